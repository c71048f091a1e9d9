from __future__ import annotations

import json
import logging
import os
import tempfile
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from attributes import AttrValue, InvalidAttribute, validate_attributes
from hexgrid import ORIGIN, CubeCoord, InvalidCoordinate, distance, hexes_within

logger = logging.getLogger(__name__)

# Legacy maps carry exactly two categorical string fields per hex.
LEGACY_SCHEMA_VERSION = "0.1.0"
SCHEMA_VERSION = "0.2.0"
SUPPORTED_VERSIONS = (LEGACY_SCHEMA_VERSION, SCHEMA_VERSION)
LEGACY_FIELDS = ("terrain", "difficulty")


class LoadError(Exception):
    """A map document could not be read or decoded."""


class SaveError(Exception):
    """A map document could not be written."""


class DuplicateCoordinate(ValueError):
    """Two hex records share a coordinate."""


@dataclass
class Hex:
    """One occupied cell: its coordinate plus free-form attributes."""

    coordinate: CubeCoord
    attributes: Dict[str, AttrValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.attributes = validate_attributes(self.attributes)

    @property
    def terrain(self) -> Optional[AttrValue]:
        return self.attributes.get("terrain")

    @property
    def difficulty(self) -> Optional[AttrValue]:
        return self.attributes.get("difficulty")

    def to_dict(self) -> Dict[str, Any]:
        c = self.coordinate
        record: Dict[str, Any] = {"coordinate": {"q": c.q, "r": c.r, "s": c.s}}
        record.update(self.attributes)
        return record


class HexRegistry:
    """Read-only lookup from coordinate to hex record.

    Built once from a sequence of records; iteration follows that sequence.
    """

    def __init__(self, hexes: Iterable[Hex] = ()) -> None:
        self._hexes: Dict[CubeCoord, Hex] = {}
        for h in hexes:
            if h.coordinate in self._hexes:
                raise DuplicateCoordinate(f"duplicate hex coordinate {h.coordinate}")
            self._hexes[h.coordinate] = h

    def lookup(self, coord: CubeCoord) -> Optional[Hex]:
        return self._hexes.get(coord)

    def contains(self, coord: CubeCoord) -> bool:
        return coord in self._hexes

    __contains__ = contains

    def values(self) -> Tuple[Hex, ...]:
        return tuple(self._hexes.values())

    def coordinates(self) -> Tuple[CubeCoord, ...]:
        return tuple(self._hexes)

    def __iter__(self) -> Iterator[Hex]:
        return iter(self._hexes.values())

    def __len__(self) -> int:
        return len(self._hexes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HexRegistry):
            return NotImplemented
        return self._hexes == other._hexes

    def __repr__(self) -> str:
        return f"HexRegistry({len(self._hexes)} hexes)"


def _fail(where: str, message: str) -> LoadError:
    return LoadError(f"{where}: {message}")


def _decode_coordinate(raw: Any, where: str) -> CubeCoord:
    if not isinstance(raw, dict):
        raise _fail(where, "coordinate must be an object")
    if set(raw) != {"q", "r", "s"}:
        raise _fail(where, f"coordinate must have exactly q, r, s (got {sorted(raw)})")
    for axis in ("q", "r", "s"):
        v = raw[axis]
        if isinstance(v, bool) or not isinstance(v, int):
            raise _fail(where, f"coordinate.{axis} must be an integer, got {v!r}")
    try:
        return CubeCoord(raw["q"], raw["r"], raw["s"])
    except InvalidCoordinate as exc:
        raise _fail(where, str(exc)) from exc


def _legacy_mismatch(attributes: Mapping[str, Any]) -> Optional[str]:
    """Why ``attributes`` does not fit the legacy schema, or None if it does."""
    if set(attributes) != set(LEGACY_FIELDS):
        return (
            f"schema {LEGACY_SCHEMA_VERSION} records carry exactly {', '.join(LEGACY_FIELDS)} "
            f"(got {sorted(attributes)})"
        )
    for name in LEGACY_FIELDS:
        if not isinstance(attributes[name], str):
            return f"{name} must be a string in schema {LEGACY_SCHEMA_VERSION}"
    return None


def _decode_hex(raw: Any, version: str, where: str) -> Hex:
    if not isinstance(raw, dict):
        raise _fail(where, "hex record must be an object")
    if "coordinate" not in raw:
        raise _fail(where, "missing 'coordinate'")
    coord = _decode_coordinate(raw["coordinate"], where)
    attributes = {k: v for k, v in raw.items() if k != "coordinate"}
    if version == LEGACY_SCHEMA_VERSION:
        problem = _legacy_mismatch(attributes)
        if problem is not None:
            raise _fail(where, problem)
    try:
        return Hex(coord, attributes)
    except InvalidAttribute as exc:
        raise _fail(where, str(exc)) from exc


@dataclass
class MapState:
    """A versioned hex map: the data behind a save file."""

    version: str
    registry: HexRegistry

    @classmethod
    def new(
        cls,
        radius: int,
        attributes: Optional[Mapping[str, Any]] = None,
        version: str = SCHEMA_VERSION,
    ) -> "MapState":
        """Hexagon-shaped map of ``radius`` rings around the origin."""
        attrs = dict(attributes or {})
        hexes = [Hex(c, dict(attrs)) for c in hexes_within(ORIGIN, radius)]
        return cls(version=version, registry=HexRegistry(hexes))

    def upgraded(self) -> "MapState":
        """Return this map tagged with the current schema version."""
        return MapState(version=SCHEMA_VERSION, registry=self.registry)

    # ---- serialization --------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        """Encode the map; raises :class:`SaveError` if a record does not fit its version.

        Anything written here must load back, so legacy maps are held to the
        legacy record shape.
        """
        if self.version == LEGACY_SCHEMA_VERSION:
            for i, h in enumerate(self.registry):
                problem = _legacy_mismatch(h.attributes)
                if problem is not None:
                    raise SaveError(f"hexes[{i}]: {problem}; upgrade the map to {SCHEMA_VERSION}")
        return {
            "version": self.version,
            "hexes": [h.to_dict() for h in self.registry],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "MapState":
        """Decode a whole document; raises :class:`LoadError` on any defect."""
        if not isinstance(data, dict):
            raise LoadError("map document must be a JSON object")
        version = data.get("version")
        if not isinstance(version, str):
            raise LoadError("map document is missing a string 'version'")
        if version not in SUPPORTED_VERSIONS:
            raise LoadError(
                f"unsupported map version {version!r} (expected one of {', '.join(SUPPORTED_VERSIONS)})"
            )
        raw_hexes = data.get("hexes")
        if not isinstance(raw_hexes, list):
            raise LoadError("map document is missing a 'hexes' list")

        hexes = [_decode_hex(raw, version, f"hexes[{i}]") for i, raw in enumerate(raw_hexes)]
        try:
            registry = HexRegistry(hexes)
        except DuplicateCoordinate as exc:
            raise LoadError(str(exc)) from exc
        return cls(version=version, registry=registry)

    def dumps(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"

    @classmethod
    def loads(cls, text: str) -> "MapState":
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise LoadError(f"malformed map document: {exc}") from exc
        return cls.from_dict(data)

    def save_json(self, path: str) -> None:
        """Write the map to ``path``, replacing it only once fully written."""
        text = self.dumps()
        directory = os.path.dirname(os.path.abspath(path))
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".hexmap-", suffix=".tmp", dir=directory)
        except OSError as exc:
            raise SaveError(f"cannot write {path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, path)
        except OSError as exc:
            try:
                os.unlink(tmp_path)
            except OSError as cleanup_exc:
                logger.warning("could not remove temporary file %s: %s", tmp_path, cleanup_exc)
            raise SaveError(f"cannot write {path}: {exc}") from exc
        logger.info("saved %d hexes to %s (version %s)", len(self.registry), path, self.version)

    @classmethod
    def load_json(cls, path: str) -> "MapState":
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadError(f"cannot read {path}: {exc}") from exc
        state = cls.loads(text)
        logger.info("loaded %d hexes from %s (version %s)", len(state.registry), path, state.version)
        return state

    def summary(self) -> Dict[str, Any]:
        keys: Counter = Counter()
        for h in self.registry:
            keys.update(h.attributes.keys())
        extent = max((distance(ORIGIN, c) for c in self.registry.coordinates()), default=0)
        return {
            "version": self.version,
            "hexes": len(self.registry),
            "extent": extent,
            "attributes": dict(sorted(keys.items())),
        }

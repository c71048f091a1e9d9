import json
import shutil
from pathlib import Path

import pytest
from PIL import Image

import cli
from config import SETTINGS
from hexgrid import CubeCoord
from mapstate import SCHEMA_VERSION, MapState
from render.render_topdown import render_geometries
from render.selection import PointerEvent, SelectionEngine
from viewport import Bounds

SAMPLE_MAP = Path(__file__).resolve().parent.parent / "maps" / "sample_map.json"
RED = (255, 0, 0, 255)
BLACK = (0, 0, 0, 255)


def _colors(img):
    return {c for _, c in img.getcolors(img.width * img.height)}


def test_render_geometries_draws_highlight_on_top():
    state = MapState.load_json(str(SAMPLE_MAP))
    eng = SelectionEngine(state.registry)
    bounds = Bounds(200, 200)
    img = render_geometries(eng.draw(bounds), (200, 200))
    assert img.size == (200, 200)
    assert BLACK in _colors(img)
    assert RED not in _colors(img)

    eng.update(PointerEvent.press(100, 100), bounds)
    assert eng.selected == CubeCoord(0, 0, 0)
    img = render_geometries(eng.draw(bounds), (200, 200), scale=2)
    assert img.size == (400, 400)
    assert RED in _colors(img)


def test_render_geometries_reads_current_background(monkeypatch):
    monkeypatch.setattr(SETTINGS, "background_color", (10, 20, 30, 255))
    img = render_geometries([], (4, 4))
    assert _colors(img) == {(10, 20, 30, 255)}
    img = render_geometries([], (4, 4), background=RED)
    assert _colors(img) == {RED}


def test_cli_new_summary_and_export(tmp_path, capsys):
    map_path = tmp_path / "map.json"
    assert cli.main(["new", "--radius", "2", "--attr", "terrain=plains", "--attr", "cost=3",
                     "--out", str(map_path)]) == 0
    state = MapState.load_json(str(map_path))
    assert len(state.registry) == 19
    assert state.registry.lookup(CubeCoord(0, 0, 0)).attributes == {"terrain": "plains", "cost": 3}

    capsys.readouterr()
    assert cli.main(["summary", str(map_path)]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["hexes"] == 19 and summary["extent"] == 2

    png = tmp_path / "map.png"
    assert cli.main(["export", str(map_path), "--out", str(png),
                     "--width", "300", "--height", "200", "--click", "150,100"]) == 0
    assert "Selected: (0, 0, 0)" in capsys.readouterr().out
    with Image.open(png) as img:
        assert img.size == (300, 200)


def test_cli_upgrade(tmp_path):
    legacy = tmp_path / "legacy.json"
    shutil.copy(SAMPLE_MAP, legacy)
    out = tmp_path / "current.json"
    assert cli.main(["upgrade", str(legacy), "--out", str(out)]) == 0
    before = MapState.load_json(str(legacy))
    after = MapState.load_json(str(out))
    assert after.version == SCHEMA_VERSION
    assert after.registry == before.registry


def test_cli_reports_load_errors(tmp_path, capsys):
    assert cli.main(["summary", str(tmp_path / "missing.json")]) == 1
    assert "error:" in capsys.readouterr().err


@pytest.mark.parametrize(
    "extra",
    [
        ["--attr", "coordinate=1"],
        ["--attr", "height=NaN"],
        ["--radius", "-1"],
    ],
)
def test_cli_new_rejects_bad_input(tmp_path, capsys, extra):
    out = tmp_path / "map.json"
    assert cli.main(["new", "--out", str(out), *extra]) == 1
    assert capsys.readouterr().err.startswith("error: ")
    assert not out.exists()

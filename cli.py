import argparse
import json
import logging
import sys

from config import SETTINGS
from mapstate import LoadError, MapState, SaveError
from render.render_topdown import render_geometries
from render.selection import PointerEvent, SelectionEngine
from viewport import Bounds

logger = logging.getLogger("hexmap.cli")


def parse_attr(spec: str):
    """'terrain=forest' -> ('terrain', 'forest'); JSON literals are decoded."""
    if "=" not in spec:
        raise argparse.ArgumentTypeError(f"expected key=value, got {spec!r}")
    key, raw = spec.split("=", 1)
    try:
        value = json.loads(raw)
    except ValueError:
        value = raw
    return key, value


def parse_point(spec: str):
    try:
        x, y = (float(v) for v in spec.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected x,y, got {spec!r}")
    return x, y


def cmd_new(args):
    state = MapState.new(args.radius, dict(args.attr or []))
    state.save_json(args.out)
    print(f"Map with {len(state.registry)} hexes saved to {args.out}")


def cmd_summary(args):
    state = MapState.load_json(args.map)
    print(json.dumps(state.summary(), indent=2, ensure_ascii=False))


def cmd_upgrade(args):
    state = MapState.load_json(args.map)
    out = args.out or args.map
    state.upgraded().save_json(out)
    print(f"Upgraded {args.map} ({state.version}) -> {out}")


def cmd_export(args):
    state = MapState.load_json(args.map)
    engine = SelectionEngine(state.registry)
    bounds = Bounds(args.width, args.height)
    if args.click is not None:
        engine.update(PointerEvent.press(*args.click), bounds)
        print(f"Selected: {engine.selected}")
    img = render_geometries(engine.draw(bounds), (args.width, args.height), scale=args.scale)
    img.save(args.out)
    print(f"Saved {args.out}")


def cmd_gui(args):
    # pygame is only imported when a window is requested
    from gui.main import HexMapGUI

    state = MapState.load_json(args.map)
    HexMapGUI(state, map_path=args.map).run()


def build_parser():
    ap = argparse.ArgumentParser(description="Hex map tools")
    ap.add_argument("--log-level", default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = ap.add_subparsers()

    ap_new = sub.add_parser("new", help="Create a hexagon-shaped map")
    ap_new.add_argument("--radius", type=int, default=3)
    ap_new.add_argument("--attr", action="append", type=parse_attr,
                        help="e.g. 'terrain=plain' (can repeat)")
    ap_new.add_argument("--out", default="map.json")
    ap_new.set_defaults(func=cmd_new)

    ap_sum = sub.add_parser("summary", help="Print map summary")
    ap_sum.add_argument("map")
    ap_sum.set_defaults(func=cmd_summary)

    ap_up = sub.add_parser("upgrade", help="Rewrite a map in the current schema")
    ap_up.add_argument("map")
    ap_up.add_argument("--out", default=None, help="defaults to overwriting the input")
    ap_up.set_defaults(func=cmd_upgrade)

    ap_exp = sub.add_parser("export", help="Render the map outline to PNG")
    ap_exp.add_argument("map")
    ap_exp.add_argument("--out", required=True, help="PNG path")
    ap_exp.add_argument("--width", type=int, default=SETTINGS.window_size[0])
    ap_exp.add_argument("--height", type=int, default=SETTINGS.window_size[1])
    ap_exp.add_argument("--click", type=parse_point, default=None,
                        help="press the primary button at x,y before rendering")
    ap_exp.add_argument("--scale", type=int, default=1)
    ap_exp.set_defaults(func=cmd_export)

    ap_gui = sub.add_parser("gui", help="Open the interactive viewer")
    ap_gui.add_argument("map", nargs="?", default=SETTINGS.default_map_path)
    ap_gui.set_defaults(func=cmd_gui)
    return ap


def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    if not hasattr(args, "func"):
        ap.print_help()
        return 0
    # bad --attr values and a negative --radius surface as ValueError
    try:
        args.func(args)
    except (LoadError, SaveError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations
import argparse, json, logging, sys
from dataclasses import asdict
from pathlib import Path

from .common import setup_logging, add_render_args, config_from_args, RunMeta
from ..paths import PathsConfig
from kscopecore.errors import InvalidImageError
from kscopedata import load_source, save_png
from kscopeproc import render_identicon, parse_color, DEFAULT_FOREGROUNDS, DEFAULT_BACKGROUND


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="kscope: render one kaleidoscope identicon")
    p.add_argument("source", help="Square PNG, shapes on a transparent background")
    p.add_argument("--out", default=None, help="Output PNG (default: $KSCOPE_OUTPUTS_DIR/<source>_identicon.png)")
    p.add_argument("--fg", default=f"#{DEFAULT_FOREGROUNDS[0]:08x}", help="Foreground colour (#RRGGBB, #AARRGGBB, 0xAARRGGBB)")
    p.add_argument("--bg", default=f"#{DEFAULT_BACKGROUND:08x}", help="Background colour")
    p.add_argument("--meta", default=None, help="(Optional) JSON sidecar with wedge and run info")
    add_render_args(p)
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)

    src = Path(args.source)
    try:
        cfg = config_from_args(args)
        fg, bg = parse_color(args.fg), parse_color(args.bg)
        out = Path(args.out) if args.out else PathsConfig.from_env().resolve_out(None) / f"{src.stem}_identicon.png"
    except ValueError as e:
        logging.error("Invalid arguments: %s", e)
        return 2

    try:
        source = load_source(src, size=args.size, crop=args.crop)
    except (InvalidImageError, OSError) as e:
        logging.error("Cannot read source %s: %s", src, e)
        return 2

    try:
        res = render_identicon(source, fg, bg, cfg=cfg)
        save_png(res.image, out)
    except Exception as e:
        logging.exception("Render failed for %s: %s", src, e)
        return 1

    w = res.wedge
    logging.info("→ OK %s (start=%s end=%s tilt=%.2f°)", out, tuple(w.start), tuple(w.end), w.tilt_angle)
    if args.meta:
        meta = {
            "source": str(src), "out": str(out),
            "foreground": f"#{fg:08x}", "background": f"#{bg:08x}",
            "wedge": {"start": list(w.start), "end": list(w.end), "center": list(w.center), "tilt_angle": w.tilt_angle},
            "run": asdict(RunMeta.collect(seed=args.seed, device=args.device)),
        }
        Path(args.meta).parent.mkdir(parents=True, exist_ok=True)
        Path(args.meta).write_text(json.dumps(meta, ensure_ascii=False, indent=2), encoding="utf-8")
    return 0


if __name__ == "__main__":
    sys.exit(main())

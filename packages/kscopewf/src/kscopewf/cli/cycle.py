from __future__ import annotations
import argparse, io, json, logging, sys
from pathlib import Path

from PIL import Image

from .common import setup_logging, ensure_dir, add_render_args, config_from_args
from ..api import atomic_write, identicon_name, log_append
from ..paths import PathsConfig
from kscopecore.rng import frame_generators, make_generator
from kscopedata import load_source, to_pil
from kscopeproc import render_identicon, parse_color, palette_color, DEFAULT_FOREGROUNDS, DEFAULT_BACKGROUND
from kscopeviz import montage


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="kscope: render a series of identicons, foreground colour cycling through a palette")
    p.add_argument("source", help="Square PNG, shapes on a transparent background")
    p.add_argument("--out", default=None, help="Output folder (default: $KSCOPE_OUTPUTS_DIR)")
    p.add_argument("--count", type=int, default=None, help="Number of frames (default: palette length)")
    p.add_argument("--palette", nargs="+", default=None, help="Foreground colours, cycled in order")
    p.add_argument("--bg", default=f"#{DEFAULT_BACKGROUND:08x}")
    p.add_argument("--montage", action="store_true", help="Also write montage.png")
    p.add_argument("--cols", type=int, default=5)
    p.add_argument("--gif", action="store_true", help="Also write cycle.gif")
    p.add_argument("--delay-ms", type=int, default=500, help="GIF frame duration")
    p.add_argument("--resume", action="store_true", help="Skip frames whose PNG already exists")
    add_render_args(p)
    return p.parse_args(argv)


def _png_bytes(img) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def _load_existing(p: Path) -> Image.Image | None:
    """Previously rendered frame, or None when it cannot be decoded."""
    try:
        with Image.open(p) as im:
            im.load()
            return im.convert("RGBA")
    except (OSError, SyntaxError, ValueError):
        return None


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)

    try:
        cfg = config_from_args(args)
        palette = [parse_color(c) for c in args.palette] if args.palette else list(DEFAULT_FOREGROUNDS)
        bg = parse_color(args.bg)
        out_dir = PathsConfig.from_env().resolve_out(args.out)
    except ValueError as e:
        logging.error("Invalid arguments: %s", e)
        return 2
    count = len(palette) if args.count is None else args.count
    if count <= 0:
        logging.error("--count must be > 0")
        return 2
    ensure_dir(out_dir)

    src = Path(args.source)
    try:
        source = load_source(src, size=args.size, crop=args.crop)
    except Exception as e:
        logging.exception("Cannot read source %s: %s", src, e)
        return 2

    if args.seed is None:
        gens = [make_generator(None) for _ in range(count)]
    else:
        gens = frame_generators(args.seed, count)

    run_log = out_dir / "cycle.log"
    items, frames = [], []
    errors = 0
    for i in range(count):
        fg = palette_color(palette, i)
        name = identicon_name(src.stem, i, fg, args.seed)
        dst = out_dir / name
        if args.resume and dst.exists():
            prev = _load_existing(dst)
            if prev is not None:
                logging.info("[%d/%d] skip (exists): %s", i + 1, count, dst)
                items.append({"index": i, "file": name, "foreground": f"#{fg:08x}", "skipped": True})
                frames.append(prev)
                continue
            logging.warning("[%d/%d] unreadable frame, rendering again: %s", i + 1, count, dst)
            log_append(run_log, f"REDO {name}")
        try:
            res = render_identicon(source, fg, bg, generator=gens[i], cfg=cfg)
            img = to_pil(res.image)
            atomic_write(dst, _png_bytes(img))
            frames.append(img)
            w = res.wedge
            items.append({"index": i, "file": name, "foreground": f"#{fg:08x}",
                          "start": list(w.start), "end": list(w.end), "tilt_angle": w.tilt_angle})
            logging.info("[%d/%d] → OK %s", i + 1, count, dst)
            log_append(run_log, f"OK {name}")
        except Exception as e:
            errors += 1
            logging.exception("[%d/%d] render failed: %s", i + 1, count, e)
            log_append(run_log, f"FAIL {name}: {e}")

    if frames and args.montage:
        montage(frames, cols=args.cols).save(out_dir / "montage.png")
    if frames and args.gif:
        # GIF has no partial alpha: flatten on the background colour first
        flat = []
        for f in frames:
            base = f.copy()
            base.paste((bg >> 16 & 0xFF, bg >> 8 & 0xFF, bg & 0xFF, 255), (0, 0, f.width, f.height))
            base.alpha_composite(f)
            flat.append(base.convert("RGB"))
        flat[0].save(out_dir / "cycle.gif", save_all=True, append_images=flat[1:],
                     duration=args.delay_ms, loop=0)

    manifest = {"source": str(src), "background": f"#{bg:08x}", "seed": args.seed,
                "count": count, "errors": errors, "items": items}
    (out_dir / "manifest.json").write_text(json.dumps(manifest, ensure_ascii=False, indent=2), encoding="utf-8")
    logging.info("Done: %d/%d OK, %d errors", count - errors, count, errors)
    return 0 if errors == 0 else 1


if __name__ == "__main__":
    sys.exit(main())

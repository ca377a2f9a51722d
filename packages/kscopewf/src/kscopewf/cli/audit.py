from __future__ import annotations
import argparse, csv, json, logging, sys
from pathlib import Path

from .common import setup_logging, ensure_dir
from ..paths import PathsConfig
from kscopedata import load_source, scan_images
from kscopemetrics import symmetry_report

FIELDS = ["file", "size", "rot90_mae", "rot90_psnr", "rot90_outliers",
          "mirror_mae", "mirror_psnr", "mirror_outliers", "coverage"]


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="kscope: symmetry audit of rendered identicons")
    p.add_argument("images", nargs="+", help="PNG files or folders")
    p.add_argument("--out", default=None, help="Output folder for audit.csv / audit.json (default: $KSCOPE_ARTIFACTS_DIR)")
    p.add_argument("--threshold", type=float, default=0.25, help="Per-pixel difference counted as outlier")
    p.add_argument("--log-file", default=None)
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)


def _expand(entries: list[str]) -> list[Path]:
    files: list[Path] = []
    for e in entries:
        p = Path(e)
        files.extend(scan_images(p) if p.is_dir() else [p])
    return files


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)

    try:
        out_dir = PathsConfig.from_env().resolve_out(args.out, kind="artifacts")
    except ValueError as e:
        logging.error("%s", e)
        return 2
    files = _expand(args.images)
    if not files:
        logging.error("No image found in %s", args.images)
        return 2
    ensure_dir(out_dir)

    rows, failed = [], 0
    for i, f in enumerate(files, 1):
        try:
            rep = symmetry_report(load_source(f, device="cpu"), threshold=args.threshold)
            rows.append({"file": str(f), **rep})
            logging.info("[%d/%d] %s rot90_mae=%.4f mirror_mae=%.4f", i, len(files), f,
                         rep["rot90_mae"], rep["mirror_mae"])
        except Exception as e:
            failed += 1
            logging.exception("Audit failed for %s: %s", f, e)

    (out_dir / "audit.json").write_text(
        json.dumps({"threshold": args.threshold, "images": rows}, ensure_ascii=False, indent=2), encoding="utf-8"
    )
    with open(out_dir / "audit.csv", "w", newline="", encoding="utf-8") as fh:
        w = csv.DictWriter(fh, fieldnames=FIELDS)
        w.writeheader()
        for r in rows:
            w.writerow({k: r[k] for k in FIELDS})

    logging.info("Audited: %d/%d", len(rows), len(files))
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())

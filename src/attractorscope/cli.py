"""
CLI entry point for the strange attractor renderer.

Usage:
    attractorscope [-i input.frac] [block/key=value ...] [options]
    python -m attractorscope [-i input.frac] [block/key=value ...] [options]
"""

import argparse
import sys
import time
from pathlib import Path

from attractorscope.config import DEFAULT_INPUT, ConfigError, load_config
from attractorscope.core.accumulator import BACKENDS
from attractorscope.pipeline import AttractorPipeline


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  {current}/{total} points")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  {current}/{total} points", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="attractorscope",
        description="Render a 2D strange attractor density map as a grayscale PGM",
    )

    parser.add_argument(
        "overrides",
        nargs="*",
        metavar="block/key=value",
        help="Override a parameter-file setting, e.g. image/npts=1e6 fractal/method=peter",
    )
    parser.add_argument(
        "-i", "--input",
        type=Path,
        default=Path(DEFAULT_INPUT),
        help=f"Parameter file (default: {DEFAULT_INPUT})",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output image path (overrides image/file)",
    )
    parser.add_argument(
        "--backend", type=str, default="numba",
        choices=list(BACKENDS),
        help="Accumulation backend (default: numba)",
    )
    parser.add_argument(
        "--chunk-size", type=int, default=1_000_000,
        help="Points per progress update (default: 1000000)",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Only report errors")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.input, args.overrides)
    except (FileNotFoundError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    output = args.output or Path(cfg.filename)
    vp = cfg.viewport

    if not args.quiet:
        print(f"Rendering {cfg.method.value} attractor")
        print(f"  Grid: {vp.nx}x{vp.ny}")
        print(f"  Viewport: x [{vp.xmin:g}, {vp.xmax:g}]  y [{vp.ymin:g}, {vp.ymax:g}]")
        print(f"  Points: {cfg.n_iter}")
        print(f"  Backend: {args.backend}")

    pipeline = AttractorPipeline(backend=args.backend, chunk_size=args.chunk_size)

    t0 = time.time()
    result = pipeline.process(
        cfg,
        output_path=output,
        progress_callback=None if args.quiet else _progress_bar,
    )
    elapsed = time.time() - t0

    if not args.quiet:
        print(f"\nDone! Peak cell count: {result['max_count']}")
        print(f"  Render took {elapsed:.1f}s ({cfg.n_iter / max(elapsed, 0.01):.0f} points/s)")
        print(f"  Output: {result['output_path']}")


if __name__ == "__main__":
    main()

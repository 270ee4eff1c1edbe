"""
Command-line entry point: read one image upright and optionally save it.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import threading
from pathlib import Path
from typing import Sequence

from PIL import Image

from image_reader.app_context import initialize_reader
from image_reader.core.transform import raster_size
from image_reader.reader import ReadResult, ResultCode

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-reader",
        description="Decode an image and rotate/flip it upright according to its EXIF orientation.",
    )
    parser.add_argument("source", help="Path or file:// URI of the image to read")
    parser.add_argument("-o", "--output", type=Path, help="Where to save the oriented image")
    parser.add_argument("--config", type=Path, help="TOML config file (default: ~/.image_reader/config.toml)")
    parser.add_argument("--timeout", type=float, default=60.0, help="Seconds to wait for the read (default: 60)")
    return parser


def main(argv: Sequence[str] | None = None, exit_on_timeout: bool = False) -> int:
    """
    Run one read and return the exit status. On timeout the read is abandoned;
    with exit_on_timeout the process exits at once instead of joining the
    worker thread still blocked on it.
    """
    args = build_parser().parse_args(argv)
    context = initialize_reader(config_path=args.config)

    done = threading.Event()
    outcome: list[ReadResult] = []

    def on_result(result: ReadResult) -> None:
        outcome.append(result)
        done.set()

    timed_out = False
    try:
        context.reader().configure(args.source).on_complete(on_result).start()
        timed_out = not done.wait(args.timeout)
    finally:
        context.close(wait=not timed_out)

    if timed_out:
        print(f"Timed out after {args.timeout:g}s waiting for {args.source}")
        LOGGER.error("Abandoned read of %s after %.3gs", args.source, args.timeout)
        if exit_on_timeout:
            sys.stdout.flush()
            logging.shutdown()
            os._exit(1)
        return 1

    result = outcome[0]
    if not result.ok:
        print(f"{int(result.code)} {result.code.name}")
        return 1

    width, height = raster_size(result.raster)
    print(f"{int(ResultCode.OK)} {width} {height}")
    if args.output is not None:
        image = result.raster if isinstance(result.raster, Image.Image) else Image.fromarray(result.raster)
        image.save(args.output)
        LOGGER.info("Saved oriented image to %s", args.output)
    return 0


def cli() -> None:
    raise SystemExit(main(exit_on_timeout=True))


if __name__ == "__main__":
    cli()

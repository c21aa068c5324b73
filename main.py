"""
Headless entry point: segment an object from point prompts and write the layers.

Run: python main.py --image photo.png --point 120,80 [--negative 40,40] --out-dir runs/segment
Writes object.png, background.png and mask.png into --out-dir.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from segstudio.application.container import Container
from segstudio.application.use_cases.segment_object import SegmentObjectRequest
from segstudio.config import DEFAULT_OUTPUT_DIR
from segstudio.core.errors import AppError
from segstudio.core.observability.logging_config import setup_logging
from segstudio.core.version import get_version_string
from segstudio.editor.tool_state import SEGMENT_TOOL_ID
from segstudio.imaging.io import load_image, save_png

log = logging.getLogger("segstudio")


def _xy(text: str) -> tuple[int, int]:
    try:
        x, y = (int(v) for v in text.split(","))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected X,Y got {text!r}") from e
    return x, y


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="segstudio", description=__doc__.strip().splitlines()[0])
    p.add_argument("--image", required=True, type=Path, help="source image")
    p.add_argument("--point", action="append", type=_xy, default=[], help="positive point X,Y")
    p.add_argument("--negative", action="append", type=_xy, default=[], help="negative point X,Y")
    p.add_argument("--threshold", type=float, default=None, help="colour distance threshold 0..1")
    p.add_argument("--dilate", type=int, default=None, help="edge expansion iterations")
    p.add_argument("--out-dir", type=Path, default=DEFAULT_OUTPUT_DIR)
    p.add_argument("--settings", type=Path, default=None, help="editor settings JSON")
    p.add_argument("--version", action="version", version=get_version_string())
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    container = Container(settings_path=args.settings)
    try:
        image = load_image(args.image)
        state, tool = container.state, container.tool
        state.set_current_image(image)
        tool.select_tool(SEGMENT_TOOL_ID)
        for x, y in args.point:
            tool.click(x, y, image.size)
        for x, y in args.negative:
            tool.click(x, y, image.size, negative_modifier=True)
        result = container.segment_object_use_case.execute(
            SegmentObjectRequest(threshold=args.threshold, dilate=args.dilate)
        )
        out_dir: Path = args.out_dir
        save_png(out_dir / "object.png", result.object_layer.pixel_data)
        save_png(out_dir / "background.png", result.background_layer.pixel_data)
        save_png(out_dir / "mask.png", result.mask)
        log.info("Wrote layers to %s (%d px selected)", out_dir, result.selected_pixels)
        return 0
    except (AppError, FileNotFoundError) as e:
        log.error("%s", e)
        return 2
    finally:
        container.shutdown()


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)

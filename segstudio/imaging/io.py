"""Image source/sink adapters: file decoding, PNG export and thumbnails.

The segmentation core only sees PixelBuffers; all format handling lives here.
"""

from __future__ import annotations

import base64
import io
import logging
from pathlib import Path

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from segstudio.config import THUMBNAIL_MAX_SIDE
from segstudio.core.errors import InfrastructureError
from segstudio.imaging.pixel_buffer import PixelBuffer

log = logging.getLogger(__name__)


def load_image(path: str | Path) -> PixelBuffer:
    """Decode an image file into an RGBA PixelBuffer."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Image not found: {p}")
    try:
        with Image.open(p) as img:
            rgba = img.convert("RGBA")
            arr = np.array(rgba)
    except (UnidentifiedImageError, OSError) as e:
        raise InfrastructureError(f"Cannot decode image: {p}", cause=e) from e
    log.debug("Loaded %s (%dx%d)", p.name, arr.shape[1], arr.shape[0])
    return PixelBuffer.from_array(arr)


def save_png(path: str | Path, buf: PixelBuffer) -> Path:
    """Write *buf* as an RGBA PNG, creating parent directories."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    ok = cv2.imwrite(str(p), cv2.cvtColor(buf.to_array(), cv2.COLOR_RGBA2BGRA))
    if not ok:
        raise InfrastructureError(f"Failed to write image: {p}")
    return p


def thumbnail_data_url(buf: PixelBuffer, max_side: int = THUMBNAIL_MAX_SIDE) -> str:
    """Encode a downscaled PNG copy of *buf* as a data URL for layer previews."""
    img = Image.fromarray(buf.to_array())
    img.thumbnail((max_side, max_side))
    out = io.BytesIO()
    img.save(out, format="PNG")
    return "data:image/png;base64," + base64.b64encode(out.getvalue()).decode("ascii")

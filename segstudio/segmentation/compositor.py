"""Split an image into object and background layers using a mask."""

from __future__ import annotations

from segstudio.core.errors import ProcessingError
from segstudio.imaging.pixel_buffer import PixelBuffer


def split(image: PixelBuffer, mask: PixelBuffer) -> tuple[PixelBuffer, PixelBuffer]:
    """Return ``(object_layer, background_layer)``.

    The mask's red channel is the indicator (0 = unselected). The object layer
    keeps selected pixels and clears alpha elsewhere; the background layer is
    the complement. Source alpha is never raised. Inputs are not modified.
    """
    if not image.same_size(mask):
        raise ProcessingError(
            f"Mask size {mask.width}x{mask.height} does not match image "
            f"{image.width}x{image.height}"
        )
    selected = mask.array[..., 0] != 0

    obj = image.to_array()
    obj[~selected, 3] = 0
    background = image.to_array()
    background[selected, 3] = 0
    return (
        PixelBuffer(image.width, image.height, obj),
        PixelBuffer(image.width, image.height, background),
    )

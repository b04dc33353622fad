"""Crop-and-encode step of the image intake, done with Pillow."""

import io
from dataclasses import dataclass

from PIL import Image

JPEG_QUALITY = 95


class RasterizationError(Exception):
    """The selected region could not be drawn or encoded."""


@dataclass
class RasterizedImage:
    data: bytes
    width: int
    height: int
    content_type: str = 'image/jpeg'


def rasterize(source, region, natural_size, displayed_size, quality=JPEG_QUALITY):
    """Render ``region`` of ``source`` to a JPEG.

    ``region`` is in displayed-image pixels. The output is exactly
    round(width) x round(height) pixels; the source is sampled at its
    natural resolution, so the scale between displayed and natural size is
    applied to the sampling box, not to the output.
    """
    natural_w, natural_h = natural_size
    displayed_w, displayed_h = displayed_size
    if not displayed_w or not displayed_h:
        raise RasterizationError("Displayed image size is unknown")

    scale_x = natural_w / displayed_w
    scale_y = natural_h / displayed_h

    out_w = round(region.width)
    out_h = round(region.height)
    if out_w <= 0 or out_h <= 0:
        raise RasterizationError("Crop region is smaller than one pixel")

    box = (
        region.x * scale_x,
        region.y * scale_y,
        (region.x + region.width) * scale_x,
        (region.y + region.height) * scale_y,
    )

    try:
        image = source if source.mode == 'RGB' else source.convert('RGB')
        surface = image.resize((out_w, out_h), Image.Resampling.LANCZOS, box=box)
        buf = io.BytesIO()
        surface.save(buf, format='JPEG', quality=quality)
    except (OSError, ValueError) as e:
        raise RasterizationError(f"Could not render crop: {e}") from e

    data = buf.getvalue()
    if not data:
        raise RasterizationError("Canvas is empty")
    return RasterizedImage(data=data, width=out_w, height=out_h)

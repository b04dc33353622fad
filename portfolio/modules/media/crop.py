"""
Crop Region
===========

The rectangle an admin keeps out of an uploaded image. Coordinates are
either percentages of the displayed image or displayed-image pixels, the
two units the cropper UI reports.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

PERCENT = '%'
PIXELS = 'px'
UNITS = (PERCENT, PIXELS)

DEFAULT_ASPECT_RATIO = 16 / 9

# Opening selection: 90% of the width, 5% in from the top-left corner
INITIAL_WIDTH = 90.0
INITIAL_OFFSET = 5.0


class CropRegionError(ValueError):
    """The requested rectangle cannot be placed on the image."""


@dataclass(frozen=True)
class CropRegion:
    x: float
    y: float
    width: float
    height: float
    unit: str = PERCENT
    # width / height; None leaves the selection free-form
    aspect_ratio: Optional[float] = DEFAULT_ASPECT_RATIO

    def __post_init__(self):
        if self.unit not in UNITS:
            raise CropRegionError(f"Unknown crop unit: {self.unit!r}")
        if self.aspect_ratio is not None and self.aspect_ratio <= 0:
            raise CropRegionError("Aspect ratio must be positive")

    @classmethod
    def initial(cls, bounds: Tuple[float, float], aspect_ratio=DEFAULT_ASPECT_RATIO):
        """Default selection shown when the cropper opens"""
        region = cls(
            x=INITIAL_OFFSET, y=INITIAL_OFFSET,
            width=INITIAL_WIDTH, height=INITIAL_WIDTH,
            unit=PERCENT, aspect_ratio=aspect_ratio,
        )
        return region.constrained(bounds)

    def to_pixels(self, bounds):
        if self.unit == PIXELS:
            return self
        bound_w, bound_h = bounds
        return replace(
            self, unit=PIXELS,
            x=self.x * bound_w / 100, y=self.y * bound_h / 100,
            width=self.width * bound_w / 100, height=self.height * bound_h / 100,
        )

    def to_unit(self, unit, bounds):
        px = self.to_pixels(bounds)
        if unit == PIXELS:
            return px
        bound_w, bound_h = bounds
        return replace(
            px, unit=PERCENT,
            x=px.x * 100 / bound_w, y=px.y * 100 / bound_h,
            width=px.width * 100 / bound_w, height=px.height * 100 / bound_h,
        )

    def constrained(self, bounds):
        """Apply the aspect ratio and pull the rectangle inside ``bounds``.

        Height follows width whenever an aspect ratio is set; when the
        rectangle overflows, it shrinks (keeping the ratio) rather than moves.
        Works in pixel space and returns the result in this region's unit.
        """
        bound_w, bound_h = bounds
        if bound_w <= 0 or bound_h <= 0:
            raise CropRegionError("Image bounds must be positive")

        px = self.to_pixels(bounds)
        x = min(max(px.x, 0.0), bound_w)
        y = min(max(px.y, 0.0), bound_h)
        width, height = px.width, px.height
        ratio = self.aspect_ratio

        if width <= 0 or (ratio is None and height <= 0):
            raise CropRegionError("Crop width and height must be positive")

        if ratio:
            height = width / ratio
        if x + width > bound_w:
            width = bound_w - x
            if ratio:
                height = width / ratio
        if y + height > bound_h:
            height = bound_h - y
            if ratio:
                width = height * ratio

        if width <= 0 or height <= 0:
            raise CropRegionError("Crop region lies outside the image")

        return replace(px, x=x, y=y, width=width, height=height).to_unit(self.unit, bounds)

    def to_dict(self):
        return {
            'unit': self.unit,
            'x': self.x, 'y': self.y,
            'width': self.width, 'height': self.height,
            'aspect_ratio': self.aspect_ratio,
        }

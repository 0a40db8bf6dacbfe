import logging
import os
from typing import List, Sequence, Tuple
from PIL import Image, ImageDraw, ImageFont

from runner.errors import MissingAssetError
from specsheet.inventory.views import Inventory
from .views import AnnotatedImage, AnnotationEntry

logger = logging.getLogger(__name__)

# Marker geometry is fixed; it does not scale with the element's box
MARKER_RADIUS = 16
MARKER_FILL = (231, 76, 60, 209)
MARKER_OUTLINE = (192, 57, 43, 255)
MARKER_OUTLINE_WIDTH = 2
LABEL_COLOR = (255, 255, 255, 255)
LABEL_FONT_SIZE = 18

FONT_CANDIDATES = (
    "DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "arialbd.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "arial.ttf",
)


def number_inventory(inventory: Inventory) -> List[AnnotationEntry]:
    """Number records 1..N in inventory order."""
    return [
        AnnotationEntry(number=number, center=record.center)
        for number, record in enumerate(inventory.records, start=1)
    ]


def load_label_font(size: int = LABEL_FONT_SIZE) -> ImageFont.ImageFont:
    for candidate in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


class OverlayCompositor:
    """
    Burns numbered circular markers onto a copy of a screenshot.

    The source file is only read; the annotated image is written to a
    separate path in the source's format.
    """

    def __init__(self, radius: int = MARKER_RADIUS, font_size: int = LABEL_FONT_SIZE):
        self.radius = radius
        self.font = load_label_font(font_size)

    def render_overlay(self, size: Tuple[int, int], entries: Sequence[AnnotationEntry]) -> Image.Image:
        layer = Image.new("RGBA", size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        r = self.radius
        for entry in entries:
            cx, cy = entry.center.x, entry.center.y
            draw.ellipse(
                [cx - r, cy - r, cx + r, cy + r],
                fill=MARKER_FILL,
                outline=MARKER_OUTLINE,
                width=MARKER_OUTLINE_WIDTH,
            )
            text = str(entry.number)
            left, top, right, bottom = draw.textbbox((0, 0), text, font=self.font)
            draw.text(
                (cx - (right - left) / 2 - left, cy - (bottom - top) / 2 - top),
                text,
                fill=LABEL_COLOR,
                font=self.font,
            )
        return layer

    def compose(self, screenshot_path: str, entries: Sequence[AnnotationEntry], output_path: str) -> AnnotatedImage:
        if not os.path.exists(screenshot_path):
            raise MissingAssetError(screenshot_path)
        if os.path.abspath(screenshot_path) == os.path.abspath(output_path):
            raise ValueError("Annotated output path must differ from the source screenshot")

        with Image.open(screenshot_path) as source:
            image_format = source.format or "PNG"
            source_mode = source.mode
            base = source.convert("RGBA")

        annotated = Image.alpha_composite(base, self.render_overlay(base.size, entries))
        if "A" not in source_mode:
            annotated = annotated.convert("RGB")

        out_dir = os.path.dirname(output_path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        annotated.save(output_path, format=image_format)

        width, height = annotated.size
        logger.debug("Annotated %d markers onto %s (%dx%d)", len(entries), output_path, width, height)
        return AnnotatedImage(path=output_path, width=width, height=height)

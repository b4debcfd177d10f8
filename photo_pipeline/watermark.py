"""
watermark.py — ownership watermark for published photos.

Two text elements are drawn on a transparent overlay the size of the output
image:
  * the brand text, large and faint, rotated 30° counter-clockwise about the
    centre of the canvas;
  * the handle text, small and brighter, anchored to the bottom-right corner.

Both font sizes follow the *output* width, so compose() must be called with
the resized dimensions of every image.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

DIAGONAL_DIVISOR = 15
HANDLE_DIVISOR = 50
DIAGONAL_OPACITY = 0.3
HANDLE_OPACITY = 0.7
DIAGONAL_ANGLE = -30     # degrees, negative = counter-clockwise on screen
HANDLE_INSET = 20        # px from the right and bottom edges

FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/Library/Fonts/Arial Black.ttf",
    "/Library/Fonts/Arial.ttf",
    "/System/Library/Fonts/Supplemental/Arial Black.ttf",
    "C:\\Windows\\Fonts\\ariblk.ttf",
    "C:\\Windows\\Fonts\\arial.ttf",
)


@dataclass(frozen=True)
class WatermarkSpec:
    canvas_width: int
    canvas_height: int
    brand_text: str
    handle_text: str
    diagonal_font_size: int
    handle_font_size: int
    diagonal_opacity: float = DIAGONAL_OPACITY
    handle_opacity: float = HANDLE_OPACITY
    diagonal_angle: float = DIAGONAL_ANGLE
    handle_inset: int = HANDLE_INSET

    @property
    def size(self):
        return (self.canvas_width, self.canvas_height)


def compose(target_width: int, target_height: int, brand_text: str, handle_text: str) -> WatermarkSpec:
    """Describe the overlay for an output image of the given size."""
    if target_width <= 0 or target_height <= 0:
        raise ValueError(f"Canvas must be positive, got {target_width}x{target_height}")
    return WatermarkSpec(
        canvas_width=target_width,
        canvas_height=target_height,
        brand_text=brand_text,
        handle_text=handle_text,
        diagonal_font_size=target_width // DIAGONAL_DIVISOR,
        handle_font_size=target_width // HANDLE_DIVISOR,
    )


# --------- Rendering ---------
def load_font(font_path: str | None, px: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """
    Try user font, then common system fonts, then Pillow's default font at the
    requested size.
    """
    px = max(1, int(px))
    candidates = []
    if font_path:
        candidates.append(font_path)
    candidates += FONT_CANDIDATES

    for fp in candidates:
        p = Path(fp)
        if p.exists():
            try:
                return ImageFont.truetype(str(p), px)
            except OSError:
                logger.debug(f"Could not load font {p}, trying next candidate")

    return ImageFont.load_default(size=px)


def _alpha(opacity: float) -> int:
    return max(0, min(255, int(round(255 * opacity))))


def _diagonal_layer(spec: WatermarkSpec, font_path: str | None) -> Image.Image:
    font = load_font(font_path, spec.diagonal_font_size)
    a = _alpha(spec.diagonal_opacity)
    shadow_offset = max(1, spec.diagonal_font_size // 40)

    probe = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
    l, t, r, b = probe.textbbox((0, 0), spec.brand_text, font=font, anchor="mm")
    pad = shadow_offset * 2 + 2
    text_w = (r - l) + pad * 2
    text_h = (b - t) + pad * 2

    layer = Image.new("RGBA", (max(1, text_w), max(1, text_h)), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    cx, cy = text_w // 2, text_h // 2
    draw.text((cx + shadow_offset, cy + shadow_offset), spec.brand_text, font=font,
              fill=(0, 0, 0, a // 2), anchor="mm")
    draw.text((cx, cy), spec.brand_text, font=font, fill=(255, 255, 255, a), anchor="mm")

    # Pillow rotates counter-clockwise for positive angles.
    rotated = layer.rotate(-spec.diagonal_angle, resample=Image.Resampling.BICUBIC, expand=True)

    # Crop a canvas-sized window around the rotated text's centre; areas outside
    # the rotated layer come back fully transparent.
    W, H = spec.size
    rw, rh = rotated.size
    left = rw // 2 - W // 2
    top = rh // 2 - H // 2
    return rotated.crop((left, top, left + W, top + H))


def render_overlay(spec: WatermarkSpec, font_path: str | None = None) -> Image.Image:
    """Render a WatermarkSpec to an RGBA image exactly the size of the canvas."""
    W, H = spec.size
    overlay = Image.new("RGBA", (W, H), (0, 0, 0, 0))

    if spec.brand_text:
        overlay = Image.alpha_composite(overlay, _diagonal_layer(spec, font_path))

    if spec.handle_text:
        font = load_font(font_path, spec.handle_font_size)
        a = _alpha(spec.handle_opacity)
        draw = ImageDraw.Draw(overlay)
        xy = (W - spec.handle_inset, H - spec.handle_inset)
        draw.text((xy[0] + 1, xy[1] + 1), spec.handle_text, font=font,
                  fill=(0, 0, 0, a // 2), anchor="rs")
        draw.text(xy, spec.handle_text, font=font, fill=(255, 255, 255, a), anchor="rs")

    return overlay


def apply_watermark(im: Image.Image, spec: WatermarkSpec, font_path: str | None = None) -> Image.Image:
    """Composite the overlay at the top-left corner and return an RGB image."""
    if im.size != spec.size:
        raise ValueError(f"Watermark canvas {spec.size} does not match image {im.size}")
    if im.mode != "RGBA":
        im = im.convert("RGBA")
    out = Image.alpha_composite(im, render_overlay(spec, font_path))
    return out.convert("RGB")

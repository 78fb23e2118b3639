"""
Layout Utilities for QR-bill PDFs.

Handles:
1. Font Registration (Liberation Sans, with Helvetica fallback).
2. Text styles from the QR-bill style guide.
3. Swiss cross and blank field corner marks.
4. Address formatting.
"""
import logging
import os
from dataclasses import dataclass

from reportlab.lib.enums import TA_LEFT
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError

from qrbill import config
from qrbill.constants import CORNER_MARK_LENGTH, CORNER_MARK_LINE_WIDTH, SWISS_CROSS_SIZE
from qrbill.errors import ConfigurationError
from qrbill.utils.qr_vector import saved_state

logger = logging.getLogger(__name__)

# 1. Font Registration
# Safe Fallbacks (Helvetica is one of the fonts the style guide allows)
FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

_fonts_registered = False


def register_fonts():
    """
    Register Liberation Sans from the configured paths.

    Raises ConfigurationError when fonts are required (production) but missing;
    otherwise falls back to Helvetica with a warning.

    Returns:
        Tuple of (regular_font_name, bold_font_name)
    """
    global FONT_REGULAR, FONT_BOLD, _fonts_registered

    if _fonts_registered:
        return FONT_REGULAR, FONT_BOLD

    paths = {"LiberationSans": config.FONT_REGULAR_PATH, "LiberationSans-Bold": config.FONT_BOLD_PATH}
    missing = [path for path in paths.values() if not path or not os.path.exists(path)]

    if missing:
        if config.REQUIRE_FONTS:
            raise ConfigurationError(f"Required QR-bill fonts missing: {', '.join(map(str, missing))}")
        logger.warning(f"[Fonts] Liberation Sans not found ({', '.join(map(str, missing))}), using Helvetica")
        _fonts_registered = True
        return FONT_REGULAR, FONT_BOLD

    try:
        for name, path in paths.items():
            pdfmetrics.registerFont(TTFont(name, path))
    except (TTFError, OSError) as e:
        if config.REQUIRE_FONTS:
            raise ConfigurationError(f"Failed to register QR-bill fonts: {e}") from e
        logger.warning(f"[Fonts] Failed to register Liberation Sans: {e}, using Helvetica")
    else:
        FONT_REGULAR, FONT_BOLD = "LiberationSans", "LiberationSans-Bold"

    _fonts_registered = True
    return FONT_REGULAR, FONT_BOLD


# 2. Text Styles
@dataclass(frozen=True)
class TextStyle:
    bold: bool
    font_size: float
    line_height: float


@dataclass(frozen=True)
class BillStyles:
    """Font sizes and line heights in points; defaults follow the QR-bill style guide."""
    section_heading: TextStyle = TextStyle(True, 11, 13)
    payment_heading: TextStyle = TextStyle(True, 8, 11)
    payment_value: TextStyle = TextStyle(False, 10, 11)
    receipt_heading: TextStyle = TextStyle(True, 6, 9)
    receipt_value: TextStyle = TextStyle(False, 8, 9)
    alternative_heading: TextStyle = TextStyle(True, 7, 8)
    alternative_value: TextStyle = TextStyle(False, 7, 8)


def paragraph_style(name: str, text_style: TextStyle, space_after: float = 0,
                    alignment=TA_LEFT) -> ParagraphStyle:
    """
    Build a platypus ParagraphStyle for one of the bill's text styles.

    Fonts must be registered first (see register_fonts).
    """
    return ParagraphStyle(
        name,
        fontName=FONT_BOLD if text_style.bold else FONT_REGULAR,
        fontSize=text_style.font_size,
        leading=text_style.line_height,
        spaceBefore=0,
        spaceAfter=space_after,
        alignment=alignment,
    )


# 3. Graphics
def draw_swiss_cross(c, x, y):
    """
    Draw the 7mm Swiss cross with its bottom-left corner at (x, y).

    White square, black 6mm square, white cross.
    """
    with saved_state(c):
        c.translate(x, y)
        c.setFillColorRGB(1, 1, 1)
        c.rect(0, 0, SWISS_CROSS_SIZE, SWISS_CROSS_SIZE, stroke=0, fill=1)
        c.setFillColorRGB(0, 0, 0)
        c.rect(0.5 * mm, 0.5 * mm, 6 * mm, 6 * mm, stroke=0, fill=1)
        c.setFillColorRGB(1, 1, 1)
        cross = c.beginPath()
        cross.rect(2.93 * mm, 1.67 * mm, 1.17 * mm, 3.9 * mm)
        cross.rect(1.57 * mm, 3.04 * mm, 3.9 * mm, 1.17 * mm)
        c.drawPath(cross, stroke=0, fill=1)


def draw_corner_marks(c, width, height):
    """Stroke the four L-shaped corner marks of a blank field at the origin."""
    arm = CORNER_MARK_LENGTH
    with saved_state(c):
        c.setStrokeColorRGB(0, 0, 0)
        c.setLineWidth(CORNER_MARK_LINE_WIDTH)
        marks = c.beginPath()
        for points in (
            ((0, arm), (0, 0), (arm, 0)),
            ((width - arm, 0), (width, 0), (width, arm)),
            ((width, height - arm), (width, height), (width - arm, height)),
            ((arm, height), (0, height), (0, height - arm)),
        ):
            marks.moveTo(*points[0])
            for point in points[1:]:
                marks.lineTo(*point)
        c.drawPath(marks, stroke=1, fill=0)


# 4. Address Formatting
def format_address(address) -> str:
    """
    Format an address for display.

    structured: name / line1 line2 / country-postal_code town
    combined:   name / line1 (if any) / country-line2
    """
    lines = [address.name]
    if address.is_structured:
        street = " ".join(part for part in (address.address_line1, address.address_line2) if part)
        if street:
            lines.append(street)
        lines.append(f"{address.country}-{address.postal_code} {address.town}")
    else:
        if address.address_line1:
            lines.append(address.address_line1)
        lines.append(f"{address.country}-{address.address_line2}")
    return "\n".join(lines)

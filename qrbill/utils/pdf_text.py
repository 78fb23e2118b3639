"""
PDF Text Utilities

Shared primitives for text measurement and formatting in ReportLab PDFs.
Used by the barcode renderer (text run alignment) and the QR-bill composer.

Print Quality Rules:
- Never rasterize text - always draw as vector text objects
- Use registered fonts (from layout_utils.register_fonts)
"""
from decimal import Decimal, ROUND_HALF_UP
from xml.sax.saxutils import escape

from reportlab.pdfbase.pdfmetrics import stringWidth


def measure_text_width(text: str, font_name: str, font_size: float) -> float:
    """
    Measure text width in points using ReportLab's stringWidth.

    Args:
        text: Text to measure
        font_name: Registered font name
        font_size: Font size in points

    Returns:
        Width in points
    """
    if not text:
        return 0.0
    return stringWidth(str(text), font_name, font_size)


def aligned_x(text: str, x: float, font_name: str, font_size: float, halign: str = "left") -> float:
    """
    Return the left edge for drawing ``text`` anchored at ``x``.

    'left' starts at x, 'center' centers the text on x, 'right' ends at x.
    """
    if halign == "left":
        return x
    width = measure_text_width(text, font_name, font_size)
    if halign == "center":
        return x - width / 2
    return x - width


def paragraph_markup(text: str) -> str:
    """Escape text for a platypus Paragraph, keeping line breaks."""
    if not text:
        return ""
    return "<br/>".join(escape(line) for line in str(text).split("\n"))


def format_amount(amount) -> str:
    """
    Format an amount with two decimals and space-grouped thousands.

    Examples:
        >>> format_amount(2500.25)
        '2 500.25'
        >>> format_amount(999999999.99)
        '999 999 999.99'
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{value:,.2f}".replace(",", " ")


def format_payload_amount(amount) -> str:
    """Two decimals without grouping, or '' when no amount is set."""
    if amount is None:
        return ""
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{value:.2f}"


def format_iban(iban: str) -> str:
    """Group an IBAN in blocks of four for display."""
    return " ".join(iban[i:i + 4] for i in range(0, len(iban), 4))


def format_reference(reference_type: str, reference: str) -> str:
    """
    Group a reference for display.

    QRR references are split as 2 + 5 x 5 digits, SCOR references in blocks of four.
    """
    if not reference:
        return ""
    if reference_type == "QRR":
        head, rest = reference[:2], reference[2:]
        return " ".join([head] + [rest[i:i + 5] for i in range(0, len(rest), 5)])
    return format_iban(reference)

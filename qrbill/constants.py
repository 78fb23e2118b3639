"""
Fixed measurements and tables for QR-bill rendering.

Measurements follow the "Style Guide QR-bill" and are expressed in points.
"""
from reportlab.lib import colors
from reportlab.lib.units import mm

# Bill canvas
BILL_WIDTH = 210 * mm
BILL_HEIGHT = 105 * mm
RECEIPT_WIDTH = 62 * mm
PAYMENT_WIDTH = 148 * mm
SECTION_PADDING = 5 * mm

# Receipt part
RECEIPT_HEADING_HEIGHT = 7 * mm
RECEIPT_INFO_HEIGHT = 56 * mm
RECEIPT_AMOUNT_HEIGHT = 14 * mm
RECEIPT_CURRENCY_WIDTH = 26 * mm
RECEIPT_PAYER_FIELD = (52 * mm, 20 * mm)
RECEIPT_AMOUNT_FIELD = (30 * mm, 10 * mm)

# Payment part
PAYMENT_LEFT_WIDTH = 51 * mm
PAYMENT_COLUMN_HEIGHT = 85 * mm
PAYMENT_HEADING_HEIGHT = 7 * mm
PAYMENT_AMOUNT_HEIGHT = 22 * mm
PAYMENT_CURRENCY_WIDTH = 23 * mm
PAYMENT_PAYER_FIELD = (65 * mm, 25 * mm)
PAYMENT_AMOUNT_FIELD = (40 * mm, 15 * mm)
QR_CODE_PADDING = (5 * mm, 5 * mm, 5 * mm, 0)  # top, right, bottom, left
SWISS_CROSS_SIZE = 7 * mm

# Blank fields and separators
CORNER_MARK_LENGTH = 3 * mm
CORNER_MARK_LINE_WIDTH = 0.75
SEPARATOR_LINE_WIDTH = 0.5
SEPARATOR_DASH = 2
SCISSORS_FONT = "ZapfDingbats"
SCISSORS_FONT_SIZE = 15
SCISSORS_GLYPH = "✂"
SCISSORS_TOP = (5 * mm, 103.1 * mm)
SCISSORS_SIDE = (60.175 * mm, 100 * mm)

# Payment data
CURRENCIES = ("CHF", "EUR")
ADDRESS_TYPES = ("structured", "combined")
REFERENCE_TYPES = ("QRR", "SCOR", "NON")
MIN_AMOUNT = 0.01
MAX_AMOUNT = 999_999_999.99
IBAN_COUNTRIES = ("CH", "LI")
IBAN_LENGTH = 21

MAX_NAME = 70
MAX_ADDRESS_LINE1 = 70
MAX_STRUCTURED_LINE2 = 16
MAX_COMBINED_LINE2 = 70
MAX_POSTAL_CODE = 16
MAX_TOWN = 35
MAX_ADDITIONAL_INFO = 140
MAX_ALTERNATIVE_SCHEMES = 2
MAX_ALTERNATIVE_SCHEME = 100

# QR code payload
QR_PAYLOAD_HEADER = ("SPC", "0200", "1")
QR_PAYLOAD_TRAILER = "EPD"
QR_PAYLOAD_SEPARATOR = "\r\n"

# Barcode color codes -> colors; unknown codes use the barcode foreground
COLOR_CODES = {
    1: colors.cyan,
    2: colors.blue,
    3: colors.magenta,
    4: colors.red,
    5: colors.yellow,
    6: colors.green,
    7: colors.black,
    8: colors.white,
}

"""
Swiss QR-bill composer.

A QR-bill is a fixed 210 x 105 mm area at the bottom of an A4 page: a 62 mm
receipt on the left and a 148 mm payment part on the right, separated by
dashed rules with scissors symbols.

Rendering is all-or-nothing: both parts are fitted first and only when both
fit is anything drawn. Layout follows the "Style Guide QR-bill" and the
"Swiss Implementation Guidelines QR-bill" (version 2.2).
"""
import io
import logging

from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Flowable, Paragraph, Spacer

from qrbill import config
from qrbill.constants import (
    BILL_HEIGHT,
    BILL_WIDTH,
    PAYMENT_AMOUNT_FIELD,
    PAYMENT_AMOUNT_HEIGHT,
    PAYMENT_COLUMN_HEIGHT,
    PAYMENT_CURRENCY_WIDTH,
    PAYMENT_HEADING_HEIGHT,
    PAYMENT_LEFT_WIDTH,
    PAYMENT_PAYER_FIELD,
    PAYMENT_WIDTH,
    QR_CODE_PADDING,
    RECEIPT_AMOUNT_FIELD,
    RECEIPT_AMOUNT_HEIGHT,
    RECEIPT_CURRENCY_WIDTH,
    RECEIPT_HEADING_HEIGHT,
    RECEIPT_INFO_HEIGHT,
    RECEIPT_PAYER_FIELD,
    RECEIPT_WIDTH,
    SCISSORS_FONT,
    SCISSORS_FONT_SIZE,
    SCISSORS_GLYPH,
    SCISSORS_SIDE,
    SCISSORS_TOP,
    SECTION_PADDING,
    SEPARATOR_DASH,
    SEPARATOR_LINE_WIDTH,
    SWISS_CROSS_SIZE,
)
from qrbill.errors import LayoutOverflowError
from qrbill.services.billing.flowables import BlankField, QRCodeFlowable, Row, Stack
from qrbill.services.billing.layout_utils import (
    BillStyles,
    draw_swiss_cross,
    format_address,
    paragraph_style,
    register_fonts,
)
from qrbill.services.billing.literals import localize
from qrbill.services.billing.payload import build_qr_payload
from qrbill.services.billing.validation import validate_payment_record
from qrbill.utils.pdf_text import format_amount, format_iban, format_reference, paragraph_markup
from qrbill.utils.qr_vector import QRCodeConfig, saved_state

logger = logging.getLogger(__name__)

HEADING_GAP = 1 * mm


def _centered_cross(c, center_x, center_y):
    draw_swiss_cross(c, center_x - SWISS_CROSS_SIZE / 2, center_y - SWISS_CROSS_SIZE / 2)


class QRBill(Flowable):
    """
    The QR-bill as a platypus Flowable.

    The payment data is validated once, on construction; ``record`` holds the
    normalized, immutable result. The bill always occupies 210 x 105 mm.

    Args:
        data: Payment data mapping or PaymentRecord (see validate_payment_record)
        styles: Optional BillStyles overriding the style guide defaults

    Raises:
        ValidationError: If the payment data is invalid
    """

    def __init__(self, data, styles: BillStyles = None):
        Flowable.__init__(self)
        self.record = validate_payment_record(data)
        self.styles = styles or BillStyles()
        self.width = BILL_WIDTH
        self.height = BILL_HEIGHT

    def wrap(self, availWidth, availHeight):
        return self.width, self.height

    def draw(self):
        self._draw_fitted(self.canv, self.fit(self.canv))

    def render(self, c, x=0, y=0):
        """
        Draw the bill directly onto a canvas with its bottom-left corner at (x, y).

        Raises:
            LayoutOverflowError: If a part does not fit; nothing is drawn then
        """
        regions = self.fit(c)
        with saved_state(c):
            c.translate(x, y)
            self._draw_fitted(c, regions)

    def fit(self, c=None):
        """
        Build and fit the receipt and payment parts without drawing.

        Returns:
            The fitted (receipt, payment) stacks

        Raises:
            LayoutOverflowError: naming the part that overflows
        """
        register_fonts()
        styles = self._paragraph_styles()
        regions = (
            ("receipt", self._receipt(styles), RECEIPT_WIDTH),
            ("payment", self._payment(styles), PAYMENT_WIDTH),
        )
        for name, region, width in regions:
            region.wrapOn(c, width, BILL_HEIGHT)
            if not region.fit_successful:
                logger.warning(f"[QR-bill] {name} part overflows")
                raise LayoutOverflowError(name)
        return regions[0][1], regions[1][1]

    def _draw_fitted(self, c, regions):
        receipt, payment = regions
        receipt.drawOn(c, 0, 0)
        payment.drawOn(c, RECEIPT_WIDTH, 0)
        self._draw_separators(c)
        logger.info(
            "Rendered QR-bill",
            extra={"ctx": {"lang": self.record.lang, "reference_type": self.record.reference_type}},
        )

    @staticmethod
    def _draw_separators(c):
        with saved_state(c):
            c.setStrokeColorRGB(0, 0, 0)
            c.setLineWidth(SEPARATOR_LINE_WIDTH)
            c.setDash([SEPARATOR_DASH], 0)
            c.line(RECEIPT_WIDTH, 0, RECEIPT_WIDTH, BILL_HEIGHT)
            c.line(0, BILL_HEIGHT, BILL_WIDTH, BILL_HEIGHT)

            c.setFillColorRGB(0, 0, 0)
            c.setFont(SCISSORS_FONT, SCISSORS_FONT_SIZE)
            c.drawString(*SCISSORS_TOP, SCISSORS_GLYPH)
            c.translate(*SCISSORS_SIDE)
            c.rotate(-90)
            c.drawString(0, 0, SCISSORS_GLYPH)

    # -------------------------------------------------------------------------
    # Content
    # -------------------------------------------------------------------------
    def _text(self, literal):
        return localize(self.record.lang, literal)

    def _paragraph_styles(self):
        s = self.styles
        return {
            "section_heading": paragraph_style("section_heading", s.section_heading),
            "payment_heading": paragraph_style("payment_heading", s.payment_heading),
            "payment_amount_heading": paragraph_style("payment_amount_heading", s.payment_heading,
                                                      space_after=HEADING_GAP),
            "payment_value": paragraph_style("payment_value", s.payment_value,
                                             space_after=s.payment_value.line_height),
            "receipt_heading": paragraph_style("receipt_heading", s.receipt_heading),
            "receipt_amount_heading": paragraph_style("receipt_amount_heading", s.receipt_heading,
                                                      space_after=HEADING_GAP),
            "receipt_value": paragraph_style("receipt_value", s.receipt_value,
                                             space_after=s.receipt_value.line_height),
            "acceptance_point": paragraph_style("acceptance_point", s.receipt_heading, alignment=TA_RIGHT),
            "alternative": paragraph_style("alternative", s.alternative_value,
                                           space_after=s.alternative_value.line_height),
            "alternative_heading": paragraph_style("alternative_heading", s.alternative_heading),
        }

    @staticmethod
    def _para(text, style):
        return Paragraph(paragraph_markup(text), style)

    def _creditor_text(self):
        creditor = self.record.creditor
        return f"{format_iban(creditor.iban)}\n{format_address(creditor)}"

    def _reference_text(self):
        return format_reference(self.record.reference_type, self.record.reference)

    def _receipt(self, styles):
        record = self.record
        heading, value = styles["receipt_heading"], styles["receipt_value"]

        info = [self._para(self._text("Account / Payable to"), heading),
                self._para(self._creditor_text(), value)]
        if record.reference_type != "NON":
            info += [self._para(self._text("Reference"), heading), self._para(self._reference_text(), value)]
        if record.debtor is not None:
            info += [self._para(self._text("Payable by"), heading),
                     self._para(format_address(record.debtor), value)]
        else:
            info += [self._para(self._text("Payable by (name/address)"), heading),
                     BlankField(*RECEIPT_PAYER_FIELD)]

        return Stack(
            [
                Stack([self._para(self._text("Receipt"), styles["section_heading"])],
                      height=RECEIPT_HEADING_HEIGHT, name="receipt heading"),
                Stack(info, height=RECEIPT_INFO_HEIGHT, name="receipt information"),
                self._receipt_amount(styles),
                self._para(self._text("Acceptance point"), styles["acceptance_point"]),
            ],
            width=RECEIPT_WIDTH, height=BILL_HEIGHT, padding=SECTION_PADDING, name="receipt",
        )

    def _receipt_amount(self, styles):
        record = self.record
        heading, value = styles["receipt_amount_heading"], styles["receipt_value"]
        if record.amount is not None:
            block = Row(
                [
                    Stack([self._para(self._text("Currency"), heading), self._para(record.currency, value)]),
                    Stack([self._para(self._text("Amount"), heading),
                           self._para(format_amount(record.amount), value)]),
                ],
                widths=[RECEIPT_CURRENCY_WIDTH, None],
            )
        else:
            field_width, field_height = RECEIPT_AMOUNT_FIELD
            block = Row(
                [
                    Stack([self._para(f"{self._text('Currency')}   {self._text('Amount')}", heading),
                           self._para(record.currency, value)]),
                    Stack([Spacer(0, 2), BlankField(field_width, field_height)]),
                ],
                widths=[None, field_width + 1 * mm],
            )
        return Stack([block], height=RECEIPT_AMOUNT_HEIGHT, name="receipt amount")

    def _payment(self, styles):
        record = self.record
        heading, value = styles["payment_heading"], styles["payment_value"]

        qr_code = QRCodeFlowable(
            QRCodeConfig(data=build_qr_payload(record), level=config.QR_ERROR_LEVEL),
            padding=QR_CODE_PADDING,
            overlay=_centered_cross,
        )
        left = Stack(
            [
                Stack([self._para(self._text("Payment part"), styles["section_heading"])],
                      height=PAYMENT_HEADING_HEIGHT, name="payment heading"),
                qr_code,
                self._payment_amount(styles),
            ],
            width=PAYMENT_LEFT_WIDTH, height=PAYMENT_COLUMN_HEIGHT, name="payment left column",
        )

        info = [self._para(self._text("Account / Payable to"), heading),
                self._para(self._creditor_text(), value)]
        if record.reference_type != "NON":
            info += [self._para(self._text("Reference"), heading), self._para(self._reference_text(), value)]
        if record.message or record.billing_information:
            additional = "\n".join(t for t in (record.message, record.billing_information) if t)
            info += [self._para(self._text("Additional information"), heading), self._para(additional, value)]
        if record.debtor is not None:
            info += [self._para(self._text("Payable by"), heading),
                     self._para(format_address(record.debtor), value)]
        else:
            info += [self._para(self._text("Payable by (name/address)"), heading),
                     BlankField(*PAYMENT_PAYER_FIELD)]

        children = [Row([left, Stack(info, height=PAYMENT_COLUMN_HEIGHT, name="payment information")],
                        widths=[PAYMENT_LEFT_WIDTH, None])]
        children += [self._alternative_scheme(scheme, styles) for scheme in record.alternative_schemes]
        return Stack(children, width=PAYMENT_WIDTH, height=BILL_HEIGHT, padding=SECTION_PADDING, name="payment")

    def _payment_amount(self, styles):
        record = self.record
        heading, value = styles["payment_amount_heading"], styles["payment_value"]
        if record.amount is not None:
            children = [Row(
                [
                    Stack([self._para(self._text("Currency"), heading), self._para(record.currency, value)]),
                    Stack([self._para(self._text("Amount"), heading),
                           self._para(format_amount(record.amount), value)]),
                ],
                widths=[PAYMENT_CURRENCY_WIDTH, None],
            )]
        else:
            field_width, field_height = PAYMENT_AMOUNT_FIELD
            children = [
                self._para(f"{self._text('Currency')}    {self._text('Amount')}", heading),
                Row([Stack([self._para(record.currency, value)]), BlankField(field_width, field_height)],
                    widths=[None, field_width + 1 * mm]),
            ]
        return Stack(children, height=PAYMENT_AMOUNT_HEIGHT, name="payment amount")

    @staticmethod
    def _alternative_scheme(scheme, styles):
        provider, _, data = scheme.partition("/")
        bold = styles["alternative_heading"].fontName
        markup = f'<font name="{bold}">{paragraph_markup(provider)}</font>{paragraph_markup(data)}'
        return Paragraph(markup, styles["alternative"])


def generate_qr_bill_pdf(data, output_path=None, styles: BillStyles = None) -> bytes:
    """
    Generate a one-page A4 PDF with the QR-bill at the bottom of the page.

    Args:
        data: Payment data mapping or PaymentRecord
        output_path: Optional file path the PDF is also written to
        styles: Optional BillStyles

    Returns:
        The PDF as bytes

    Raises:
        ValidationError: If the payment data is invalid
        LayoutOverflowError: If the content does not fit the bill
    """
    bill = QRBill(data, styles=styles)

    pdf_buffer = io.BytesIO()
    c = canvas.Canvas(pdf_buffer, pagesize=A4)
    c.setTitle("QR-bill")
    bill.render(c, 0, 0)
    c.showPage()
    c.save()

    pdf_bytes = pdf_buffer.getvalue()
    if output_path:
        with open(output_path, "wb") as f:
            f.write(pdf_bytes)
        logger.info(f"[QR-bill] written to {output_path} ({len(pdf_bytes)} bytes)")
    return pdf_bytes

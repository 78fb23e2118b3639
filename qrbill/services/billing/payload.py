"""
QR code payload for the QR-bill (Swiss Payments Code, version 2.0).

Fields are written in a fixed order and joined with CR-LF; optional values
become empty fields so every field keeps its position.
"""
from qrbill.constants import QR_PAYLOAD_HEADER, QR_PAYLOAD_SEPARATOR, QR_PAYLOAD_TRAILER
from qrbill.utils.pdf_text import format_payload_amount

ULTIMATE_CREDITOR_FIELDS = 7


def _address_fields(address):
    return [
        "S" if address.is_structured else "K",
        address.name,
        address.address_line1 or "",
        address.address_line2 or "",
        address.postal_code or "",
        address.town or "",
        address.country,
    ]


def build_qr_payload(record) -> str:
    """
    Build the QR code content for a validated PaymentRecord.

    Order: header, creditor IBAN, creditor address, empty ultimate creditor,
    amount and currency, debtor address (if any), reference type, reference,
    message, trailer, billing information (if any).
    """
    fields = list(QR_PAYLOAD_HEADER)
    fields.append(record.creditor.iban)
    fields.extend(_address_fields(record.creditor))
    fields.extend([""] * ULTIMATE_CREDITOR_FIELDS)
    fields.append(format_payload_amount(record.amount))
    fields.append(record.currency)
    if record.debtor is not None:
        fields.extend(_address_fields(record.debtor))
    fields.extend([record.reference_type, record.reference or "", record.message or "", QR_PAYLOAD_TRAILER])
    if record.billing_information:
        fields.append(record.billing_information)
    return QR_PAYLOAD_SEPARATOR.join(fields)

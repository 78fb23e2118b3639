"""Strict validation for QR-bill payment data.

Enforces (in this order, first failure wins):
- currency (CHF/EUR)
- amount range; an amount of zero turns the bill into a notification
- creditor account (IBAN) and creditor/debtor addresses
- reference type and reference check digits (QRR/SCOR/NON)
- additional information lengths
- alternative schemes

The caller's data is never modified; a new, normalized PaymentRecord is returned.
"""
import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from numbers import Real

from qrbill import config
from qrbill.constants import (
    ADDRESS_TYPES,
    CURRENCIES,
    MAX_ADDITIONAL_INFO,
    MAX_ADDRESS_LINE1,
    MAX_ALTERNATIVE_SCHEME,
    MAX_ALTERNATIVE_SCHEMES,
    MAX_AMOUNT,
    MAX_COMBINED_LINE2,
    MAX_NAME,
    MAX_POSTAL_CODE,
    MAX_STRUCTURED_LINE2,
    MAX_TOWN,
    MIN_AMOUNT,
    REFERENCE_TYPES,
)
from qrbill.errors import ChecksumError, FormatError, ValidationError
from qrbill.services.billing.checksums import (
    normalize_iban,
    normalize_qrr_reference,
    validate_scor_reference,
)
from qrbill.services.billing.literals import localize
from qrbill.services.billing.records import Address, PaymentRecord

logger = logging.getLogger(__name__)


def _check_type(field, value):
    if value is not None and not isinstance(value, str):
        raise ValidationError(field, f"must be a string, got {type(value).__name__}")


def _is_blank(value) -> bool:
    return not value or not value.strip()


def _check_length(field, value, limit):
    _check_type(field, value)
    if value is not None and len(value) > limit:
        raise ValidationError(field, f"must not contain more than {limit} characters, got {len(value)}")


def _validate_amount(amount):
    if amount is None:
        return None
    if isinstance(amount, bool) or not isinstance(amount, (Real, Decimal)):
        raise ValidationError("amount", f"must be a number, got {type(amount).__name__}")
    value = Decimal(str(amount))
    if not value.is_finite():
        raise ValidationError("amount", f"must be a finite number, got {amount}")
    if value != 0 and not (Decimal(str(MIN_AMOUNT)) <= value <= Decimal(str(MAX_AMOUNT))):
        raise ValidationError("amount", f"must be between {MIN_AMOUNT} and {MAX_AMOUNT:.2f}, got {amount}")
    return amount


def validate_address(party: str, data, with_iban: bool = False) -> Address:
    """
    Validate one address block and return it as an Address.

    Args:
        party: Name used in error messages ("creditor" or "debtor")
        data: Mapping with the address fields
        with_iban: Also validate the account number (creditor only)

    Raises:
        ValidationError: naming the offending field as ``party.field``
    """
    if data is None:
        raise ValidationError(party, "is missing")
    if not isinstance(data, Mapping):
        raise ValidationError(party, f"must be a mapping, got {type(data).__name__}")

    iban = None
    if with_iban:
        iban = data.get("iban")
        if not iban:
            raise ValidationError(f"{party}.iban", "is missing")
        try:
            iban = normalize_iban(str(iban))
        except (FormatError, ChecksumError) as e:
            raise ValidationError(f"{party}.iban", str(e)) from e

    address_type = str(data.get("address_type") or "structured")
    if address_type not in ADDRESS_TYPES:
        raise ValidationError(
            f"{party}.address_type",
            f"must be {' or '.join(ADDRESS_TYPES)}, not {address_type!r}",
        )
    structured = address_type == "structured"

    name = data.get("name")
    _check_length(f"{party}.name", name, MAX_NAME)
    if _is_blank(name):
        raise ValidationError(f"{party}.name", "must be provided")

    line1 = data.get("address_line1")
    _check_length(f"{party}.address_line1", line1, MAX_ADDRESS_LINE1)

    line2 = data.get("address_line2")
    if line2:
        limit = MAX_STRUCTURED_LINE2 if structured else MAX_COMBINED_LINE2
        _check_length(f"{party}.address_line2", line2, limit)
    elif not structured:
        raise ValidationError(f"{party}.address_line2", "must be provided for a combined address")

    postal_code = data.get("postal_code")
    town = data.get("town")
    if structured:
        _check_length(f"{party}.postal_code", postal_code, MAX_POSTAL_CODE)
        if _is_blank(postal_code):
            raise ValidationError(f"{party}.postal_code", "must be provided for a structured address")
        _check_length(f"{party}.town", town, MAX_TOWN)
        if _is_blank(town):
            raise ValidationError(f"{party}.town", "must be provided for a structured address")
    else:
        if postal_code:
            raise ValidationError(f"{party}.postal_code", "must not be provided for a combined address")
        if town:
            raise ValidationError(f"{party}.town", "must not be provided for a combined address")

    country = data.get("country")
    _check_type(f"{party}.country", country)
    if _is_blank(country):
        raise ValidationError(f"{party}.country", "must be provided")
    if len(country) != 2:
        raise ValidationError(f"{party}.country", f"must be a two-letter ISO-3166-1 code, got {country!r}")

    return Address(
        name=name,
        country=country,
        address_type=address_type,
        address_line1=line1 or None,
        address_line2=line2 or None,
        postal_code=postal_code or None,
        town=town or None,
        iban=iban,
    )


def _validate_reference(reference_type, reference):
    if reference_type not in REFERENCE_TYPES:
        raise ValidationError(
            "reference_type",
            f"must be one of {', '.join(REFERENCE_TYPES)}, not {reference_type!r}",
        )

    if reference_type == "NON":
        if reference:
            raise ValidationError("reference", "must not be provided for NON reference type")
        return None

    if not reference:
        raise ValidationError("reference", f"must be filled in for {reference_type} reference type")

    try:
        if reference_type == "QRR":
            return normalize_qrr_reference(str(reference))
        return validate_scor_reference(str(reference))
    except (FormatError, ChecksumError) as e:
        raise ValidationError("reference", str(e)) from e


def _validate_alternative_schemes(schemes):
    if schemes is None:
        schemes = ()
    elif isinstance(schemes, str):
        schemes = (schemes,)
    elif isinstance(schemes, Iterable):
        schemes = tuple(schemes)
    else:
        raise ValidationError(
            "alternative_schemes", f"must be a string or a list of strings, got {type(schemes).__name__}"
        )

    if len(schemes) > MAX_ALTERNATIVE_SCHEMES:
        raise ValidationError(
            "alternative_schemes",
            f"must at most contain {MAX_ALTERNATIVE_SCHEMES} strings, got {len(schemes)}",
        )
    for scheme in schemes:
        _check_type("alternative_schemes", scheme)
        if len(scheme) > MAX_ALTERNATIVE_SCHEME:
            raise ValidationError(
                "alternative_schemes",
                f"entries must not contain more than {MAX_ALTERNATIVE_SCHEME} characters, got {len(scheme)}",
            )
    return schemes


def validate_payment_record(data) -> PaymentRecord:
    """
    Validate QR-bill payment data and return the normalized record.

    Normalization fills in defaults (language, address type, reference type),
    appends a missing QRR check digit, strips whitespace from references and
    the IBAN, and replaces the message of a zero-amount bill with the localized
    "DO NOT USE FOR PAYMENT" notice.

    Args:
        data: Mapping with the payment data (see PaymentRecord for the keys)
              or an existing PaymentRecord.

    Returns:
        A new PaymentRecord.

    Raises:
        ValidationError: for the first field that violates a constraint.
    """
    if isinstance(data, PaymentRecord):
        data = data.to_dict()
    if not isinstance(data, Mapping):
        raise ValidationError("data", f"must be a mapping, got {type(data).__name__}")

    lang = str(data.get("lang") or config.DEFAULT_LANG)

    currency = data.get("currency")
    if currency not in CURRENCIES:
        raise ValidationError("currency", f"must be {' or '.join(CURRENCIES)}, not {currency!r}")

    amount = _validate_amount(data.get("amount"))
    message = data.get("message")
    if amount is not None and amount == 0:
        message = localize(lang, "DO NOT USE FOR PAYMENT")

    creditor = validate_address("creditor", data.get("creditor"), with_iban=True)
    debtor = None
    if data.get("debtor"):
        debtor = validate_address("debtor", data.get("debtor"))

    reference_type = str(data.get("reference_type") or "NON")
    reference = _validate_reference(reference_type, data.get("reference"))

    billing_information = data.get("billing_information")
    _check_length("message", message, MAX_ADDITIONAL_INFO)
    _check_length("billing_information", billing_information, MAX_ADDITIONAL_INFO)
    combined = len(message or "") + len(billing_information or "")
    if combined > MAX_ADDITIONAL_INFO:
        raise ValidationError(
            "message",
            f"message and billing_information together must not contain more than "
            f"{MAX_ADDITIONAL_INFO} characters, got {combined}",
        )

    alternative_schemes = _validate_alternative_schemes(data.get("alternative_schemes"))

    logger.debug(
        "Validated QR-bill data",
        extra={"ctx": {"currency": currency, "reference_type": reference_type, "lang": lang}},
    )
    return PaymentRecord(
        creditor=creditor,
        currency=currency,
        lang=lang,
        debtor=debtor,
        amount=amount,
        reference_type=reference_type,
        reference=reference,
        message=message or None,
        billing_information=billing_information or None,
        alternative_schemes=alternative_schemes,
    )

"""
Check digit algorithms for QR-bill references and accounts.

- QRR references: recursive modulo 10 (26 digits + 1 check digit)
- SCOR references: ISO 11649 creditor reference, ISO 7064 MOD 97-10
- IBAN: ISO 13616, ISO 7064 MOD 97-10 (CH/LI accounts only)

All functions are pure; they raise FormatError for malformed input and
ChecksumError for well-formed input with wrong check digits.
"""
import re

from qrbill.constants import IBAN_COUNTRIES, IBAN_LENGTH
from qrbill.errors import ChecksumError, FormatError

QRR_MODULO10_TABLE = (
    (0, 9, 4, 6, 8, 2, 7, 1, 3, 5),
    (9, 4, 6, 8, 2, 7, 1, 3, 5, 0),
    (4, 6, 8, 2, 7, 1, 3, 5, 0, 9),
    (6, 8, 2, 7, 1, 3, 5, 0, 9, 4),
    (8, 2, 7, 1, 3, 5, 0, 9, 4, 6),
    (2, 7, 1, 3, 5, 0, 9, 4, 6, 8),
    (7, 1, 3, 5, 0, 9, 4, 6, 8, 2),
    (1, 3, 5, 0, 9, 4, 6, 8, 2, 7),
    (3, 5, 0, 9, 4, 6, 8, 2, 7, 1),
    (5, 0, 9, 4, 6, 8, 2, 7, 1, 3),
)

_WHITESPACE = re.compile(r"\s+")
_QRR_SHAPE = re.compile(r"[0-9]{26,27}")
_SCOR_SHAPE = re.compile(r"[A-Za-z0-9]{5,25}")
_SCOR_PREFIX = re.compile(r"RF[0-9]{2}")
_IBAN_SHAPE = re.compile(r"[A-Z]{2}[0-9]{2}[A-Z0-9]+")


def strip_whitespace(value: str) -> str:
    return _WHITESPACE.sub("", value)


def qrr_check_digit(digits: str) -> int:
    """
    Compute the recursive modulo 10 check digit over a string of digits.

    The running state starts at 0 and each digit moves it through the fixed
    transition table; the check digit complements the final state to 10.
    """
    state = 0
    for digit in digits:
        state = QRR_MODULO10_TABLE[state][ord(digit) - 48]
    return (10 - state) % 10


def normalize_qrr_reference(value: str) -> str:
    """
    Validate a QRR reference and return it with its check digit.

    Args:
        value: 26 digits (check digit is appended) or 27 digits (check digit is
               verified). Whitespace anywhere in the value is ignored.

    Returns:
        The 27 digit reference without whitespace.

    Raises:
        FormatError: If the value does not consist of 26 or 27 digits
        ChecksumError: If a 27th digit is present and does not match
    """
    value = strip_whitespace(value)
    if not _QRR_SHAPE.fullmatch(value):
        raise FormatError("QRR reference must contain 26 or 27 digits")

    check_digit = qrr_check_digit(value[:26])
    if len(value) == 26:
        return value + str(check_digit)
    if int(value[26]) != check_digit:
        raise ChecksumError(f"QRR reference contains an invalid check digit, should be {check_digit}")
    return value


def mod97(value: str) -> int:
    """
    Return the ISO 7064 MOD 97-10 remainder of an alphanumeric string.

    Letters are replaced by two digits (A=10 ... Z=35) before the whole string
    is read as one decimal number.
    """
    numeral = "".join(str(ord(c) - 55) if c.isalpha() else c for c in value.upper())
    return int(numeral) % 97


def validate_scor_reference(value: str) -> str:
    """
    Validate an ISO 11649 creditor reference (``RF`` + 2 check digits + payload).

    The length/character check runs before the ``RF`` prefix check, so a short
    or non-alphanumeric value always reports the length constraint.

    Returns:
        The reference without whitespace.

    Raises:
        FormatError: If the shape is wrong
        ChecksumError: If the check digits do not verify
    """
    value = strip_whitespace(value)
    if not _SCOR_SHAPE.fullmatch(value):
        raise FormatError("SCOR reference must contain between 5 and 25 alpha-numeric characters")
    if not _SCOR_PREFIX.match(value):
        raise FormatError("SCOR reference must start with RF and check digits")
    if mod97(value[4:] + value[:4]) != 1:
        raise ChecksumError("SCOR reference has invalid check digits")
    return value


def normalize_iban(value: str) -> str:
    """
    Validate a Swiss or Liechtenstein IBAN and return it without whitespace.

    Raises:
        FormatError: If the IBAN is not 21 characters or not a CH/LI account
        ChecksumError: If the check digits do not verify
    """
    value = strip_whitespace(value).upper()
    if len(value) != IBAN_LENGTH or not _IBAN_SHAPE.fullmatch(value):
        raise FormatError(f"IBAN must contain exactly {IBAN_LENGTH} alpha-numeric characters, got {len(value)}")
    if value[:2] not in IBAN_COUNTRIES:
        raise FormatError(f"IBAN must be a {' or '.join(IBAN_COUNTRIES)} account, not {value[:2]}")
    if mod97(value[4:] + value[:4]) != 1:
        raise ChecksumError("IBAN has invalid check digits")
    return value

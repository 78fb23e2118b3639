"""
Error taxonomy for QR-bill rendering.

Every error raised by the renderers, the checksum engine, the validator and
the bill composer derives from QRBillError so callers can catch one type.
"""


class QRBillError(Exception):
    """Base class for all qrbill errors."""


class ConfigurationError(QRBillError):
    """Raised when render parameters are malformed (empty grid, bad size, unknown color)."""


class FormatError(QRBillError):
    """Raised when a reference or account string has the wrong shape."""


class ChecksumError(QRBillError):
    """Raised when a well-formed reference or account fails its check digits."""


class ValidationError(QRBillError):
    """
    Raised when a payment record field violates a constraint.

    Validation is fail-fast, so ``field`` always names the first offending field.
    """
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Data field {field}: {message}")


class LayoutOverflowError(QRBillError):
    """Raised when validated content does not fit the fixed bill area."""
    def __init__(self, region: str):
        self.region = region
        super().__init__(f"The QR-bill could not be fit ({region} part overflows)")

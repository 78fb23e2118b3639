"""
Immutable payment data records.

Records are produced by ``validation.validate_payment_record`` and are read-only
afterwards; field names follow the QR-bill data structure.
"""
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Address:
    name: str
    country: str
    address_type: str = "structured"
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    postal_code: Optional[str] = None
    town: Optional[str] = None
    iban: Optional[str] = None  # creditor only

    @property
    def is_structured(self) -> bool:
        return self.address_type == "structured"


@dataclass(frozen=True)
class PaymentRecord:
    creditor: Address
    currency: str
    lang: str = "en"
    debtor: Optional[Address] = None
    amount: Optional[Union[float, Decimal]] = None
    reference_type: str = "NON"
    reference: Optional[str] = None
    message: Optional[str] = None
    billing_information: Optional[str] = None
    alternative_schemes: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Plain nested dict view, accepted again by the validator."""
        data = asdict(self)
        data["alternative_schemes"] = list(self.alternative_schemes)
        return data

"""Payment models: results and method-specific payment data.

Payment data is a tagged union keyed by payment method. Each variant carries
only the fields its strategy needs; format checks stay in the strategies.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Optional, Union

from domain.orders.status import PaymentMethod


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of a payment attempt.

    transaction_id is set iff success; error_message is set iff not success.
    """
    success: bool
    transaction_id: Optional[str] = None
    error_message: Optional[str] = None
    processing_time_ms: float = 0.0

    @classmethod
    def succeeded(cls, transaction_id: str, processing_time_ms: float = 0.0) -> "PaymentResult":
        return cls(success=True, transaction_id=transaction_id, processing_time_ms=processing_time_ms)

    @classmethod
    def failed(cls, error_message: str, processing_time_ms: float = 0.0) -> "PaymentResult":
        return cls(success=False, error_message=error_message, processing_time_ms=processing_time_ms)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "transaction_id": self.transaction_id,
            "error_message": self.error_message,
            "processing_time_ms": self.processing_time_ms,
        }


@dataclass(frozen=True)
class CreditCardData:
    method: ClassVar[PaymentMethod] = PaymentMethod.CREDIT_CARD

    card_number: str
    expiry_date: str  # MM/YY
    cvv: str
    cardholder_name: str


@dataclass(frozen=True)
class PixData:
    method: ClassVar[PaymentMethod] = PaymentMethod.PIX

    pix_key: str
    user_document: str


@dataclass(frozen=True)
class BoletoData:
    method: ClassVar[PaymentMethod] = PaymentMethod.BOLETO

    user_document: str
    user_name: str
    user_address: str


PaymentData = Union[CreditCardData, PixData, BoletoData]

_VARIANTS = {
    PaymentMethod.CREDIT_CARD: (CreditCardData, ("card_number", "expiry_date", "cvv", "cardholder_name")),
    PaymentMethod.PIX: (PixData, ("pix_key", "user_document")),
    PaymentMethod.BOLETO: (BoletoData, ("user_document", "user_name", "user_address")),
}


def parse_payment_data(method: PaymentMethod, raw: Mapping[str, Any]) -> PaymentData:
    """Build the variant for method from a loose mapping.

    Accepts snake_case or camelCase keys. Missing fields become empty strings
    and are rejected later by the strategy's validate().

    Example:
        >>> parse_payment_data(PaymentMethod.PIX, {"pixKey": "a@b.com", "userDocument": "1"})
        PixData(pix_key='a@b.com', user_document='1')
    """
    variant, fields = _VARIANTS[PaymentMethod(method)]
    values = {}
    for name in fields:
        head, *rest = name.split("_")
        camel = head + "".join(part.title() for part in rest)
        value = raw.get(name, raw.get(camel))
        values[name] = "" if value is None else str(value)
    return variant(**values)

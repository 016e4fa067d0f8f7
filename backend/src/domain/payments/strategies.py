"""Payment strategies, one per payment method.

Every strategy validates its data before doing anything else; invalid data
produces a failed PaymentResult without a simulated transaction. Gateway
unreliability is simulated through an injected random source so tests can
force both the success and the decline branch.
"""

import random
import re
import time
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional
from uuid import uuid4

from domain.orders.status import PaymentMethod
from .models import BoletoData, CreditCardData, PaymentResult, PixData


RandomSource = Callable[[], float]
Clock = Callable[[], datetime]


class PaymentStrategy(ABC):
    """Port interface for a payment method.

    Strategies hold configuration only, never per-request state, so one
    instance may serve concurrent requests.
    """

    transaction_prefix: str = "txn"
    invalid_data_message: str = "Invalid payment data"

    @abstractmethod
    def method(self) -> PaymentMethod:
        pass

    @abstractmethod
    def validate(self, data: Any) -> bool:
        """Check that data is the right variant and well-formed."""
        pass

    def gateway_failure(self, amount: Decimal, data: Any) -> Optional[str]:
        """Simulated gateway outcome: an error message, or None on success."""
        return None

    def process(self, amount: Decimal, data: Any) -> PaymentResult:
        """Charge amount using data.

        Returns:
            PaymentResult; invalid data and gateway declines both fail but
            carry different error messages
        """
        if not self.validate(data):
            return PaymentResult.failed(self.invalid_data_message)

        start = time.perf_counter()
        failure = self.gateway_failure(amount, data)
        elapsed_ms = (time.perf_counter() - start) * 1000

        if failure:
            return PaymentResult.failed(failure, processing_time_ms=elapsed_ms)
        return PaymentResult.succeeded(self.new_transaction_id(), processing_time_ms=elapsed_ms)

    def void(self, transaction_id: str) -> PaymentResult:
        """Void a transaction issued by this strategy (compensation)."""
        if not transaction_id or not transaction_id.startswith(f"{self.transaction_prefix}_"):
            return PaymentResult.failed(f"Unknown transaction: {transaction_id}")
        return PaymentResult.succeeded(f"void_{transaction_id}")

    def new_transaction_id(self) -> str:
        return f"{self.transaction_prefix}_{int(time.time() * 1000)}_{uuid4().hex[:9]}"


class CreditCardPaymentStrategy(PaymentStrategy):
    """Card payments.

    Requires a 16 digit card number (whitespace ignored), an MM/YY expiry
    after the current month, a 3-4 digit CVV and a cardholder name.
    """

    transaction_prefix = "cc"
    invalid_data_message = "Invalid credit card data"

    CARD_NUMBER_RE = re.compile(r"\d{16}", re.ASCII)
    CVV_RE = re.compile(r"\d{3,4}", re.ASCII)
    EXPIRY_RE = re.compile(r"(\d{2})/(\d{2})", re.ASCII)

    def __init__(
        self,
        decline_rate: float = 0.05,
        random_source: RandomSource = random.random,
        clock: Clock = datetime.now
    ):
        self.decline_rate = decline_rate
        self.random_source = random_source
        self.clock = clock

    def method(self) -> PaymentMethod:
        return PaymentMethod.CREDIT_CARD

    def validate(self, data: Any) -> bool:
        if not isinstance(data, CreditCardData):
            return False
        if not (data.card_number and data.expiry_date and data.cvv and data.cardholder_name.strip()):
            return False
        if not self.CARD_NUMBER_RE.fullmatch(re.sub(r"\s", "", data.card_number)):
            return False
        if not self.CVV_RE.fullmatch(data.cvv):
            return False
        return self.is_expiry_in_future(data.expiry_date)

    def is_expiry_in_future(self, expiry_date: str) -> bool:
        match = self.EXPIRY_RE.fullmatch(expiry_date.strip())
        if not match:
            return False
        month, year = int(match.group(1)), 2000 + int(match.group(2))
        if not 1 <= month <= 12:
            return False
        now = self.clock()
        return (year, month) > (now.year, now.month)

    def gateway_failure(self, amount: Decimal, data: Any) -> Optional[str]:
        if self.random_source() < self.decline_rate:
            return "Payment declined by bank"
        return None


class PixPaymentStrategy(PaymentStrategy):
    """PIX instant payments. Key may be an email, CPF, CNPJ or random UUID key."""

    transaction_prefix = "pix"
    invalid_data_message = "Invalid PIX data"

    # ASCII only: Unicode digits are not document digits
    PIX_KEY_RE = re.compile(
        r"[\w.-]+@[\w.-]+\.\w+"
        r"|\d{11}"
        r"|\d{14}"
        r"|[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
        re.IGNORECASE | re.ASCII
    )

    def __init__(self, failure_rate: float = 0.01, random_source: RandomSource = random.random):
        self.failure_rate = failure_rate
        self.random_source = random_source

    def method(self) -> PaymentMethod:
        return PaymentMethod.PIX

    def validate(self, data: Any) -> bool:
        if not isinstance(data, PixData):
            return False
        if not data.pix_key or not data.user_document:
            return False
        return bool(self.PIX_KEY_RE.fullmatch(data.pix_key))

    def gateway_failure(self, amount: Decimal, data: Any) -> Optional[str]:
        if self.random_source() < self.failure_rate:
            return "PIX key not found or inactive"
        return None


class BoletoPaymentStrategy(PaymentStrategy):
    """Boleto bank slips. Issuance is deterministic; there is no decline channel."""

    transaction_prefix = "boleto"
    invalid_data_message = "Invalid boleto data"

    def method(self) -> PaymentMethod:
        return PaymentMethod.BOLETO

    def validate(self, data: Any) -> bool:
        if not isinstance(data, BoletoData):
            return False
        if not (data.user_document and data.user_name.strip() and data.user_address.strip()):
            return False
        digits = re.sub(r"\D", "", data.user_document, flags=re.ASCII)
        return len(digits) in (11, 14)

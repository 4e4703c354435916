"""
Payment collaborator (Razorpay Checkout).

The checkout widget itself runs in the browser. The backend creates the
gateway order the widget opens, then verifies the signed result the widget
hands back before marking the bill as paid. Nothing is retried here; the
user retries from the UI.
"""

import hashlib
import hmac
import logging
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional
from uuid import UUID

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ConflictError, NotFoundError, PaymentFailedError, ValidationError
from app.models.billing import Bill
from app.schemas.payment import CheckoutSession, PayerDetails, PaymentOutcome
from app.services.bill_service import BillService

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


def to_subunits(amount: Decimal) -> int:
    """Rupees to paise, rounded half-up."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class RazorpayGateway:
    """Thin async client for the Razorpay Orders API."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_base: str = "https://api.razorpay.com/v1",
        currency: str = "INR",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_base = api_base.rstrip("/")
        self.currency = currency
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.key_id and self.key_secret)

    async def create_order(self, amount: Decimal, receipt: str, notes: Dict[str, str]) -> Dict[str, Any]:
        """
        Create a gateway order for `amount`.

        Returns:
            The gateway's order object (contains "id")

        Raises:
            PaymentFailedError: gateway unconfigured, unreachable or refusing the order
        """
        if not self.configured:
            raise PaymentFailedError("Payment gateway is not configured")

        payload = {
            "amount": to_subunits(amount),
            "currency": self.currency,
            "receipt": receipt[:40],
            "notes": notes,
        }
        try:
            async with httpx.AsyncClient(
                base_url=self.api_base,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post("/orders", json=payload)
        except httpx.HTTPError as e:
            logger.warning("Payment gateway unreachable: %s", e)
            raise PaymentFailedError("Payment gateway is unreachable. Please try again.") from e

        if resp.status_code >= 400:
            raise PaymentFailedError(self._error_description(resp))
        return resp.json()

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Check the HMAC-SHA256 signature the widget returns on success."""
        if not self.key_secret:
            return False
        message = f"{order_id}|{payment_id}".encode("utf-8")
        expected = hmac.new(self.key_secret.encode("utf-8"), message, hashlib.sha256).hexdigest()
        return hmac.compare_digest(expected, signature)

    @staticmethod
    def _error_description(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            body = {}
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("description"):
            return error["description"]
        return f"Gateway returned HTTP {resp.status_code}"


def get_payment_gateway() -> RazorpayGateway:
    """FastAPI dependency; overridden in tests."""
    return RazorpayGateway(
        key_id=settings.RAZORPAY_KEY_ID,
        key_secret=settings.RAZORPAY_KEY_SECRET,
        api_base=settings.RAZORPAY_API_BASE,
        currency=settings.PAYMENT_CURRENCY,
        timeout=settings.PAYMENT_TIMEOUT_SECONDS,
    )


class PaymentService:
    """Drives a bill through checkout and into the Paid state"""

    @staticmethod
    def validate_payer(payer: PayerDetails) -> PayerDetails:
        """Trim payer details and normalise the phone number to its digits."""
        name = payer.name.strip()
        if not name:
            raise ValidationError("name", "Please enter your name")
        email = payer.email.strip()
        if not email:
            raise ValidationError("email", "Please enter your email address")
        if not _EMAIL_PATTERN.match(email):
            raise ValidationError("email", "Please enter a valid email address")
        if not payer.contact.strip():
            raise ValidationError("contact", "Please enter your phone number")
        digits = re.sub(r"\D", "", payer.contact)
        if len(digits) != 10:
            raise ValidationError("contact", "Please enter a valid 10-digit phone number")
        return PayerDetails(name=name, email=email, contact=digits)

    @staticmethod
    async def _payable_bill(db: AsyncSession, owner_id: UUID, bill_id: UUID) -> Bill:
        bill = await BillService.get_bill(db, owner_id, bill_id)
        if not bill:
            raise NotFoundError("Bill", bill_id)
        return bill

    @staticmethod
    async def start_checkout(
        db: AsyncSession,
        gateway: RazorpayGateway,
        owner_id: UUID,
        bill_id: UUID,
        payer: PayerDetails,
    ) -> CheckoutSession:
        """Create a gateway order for an unpaid bill and return the widget options."""
        payer = PaymentService.validate_payer(payer)
        bill = await PaymentService._payable_bill(db, owner_id, bill_id)
        if bill.is_paid:
            raise ConflictError("Bill is already paid", field="status")

        notes = {
            "bill_id": str(bill.bill_id),
            "meter_number": bill.meter_number,
            "consumer_name": bill.consumer_name,
        }
        order = await gateway.create_order(bill.amount, receipt=str(bill.bill_id), notes=notes)
        logger.info("Payment order %s created for bill %s", order.get("id"), bill.bill_id)

        return CheckoutSession(
            bill_id=bill.bill_id,
            key_id=gateway.key_id,
            order_id=order["id"],
            amount=bill.amount,
            amount_subunits=to_subunits(bill.amount),
            currency=gateway.currency,
            name=settings.MERCHANT_NAME,
            description=f"Electricity Bill Payment - Meter: {bill.meter_number}",
            prefill=payer.model_dump(),
            notes=notes,
        )

    @staticmethod
    async def complete_payment(
        db: AsyncSession,
        gateway: RazorpayGateway,
        owner_id: UUID,
        bill_id: UUID,
        outcome: PaymentOutcome,
    ) -> Bill:
        """
        Apply the widget's result to a bill.

        Raises:
            PaymentFailedError: the widget reported failure, or the success
                signature does not verify; the bill is left unchanged
        """
        await PaymentService._payable_bill(db, owner_id, bill_id)

        if not outcome.success:
            reason = (outcome.failure_reason or "").strip() or "Please try again"
            logger.warning("Payment for bill %s failed: %s", bill_id, reason)
            raise PaymentFailedError(reason)

        if not gateway.verify_signature(outcome.order_id, outcome.payment_id, outcome.signature):
            logger.warning("Payment signature mismatch for bill %s (order %s)", bill_id, outcome.order_id)
            raise PaymentFailedError("Payment could not be verified")

        logger.info("Payment %s verified for bill %s", outcome.payment_id, bill_id)
        return await BillService.mark_paid(db, owner_id, bill_id)

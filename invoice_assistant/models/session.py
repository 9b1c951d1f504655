from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel

from ..core.errors import InvoiceAssistantError


class EmailIntent(str, Enum):
    PAYMENT_APPROVAL = "payment-approval"
    VENDOR_QUERY = "vendor-query"

    @property
    def title(self) -> str:
        if self is EmailIntent.PAYMENT_APPROVAL:
            return "Draft: Payment Approval Request"
        return "Draft: Query to Vendor"

    @property
    def label(self) -> str:
        if self is EmailIntent.PAYMENT_APPROVAL:
            return "Payment Approval"
        return "Vendor Query"


class EmailDraft(BaseModel):
    """Generated email pending user action (copy or dismiss)"""
    intent: EmailIntent
    title: str
    body: str


@dataclass
class OperationError:
    """User-visible failure of the last operation plus the error behind it"""

    message: str
    error: InvoiceAssistantError

    @property
    def kind(self) -> str:
        return type(self.error).__name__

from loguru import logger

from ..core.errors import InvoiceAssistantError, MissingCredential
from ..models.session import EmailDraft, EmailIntent, OperationError
from .gemini import GeminiGateway
from .prompts import build_email_request
from .storage.record_store import RecordStore

FAILURE_PREFIX = "Failed to generate email."


class EmailDraftOrchestrator:
    """Drafts follow-up emails (payment approval, vendor query) from the current record"""

    def __init__(self, store: RecordStore, gateway: GeminiGateway):
        self.store = store
        self.gateway = gateway
        self.failure: OperationError | None = None

    async def draft_email(self, intent: EmailIntent, credential: str | None) -> EmailDraft | None:
        self.failure = None
        with self.store.operation(f"Drafting {intent.label} email..."):
            try:
                if not credential:
                    raise MissingCredential()
                record = self.store.require_record()
                payload = build_email_request(intent, record)
                body = await self.gateway.invoke(payload, credential)
            except InvoiceAssistantError as e:
                logger.error("Error generating email", intent=intent.value, error=str(e))
                self.failure = self.store.fail(FAILURE_PREFIX, e)
                return None

            draft = EmailDraft(intent=intent, title=intent.title, body=body)
            self.store.email_draft = draft
            logger.info("Email drafted", intent=intent.value, chars=len(body))
            return draft

    def dismiss(self) -> None:
        self.store.email_draft = None

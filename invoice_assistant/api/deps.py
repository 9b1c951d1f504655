from fastapi import Depends
from pydantic import BaseModel

from ..core.config import settings
from ..models.invoice import InvoiceRecord, format_currency
from ..models.session import EmailDraft
from ..services.config_provider import ConfigProvider, create_config_provider
from ..services.emails import EmailDraftOrchestrator
from ..services.enrichment import EnrichmentOrchestrator
from ..services.extraction import ExtractionOrchestrator
from ..services.gemini import GeminiGateway
from ..services.storage import record_store
from ..services.storage.record_store import RecordStore


class InvoiceStateResponse(BaseModel):
    """Everything the client needs to render the current session"""
    record: InvoiceRecord | None = None
    version: int = 0
    busy: bool = False
    loading_message: str = ""
    file_name: str = ""
    error: str | None = None
    error_type: str | None = None
    credential_prompt_requested: bool = False
    email_draft: EmailDraft | None = None
    formatted_totals: dict[str, str] | None = None  # subtotal/tax/total as displayed

    @classmethod
    def from_store(cls, store: RecordStore) -> "InvoiceStateResponse":
        record = store.record
        totals = None
        if record is not None:
            totals = {
                "subtotal": format_currency(record, record.subtotal),
                "tax": format_currency(record, record.tax),
                "total": format_currency(record, record.total),
            }
        return cls(
            record=record,
            version=store.version,
            busy=store.busy,
            loading_message=store.loading_message,
            file_name=store.file_name,
            error=store.error.message if store.error else None,
            error_type=store.error.kind if store.error else None,
            credential_prompt_requested=store.credential_prompt_requested,
            email_draft=store.email_draft,
            formatted_totals=totals,
        )


class CategoryUpdate(BaseModel):
    category: str


class CredentialUpdate(BaseModel):
    api_key: str


class ThemeUpdate(BaseModel):
    theme: str


# Process-wide singletons (tests swap them via app.dependency_overrides)
_config_provider = create_config_provider(settings)
_gateway = GeminiGateway()


def get_store() -> RecordStore:
    return record_store


def get_config() -> ConfigProvider:
    return _config_provider


def get_gateway() -> GeminiGateway:
    return _gateway


def get_extraction(store: RecordStore = Depends(get_store), gateway: GeminiGateway = Depends(get_gateway)) -> ExtractionOrchestrator:
    return ExtractionOrchestrator(store, gateway)


def get_enrichment(store: RecordStore = Depends(get_store), gateway: GeminiGateway = Depends(get_gateway)) -> EnrichmentOrchestrator:
    return EnrichmentOrchestrator(store, gateway)


def get_email_drafts(store: RecordStore = Depends(get_store), gateway: GeminiGateway = Depends(get_gateway)) -> EmailDraftOrchestrator:
    return EmailDraftOrchestrator(store, gateway)

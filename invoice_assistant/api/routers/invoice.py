from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import Response
from loguru import logger

from ..deps import (
    CategoryUpdate,
    InvoiceStateResponse,
    get_config,
    get_email_drafts,
    get_enrichment,
    get_extraction,
    get_store,
)
from ...core.errors import (
    GatewayHTTPError,
    IncompleteRecord,
    InvoiceAssistantError,
    MissingCredential,
    TransportError,
)
from ...models.session import EmailIntent, OperationError
from ...services.config_provider import ConfigProvider
from ...services.csv_export import build_csv, export_filename
from ...services.emails import EmailDraftOrchestrator
from ...services.enrichment import EnrichmentOrchestrator
from ...services.extraction import ExtractionOrchestrator
from ...services.storage.record_store import RecordStore

router = APIRouter(prefix="/invoices", tags=["invoices"])


def error_status(error: InvoiceAssistantError) -> int:
    if isinstance(error, MissingCredential):
        return 401
    if isinstance(error, (GatewayHTTPError, TransportError)):
        return 502
    return 400


def raise_for_failure(failure: OperationError | None) -> None:
    if failure is None:
        return
    raise HTTPException(
        status_code=error_status(failure.error),
        detail=failure.message,
        headers={"X-Error-Type": failure.kind},
    )


@router.post("/extract", response_model=InvoiceStateResponse)
async def extract(
    request: Request,
    file: UploadFile = File(None),
    store: RecordStore = Depends(get_store),
    config: ConfigProvider = Depends(get_config),
    extraction: ExtractionOrchestrator = Depends(get_extraction),
):
    """
    Transcribe an invoice image/PDF into a structured record.

    Accepts either:
    - multipart/form-data (file upload via form)
    - raw binary body with Content-Type (and optional X-Filename header)

    Replaces any current record. On failure the record stays empty and the
    error is returned with a status matching its kind.
    """
    if file:
        content = await file.read()
        filename = file.filename or "upload"
        mime_type = file.content_type
    else:
        content = await request.body()
        if not content:
            raise HTTPException(status_code=422, detail="No file provided (either multipart or raw body)")
        filename = request.headers.get("x-filename", "upload")
        mime_type = request.headers.get("content-type")

    record = await extraction.transcribe(content, filename, mime_type, config.get_credential())
    if record is None:
        raise_for_failure(extraction.failure)
    return InvoiceStateResponse.from_store(store)


@router.get("/current", response_model=InvoiceStateResponse)
async def current(store: RecordStore = Depends(get_store)):
    """Current session state: record, busy indicator, last error, email draft"""
    return InvoiceStateResponse.from_store(store)


@router.delete("/current", response_model=InvoiceStateResponse)
async def upload_new(store: RecordStore = Depends(get_store)):
    """Discard the current record so a new invoice can be uploaded"""
    store.reset()
    return InvoiceStateResponse.from_store(store)


@router.put("/current/line-items/{index}/category", response_model=InvoiceStateResponse)
async def set_category(index: int, update: CategoryUpdate, store: RecordStore = Depends(get_store)):
    """Manual edit of one line item's category"""
    try:
        store.set_category(index, update.category)
    except IncompleteRecord as e:
        raise HTTPException(status_code=404, detail=str(e))
    return InvoiceStateResponse.from_store(store)


@router.post("/current/line-items/{index}/suggest-category", response_model=InvoiceStateResponse)
async def suggest_category(
    index: int,
    store: RecordStore = Depends(get_store),
    config: ConfigProvider = Depends(get_config),
    enrichment: EnrichmentOrchestrator = Depends(get_enrichment),
):
    category = await enrichment.suggest_category(index, config.get_credential())
    if category is None:
        raise_for_failure(enrichment.failure)
        raise HTTPException(status_code=409, detail="Invoice changed before the suggestion arrived; result discarded.")
    return InvoiceStateResponse.from_store(store)


@router.post("/current/suggest-categories", response_model=InvoiceStateResponse)
async def suggest_all_categories(
    store: RecordStore = Depends(get_store),
    config: ConfigProvider = Depends(get_config),
    enrichment: EnrichmentOrchestrator = Depends(get_enrichment),
):
    merged = await enrichment.suggest_all_categories(config.get_credential())
    if not merged:
        raise_for_failure(enrichment.failure)
        raise HTTPException(status_code=409, detail="Invoice changed before the suggestions arrived; result discarded.")
    return InvoiceStateResponse.from_store(store)


@router.post("/current/emails/{intent}", response_model=InvoiceStateResponse)
async def draft_email(
    intent: EmailIntent,
    store: RecordStore = Depends(get_store),
    config: ConfigProvider = Depends(get_config),
    email_drafts: EmailDraftOrchestrator = Depends(get_email_drafts),
):
    """Draft a payment approval request or a vendor query for the current invoice"""
    draft = await email_drafts.draft_email(intent, config.get_credential())
    if draft is None:
        raise_for_failure(email_drafts.failure)
    return InvoiceStateResponse.from_store(store)


@router.delete("/current/email", response_model=InvoiceStateResponse)
async def dismiss_email(
    store: RecordStore = Depends(get_store),
    email_drafts: EmailDraftOrchestrator = Depends(get_email_drafts),
):
    email_drafts.dismiss()
    return InvoiceStateResponse.from_store(store)


@router.get("/current/export.csv")
async def export_csv(store: RecordStore = Depends(get_store)):
    """Download the current invoice as CSV for accounting import"""
    if store.record is None:
        raise HTTPException(status_code=404, detail="No invoice has been extracted yet.")

    record = store.record
    logger.info("Exporting CSV", invoice_number=record.invoice_number, rows=len(record.line_items))
    return Response(
        content=build_csv(record),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(record)}"'},
    )

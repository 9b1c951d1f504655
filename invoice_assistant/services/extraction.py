import json
from enum import Enum

from loguru import logger
from pydantic import ValidationError

from ..core.errors import InvoiceAssistantError, MalformedResponse, MissingCredential
from ..models.invoice import InvoiceRecord
from ..models.session import OperationError
from .file_encoder import encode_bytes
from .gemini import GeminiGateway
from .prompts import build_extraction_request
from .storage.record_store import RecordStore

FAILURE_PREFIX = "Failed to transcribe invoice."


class ExtractionState(str, Enum):
    IDLE = "idle"
    ENCODING = "encoding"
    REQUESTING = "requesting"
    VALIDATING = "validating"
    READY = "ready"
    FAILED = "failed"


def decode_invoice(text: str) -> InvoiceRecord:
    """
    Decode the model's JSON answer into a fully typed record.

    Every line item starts with an empty category. Raises MalformedResponse
    for unparsable JSON, a missing or empty ``lineItems`` list, or any
    wrongly typed field.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise MalformedResponse(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponse("Expected a JSON object describing the invoice.")

    items = data.get("lineItems")
    if not isinstance(items, list) or not items:
        raise MalformedResponse("Response contains no line items.")
    data["lineItems"] = [{**item, "category": ""} if isinstance(item, dict) else item for item in items]

    try:
        return InvoiceRecord.model_validate(data)
    except ValidationError as e:
        raise MalformedResponse(f"Response does not match the invoice schema: {e.error_count()} invalid field(s)") from e


class ExtractionOrchestrator:
    """Drives an uploaded file to a validated InvoiceRecord in the store"""

    def __init__(self, store: RecordStore, gateway: GeminiGateway):
        self.store = store
        self.gateway = gateway
        self.state = ExtractionState.IDLE
        self.failure: OperationError | None = None

    async def transcribe(
        self,
        content: bytes | None,
        filename: str,
        mime_type: str | None,
        credential: str | None,
    ) -> InvoiceRecord | None:
        """
        Extract a record from an uploaded file.

        Returns the installed record, or None on failure. The failure is kept
        on ``self.failure`` and shown on the store as a user-visible error.
        """
        self.failure = None
        if not credential:
            # The previous record goes away, but no encoding and no request
            self.store.reset()
            self.store.request_credential()
            self._fail(MissingCredential())
            logger.warning("Extraction refused: no API credential configured", filename=filename)
            return None

        with self.store.operation(f"Analyzing invoice: {filename}..."):
            self.store.clear()
            self.store.file_name = filename

            try:
                self.state = ExtractionState.ENCODING
                encoded = encode_bytes(content, filename=filename, mime_type=mime_type)

                self.state = ExtractionState.REQUESTING
                text = await self.gateway.invoke(build_extraction_request(encoded), credential)

                self.state = ExtractionState.VALIDATING
                record = decode_invoice(text)
            except InvoiceAssistantError as e:
                if isinstance(e, MissingCredential):
                    self.store.request_credential()
                logger.error("Error during transcription", filename=filename, error=str(e))
                self._fail(e)
                return None

            self.store.install(record)
            self.state = ExtractionState.READY
            logger.info(
                "Invoice transcribed",
                filename=filename,
                invoice_number=record.invoice_number,
                line_items=len(record.line_items),
            )
            return record

    def _fail(self, error: InvoiceAssistantError) -> None:
        self.state = ExtractionState.FAILED
        self.failure = self.store.fail(FAILURE_PREFIX, error)

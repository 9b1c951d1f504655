import json

from loguru import logger

from ..core.errors import IncompleteRecord, InvoiceAssistantError, MalformedResponse, MissingCredential
from ..models.session import OperationError
from .gemini import GeminiGateway
from .prompts import build_bulk_category_request, build_category_request
from .storage.record_store import RecordStore

SINGLE_FAILURE_PREFIX = "Failed to get category suggestion."
BULK_FAILURE_PREFIX = "Failed to get all category suggestions."


def decode_categories(text: str) -> dict[str, str]:
    """Parse a description -> category JSON object"""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise MalformedResponse(f"Category response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedResponse("Expected a JSON object mapping descriptions to categories.")
    return {str(k): v.strip() for k, v in data.items() if isinstance(v, str)}


class EnrichmentOrchestrator:
    """
    AI-assisted expense categories for line items.

    Suggestions merge into whatever record is current when the answer
    arrives, provided it is still the record the request was issued for.
    Concurrent suggestions are not serialized: for an index touched by two
    of them, the one that finishes last wins.
    """

    def __init__(self, store: RecordStore, gateway: GeminiGateway):
        self.store = store
        self.gateway = gateway
        self.failure: OperationError | None = None

    async def suggest_category(self, index: int, credential: str | None, description: str | None = None) -> str | None:
        """
        Suggest a category for one line item and write it to that index.

        Returns the applied category, or None when the request failed (see
        ``self.failure``) or the record was replaced before the answer arrived.
        """
        self.failure = None
        if description is None:
            description = self._description_of(index)

        with self.store.operation(f'Getting category for "{description or f"item {index}"}"...'):
            try:
                if not credential:
                    raise MissingCredential()
                self.store.line_item(index)
                version = self.store.version

                text = await self.gateway.invoke(build_category_request(description), credential)
            except InvoiceAssistantError as e:
                logger.error("Error getting category", index=index, error=str(e))
                self.failure = self.store.fail(SINGLE_FAILURE_PREFIX, e)
                return None

            category = text.strip()
            if not self.store.apply_category(version, index, category):
                return None
            logger.info("Category suggested", index=index, category=category)
            return category

    async def suggest_all_categories(self, credential: str | None) -> bool:
        """
        Suggest categories for every line item in a single round trip.

        Returns True if the suggestions were merged into the current record.
        """
        self.failure = None
        with self.store.operation("Getting all category suggestions..."):
            try:
                if not credential:
                    raise MissingCredential()
                record = self.store.require_record()
                version = self.store.version
                descriptions = [item.description for item in record.line_items]

                text = await self.gateway.invoke(build_bulk_category_request(descriptions), credential)
                categories = decode_categories(text)
            except InvoiceAssistantError as e:
                logger.error("Error getting all categories", error=str(e))
                self.failure = self.store.fail(BULK_FAILURE_PREFIX, e)
                return False

            merged = self.store.merge_categories(version, categories)
            if merged:
                logger.info("Categories suggested", items=len(descriptions), suggestions=len(categories))
            return merged

    def _description_of(self, index: int) -> str | None:
        try:
            return self.store.line_item(index).description
        except IncompleteRecord:
            return None

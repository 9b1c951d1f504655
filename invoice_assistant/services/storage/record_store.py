"""
In-memory holder for the current session's invoice record.

There is exactly one current record (or none). Every orchestrator reads
and writes it through this store.

Versioning: installing or clearing a record bumps ``version``. Category
patches carry the version they were issued against and are rejected when
the store has moved on, so a suggestion that resolves after a new
extraction started never lands on the wrong record. Category patches do
not bump the version; between two patches on the same record the last
write wins.
"""
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from loguru import logger

from ...core.errors import IncompleteRecord, InvoiceAssistantError
from ...models.invoice import InvoiceRecord, LineItem
from ...models.session import EmailDraft, OperationError


class RecordStore:
    def __init__(self):
        self.record: Optional[InvoiceRecord] = None
        self.version: int = 0
        self.error: Optional[OperationError] = None
        self.file_name: str = ""
        self.loading_message: str = ""
        self.email_draft: Optional[EmailDraft] = None
        self.credential_prompt_requested: bool = False
        self._in_flight: int = 0

    # --- busy indicator (not a lock) ---

    @property
    def busy(self) -> bool:
        return self._in_flight > 0

    @contextmanager
    def operation(self, message: str) -> Iterator[None]:
        """Mark an operation in flight for the duration of the block"""
        self._in_flight += 1
        self.loading_message = message
        self.error = None
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self.loading_message = ""

    # --- errors ---

    def fail(self, prefix: str, error: InvoiceAssistantError) -> OperationError:
        failure = OperationError(message=f"{prefix} {error}", error=error)
        self.error = failure
        return failure

    def request_credential(self) -> None:
        self.credential_prompt_requested = True

    # --- record lifecycle ---

    def install(self, record: InvoiceRecord) -> int:
        """Replace the current record wholesale and return its version"""
        self.record = record
        self.version += 1
        self.credential_prompt_requested = False
        return self.version

    def clear(self) -> None:
        """Drop the current record (extraction starting)"""
        self.record = None
        self.email_draft = None
        self.version += 1

    def reset(self) -> None:
        """Drop the record and any error shown next to it ("Upload New")"""
        self.clear()
        self.error = None

    def require_record(self) -> InvoiceRecord:
        if self.record is None:
            raise IncompleteRecord("No invoice has been extracted yet.")
        return self.record

    def line_item(self, index: int) -> LineItem:
        record = self.require_record()
        if not 0 <= index < len(record.line_items):
            raise IncompleteRecord(f"Line item {index} does not exist (invoice has {len(record.line_items)} items).")
        return record.line_items[index]

    # --- category mutations ---

    def set_category(self, index: int, category: str) -> LineItem:
        """Direct user edit of one line item's category"""
        item = self.line_item(index)
        item.category = category
        return item

    def apply_category(self, version: int, index: int, category: str) -> bool:
        """Apply one suggested category if the target record is still current"""
        if not self._is_current(version):
            logger.warning("Discarding category suggestion for replaced record", index=index, issued_version=version, current_version=self.version)
            return False
        if not 0 <= index < len(self.record.line_items):
            logger.warning("Discarding category suggestion for missing line item", index=index)
            return False
        self.record.line_items[index].category = category
        return True

    def merge_categories(self, version: int, categories: Dict[str, str]) -> bool:
        """
        Merge a description -> category mapping into every line item.

        An item takes the suggested category for its description if there is
        one, otherwise keeps its existing category.
        """
        if not self._is_current(version):
            logger.warning("Discarding bulk category suggestions for replaced record", issued_version=version, current_version=self.version)
            return False
        for item in self.record.line_items:
            item.category = categories.get(item.description) or item.category or ""
        return True

    def _is_current(self, version: int) -> bool:
        return self.record is not None and version == self.version


# Global instance (one session per process)
record_store = RecordStore()

import pytest

from invoice_assistant.core.errors import IncompleteRecord, MalformedResponse
from invoice_assistant.services.extraction import decode_invoice
from invoice_assistant.services.storage.record_store import RecordStore
from tests.helpers import FULL_INVOICE, invoice_json


@pytest.fixture
def store():
    store = RecordStore()
    store.install(decode_invoice(invoice_json(FULL_INVOICE)))
    return store


def test_starts_without_record():
    store = RecordStore()

    assert store.record is None
    assert store.busy is False
    with pytest.raises(IncompleteRecord):
        store.require_record()


def test_install_and_clear_bump_version(store):
    version = store.version

    store.clear()
    assert store.record is None
    assert store.version == version + 1

    store.install(decode_invoice(invoice_json(FULL_INVOICE)))
    assert store.version == version + 2


def test_manual_edit_does_not_bump_version(store):
    version = store.version

    store.set_category(1, "Misc")

    assert store.record.line_items[1].category == "Misc"
    assert store.version == version


def test_manual_edit_out_of_range(store):
    with pytest.raises(IncompleteRecord):
        store.set_category(3, "Misc")
    with pytest.raises(IncompleteRecord):
        store.set_category(-1, "Misc")


def test_stale_patches_are_rejected(store):
    stale = store.version
    store.install(decode_invoice(invoice_json(FULL_INVOICE)))

    assert store.apply_category(stale, 0, "Travel") is False
    assert store.merge_categories(stale, {"Widget": "Equipment"}) is False
    assert [i.category for i in store.record.line_items] == ["", "", ""]


def test_operation_nesting_keeps_busy_until_last_exits(store):
    with store.operation("first"):
        with store.operation("second"):
            assert store.busy is True
            assert store.loading_message == "second"
        assert store.busy is True
    assert store.busy is False
    assert store.loading_message == ""


def test_operation_clears_error_and_survives_exceptions(store):
    store.fail("Failed to transcribe invoice.", MalformedResponse("bad"))

    with pytest.raises(RuntimeError):
        with store.operation("work"):
            assert store.error is None
            raise RuntimeError("boom")

    assert store.busy is False


def test_fail_prefixes_message(store):
    failure = store.fail("Failed to generate email.", IncompleteRecord("no total"))

    assert failure.message == "Failed to generate email. no total"
    assert failure.kind == "IncompleteRecord"
    assert store.error is failure


def test_reset_drops_record_and_error(store):
    version = store.version
    store.fail("Failed to generate email.", IncompleteRecord("no total"))

    store.reset()

    assert store.record is None
    assert store.error is None
    assert store.version == version + 1

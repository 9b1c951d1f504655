"""
Tests for the accounting CSV export layout.
"""

import csv
import io

from invoice_assistant.models.invoice import format_currency
from invoice_assistant.services.csv_export import CSV_HEADERS, build_csv, export_filename
from invoice_assistant.services.extraction import decode_invoice
from tests.helpers import FULL_INVOICE, SAMPLE_INVOICE, invoice_json


def rows_of(csv_text: str) -> list[str]:
    return csv_text.rstrip("\n").split("\n")


def test_header_row():
    record = decode_invoice(invoice_json(SAMPLE_INVOICE))

    header = rows_of(build_csv(record))[0]

    assert header == (
        "Invoice no.,Customer,Invoice date,Due date,Item(Product/Service),Description,"
        "Item quantity,Item rate,Item amount,Tax amount,Item Category,Currency"
    )
    assert header.split(",") == CSV_HEADERS


def test_one_row_per_line_item_with_header_fields_on_first_row_only():
    record = decode_invoice(invoice_json(FULL_INVOICE))
    record.line_items[1].category = "Equipment"

    rows = rows_of(build_csv(record))[1:]

    assert len(rows) == len(record.line_items)
    assert rows[0] == (
        '"INV-2042","Ammons ""Data"" Labs",2025-10-01,2025-10-31,"Widget","Widget",2,5,10,15,"","€"'
    )
    assert rows[1] == ',,,,"Gadget","Gadget",1,19.99,19.99,,"Equipment",'
    assert rows[2] == ',,,,"Travel to site","Travel to site",1,120,120,,"",'


def test_missing_fields_render_blank_or_zero():
    record = decode_invoice(invoice_json({
        "lineItems": [{"description": "Widget", "quantity": 0, "unitPrice": 0, "total": 0}],
    }))

    row = rows_of(build_csv(record))[1]

    assert row == '"","",,,"Widget","Widget",0,0,0,0,"",""'


def test_export_filename():
    assert export_filename(decode_invoice(invoice_json(SAMPLE_INVOICE))) == "invoice_INV-1.csv"
    record = decode_invoice(invoice_json({"lineItems": SAMPLE_INVOICE["lineItems"]}))
    assert export_filename(record) == "invoice_data.csv"


def test_format_currency():
    record = decode_invoice(invoice_json(FULL_INVOICE))

    assert format_currency(record, record.subtotal) == "€149.99"
    assert format_currency(record, None) == "N/A"


def test_commas_in_free_text_stay_in_their_column():
    record = decode_invoice(invoice_json(FULL_INVOICE))
    record.invoice_number = "INV-1, rev 2"
    record.line_items[0].category = "Meals, Entertainment"

    rows = list(csv.reader(io.StringIO(build_csv(record))))

    assert all(len(row) == len(CSV_HEADERS) for row in rows)
    assert rows[1][0] == "INV-1, rev 2"
    assert rows[1][10] == "Meals, Entertainment"
    assert rows[1][11] == "€"

"""
CSV export in the column layout accounting imports expect (QuickBooks style).

Invoice-level fields appear on the first row only; every line item gets
its own row with the description repeated in two columns.
"""

from ..models.invoice import InvoiceRecord

CSV_HEADERS = [
    "Invoice no.", "Customer", "Invoice date", "Due date", "Item(Product/Service)",
    "Description", "Item quantity", "Item rate", "Item amount", "Tax amount",
    "Item Category", "Currency",
]


def _quote(value: str | None) -> str:
    return '"' + (value or "").replace('"', '""') + '"'


def _number(value: float | None) -> str:
    if not value:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def export_filename(record: InvoiceRecord) -> str:
    return f"invoice_{record.invoice_number or 'data'}.csv"


def build_csv(record: InvoiceRecord) -> str:
    lines = [",".join(CSV_HEADERS)]
    for index, item in enumerate(record.line_items):
        first = index == 0
        row = [
            _quote(record.invoice_number) if first else "",
            _quote(record.billed_to) if first else "",
            (record.invoice_date or "") if first else "",
            (record.due_date or "") if first else "",
            _quote(item.description),
            _quote(item.description),
            _number(item.quantity),
            _number(item.unit_price),
            _number(item.total),
            _number(record.tax) if first else "",
            _quote(item.category),
            _quote(record.currency) if first else "",
        ]
        lines.append(",".join(row))
    return "\n".join(lines) + "\n"

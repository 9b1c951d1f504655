from pydantic import BaseModel, ConfigDict, Field


class LineItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str
    quantity: float
    unit_price: float = Field(alias="unitPrice")
    total: float
    category: str = ""  # Editable expense category


class InvoiceRecord(BaseModel):
    """Structured representation of one extracted invoice/bill (camelCase on the wire)"""
    model_config = ConfigDict(populate_by_name=True)

    invoice_number: str | None = Field(default=None, alias="invoiceNumber")
    invoice_date: str | None = Field(default=None, alias="invoiceDate")
    due_date: str | None = Field(default=None, alias="dueDate")
    billed_to: str | None = Field(default=None, alias="billedTo")
    from_: str | None = Field(default=None, alias="from")
    currency: str | None = None  # Free-text symbol or code ("$", "€", "AUD")
    line_items: list[LineItem] = Field(alias="lineItems", min_length=1)
    subtotal: float | None = None
    tax: float | None = None
    total: float | None = None

    @property
    def currency_symbol(self) -> str:
        return self.currency or "$"


def format_currency(record: InvoiceRecord, amount: float | None) -> str:
    """Render an amount the way the invoice view shows it, e.g. ``$10.00``"""
    if amount is None:
        return "N/A"
    return f"{record.currency_symbol}{amount:.2f}"

"""
Request payloads for the Gemini generateContent endpoint.

One builder per operation kind. Builders only shape the request body;
addressing and credentials belong to the gateway.
"""

import json

from ..core.errors import IncompleteRecord
from ..models.invoice import InvoiceRecord, format_currency
from ..models.session import EmailIntent
from .file_encoder import EncodedFile

EXTRACTION_PROMPT = (
    "Analyze the following invoice/bill image. Extract the information in the specified JSON format. "
    "Identify the currency symbol (e.g., $, €, £) and include it. Ensure all monetary values are numbers."
)

EXTRACTION_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "invoiceNumber": {"type": "STRING"},
        "invoiceDate": {"type": "STRING"},
        "dueDate": {"type": "STRING"},
        "billedTo": {"type": "STRING"},
        "from": {"type": "STRING"},
        "currency": {"type": "STRING"},
        "lineItems": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "description": {"type": "STRING"},
                    "quantity": {"type": "NUMBER"},
                    "unitPrice": {"type": "NUMBER"},
                    "total": {"type": "NUMBER"},
                },
                "required": ["description", "quantity", "unitPrice", "total"],
            },
        },
        "subtotal": {"type": "NUMBER"},
        "tax": {"type": "NUMBER"},
        "total": {"type": "NUMBER"},
    },
    "required": [
        "invoiceNumber", "invoiceDate", "billedTo", "from", "currency",
        "lineItems", "subtotal", "tax", "total",
    ],
}

EXAMPLE_CATEGORIES = ["Software", "Office Supplies", "Marketing", "Travel", "Meals & Entertainment"]

EMAIL_PLACEHOLDER = "[INSERT QUESTION ABOUT A SPECIFIC CHARGE HERE]"


def _text_request(prompt: str) -> dict:
    return {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}


def build_extraction_request(encoded: EncodedFile) -> dict:
    schema = json.loads(json.dumps(EXTRACTION_RESPONSE_SCHEMA))
    return {
        "contents": [{
            "role": "user",
            "parts": [
                {"text": EXTRACTION_PROMPT},
                {"inlineData": {"mimeType": encoded.mime_type, "data": encoded.data}},
            ],
        }],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": schema,
        },
    }


def build_category_request(description: str) -> dict:
    examples = ", ".join(f'"{c}"' for c in EXAMPLE_CATEGORIES)
    prompt = (
        f'Based on the item description "{description}", suggest a single, common business expense '
        f"category (e.g., {examples}). Respond with only the category name."
    )
    return _text_request(prompt)


def build_bulk_category_request(descriptions: list[str]) -> dict:
    prompt = (
        "For each item description in this list, suggest a single, common business expense category.\n"
        f"Descriptions: {json.dumps(descriptions, ensure_ascii=False)}\n"
        "Respond with a JSON object where keys are the original descriptions and values are the "
        "suggested categories."
    )
    request = _text_request(prompt)
    request["generationConfig"] = {"responseMimeType": "application/json"}
    return request


def build_email_request(intent: EmailIntent, record: InvoiceRecord) -> dict:
    if record.total is None:
        raise IncompleteRecord("Invoice total is missing; cannot draft an email without it.")

    total = format_currency(record, record.total)

    if intent is EmailIntent.PAYMENT_APPROVAL:
        prompt = (
            "Write a polite and professional email to an internal accounting department to request "
            "payment approval for the following invoice. Keep it concise.\n\n"
            "Invoice Details:\n"
            f"- From: {record.from_}\n"
            f"- Invoice Number: {record.invoice_number}\n"
            f"- Total Amount: {total}\n"
            f"- Due Date: {record.due_date}\n\n"
            'Sign off as "Best regards,".'
        )
    else:
        prompt = (
            f"Write a polite and professional email to a vendor ({record.from_}) to ask for clarification "
            f"on their invoice. Mention the invoice number ({record.invoice_number}) and total amount "
            f'({total}). Include a placeholder like "{EMAIL_PLACEHOLDER}" for the user to fill in. '
            "Keep it concise.\n\n"
            'Sign off as "Thank you,".'
        )
    return _text_request(prompt)

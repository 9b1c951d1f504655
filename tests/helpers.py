"""Shared test data and fakes"""

import json
from unittest.mock import AsyncMock

TEST_API_KEY = "test-key"

SAMPLE_INVOICE = {
    "invoiceNumber": "INV-1",
    "lineItems": [{"description": "Widget", "quantity": 2, "unitPrice": 5, "total": 10}],
    "subtotal": 10,
    "tax": 0,
    "total": 10,
    "currency": "$",
}

FULL_INVOICE = {
    "invoiceNumber": "INV-2042",
    "invoiceDate": "2025-10-01",
    "dueDate": "2025-10-31",
    "billedTo": 'Ammons "Data" Labs',
    "from": "Contoso Pty Ltd",
    "currency": "€",
    "lineItems": [
        {"description": "Widget", "quantity": 2, "unitPrice": 5, "total": 10},
        {"description": "Gadget", "quantity": 1, "unitPrice": 19.99, "total": 19.99},
        {"description": "Travel to site", "quantity": 1, "unitPrice": 120, "total": 120},
    ],
    "subtotal": 149.99,
    "tax": 15,
    "total": 164.99,
}


def fake_gateway(*responses):
    """Gateway stand-in whose invoke() returns (or raises) the given values in order"""
    gateway = AsyncMock()
    gateway.invoke.side_effect = list(responses)
    return gateway


def gemini_reply(text: str) -> dict:
    """Success envelope as returned by generateContent"""
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def invoice_json(data: dict = SAMPLE_INVOICE) -> str:
    return json.dumps(data)

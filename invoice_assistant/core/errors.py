"""
Error taxonomy for the invoice assistant.

Every failure raised along an orchestrator's call chain is one of these.
Orchestrators catch them, log them and convert them into a single
user-visible message; the API layer maps the class to an HTTP status.
"""


class InvoiceAssistantError(Exception):
    """Base class for all expected failures"""


class MissingCredential(InvoiceAssistantError):
    def __init__(self, message: str = "API key is missing. Please configure your Gemini API key."):
        super().__init__(message)


class FileReadError(InvoiceAssistantError, OSError):
    """The uploaded file could not be read or was empty"""


class TransportError(InvoiceAssistantError):
    """The request never produced an HTTP response (DNS, connect, timeout...)"""


class GatewayHTTPError(InvoiceAssistantError):
    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"API request failed with status {status}: {body}")


class BlockedContent(InvoiceAssistantError):
    def __init__(self, reason: str, message: str | None = None):
        self.reason = reason
        self.message = message or ""
        super().__init__(f"Request was blocked. Reason: {reason}. {self.message}".rstrip())


class MalformedResponse(InvoiceAssistantError):
    """The model answered, but not with something we can decode"""


class IncompleteRecord(InvoiceAssistantError):
    """No current record, or the record lacks what the operation needs"""

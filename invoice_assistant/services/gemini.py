import httpx
from loguru import logger

from ..core.config import settings
from ..core.errors import (
    BlockedContent,
    GatewayHTTPError,
    MalformedResponse,
    MissingCredential,
    TransportError,
)

# Single chokepoint for the Gemini generateContent call.
# Nothing else in the service knows the wire shape of the response.


class GeminiGateway:
    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ):
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.model = model or settings.gemini_model
        self.timeout = timeout or settings.gemini_timeout_seconds

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def invoke(self, payload: dict, credential: str | None) -> str:
        """
        Send one generateContent request and return the first candidate's text.

        Raises:
            MissingCredential: credential is empty
            TransportError: no HTTP response was received
            GatewayHTTPError: non-2xx status (raw body kept for diagnostics)
            BlockedContent: no text, but the prompt was blocked
            MalformedResponse: no text and no block reason
        """
        if not credential:
            raise MissingCredential()

        logger.info("Calling Gemini", model=self.model, has_inline_data=_has_inline_data(payload))

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.post(self.endpoint, params={"key": credential}, json=payload)
        except httpx.HTTPError as e:
            # Request URL carries the key; keep it out of the message
            raise TransportError(f"Could not reach the Gemini API: {type(e).__name__}") from e

        if not r.is_success:
            logger.warning("Gemini returned an error status", status=r.status_code)
            raise GatewayHTTPError(r.status_code, r.text)

        try:
            result = r.json()
        except ValueError as e:
            raise MalformedResponse("Invalid response structure from the API.") from e

        text = _first_candidate_text(result)
        if text is not None:
            return text

        logger.error("Invalid API response", response=result)
        feedback = result.get("promptFeedback") if isinstance(result, dict) else None
        if isinstance(feedback, dict) and feedback.get("blockReason"):
            raise BlockedContent(feedback["blockReason"], feedback.get("blockReasonMessage"))
        raise MalformedResponse("Invalid response structure from the API.")


def _first_candidate_text(result) -> str | None:
    if not isinstance(result, dict):
        return None
    candidates = result.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


def _has_inline_data(payload: dict) -> bool:
    for content in payload.get("contents", []):
        for part in content.get("parts", []):
            if "inlineData" in part:
                return True
    return False

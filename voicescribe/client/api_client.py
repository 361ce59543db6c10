"""
Asynchronous HTTP client for the VoiceScribe API.

``APIClient`` implements ``StageBackend`` so the pipeline orchestrator can
run on the recording machine while the stages execute on the server.
Server-side stage failures come back as the matching ``StageError``
subclass; transport problems raise ``APIError``.
"""

import base64
import logging

import httpx

from voicescribe.core.exceptions import (
    StageError,
    SummaryError,
    TranscriptionError,
    TranslationError,
    UploadError,
)
from voicescribe.core.models import (
    PipelineRunResponse,
    StoredAudioReference,
    SummaryResult,
    SummaryType,
    TranscriptionResult,
    TranslationResult,
)
from voicescribe.services.pipeline.backend import StageBackend

logger = logging.getLogger(__name__)

_STAGE_ERRORS: dict[str, type[StageError]] = {
    cls.error_code: cls for cls in (UploadError, TranscriptionError, TranslationError, SummaryError)
}


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    """

    def __init__(self, message: str, category: str = "unknown", code: str | None = None) -> None:
        self.message = message
        self.category = category
        self.code = code
        super().__init__(message)


class APIClient(StageBackend):
    """Thin async wrapper around httpx for calling the FastAPI backend.

    Args:
        base_url: Base URL of the VoiceScribe API.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use ``ASGITransport``).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 300.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        """Execute an HTTP request and return the parsed JSON body.

        Raises:
            StageError: The server reported a stage failure.
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        try:
            resp = await self._client.request(method, path, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except httpx.ConnectError:
            raise APIError(
                f"VoiceScribe server is not reachable at {self._base_url}. "
                "Start it with: `voicescribe serve`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            try:
                body = exc.response.json()
            except ValueError:
                body = {}
            detail = body.get("detail") or exc.response.text or str(exc)
            code = body.get("code")
            if code in _STAGE_ERRORS:
                raise _STAGE_ERRORS[code](str(detail)) from None
            raise APIError(str(detail), category="http", code=code) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- health --

    async def health_check(self) -> dict:
        return await self._request("GET", "/health")

    # -- stage procedures --

    async def upload_audio(self, data: bytes, mime_type: str) -> StoredAudioReference:
        body = await self._request(
            "POST",
            "/api/v1/storage/upload-audio",
            json={"audioData": base64.b64encode(data).decode("ascii"), "mimeType": mime_type},
        )
        return StoredAudioReference(url=body["url"], key=body["key"])

    async def transcribe_audio(
        self, audio_url: str, language: str | None = None
    ) -> TranscriptionResult:
        payload: dict = {"audioUrl": audio_url}
        if language:
            payload["language"] = language
        body = await self._request("POST", "/api/v1/transcribe/audio", json=payload)
        return TranscriptionResult(
            text=body["text"], language=body["language"], duration=body["duration"]
        )

    async def translate_text(
        self, text: str, target_language: str, context: str | None = None
    ) -> TranslationResult:
        payload: dict = {"text": text, "targetLanguage": target_language}
        if context:
            payload["context"] = context
        body = await self._request("POST", "/api/v1/translate/text", json=payload)
        return TranslationResult(
            translation=body["translation"], target_language=body["targetLanguage"]
        )

    async def generate_summary(
        self, text: str, summary_type: SummaryType, language: str
    ) -> SummaryResult:
        body = await self._request(
            "POST",
            "/api/v1/summary/generate",
            json={"text": text, "type": str(summary_type), "language": language},
        )
        return SummaryResult(
            summary=body["summary"], type=SummaryType(body["type"]), language=body["language"]
        )

    # -- server-side pipeline --

    async def run_pipeline(
        self,
        data: bytes,
        mime_type: str,
        target_language: str,
        summary_type: SummaryType,
        summary_language: str | None = None,
    ) -> PipelineRunResponse:
        """Run all four stages on the server in one request."""
        payload: dict = {
            "audioData": base64.b64encode(data).decode("ascii"),
            "mimeType": mime_type,
            "targetLanguage": target_language,
            "summaryType": str(summary_type),
        }
        if summary_language:
            payload["summaryLanguage"] = summary_language
        body = await self._request("POST", "/api/v1/pipeline/run", json=payload)
        return PipelineRunResponse.model_validate(body)

    # -- history --

    async def list_transcriptions(self, limit: int = 50, offset: int = 0) -> list[dict]:
        return await self._request(
            "GET", "/api/v1/transcriptions", params={"limit": limit, "offset": offset}
        )

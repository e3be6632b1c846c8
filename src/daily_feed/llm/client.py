"""OpenAI-compatible chat completions client for article summaries."""

import httpx
import structlog

from daily_feed.config.models import SummarizerConfig
from daily_feed.fetch.constants import (
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_PAYLOAD_TOO_LARGE,
    HTTP_STATUS_TOO_MANY_REQUESTS,
)
from daily_feed.fetch.models import is_success_status
from daily_feed.fetch.redact import redact_headers
from daily_feed.llm.errors import (
    SummarizerErrorKind,
    SummarizerFailure,
    SummaryValidationError,
)
from daily_feed.llm.json_utils import strip_markdown_fences, try_parse_json_object
from daily_feed.llm.models import SummaryResult, TokenUsage, parse_summary_payload
from daily_feed.llm.prompts import build_user_prompt
from daily_feed.utils.text import extract_domain, truncate_text


logger = structlog.get_logger()

_CONTEXT_EXCEEDED_MARKERS = (
    "context length",
    "context_length",
    "maximum context",
    "too many tokens",
    "context window",
)
_ERROR_BODY_PREVIEW_CHARS = 200


class SummarizerClient:
    """Summarizes one article per call through a chat completions endpoint.

    Every call returns either a SummaryResult or a SummarizerFailure; the
    client never retries, which is the orchestrator's job.
    """

    def __init__(self, http: httpx.AsyncClient, config: SummarizerConfig) -> None:
        """Initialize the client.

        Args:
            http: Shared async HTTP client.
            config: Endpoint, model, credential and prompt settings.
        """
        self._http = http
        self._config = config
        self._log = logger.bind(component="llm", subcomponent="client")

    async def summarize(
        self,
        title: str,
        url: str,
        content: str,
    ) -> SummaryResult | SummarizerFailure:
        """Summarize and score an article.

        Args:
            title: Story title.
            url: Story URL.
            content: Article text (or the title when content was unavailable).

        Returns:
            SummaryResult on success, otherwise a SummarizerFailure.
        """
        if not self._config.api_key:
            return SummarizerFailure(
                SummarizerErrorKind.MISSING_CREDENTIALS, "LLM_API_KEY is not configured"
            )

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
        }
        body = self._build_request_body(title, url, content)

        try:
            response = await self._http.post(
                self._config.completions_url,
                headers=headers,
                json=body,
                timeout=self._config.timeout_seconds,
            )
        except httpx.TimeoutException:
            return SummarizerFailure(
                SummarizerErrorKind.TIMEOUT,
                f"LLM request timed out after {self._config.timeout_seconds:g}s",
            )
        except httpx.HTTPError as exc:
            return SummarizerFailure(
                SummarizerErrorKind.NETWORK_ERROR, f"LLM request failed: {exc}"
            )

        if not is_success_status(response.status_code):
            failure = self._classify_http_failure(response)
            self._log.warning(
                "llm_api_error",
                status=response.status_code,
                kind=failure.kind.value,
                headers=redact_headers(headers),
            )
            return failure

        try:
            return self._parse_response(response)
        except SummaryValidationError as exc:
            self._log.warning("llm_response_rejected", kind=exc.kind.value, error=str(exc))
            return SummarizerFailure(exc.kind, str(exc))

    def _build_request_body(
        self,
        title: str,
        url: str,
        content: str,
    ) -> dict[str, object]:
        """Build the chat completions payload.

        Content is capped again here regardless of earlier truncation so an
        oversized body can never reach the model.
        """
        capped = truncate_text(content, self._config.prompt_content_chars)
        user_prompt = build_user_prompt(
            title=title,
            url=url,
            content=capped,
            domain=extract_domain(url),
            language=self._config.output_language,
        )
        return {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": self._config.system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": self._config.max_output_tokens,
            "temperature": self._config.temperature,
            "response_format": {"type": "json_object"},
        }

    @staticmethod
    def _classify_http_failure(response: httpx.Response) -> SummarizerFailure:
        """Map a non-2xx response to a failure kind."""
        status = response.status_code
        preview = response.text[:_ERROR_BODY_PREVIEW_CHARS]

        if status == HTTP_STATUS_TOO_MANY_REQUESTS:
            return SummarizerFailure(
                SummarizerErrorKind.RATE_LIMITED,
                f"LLM API rate limited (429): {preview}",
                status_code=status,
            )

        if status in (HTTP_STATUS_BAD_REQUEST, HTTP_STATUS_PAYLOAD_TOO_LARGE):
            lowered = preview.lower()
            if any(marker in lowered for marker in _CONTEXT_EXCEEDED_MARKERS):
                return SummarizerFailure(
                    SummarizerErrorKind.CONTEXT_EXCEEDED,
                    f"LLM context length exceeded ({status}): {preview}",
                    status_code=status,
                )

        return SummarizerFailure(
            SummarizerErrorKind.API_ERROR,
            f"LLM API error: {status} {preview}".rstrip(),
            status_code=status,
        )

    @staticmethod
    def _parse_response(response: httpx.Response) -> SummaryResult:
        """Extract and validate the structured answer.

        Raises:
            SummaryValidationError: For empty, malformed or invalid output.
        """
        try:
            data = response.json()
        except ValueError as exc:
            msg = "LLM API returned a non-JSON body"
            raise SummaryValidationError(SummarizerErrorKind.MALFORMED_OUTPUT, msg) from exc

        message_content = _first_message_content(data)
        if not message_content or not message_content.strip():
            msg = "Empty LLM response"
            raise SummaryValidationError(SummarizerErrorKind.EMPTY_RESPONSE, msg)

        text = strip_markdown_fences(message_content)
        parsed = try_parse_json_object(text)
        if parsed is None:
            msg = f"LLM output is not a JSON object: {text[:_ERROR_BODY_PREVIEW_CHARS]}"
            raise SummaryValidationError(SummarizerErrorKind.MALFORMED_OUTPUT, msg)

        usage = TokenUsage.from_response(
            data.get("usage") if isinstance(data, dict) else None
        )
        return parse_summary_payload(parsed, usage)


def _first_message_content(data: object) -> str | None:
    """Return ``choices[0].message.content`` if present and a string."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None

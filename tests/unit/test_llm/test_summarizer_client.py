"""Unit tests for the chat completions summarizer client."""

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest

from daily_feed.config.models import SummarizerConfig
from daily_feed.llm.client import SummarizerClient
from daily_feed.llm.errors import SummarizerErrorKind, SummarizerFailure
from daily_feed.llm.models import SummaryResult


VALID_ANSWER = {
    "summary_short": "Short.",
    "summary_long": "- Long.",
    "recommend_reason": "Because.",
    "global_score": 81,
    "tags": ["ai", "tools"],
}


def _completion(content: str, usage: dict[str, int] | None = None) -> dict[str, object]:
    body: dict[str, object] = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    if usage is not None:
        body["usage"] = usage
    return body


def _summarize(
    handler: Callable[[httpx.Request], httpx.Response],
    config: SummarizerConfig | None = None,
    content: str = "Article body.",
) -> SummaryResult | SummarizerFailure:
    config = config or SummarizerConfig(api_key="sk-test")

    async def _run() -> SummaryResult | SummarizerFailure:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = SummarizerClient(http, config)
            return await client.summarize("A title", "https://www.example.com/post", content)

    return asyncio.run(_run())


class TestSummarizeSuccess:
    """Tests for successful summaries."""

    def test_returns_summary_result(self) -> None:
        """Valid JSON answer yields a SummaryResult with usage."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json=_completion(
                    json.dumps(VALID_ANSWER),
                    {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
                ),
            )

        result = _summarize(handler)

        assert isinstance(result, SummaryResult)
        assert result.summary_short == "Short."
        assert result.global_score == 81
        assert result.tags == ["ai", "tools"]
        assert result.usage.total_tokens == 15

    def test_request_shape(self) -> None:
        """Request carries model, messages, limits and bearer credential."""
        captured: dict[str, object] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion(json.dumps(VALID_ANSWER)))

        config = SummarizerConfig(
            api_key="sk-test",
            base_url="https://llm.example.com/v1/",
            model="test-model",
            max_output_tokens=200,
            temperature=0.3,
        )
        _summarize(handler, config)

        body = captured["body"]
        assert isinstance(body, dict)
        assert captured["url"] == "https://llm.example.com/v1/chat/completions"
        assert captured["auth"] == "Bearer sk-test"
        assert body["model"] == "test-model"
        assert body["max_tokens"] == 200
        assert body["temperature"] == 0.3
        assert body["response_format"] == {"type": "json_object"}
        assert [m["role"] for m in body["messages"]] == ["system", "user"]
        assert "example.com" in body["messages"][1]["content"]

    def test_content_capped_before_sending(self) -> None:
        """Oversized content is truncated to the prompt budget."""
        captured: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["prompt"] = json.loads(request.content)["messages"][1]["content"]
            return httpx.Response(200, json=_completion(json.dumps(VALID_ANSWER)))

        config = SummarizerConfig(api_key="sk-test", prompt_content_chars=100)
        _summarize(handler, config, content="x" * 5000)

        assert "x" * 100 + "..." in captured["prompt"]
        assert "x" * 101 not in captured["prompt"]

    def test_code_fenced_answer(self) -> None:
        """Markdown fences around the JSON are tolerated."""
        fenced = f"```json\n{json.dumps(VALID_ANSWER)}\n```"

        result = _summarize(lambda _: httpx.Response(200, json=_completion(fenced)))

        assert isinstance(result, SummaryResult)

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(142.7, 100), (-5, 0), (72.5, 73), (10**400, 100), (-(10**400), 0)],
    )
    def test_score_clamped_and_rounded(self, raw: float, expected: int) -> None:
        """Scores are clamped to [0, 100] and rounded half-up."""
        answer = {**VALID_ANSWER, "global_score": raw}

        result = _summarize(
            lambda _: httpx.Response(200, json=_completion(json.dumps(answer)))
        )

        assert isinstance(result, SummaryResult)
        assert result.global_score == expected


class TestSummarizeFailures:
    """Tests for failure classification."""

    def test_missing_credentials_sends_nothing(self) -> None:
        """Without an API key no request is made."""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200)

        result = _summarize(handler, SummarizerConfig(api_key=None))

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.MISSING_CREDENTIALS
        assert calls == []

    def test_rate_limited(self) -> None:
        """HTTP 429 is rate_limited."""
        result = _summarize(lambda _: httpx.Response(429, text="slow down"))

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.RATE_LIMITED
        assert result.status_code == 429

    def test_context_exceeded(self) -> None:
        """HTTP 400 mentioning context length is context_exceeded."""
        result = _summarize(
            lambda _: httpx.Response(
                400, text="This model's maximum context length is 8192 tokens"
            )
        )

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.CONTEXT_EXCEEDED

    def test_plain_bad_request_is_api_error(self) -> None:
        """HTTP 400 without a context marker is api_error."""
        result = _summarize(lambda _: httpx.Response(400, text="bad model"))

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.API_ERROR
        assert "400" in str(result)

    def test_server_error(self) -> None:
        """HTTP 500 is api_error."""
        result = _summarize(lambda _: httpx.Response(500, text="oops"))

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.API_ERROR

    def test_timeout(self) -> None:
        """Transport timeouts map to timeout."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = _summarize(handler)

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.TIMEOUT

    def test_network_error(self) -> None:
        """Connection failures map to network_error."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        result = _summarize(handler)

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.NETWORK_ERROR

    def test_empty_response(self) -> None:
        """Missing message content is empty_response."""
        result = _summarize(lambda _: httpx.Response(200, json={"choices": []}))

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.EMPTY_RESPONSE

    def test_malformed_output(self) -> None:
        """Non-JSON message content is malformed_output."""
        result = _summarize(
            lambda _: httpx.Response(200, json=_completion("Sure! Here is a summary."))
        )

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.MALFORMED_OUTPUT

    def test_json_array_is_malformed(self) -> None:
        """A JSON array is not an object."""
        result = _summarize(lambda _: httpx.Response(200, json=_completion("[1, 2]")))

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.MALFORMED_OUTPUT

    def test_missing_field_is_invalid_structure(self) -> None:
        """An object without recommend_reason is invalid_structure."""
        answer = {k: v for k, v in VALID_ANSWER.items() if k != "recommend_reason"}

        result = _summarize(
            lambda _: httpx.Response(200, json=_completion(json.dumps(answer)))
        )

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.INVALID_STRUCTURE
        assert "recommend_reason" in result.message

    def test_string_score_is_invalid_structure(self) -> None:
        """Scores must be numbers."""
        answer = {**VALID_ANSWER, "global_score": "80"}

        result = _summarize(
            lambda _: httpx.Response(200, json=_completion(json.dumps(answer)))
        )

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.INVALID_STRUCTURE

    def test_oversized_integer_literal_is_malformed(self) -> None:
        """A score too long to parse as an integer is malformed_output."""
        prefix = json.dumps({k: v for k, v in VALID_ANSWER.items() if k != "global_score"})
        content = prefix[:-1] + ', "global_score": 1' + "0" * 5000 + "}"

        result = _summarize(lambda _: httpx.Response(200, json=_completion(content)))

        assert isinstance(result, SummarizerFailure)
        assert result.kind == SummarizerErrorKind.MALFORMED_OUTPUT

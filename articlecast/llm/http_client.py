"""Provider HTTP client utilities for text-generation and speech stages.

Responsibilities:
- Send minimal chat/messages and speech requests to provider REST APIs.
- Normalize response extraction for deterministic stage integrations.
- Raise provider-named exceptions for pipeline-level error mapping.

Key types:
- `ChatCompletionsClient`: OpenAI-compatible chat-completions (OpenAI,
  Perplexity, DeepSeek).
- `AnthropicMessagesClient`: Anthropic messages API.
- `SpeechClient`: OpenAI `/audio/speech` synthesis.
"""

from __future__ import annotations

import json
import re
import socket
from typing import Any

import requests

from .rate_limiter import RateLimiter


class ProviderError(RuntimeError):
    """Raised when a provider request fails or returns malformed output."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        failure_kind: str = "unknown",
        status_code: int | None = None,
        provider_code: str | None = None,
    ) -> None:
        """Initialize provider error metadata for stage-aware diagnostics."""

        super().__init__(f"Failed to process request with {provider}: {message}")
        self.provider = provider
        self.reason = message
        self.failure_kind = failure_kind
        self.status_code = status_code
        self.provider_code = provider_code


class _ProviderBaseClient:
    """Shared HTTP settings and helpers used by provider-specific clients."""

    _MAX_PROVIDER_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        provider_id: str,
        api_key: str | None,
        base_url: str,
        timeout_seconds: float = 120.0,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """Initialize provider HTTP client settings."""

        self.provider_id = provider_id
        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.rate_limiter = rate_limiter

    def _error(self, message: str, **metadata: Any) -> ProviderError:
        """Build a provider error bound to this client's provider identity."""

        return ProviderError(message, provider=self.provider_id, **metadata)

    def _require_api_key(self) -> None:
        """Require API key presence before issuing provider requests."""

        if not self.api_key:
            raise self._error(
                f"Missing {self.provider_id} API key. Set it in the environment or run "
                "`articlecast credentials`.",
                failure_kind="invalid_api_key",
            )

    def _auth_headers(self) -> dict[str, str]:
        """Return provider authentication headers."""

        return {"Authorization": f"Bearer {self.api_key}"}

    def _post_json_bytes(
        self,
        *,
        endpoint_path: str,
        payload: dict[str, Any],
        require_non_empty_response: bool = False,
        empty_response_message: str = "Provider response is empty.",
    ) -> bytes:
        """POST a JSON payload and map failures to provider errors consistently."""

        if self.rate_limiter is not None:
            self.rate_limiter.acquire(f"{self.provider_id}:{endpoint_path}")

        endpoint = f"{self.base_url}{endpoint_path}"
        headers = {**self._auth_headers(), "Content-Type": "application/json"}
        try:
            response = requests.post(
                endpoint,
                headers=headers,
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            response_bytes = bytes(response.content)
        except requests.HTTPError as exc:
            raise self._http_error_to_provider_error(exc) from exc
        except requests.RequestException as exc:
            failure_kind = self._classify_transport_failure(exc)
            if failure_kind == "timeout":
                detail = "Request timed out."
            else:
                detail = f"Transport error: {self._short_message(str(exc))}"
            raise self._error(detail, failure_kind=failure_kind) from exc
        except TimeoutError as exc:
            raise self._error("Request timed out.", failure_kind="timeout") from exc

        if require_non_empty_response and not response_bytes:
            raise self._error(empty_response_message, failure_kind="malformed_response")
        return response_bytes

    def _post_json_payload(self, *, endpoint_path: str, payload: dict[str, Any]) -> Any:
        """POST a JSON payload and decode the JSON response body."""

        raw = self._post_json_bytes(endpoint_path=endpoint_path, payload=payload)
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise self._error(
                "Provider returned invalid JSON payload.",
                failure_kind="malformed_response",
            ) from exc

    @staticmethod
    def _decode_error_body(exc: requests.HTTPError) -> str:
        """Decode an HTTP error body into a best-effort UTF-8 payload string."""

        response = exc.response
        if response is None:
            return ""
        return bytes(response.content or b"").decode("utf-8", errors="replace").strip()

    @classmethod
    def _redact_sensitive_tokens(cls, text: str) -> str:
        """Redact API-key-like tokens from provider error content."""

        redacted = re.sub(r"\bsk-[A-Za-z0-9_-]{8,}\b", "[redacted-key]", text)
        redacted = re.sub(r"\bpplx-[A-Za-z0-9_-]{8,}\b", "[redacted-key]", redacted)
        redacted = re.sub(
            r"(?i)bearer\s+[A-Za-z0-9._-]{12,}",
            "Bearer [redacted-token]",
            redacted,
        )
        return redacted

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing provider message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."

    @classmethod
    def _extract_provider_message(cls, body: str) -> tuple[str, str | None]:
        """Extract a concise provider-facing message and optional provider error code."""

        if not body:
            return "", None

        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(cls._redact_sensitive_tokens(body)), None

        provider_code: str | None = None
        message: str | None = None
        if isinstance(payload, dict):
            error_payload = payload.get("error")
            if isinstance(error_payload, dict):
                for code_key in ("code", "type"):
                    code_value = error_payload.get(code_key)
                    if isinstance(code_value, str) and code_value.strip():
                        provider_code = code_value.strip()
                        break
                message_value = error_payload.get("message")
                if isinstance(message_value, str) and message_value.strip():
                    message = message_value.strip()

        if message is None:
            message = body

        return cls._short_message(cls._redact_sensitive_tokens(message)), provider_code

    @staticmethod
    def _classify_http_failure(
        status_code: int,
        provider_message: str,
        provider_code: str | None,
    ) -> str:
        """Classify HTTP errors into deterministic diagnostic kinds."""

        message_lower = provider_message.lower()
        normalized_code = provider_code.lower() if provider_code is not None else ""

        if status_code in {401, 403} or "api key" in message_lower:
            return "invalid_api_key"
        if normalized_code == "insufficient_quota" or (
            status_code == 429 and "quota" in message_lower
        ):
            return "insufficient_quota"
        if status_code == 429 or normalized_code == "rate_limit_error":
            return "rate_limited"
        if normalized_code == "model_not_found" or (
            "model" in message_lower
            and any(phrase in message_lower for phrase in ("not found", "does not exist", "invalid"))
        ):
            return "invalid_model"
        if status_code in {408, 504} or "timeout" in message_lower or "timed out" in message_lower:
            return "timeout"
        return "http_error"

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

    def _http_error_to_provider_error(self, exc: requests.HTTPError) -> ProviderError:
        """Convert HTTP errors into normalized provider exceptions with metadata."""

        status_code = exc.response.status_code if exc.response is not None else 0
        body = self._decode_error_body(exc)
        provider_message, provider_code = self._extract_provider_message(body)
        failure_kind = self._classify_http_failure(status_code, provider_message, provider_code)

        headline = {
            "invalid_api_key": "Authentication failed",
            "insufficient_quota": "Quota is insufficient for this request",
            "rate_limited": "Rate limit exceeded",
            "invalid_model": "Provider rejected the selected model",
            "timeout": "Request timed out",
        }.get(failure_kind, "Request failed")

        if provider_message:
            detail = f"{headline} (HTTP {status_code}): {provider_message}"
        else:
            detail = f"{headline} (HTTP {status_code})."

        return self._error(
            detail,
            failure_kind=failure_kind,
            status_code=status_code,
            provider_code=provider_code,
        )


class ChatCompletionsClient(_ProviderBaseClient):
    """Requests-based client for OpenAI-compatible chat-completions endpoints."""

    def complete_text(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float = 0.7,
    ) -> str:
        """Return the first assistant text response from a chat-completions request."""

        self._require_api_key()

        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        payload = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        response_payload = self._post_json_payload(
            endpoint_path="/chat/completions",
            payload=payload,
        )
        return self._extract_message_text(response_payload)

    def _extract_message_text(self, payload: Any) -> str:
        """Extract first assistant message text from a chat-completions JSON payload."""

        choices = payload.get("choices") if isinstance(payload, dict) else None
        if not isinstance(choices, list) or not choices:
            raise self._error(
                "Response missing non-empty `choices` list.",
                failure_kind="malformed_response",
            )

        first_choice = choices[0]
        message = first_choice.get("message") if isinstance(first_choice, dict) else None
        if not isinstance(message, dict):
            raise self._error(
                "Response missing `choices[0].message` object.",
                failure_kind="malformed_response",
            )

        normalized = _content_to_text(message.get("content")).strip()
        if not normalized:
            raise self._error(
                "Response message content is empty.",
                failure_kind="malformed_response",
            )
        return normalized


class AnthropicMessagesClient(_ProviderBaseClient):
    """Requests-based client for the Anthropic messages API."""

    API_VERSION = "2023-06-01"

    def _auth_headers(self) -> dict[str, str]:
        """Return Anthropic API key and version headers."""

        return {"x-api-key": self.api_key, "anthropic-version": self.API_VERSION}

    def complete_text(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float = 0.7,
    ) -> str:
        """Return concatenated text blocks from an Anthropic messages response."""

        self._require_api_key()

        payload: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": user_prompt}],
        }
        if system_prompt:
            payload["system"] = system_prompt
        response_payload = self._post_json_payload(endpoint_path="/messages", payload=payload)

        content = response_payload.get("content") if isinstance(response_payload, dict) else None
        if not isinstance(content, list):
            raise self._error(
                "Response missing `content` block list.",
                failure_kind="malformed_response",
            )
        normalized = _content_to_text(content).strip()
        if not normalized:
            raise self._error(
                "Response message content is empty.",
                failure_kind="malformed_response",
            )
        return normalized


class SpeechClient(_ProviderBaseClient):
    """Requests-based client for OpenAI speech synthesis."""

    def synthesize_speech(
        self,
        *,
        model: str,
        voice: str,
        text: str,
        response_format: str = "mp3",
    ) -> bytes:
        """Return synthesized audio bytes from `/audio/speech`."""

        self._require_api_key()

        payload = {
            "model": model,
            "voice": voice,
            "input": text,
            "response_format": response_format,
        }
        return self._post_json_bytes(
            endpoint_path="/audio/speech",
            payload=payload,
            require_non_empty_response=True,
            empty_response_message="Speech response is empty.",
        )


def _content_to_text(content: Any) -> str:
    """Convert string or typed-block message content into plain text."""

    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for item in content:
            if not isinstance(item, dict):
                continue
            if item.get("type") == "text" and isinstance(item.get("text"), str):
                parts.append(item["text"])
        return "".join(parts)
    return ""

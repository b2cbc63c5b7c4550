"""
Claude (Anthropic Messages API) client for the draft assistant.

Direct HTTP via requests with proxy-safe init, a per-call timeout, bounded
attempts with exponential backoff on rate-limit / overload responses, and a
fallback API key.
"""

import logging
import os
import time
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from apps.core.exceptions import AIServiceError

from .prompts import prompt_registry

logger = logging.getLogger(__name__)


class AssistantClient:
    """
    Thin Claude API wrapper.

    Every failure surfaces as AIServiceError; callers never see requests
    exceptions.
    """

    API_URL = "https://api.anthropic.com/v1/messages"
    API_VERSION = "2023-06-01"

    # Rate limit, service unavailable, overloaded
    RETRY_STATUS_CODES = {429, 503, 529}

    def __init__(
        self,
        api_key: Optional[str] = None,
        fallback_api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
    ):
        self.api_key = api_key or settings.ANTHROPIC_API_KEY
        self.fallback_api_key = fallback_api_key or getattr(settings, 'ANTHROPIC_API_KEY_FALLBACK', '')
        self.model = model or settings.LLM_MODEL
        self.max_tokens = max_tokens or settings.LLM_MAX_TOKENS
        self.temperature = temperature if temperature is not None else settings.LLM_TEMPERATURE
        self.timeout = timeout or settings.AI_REQUEST_TIMEOUT
        self.max_attempts = max_attempts or settings.AI_MAX_ATTEMPTS
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.AI_BACKOFF_SECONDS
        )
        self._using_fallback = False

        self.proxies = {
            k: v for k, v in {
                "http": os.getenv("HTTP_PROXY") or os.getenv("http_proxy"),
                "https": os.getenv("HTTPS_PROXY") or os.getenv("https_proxy"),
            }.items() if v
        } or None

    @property
    def available(self) -> bool:
        """Return True when we have an API key (primary or fallback)."""
        return bool(self.api_key) or bool(self.fallback_api_key)

    @property
    def using_fallback(self) -> bool:
        return self._using_fallback

    def _get_active_key(self) -> str:
        if self._using_fallback and self.fallback_api_key:
            return self.fallback_api_key
        return self.api_key or self.fallback_api_key

    def _backoff(self, attempt: int) -> None:
        if attempt >= self.max_attempts:
            return
        delay = self.backoff_seconds * (2 ** (attempt - 1))
        if delay > 0:
            time.sleep(delay)

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        blocks = data.get("content") or []
        parts = [
            block.get("text", "")
            for block in blocks
            if isinstance(block, dict) and block.get("type", "text") == "text"
        ]
        return "".join(parts).strip()

    def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        prompt_name: Optional[str] = None,
    ) -> str:
        """
        Run a single prompt and return the response text.

        Raises:
            AIServiceError: not configured, non-retryable HTTP error, or all
                attempts exhausted.
        """
        if not self.available:
            raise AIServiceError("AI service is not configured")

        payload = {
            "model": self.model,
            "max_tokens": max_tokens or self.max_tokens,
            "temperature": temperature if temperature is not None else self.temperature,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": prompt}],
                }
            ],
        }
        if system:
            payload["system"] = system

        last_error = None
        start_time = time.time()

        for attempt in range(1, self.max_attempts + 1):
            headers = {
                "x-api-key": self._get_active_key(),
                "anthropic-version": self.API_VERSION,
                "content-type": "application/json",
            }

            try:
                resp = requests.post(
                    self.API_URL,
                    headers=headers,
                    json=payload,
                    timeout=self.timeout,
                    proxies=self.proxies,
                )
            except requests.RequestException as exc:
                last_error = str(exc)
                logger.warning("Claude HTTP call exception (attempt %s): %s", attempt, exc)
                self._backoff(attempt)
                continue

            raw_text = resp.text or ""

            if resp.status_code in self.RETRY_STATUS_CODES:
                last_error = f"HTTP {resp.status_code}"
                if self.fallback_api_key and not self._using_fallback and self.api_key:
                    logger.warning(
                        "Primary API key hit %s, switching to fallback key",
                        resp.status_code,
                    )
                    self._using_fallback = True
                    continue
                logger.warning(
                    "Claude returned %s (attempt %s/%s): %s",
                    resp.status_code, attempt, self.max_attempts, raw_text[:400],
                )
                self._backoff(attempt)
                continue

            if resp.status_code != 200:
                logger.error("Claude HTTP call failed: %s - %s", resp.status_code, raw_text[:400])
                raise AIServiceError(
                    f"AI service returned HTTP {resp.status_code}",
                    details={"status_code": resp.status_code},
                )

            try:
                data = resp.json()
            except ValueError:
                last_error = "invalid JSON body"
                logger.warning("Claude response parse error (attempt %s): %s", attempt, raw_text[:400])
                self._backoff(attempt)
                continue

            text = self._extract_text(data)
            if not text:
                last_error = "empty response"
                logger.warning("Claude returned empty content (attempt %s): %s", attempt, raw_text[:200])
                self._backoff(attempt)
                continue

            usage = data.get("usage") or {}
            logger.info(
                "Claude %s ok in %dms (in=%s out=%s)",
                prompt_name or "prompt",
                int((time.time() - start_time) * 1000),
                usage.get("input_tokens"),
                usage.get("output_tokens"),
            )
            return text

        logger.error("Claude %s failed after %s attempts: %s", prompt_name or "prompt", self.max_attempts, last_error)
        raise AIServiceError(
            f"AI service failed after {self.max_attempts} attempts",
            details={"last_error": last_error},
        )

    def run_template(self, template_name: str, variables: Dict[str, Any]) -> str:
        """
        Run a prompt from a registered template. Inputs longer than the
        template's max_input_chars are cut.
        """
        template = prompt_registry.get(template_name)
        if not template:
            raise ValueError(f"Prompt template '{template_name}' not found")

        if template.max_input_chars and isinstance(variables.get("content"), str):
            variables = dict(variables, content=variables["content"][:template.max_input_chars])

        return self.complete(
            prompt=template.render(**variables),
            system=template.get_system_prompt(**variables),
            max_tokens=template.recommended_max_tokens,
            temperature=template.temperature,
            prompt_name=template_name,
        )

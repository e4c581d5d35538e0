"""
NeuroNotes Backend: AI Gateway Service
========================================

What:  NoteAssistant implementation backed by an OpenAI-compatible
       chat-completions gateway.
How:   Builds a chat-completion request per call, posts it with httpx, and
       reshapes the reply: a forced `suggest_tags` tool call for tag
       suggestions, the plain message content for summaries.
Who:   Singleton used by routes/functions.py.
When:  Once per suggest-tags / summarize-note invocation. No state is kept
       between calls.

Error Classification:
    upstream 429              → AIRateLimitError        (returned as 429, no retry)
    upstream 402              → AICreditsExhaustedError (returned as 402, no retry)
    upstream 502 / 503 / 504  → retried, then AIGatewayError
    transport error / timeout → retried, then AIGatewayError
    any other non-2xx         → AIGatewayError          (generic 500)
    missing tool call         → AIGatewayError("Failed to generate tags")

Retry Policy:
    tenacity AsyncRetrying with exponential backoff + jitter, bounded by
    RETRY_MAX_ATTEMPTS. Settings are read per call so tests can shrink waits.
"""

import json
import logging
import time
import uuid
from typing import Any, Dict, List, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from neuronotes.config import settings
from neuronotes.exceptions import (
    AICreditsExhaustedError,
    AIGatewayError,
    AIRateLimitError,
    ConfigurationError,
)
from neuronotes.services.llm_base import NoteAssistant
from neuronotes.tags import normalize_tags

logger = logging.getLogger(__name__)

MIN_TAGS = 3
MAX_TAGS = 5

# Upstream statuses worth another attempt
RETRYABLE_STATUSES = {502, 503, 504}


class TransientGatewayError(AIGatewayError):
    """Retryable upstream failure (5xx gateway errors)."""


class AIGatewayService(NoteAssistant):
    """
    Chat-completions client for tag suggestions and summaries.

    Args:
        transport: Optional httpx transport. Tests pass an
                   httpx.MockTransport to stand in for the gateway.
    """

    SUGGEST_TAGS_PROMPT = (
        "You are a helpful assistant that suggests relevant tags for notes. "
        "Return 3-5 concise, lowercase tags. Tags should be single words or "
        "short phrases (max 2 words). Only return the tags, nothing else."
    )

    SUMMARIZE_PROMPT = (
        "You are a helpful assistant that summarizes notes. Write a concise "
        "summary of 2-4 sentences capturing the key points of the note. "
        "Only return the summary, nothing else."
    )

    SUGGEST_TAGS_TOOL: Dict[str, Any] = {
        "type": "function",
        "function": {
            "name": "suggest_tags",
            "description": "Return 3-5 relevant tags for the note",
            "parameters": {
                "type": "object",
                "properties": {
                    "tags": {
                        "type": "array",
                        "items": {"type": "string"},
                        "minItems": MIN_TAGS,
                        "maxItems": MAX_TAGS,
                    }
                },
                "required": ["tags"],
                "additionalProperties": False,
            },
        },
    }

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    # ══════════════════════════════════════════════════════════════════════
    # Public API
    # ══════════════════════════════════════════════════════════════════════

    async def suggest_tags(self, title: str, content: str) -> List[str]:
        request_id = str(uuid.uuid4())[:8]
        logger.info("[%s] Generating tag suggestions...", request_id)

        payload = {
            "model": settings.ai_model,
            "messages": [
                {"role": "system", "content": self.SUGGEST_TAGS_PROMPT},
                {
                    "role": "user",
                    "content": f"Suggest tags for this note:\n\nTitle: {title}\n\nContent: {content}",
                },
            ],
            "tools": [self.SUGGEST_TAGS_TOOL],
            "tool_choice": {"type": "function", "function": {"name": "suggest_tags"}},
        }
        data = await self._complete(payload, request_id)

        tags = self._extract_tags(data)
        if tags is None:
            logger.error("[%s] Reply carried no usable suggest_tags tool call", request_id)
            raise AIGatewayError(
                message="Failed to generate tags",
                context={"request_id": request_id},
            )

        logger.info("[%s] Tags generated successfully: %s", request_id, tags)
        return tags

    async def summarize_note(self, content: str) -> str:
        request_id = str(uuid.uuid4())[:8]
        logger.info("[%s] Generating note summary (%d chars)...", request_id, len(content))

        payload = {
            "model": settings.ai_model,
            "messages": [
                {"role": "system", "content": self.SUMMARIZE_PROMPT},
                {"role": "user", "content": f"Summarize this note:\n\n{content}"},
            ],
        }
        data = await self._complete(payload, request_id)

        try:
            summary = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            summary = None
        if not isinstance(summary, str) or not summary.strip():
            logger.error("[%s] Reply carried no summary text", request_id)
            raise AIGatewayError(
                message="Failed to generate summary",
                context={"request_id": request_id},
            )

        summary = summary.strip()
        logger.info("[%s] Summary generated successfully (%d chars)", request_id, len(summary))
        return summary

    async def health_check(self) -> bool:
        """True when a gateway key is configured. Makes no upstream call."""
        return bool(settings.ai_gateway_api_key)

    # ══════════════════════════════════════════════════════════════════════
    # Transport
    # ══════════════════════════════════════════════════════════════════════

    def _require_api_key(self) -> str:
        if not settings.ai_gateway_api_key:
            raise ConfigurationError(message="AI_GATEWAY_API_KEY is not configured")
        return settings.ai_gateway_api_key

    async def _complete(self, payload: Dict[str, Any], request_id: str) -> Dict[str, Any]:
        """
        Send a chat-completion request and return the decoded JSON reply.

        Only TransientGatewayError and httpx transport errors are retried;
        rate-limit and credit errors leave on the first response.
        """
        api_key = self._require_api_key()

        retrying = AsyncRetrying(
            retry=retry_if_exception_type((TransientGatewayError, httpx.TransportError)),
            stop=stop_after_attempt(settings.retry_max_attempts),
            wait=wait_exponential_jitter(
                initial=settings.retry_min_wait,
                max=settings.retry_max_wait,
                jitter=min(1.0, settings.retry_max_wait),
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._post(payload, api_key, request_id)
        except httpx.TransportError as e:
            logger.error("[%s] AI gateway unreachable: %s", request_id, str(e))
            raise AIGatewayError(
                context={"request_id": request_id, "error_type": type(e).__name__},
            )
        except TransientGatewayError as e:
            # Retries exhausted; callers only see the generic error
            raise AIGatewayError(context=e.context)

        try:
            data = response.json()
        except ValueError:
            logger.error("[%s] AI gateway returned a non-JSON body", request_id)
            raise AIGatewayError(context={"request_id": request_id})
        if not isinstance(data, dict):
            raise AIGatewayError(context={"request_id": request_id})
        return data

    async def _post(
        self, payload: Dict[str, Any], api_key: str, request_id: str
    ) -> httpx.Response:
        start_time = time.perf_counter()
        async with httpx.AsyncClient(
            timeout=settings.ai_gateway_timeout_seconds,
            transport=self._transport,
        ) as client:
            response = await client.post(
                settings.ai_gateway_url,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
        duration_ms = (time.perf_counter() - start_time) * 1000

        if response.is_success:
            logger.debug("[%s] AI gateway answered in %.0fms", request_id, duration_ms)
            return response

        status = response.status_code
        logger.error("[%s] AI gateway error: %d %s", request_id, status, response.text)
        context = {"request_id": request_id, "upstream_status": status}

        if status == 429:
            raise AIRateLimitError(context=context)
        if status == 402:
            raise AICreditsExhaustedError(context=context)
        if status in RETRYABLE_STATUSES:
            raise TransientGatewayError(context=context)
        raise AIGatewayError(context=context)

    # ══════════════════════════════════════════════════════════════════════
    # Reply parsing
    # ══════════════════════════════════════════════════════════════════════

    @staticmethod
    def _extract_tags(data: Dict[str, Any]) -> Optional[List[str]]:
        """
        Pull the tag list out of the first `suggest_tags` tool call.

        Returns None when the call is missing, names another function, its
        arguments are not a JSON object with a list of strings, or fewer than
        MIN_TAGS distinct tags remain after normalizing.
        """
        try:
            tool_calls = data["choices"][0]["message"].get("tool_calls") or []
        except (KeyError, IndexError, TypeError, AttributeError):
            return None
        if not tool_calls:
            return None

        function = tool_calls[0].get("function") or {}
        if function.get("name") != "suggest_tags":
            return None

        try:
            arguments = json.loads(function.get("arguments") or "")
        except (TypeError, ValueError):
            return None

        tags = arguments.get("tags") if isinstance(arguments, dict) else None
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            return None
        tags = normalize_tags(tags)
        if len(tags) < MIN_TAGS:
            return None
        return tags[:MAX_TAGS]


ai_gateway_service = AIGatewayService()

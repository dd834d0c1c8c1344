"""LiteLLMGateway — ModelGateway implementation backed by LiteLLM."""

import time
from typing import Any

import litellm

from skill_duel.gateway.domain.json_extraction import extract_json_payload
from skill_duel.gateway.domain.message import ImageBlock, MessageContent, TextBlock
from skill_duel.gateway.domain.observer import GatewayObserver
from skill_duel.gateway.domain.reply import GatewayReply
from skill_duel.gateway.infrastructure.errors import GatewayInvocationError


def _to_litellm_content(content: MessageContent) -> str | list[dict[str, Any]]:
    """Convert domain content blocks into OpenAI-style parts understood by LiteLLM."""
    if isinstance(content, str):
        return content
    parts: list[dict[str, Any]] = []
    for block in content:
        if isinstance(block, TextBlock):
            parts.append({"type": "text", "text": block.text})
        elif isinstance(block, ImageBlock):
            parts.append(
                {
                    "type": "image_url",
                    "image_url": {
                        "url": f"data:{block.media_type};base64,{block.base64}"
                    },
                }
            )
    return parts


def _has_images(content: MessageContent) -> bool:
    return not isinstance(content, str) and any(
        isinstance(block, ImageBlock) for block in content
    )


def _extract_text(response: Any) -> str:
    """Return the assistant text of the first choice, or '' when there is none."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = choices[0].message
    text = getattr(message, "content", None)
    if isinstance(text, list):
        text = next(
            (part.get("text") for part in text if part.get("type") == "text"), None
        )
    return text or ""


class LiteLLMGateway:
    """Calls a language model through LiteLLM, one request per call, no retries.

    Model identifiers use LiteLLM's ``provider/model`` form, for example
    ``anthropic/claude-sonnet-4-5-20250929``.
    """

    def __init__(self, observer: GatewayObserver) -> None:
        litellm.suppress_debug_info = True
        self._observer = observer

    async def complete(
        self,
        api_key: str,
        model: str,
        system_prompt: str,
        content: MessageContent,
        max_tokens: int,
        json_mode: bool = False,
    ) -> GatewayReply:
        """Send one user message and return the extracted reply text.

        Raises:
            GatewayInvocationError: if the API call fails for any reason.
        """
        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": _to_litellm_content(content)})

        self._observer.gateway_call_started(model=model, has_images=_has_images(content))
        start = time.monotonic()
        try:
            response = await litellm.acompletion(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                api_key=api_key or None,
            )
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
            self._observer.gateway_call_failed(model=model, reason=reason)
            raise GatewayInvocationError(
                reason=reason, status_code=getattr(exc, "status_code", None)
            ) from exc

        duration_ms = int((time.monotonic() - start) * 1000)
        self._observer.gateway_call_completed(model=model, duration_ms=duration_ms)

        text = _extract_text(response)
        if not json_mode:
            return GatewayReply(text=text)

        try:
            parsed = extract_json_payload(text)
        except ValueError as exc:
            self._observer.gateway_json_unparseable(model=model, reason=str(exc))
            return GatewayReply(text=text, parse_error=str(exc))
        return GatewayReply(text=text, parsed=parsed)

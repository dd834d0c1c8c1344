"""FakeModelGateway — in-memory ModelGateway implementation for use in tests."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from skill_duel.gateway.domain.message import MessageContent, TextBlock
from skill_duel.gateway.domain.reply import GatewayReply


@dataclass(frozen=True)
class GatewayCall:
    api_key: str
    model: str
    system_prompt: str
    content: MessageContent
    max_tokens: int
    json_mode: bool

    @property
    def text(self) -> str:
        """The user content flattened to text, images omitted."""
        if isinstance(self.content, str):
            return self.content
        return "".join(b.text for b in self.content if isinstance(b, TextBlock))


class FakeModelGateway:
    """Satisfies the ModelGateway protocol.

    Returns ``text`` for every call unless ``script`` is given, in which case
    the script's return value is the reply text; a script may raise to
    simulate a failed call. Tracks peak concurrency in ``max_in_flight``.
    """

    def __init__(
        self,
        text: str = "Generated output.",
        script: Callable[[GatewayCall], str] | None = None,
        delay_seconds: float = 0.0,
        parsed: Any = None,
        parse_error: str | None = None,
    ) -> None:
        self._text = text
        self._script = script
        self._delay_seconds = delay_seconds
        self._parsed = parsed
        self._parse_error = parse_error
        self.calls: list[GatewayCall] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def complete(
        self,
        api_key: str,
        model: str,
        system_prompt: str,
        content: MessageContent,
        max_tokens: int,
        json_mode: bool = False,
    ) -> GatewayReply:
        call = GatewayCall(
            api_key=api_key,
            model=model,
            system_prompt=system_prompt,
            content=content,
            max_tokens=max_tokens,
            json_mode=json_mode,
        )
        self.calls.append(call)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._delay_seconds)
            text = self._script(call) if self._script is not None else self._text
        finally:
            self.in_flight -= 1
        return GatewayReply(text=text, parsed=self._parsed, parse_error=self._parse_error)

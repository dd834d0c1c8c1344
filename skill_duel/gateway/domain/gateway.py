"""ModelGateway Protocol — structural interface for language-model calls."""

from typing import Protocol

from skill_duel.gateway.domain.message import MessageContent
from skill_duel.gateway.domain.reply import GatewayReply


class ModelGateway(Protocol):
    """Single-call abstraction over the external language-model API.

    Implementations never retry; a failed call raises GatewayInvocationError
    and the caller decides what to do with it.
    """

    async def complete(
        self,
        api_key: str,
        model: str,
        system_prompt: str,
        content: MessageContent,
        max_tokens: int,
        json_mode: bool = False,
    ) -> GatewayReply: ...

"""GatewayReply — the extracted outcome of one successful model call."""

from typing import Any

from pydantic import BaseModel


class GatewayReply(BaseModel, frozen=True):
    """Text of the assistant reply, plus the JSON payload when requested.

    ``parsed`` and ``parse_error`` are only populated for ``json_mode`` calls;
    a parse failure is reported in ``parse_error`` rather than raised.
    """

    text: str
    parsed: Any = None
    parse_error: str | None = None

"""Message content blocks sent to the model gateway."""

from typing import Annotated, Literal, TypeAlias

from pydantic import BaseModel, Field


class TextBlock(BaseModel, frozen=True):
    type: Literal["text"] = "text"
    text: str


class ImageBlock(BaseModel, frozen=True):
    """A base64-encoded image attached to a user message."""

    type: Literal["image"] = "image"
    base64: str = Field(min_length=1)
    media_type: str = "image/png"


ContentBlock: TypeAlias = Annotated[TextBlock | ImageBlock, Field(discriminator="type")]

MessageContent: TypeAlias = str | list[ContentBlock]

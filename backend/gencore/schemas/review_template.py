"""Review Template Schemas — Pydantic models for role-tagged judge message templates.

Invariants:
    - ReviewTemplate.messages is non-empty
    - role is exactly one of system | user | assistant (never coerced)
    - Content items are a discriminated union on `type`: text | image_url
    - image_url items require image_url.url

Design Decisions:
    - Annotated union with Field(discriminator=...): unknown tags fail with a single
      clear error instead of one error per union member
    - Unknown extra keys are ignored (dropped), matching how templates were stored
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from gencore.core.domain_types import MessageRole


class ImageUrl(BaseModel):
    url: str


class TextContent(BaseModel):
    """Plain text part of a multi-part message."""
    type: Literal["text"] = "text"
    text: str


class ImageUrlContent(BaseModel):
    """Image reference part of a multi-part message."""
    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


ContentItem = Annotated[TextContent | ImageUrlContent, Field(discriminator="type")]


class ReviewMessage(BaseModel):
    """One role-tagged message: plain string or ordered content parts."""
    role: MessageRole
    content: str | list[ContentItem]


class ReviewTemplate(BaseModel):
    """Validated sequence of template messages."""
    messages: list[ReviewMessage] = Field(min_length=1)

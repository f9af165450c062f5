"""Review Schemas — judging configuration and API bodies for review templates.

Invariants:
    - JudgingConfig.prompts.system_message and .review are always present
    - review_template is raw JSON text (validated lazily by the template engine)
    - Variable values are strings

Design Decisions:
    - review_template stays a str, not a parsed ReviewTemplate: an invalid stored
      template must degrade to the fallback prompts, not reject the whole config
"""

from pydantic import BaseModel, Field

from gencore.schemas.review_template import ReviewMessage


class JudgingPrompts(BaseModel):
    """Prompt fragments a judge configuration supplies."""
    system_message: str
    review: str


class JudgingConfig(BaseModel):
    """Judge configuration consumed by the review message builder."""
    prompts: JudgingPrompts
    review_template: str | None = None


class TemplateValidateRequest(BaseModel):
    template: str = Field(min_length=1)


class TemplateValidateResponse(BaseModel):
    valid: bool
    message_count: int
    variables: list[str]


class TemplateResolveRequest(BaseModel):
    template: str = Field(min_length=1)
    variables: dict[str, str] = Field(default_factory=dict)


class TemplateResolveResponse(BaseModel):
    messages: list[ReviewMessage]
    unresolved: list[str]

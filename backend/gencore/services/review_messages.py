"""Review Messages — build the judge conversation for one challenge entry.

Invariants:
    - Output always ends with a user message carrying theme, creator, and image
    - The response-schema instruction appears exactly once, in the LAST system message
      (appended to its last text part, or as a new text part, or as a new leading
      system message when the template has none)
    - An invalid stored template never fails the review — fallback prompts are used

Design Decisions:
    - Template path and fallback path share the trailing user message so judges see
      the entry identically either way
    - Messages returned as ReviewMessage models; callers serialize with model_dump()
"""

import logging

from gencore.core.errors import TemplateValidationError
from gencore.schemas.review import JudgingConfig
from gencore.schemas.review_template import (
    ImageUrl,
    ImageUrlContent,
    ReviewMessage,
    TextContent,
)
from gencore.services.template_engine import parse_review_template, resolve_template

logger = logging.getLogger(__name__)


RESPONSE_SCHEMA = """{
  "score": {
    "theme": number,     // 0-10
    "wittiness": number, // 0-10
    "humor": number,     // 0-10
    "aesthetic": number  // 0-10
  },
  "reaction": "Laugh" | "Heart" | "Like" | "Cry",
  "comment": "your review comment (2-3 sentences)",
  "summary": "concise factual summary of the image",
  "aestheticFlaws": ["flaw 1", "flaw 2"] // optional
}"""

SCHEMA_INSTRUCTION = f"\n\nReply with json\n\n{RESPONSE_SCHEMA}"


def build_review_messages(
    config: JudgingConfig,
    *,
    theme: str,
    creator: str,
    image_url: str,
    theme_elements: str = "",
) -> list[ReviewMessage]:
    """Judge messages from the config's template, or from its prompts as fallback."""
    if config.review_template:
        try:
            return _build_from_template(
                config, theme=theme, creator=creator,
                image_url=image_url, theme_elements=theme_elements,
            )
        except TemplateValidationError as exc:
            logger.warning(
                f"Invalid review template, falling back to default prompts: {exc.message}",
                extra={"error_code": exc.code},
            )
    return _build_fallback(config, theme=theme, creator=creator, image_url=image_url)


def _build_from_template(
    config: JudgingConfig,
    *,
    theme: str,
    creator: str,
    image_url: str,
    theme_elements: str,
) -> list[ReviewMessage]:
    template = parse_review_template(config.review_template or "")
    variables = {
        "systemPrompt": config.prompts.system_message,
        "reviewPrompt": config.prompts.review,
        "theme": theme,
        "themeElements": theme_elements,
    }
    messages = resolve_template(template, variables)
    messages = _inject_schema_instruction(messages)
    messages.append(_entry_message(theme, creator, image_url))
    return messages


def _build_fallback(
    config: JudgingConfig, *, theme: str, creator: str, image_url: str,
) -> list[ReviewMessage]:
    text = f"{config.prompts.system_message}\n\n{config.prompts.review.strip()}{SCHEMA_INSTRUCTION}"
    return [
        ReviewMessage(role="system", content=[TextContent(text=text)]),
        _entry_message(theme, creator, image_url),
    ]


def _inject_schema_instruction(messages: list[ReviewMessage]) -> list[ReviewMessage]:
    """Append the response schema to the last system message. Returns a new list."""
    result = list(messages)
    system_indices = [i for i, m in enumerate(result) if m.role == "system"]
    if not system_indices:
        result.insert(0, ReviewMessage(role="system", content=SCHEMA_INSTRUCTION.lstrip()))
        return result

    idx = system_indices[-1]
    message = result[idx]
    if isinstance(message.content, str):
        result[idx] = ReviewMessage(role="system", content=message.content + SCHEMA_INSTRUCTION)
        return result

    items = list(message.content)
    text_indices = [i for i, item in enumerate(items) if isinstance(item, TextContent)]
    if text_indices:
        last = text_indices[-1]
        items[last] = TextContent(text=items[last].text + SCHEMA_INSTRUCTION)
    else:
        items.append(TextContent(text=SCHEMA_INSTRUCTION.lstrip()))
    result[idx] = ReviewMessage(role="system", content=items)
    return result


def _entry_message(theme: str, creator: str, image_url: str) -> ReviewMessage:
    return ReviewMessage(
        role="user",
        content=[
            TextContent(text=f"Theme: {theme}\nCreator: {creator}"),
            ImageUrlContent(image_url=ImageUrl(url=image_url)),
        ],
    )

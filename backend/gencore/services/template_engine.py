"""Template Engine — parse, validate, and resolve JSON review templates.

Invariants:
    - parse_review_template rejects the whole document on the first violation:
      malformed JSON -> TemplateParseError, shape mismatch -> TemplateValidationError
    - resolve_template never mutates the input template — returns new messages
    - {{name}} is replaced only when name is a key of variables; otherwise the
      placeholder is kept verbatim and logged once per distinct placeholder
    - Substitution is single-pass: replaced values are never re-expanded
    - Content part order and tags are preserved

Design Decisions:
    - Exhaustive match over the content union: adding a new part type without
      handling it fails loudly instead of passing through unresolved
    - Unresolved placeholders are a diagnostic, not an error (permissive contract)
"""

import json
import logging
import re
from collections.abc import Mapping

from pydantic import ValidationError

from gencore.core.errors import TemplateParseError, TemplateValidationError
from gencore.schemas.review_template import (
    ContentItem,
    ImageUrl,
    ImageUrlContent,
    ReviewMessage,
    ReviewTemplate,
    TextContent,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{([A-Za-z0-9_]+)\}\}")


# === Public API ===============================================================

def parse_review_template(raw_json: str) -> ReviewTemplate:
    """Parse and validate a JSON review template string."""
    try:
        parsed = json.loads(raw_json)
    except (json.JSONDecodeError, TypeError) as exc:
        raise TemplateParseError(str(exc)) from exc

    try:
        return ReviewTemplate.model_validate(parsed)
    except ValidationError as exc:
        details = [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ]
        raise TemplateValidationError(
            f"Review template does not match schema ({len(details)} error(s))",
            details=details,
        ) from exc


def resolve_template(
    template: ReviewTemplate, variables: Mapping[str, str],
) -> list[ReviewMessage]:
    """Replace {{var}} placeholders throughout the template's message tree."""
    unresolved: list[str] = []

    def replace_vars(text: str) -> str:
        def substitute(match: re.Match) -> str:
            name = match.group(1)
            if name in variables:
                return str(variables[name])
            if match.group(0) not in unresolved:
                unresolved.append(match.group(0))
            return match.group(0)
        return _PLACEHOLDER.sub(substitute, text)

    resolved = [
        _resolve_message(message, replace_vars) for message in template.messages
    ]
    for placeholder in unresolved:
        logger.warning(
            f"Unrecognized template variable: {placeholder}",
            extra={"placeholder": placeholder},
        )
    return resolved


def list_template_variables(template: ReviewTemplate) -> list[str]:
    """Distinct placeholder names in order of first appearance."""
    names: list[str] = []
    for text in _iter_texts(template):
        for name in _PLACEHOLDER.findall(text):
            if name not in names:
                names.append(name)
    return names


def find_unresolved_variables(
    template: ReviewTemplate, variables: Mapping[str, str],
) -> list[str]:
    """Placeholder names the variables map does not provide."""
    return [
        name for name in list_template_variables(template) if name not in variables
    ]


# === Private helpers ==========================================================

def _resolve_message(message: ReviewMessage, replace_vars) -> ReviewMessage:
    if isinstance(message.content, str):
        return ReviewMessage(role=message.role, content=replace_vars(message.content))
    return ReviewMessage(
        role=message.role,
        content=[_resolve_item(item, replace_vars) for item in message.content],
    )


def _resolve_item(item: ContentItem, replace_vars) -> ContentItem:
    match item:
        case TextContent(text=text):
            return TextContent(text=replace_vars(text))
        case ImageUrlContent(image_url=ImageUrl(url=url)):
            return ImageUrlContent(image_url=ImageUrl(url=replace_vars(url)))
        case _:
            raise TypeError(f"Unsupported content item: {type(item).__name__}")


def _iter_texts(template: ReviewTemplate):
    """Yield every substitutable string in the template, in order."""
    for message in template.messages:
        if isinstance(message.content, str):
            yield message.content
            continue
        for item in message.content:
            match item:
                case TextContent(text=text):
                    yield text
                case ImageUrlContent(image_url=ImageUrl(url=url)):
                    yield url

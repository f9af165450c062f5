"""Template Engine — tests for review template parsing and placeholder resolution.

Tests cover:
    - Valid templates parse into typed messages (string and multi-part content)
    - Malformed JSON → TemplateParseError (which is a TemplateValidationError)
    - Shape violations (bad role, empty messages, unknown part type, missing url)
      → TemplateValidationError with field details
    - Known placeholders replaced in strings, text parts, and image URLs
    - Unknown placeholders kept verbatim, warned once per distinct placeholder
    - Single-pass substitution (no recursive expansion), input never mutated
    - Variable listing and unresolved detection
"""

import json
import logging

import pytest

from gencore.core.errors import TemplateParseError, TemplateValidationError
from gencore.schemas.review_template import ImageUrlContent, TextContent
from gencore.services.template_engine import (
    find_unresolved_variables,
    list_template_variables,
    parse_review_template,
    resolve_template,
)


def _template(*messages) -> str:
    return json.dumps({"messages": list(messages)})


MULTIPART = _template(
    {"role": "system", "content": "{{systemPrompt}}"},
    {"role": "user", "content": [
        {"type": "text", "text": "Theme: {{theme}}"},
        {"type": "image_url", "image_url": {"url": "https://img/{{theme}}.png"}},
    ]},
)


# ─── parse_review_template ───────────────────────────────────────

def test_parse_valid_template():
    template = parse_review_template(MULTIPART)
    assert [m.role for m in template.messages] == ["system", "user"]
    assert template.messages[0].content == "{{systemPrompt}}"
    parts = template.messages[1].content
    assert isinstance(parts[0], TextContent)
    assert isinstance(parts[1], ImageUrlContent)


def test_parse_malformed_json_raises_parse_error():
    with pytest.raises(TemplateParseError) as exc_info:
        parse_review_template("{not json")
    assert exc_info.value.code == "TEMPLATE_PARSE_ERROR"
    assert exc_info.value.http_status == 400
    assert isinstance(exc_info.value, TemplateValidationError)


def test_parse_unknown_role_raises_validation_error():
    raw = _template({"role": "bot", "content": "hi"})
    with pytest.raises(TemplateValidationError) as exc_info:
        parse_review_template(raw)
    assert not isinstance(exc_info.value, TemplateParseError)
    assert exc_info.value.code == "TEMPLATE_INVALID"
    assert exc_info.value.details
    assert exc_info.value.details[0]["field"].startswith("messages.0.role")


def test_parse_empty_messages_raises_validation_error():
    with pytest.raises(TemplateValidationError):
        parse_review_template(_template())


def test_parse_unknown_content_type_raises_validation_error():
    raw = _template({"role": "user", "content": [{"type": "audio", "data": "x"}]})
    with pytest.raises(TemplateValidationError):
        parse_review_template(raw)


def test_parse_image_part_without_url_raises_validation_error():
    raw = _template({"role": "user", "content": [{"type": "image_url", "image_url": {}}]})
    with pytest.raises(TemplateValidationError):
        parse_review_template(raw)


def test_parse_non_object_document_raises_validation_error():
    with pytest.raises(TemplateValidationError):
        parse_review_template("[1, 2, 3]")


def test_validation_error_response_includes_details():
    with pytest.raises(TemplateValidationError) as exc_info:
        parse_review_template(_template({"role": "bot", "content": "x"}))
    response = exc_info.value.to_response()
    assert response["error"]["code"] == "TEMPLATE_INVALID"
    assert response["error"]["details"]


# ─── resolve_template ────────────────────────────────────────────

def test_resolve_replaces_known_placeholders_everywhere():
    template = parse_review_template(MULTIPART)
    messages = resolve_template(template, {"systemPrompt": "Be fair", "theme": "cats"})
    assert messages[0].content == "Be fair"
    text, image = messages[1].content
    assert text.text == "Theme: cats"
    assert image.image_url.url == "https://img/cats.png"


def test_resolve_keeps_unknown_placeholders_and_warns_once(caplog):
    raw = _template(
        {"role": "system", "content": "{{missing}} and {{missing}}"},
        {"role": "user", "content": "{{missing}} {{other}}"},
    )
    template = parse_review_template(raw)
    with caplog.at_level(logging.WARNING, logger="gencore.services.template_engine"):
        messages = resolve_template(template, {})
    assert messages[0].content == "{{missing}} and {{missing}}"
    warnings = [r.getMessage() for r in caplog.records]
    assert warnings.count("Unrecognized template variable: {{missing}}") == 1
    assert warnings.count("Unrecognized template variable: {{other}}") == 1


def test_resolve_is_single_pass():
    template = parse_review_template(_template({"role": "user", "content": "{{a}}"}))
    messages = resolve_template(template, {"a": "{{b}}", "b": "nope"})
    assert messages[0].content == "{{b}}"


def test_resolve_ignores_non_identifier_braces():
    raw = _template({"role": "user", "content": "{{ spaced }} {single} {{x-y}}"})
    messages = resolve_template(parse_review_template(raw), {"spaced": "no"})
    assert messages[0].content == "{{ spaced }} {single} {{x-y}}"


def test_resolve_does_not_mutate_template():
    template = parse_review_template(MULTIPART)
    before = template.model_dump()
    resolve_template(template, {"systemPrompt": "x", "theme": "y"})
    assert template.model_dump() == before


def test_resolve_preserves_message_and_part_order():
    template = parse_review_template(MULTIPART)
    messages = resolve_template(template, {})
    assert [m.role for m in messages] == ["system", "user"]
    assert [p.type for p in messages[1].content] == ["text", "image_url"]


# ─── Variable listing ────────────────────────────────────────────

def test_list_template_variables_in_order_of_appearance():
    template = parse_review_template(MULTIPART)
    assert list_template_variables(template) == ["systemPrompt", "theme"]


def test_find_unresolved_variables():
    template = parse_review_template(MULTIPART)
    assert find_unresolved_variables(template, {"theme": "x"}) == ["systemPrompt"]
    assert find_unresolved_variables(template, {"theme": "x", "systemPrompt": "y"}) == []

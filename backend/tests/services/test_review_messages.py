"""Review Messages — tests for judge message construction.

Tests cover:
    - Template path resolves prompt/theme variables
    - Schema instruction lands in the LAST system message (string content,
      last text part, appended part, or a new leading system message)
    - Output always ends with the entry message (theme, creator, image)
    - Invalid or malformed templates fall back to the configured prompts
    - No template at all uses the fallback
"""

import json
import logging

from gencore.schemas.review import JudgingConfig, JudgingPrompts
from gencore.schemas.review_template import ImageUrlContent, TextContent
from gencore.services.review_messages import SCHEMA_INSTRUCTION, build_review_messages


def _config(template=None) -> JudgingConfig:
    return JudgingConfig(
        prompts=JudgingPrompts(system_message="You are a judge.", review="  Review it.  "),
        review_template=json.dumps({"messages": template}) if template is not None else None,
    )


def _build(config: JudgingConfig):
    return build_review_messages(
        config, theme="Cats", creator="alice", image_url="https://img/1.png",
        theme_elements="whiskers",
    )


def _assert_entry_message(message):
    assert message.role == "user"
    text, image = message.content
    assert text.text == "Theme: Cats\nCreator: alice"
    assert isinstance(image, ImageUrlContent)
    assert image.image_url.url == "https://img/1.png"


# ─── Template path ───────────────────────────────────────────────

def test_template_variables_resolved_and_schema_appended_to_string_content():
    messages = _build(_config([
        {"role": "system", "content": "{{systemPrompt}} Theme: {{theme}} ({{themeElements}})"},
    ]))
    assert messages[0].content == (
        "You are a judge. Theme: Cats (whiskers)" + SCHEMA_INSTRUCTION
    )
    _assert_entry_message(messages[-1])
    assert len(messages) == 2


def test_schema_goes_to_last_system_message_only():
    messages = _build(_config([
        {"role": "system", "content": "first"},
        {"role": "user", "content": "{{reviewPrompt}}"},
        {"role": "system", "content": "second"},
    ]))
    assert messages[0].content == "first"
    assert messages[1].content == "  Review it.  "
    assert messages[2].content == "second" + SCHEMA_INSTRUCTION


def test_schema_appended_to_last_text_part():
    messages = _build(_config([
        {"role": "system", "content": [
            {"type": "text", "text": "a"},
            {"type": "text", "text": "b"},
            {"type": "image_url", "image_url": {"url": "https://ref.png"}},
        ]},
    ]))
    parts = messages[0].content
    assert parts[0].text == "a"
    assert parts[1].text == "b" + SCHEMA_INSTRUCTION
    assert parts[2].image_url.url == "https://ref.png"


def test_schema_added_as_new_part_when_no_text_part():
    messages = _build(_config([
        {"role": "system", "content": [
            {"type": "image_url", "image_url": {"url": "https://ref.png"}},
        ]},
    ]))
    parts = messages[0].content
    assert len(parts) == 2
    assert isinstance(parts[1], TextContent)
    assert parts[1].text.startswith("Reply with json")


def test_new_system_message_when_template_has_none():
    messages = _build(_config([{"role": "user", "content": "hello"}]))
    assert messages[0].role == "system"
    assert "Reply with json" in messages[0].content
    assert messages[1].content == "hello"
    _assert_entry_message(messages[-1])


# ─── Fallback path ───────────────────────────────────────────────

def test_fallback_without_template():
    messages = _build(_config())
    assert len(messages) == 2
    system = messages[0]
    assert system.role == "system"
    assert system.content[0].text == "You are a judge.\n\nReview it." + SCHEMA_INSTRUCTION
    _assert_entry_message(messages[1])


def test_invalid_template_falls_back_and_logs(caplog):
    config = _config([{"role": "bot", "content": "x"}])
    with caplog.at_level(logging.WARNING, logger="gencore.services.review_messages"):
        messages = _build(config)
    assert messages[0].content[0].text.startswith("You are a judge.")
    assert "falling back" in caplog.text


def test_malformed_template_json_falls_back():
    config = JudgingConfig(
        prompts=JudgingPrompts(system_message="S", review="R"),
        review_template="{broken",
    )
    messages = _build(config)
    assert messages[0].content[0].text == "S\n\nR" + SCHEMA_INSTRUCTION

"""Domain Types — verifies enum values shared across graphs and templates.

Tests:
    - NodeKind serializes to the string clients render on
    - Ecosystem values match the names used in graph routing
    - MessageRole matches the review template roles
"""

from gencore.core.domain_types import (
    Ecosystem,
    MessageRole,
    NodeKind,
    WeightedScore,
    WORKFLOW_UPSCALE,
)


def test_node_kind_values_are_strings():
    assert NodeKind.ASPECT_RATIO.value == "aspect_ratio"
    assert NodeKind.COMPUTED == "computed"


def test_ecosystem_members():
    assert {e.value for e in Ecosystem} == {
        "SD1", "SDXL", "Pony", "Illustrious", "NoobAI", "Kling", "HiDream",
    }


def test_message_roles():
    assert {r.value for r in MessageRole} == {"system", "user", "assistant"}
    assert MessageRole.SYSTEM == "system"


def test_weighted_score_wraps_float():
    assert WeightedScore(7.5) == 7.5


def test_upscale_workflow_name():
    assert WORKFLOW_UPSCALE == "img2img:upscale"

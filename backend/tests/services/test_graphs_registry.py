"""Graphs Registry — tests for graph lookup and form computation entry point.

Tests cover:
    - All four graphs registered and retrievable
    - Unknown graph key → GraphNotFoundError (404)
    - Ecosystem/workflow routing, upscale workflow overrides ecosystem
    - compute_form rejects missing context keys with MissingContextError
"""

import pytest

from gencore.core.errors import GraphNotFoundError, MissingContextError
from gencore.services.graphs_registry import (
    compute_form,
    get_graph,
    graph_key_for,
    list_graphs,
)


def test_all_graphs_registered():
    assert list_graphs() == ["stable-diffusion", "kling", "hi-dream", "image-upscale"]
    for key in list_graphs():
        assert get_graph(key).name == key


def test_unknown_graph_raises_not_found():
    with pytest.raises(GraphNotFoundError) as exc_info:
        get_graph("flux")
    assert exc_info.value.http_status == 404
    assert exc_info.value.context.graph_key == "flux"


@pytest.mark.parametrize(("ecosystem", "workflow", "expected"), [
    ("SD1", "txt2img", "stable-diffusion"),
    ("SDXL", "img2img", "stable-diffusion"),
    ("Illustrious", "txt2img", "stable-diffusion"),
    ("Kling", "txt2vid", "kling"),
    ("HiDream", "txt2img", "hi-dream"),
    ("SDXL", "img2img:upscale", "image-upscale"),
    (None, "img2img:upscale", "image-upscale"),
])
def test_graph_key_for(ecosystem, workflow, expected):
    assert graph_key_for(ecosystem, workflow) == expected


def test_graph_key_for_unknown_ecosystem():
    with pytest.raises(GraphNotFoundError):
        graph_key_for("Flux", "txt2img")


def test_compute_form_requires_context_keys():
    with pytest.raises(MissingContextError) as exc_info:
        compute_form("stable-diffusion", {"ecosystem": "SDXL"})
    assert exc_info.value.missing == ["workflow"]
    assert exc_info.value.code == "CONTEXT_INCOMPLETE"


def test_compute_form_returns_graph_result():
    result = compute_form("kling", {"ecosystem": "Kling", "workflow": "txt2vid"})
    assert result["klingVersion"].default_value == "v3"


def test_compute_form_upscale_needs_no_context():
    assert "targetDimensions" in compute_form("image-upscale", {})

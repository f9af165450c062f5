"""Graphs Registry — lookup of generation graphs by key or by ecosystem/workflow.

Invariants:
    - Every registered key maps to exactly one DataGraph
    - img2img:upscale routes to the image-upscale graph regardless of ecosystem
    - Unknown keys/ecosystems raise GraphNotFoundError (never a silent default)
    - compute_form refuses to run without the graph's declared context keys

Design Decisions:
    - Explicit dict mapping, no auto-discovery: adding an ecosystem is one line here
      plus its define_*_graph.py module
"""

from collections.abc import Mapping
from typing import Any

from gencore.core.data_graph import DataGraph, GraphResult, NodeConfig
from gencore.core.domain_types import Ecosystem, WORKFLOW_UPSCALE
from gencore.core.errors import GraphNotFoundError, MissingContextError
from gencore.services.define_hi_dream_graph import HI_DREAM_GRAPH
from gencore.services.define_image_upscale_graph import IMAGE_UPSCALE_GRAPH
from gencore.services.define_kling_graph import KLING_GRAPH
from gencore.services.define_stable_diffusion_graph import (
    STABLE_DIFFUSION_ECOSYSTEMS,
    STABLE_DIFFUSION_GRAPH,
)


GRAPHS: dict[str, DataGraph] = {
    "stable-diffusion": STABLE_DIFFUSION_GRAPH,
    "kling": KLING_GRAPH,
    "hi-dream": HI_DREAM_GRAPH,
    "image-upscale": IMAGE_UPSCALE_GRAPH,
}

_ECOSYSTEM_GRAPHS: dict[str, str] = {
    **{eco.value: "stable-diffusion" for eco in STABLE_DIFFUSION_ECOSYSTEMS},
    Ecosystem.KLING.value: "kling",
    Ecosystem.HIDREAM.value: "hi-dream",
}


def list_graphs() -> list[str]:
    return list(GRAPHS)


def get_graph(graph_key: str) -> DataGraph:
    graph = GRAPHS.get(graph_key)
    if graph is None:
        raise GraphNotFoundError(graph_key)
    return graph


def graph_key_for(ecosystem: str | None, workflow: str) -> str:
    """Which graph drives the form for an ecosystem/workflow selection."""
    if workflow == WORKFLOW_UPSCALE:
        return "image-upscale"
    key = _ECOSYSTEM_GRAPHS.get(ecosystem or "")
    if key is None:
        raise GraphNotFoundError(ecosystem or "<none>")
    return key


def compute_form(
    graph_key: str,
    context: Mapping[str, Any],
    extras: Mapping[str, Any] | None = None,
    *,
    previous_context: Mapping[str, Any] | None = None,
    previous_result: Mapping[str, NodeConfig] | None = None,
    previous_extras: Mapping[str, Any] | None = None,
    strict: bool = False,
) -> GraphResult:
    """Compute the form configuration of a registered graph."""
    graph = get_graph(graph_key)
    missing = sorted(graph.context_keys - set(context))
    if missing:
        raise MissingContextError(graph_key, missing)
    return graph.compute(
        context, extras,
        previous_context=previous_context,
        previous_result=previous_result,
        previous_extras=previous_extras,
        strict=strict,
    )

"""Generation Graph Routes — list graphs and compute form configurations.

Invariants:
    - Nodes returned in graph registration order (branch nodes at the
      discriminator's position)
    - Extras default to the configured resource limit when the caller sends none
    - Missing context keys → 400 CONTEXT_INCOMPLETE; unknown graph → 404

Design Decisions:
    - Stateless: each request computes from scratch (no previous_result across
      requests); incremental recompute is an in-process concern
    - Strict dependency tracking toggled by settings, not per request
"""

import logging

from fastapi import APIRouter, Depends, Query

from gencore.config import Settings, get_settings
from gencore.schemas.graph import (
    GraphComputeRequest,
    GraphComputeResponse,
    GraphListResponse,
    GraphLookupResponse,
    NodeOut,
)
from gencore.services.graphs_registry import compute_form, graph_key_for, list_graphs

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/graphs", tags=["generation-graph"])


@router.get("", response_model=GraphListResponse)
async def get_graphs():
    return GraphListResponse(graphs=list_graphs())


@router.get("/lookup", response_model=GraphLookupResponse)
async def lookup_graph(
    workflow: str = Query(min_length=1),
    ecosystem: str | None = None,
):
    """Which graph drives the form for an ecosystem/workflow selection."""
    return GraphLookupResponse(
        ecosystem=ecosystem, workflow=workflow,
        graph_key=graph_key_for(ecosystem, workflow),
    )


@router.post("/{graph_key}/compute", response_model=GraphComputeResponse)
async def compute_graph(
    graph_key: str,
    body: GraphComputeRequest,
    settings: Settings = Depends(get_settings),
):
    """Compute every node of a graph against the submitted form context."""
    extras = body.extras
    if extras is None:
        extras = {"limits": {"max_resources": settings.default_max_resources}}
    result = compute_form(
        graph_key, body.context, extras,
        strict=settings.graph_strict_dependencies,
    )
    logger.info(
        f"Computed graph {graph_key}: {len(result)} nodes",
        extra={"graph_key": graph_key},
    )
    return GraphComputeResponse(
        graph_key=graph_key,
        nodes=[NodeOut(key=key, **config.to_dict()) for key, config in result.items()],
    )

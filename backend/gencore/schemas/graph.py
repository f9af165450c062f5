"""Graph Schemas — Pydantic models for the generation graph compute endpoint.

Invariants:
    - Nodes are returned as an ordered list (order drives form layout)
    - NodeOut.kind corresponds to NodeKind values

Design Decisions:
    - List of nodes instead of a JSON object: preserves order for every client
"""

from typing import Any

from pydantic import BaseModel, Field


class GraphComputeRequest(BaseModel):
    context: dict[str, Any] = Field(default_factory=dict)
    extras: dict[str, Any] | None = None


class NodeOut(BaseModel):
    key: str
    kind: str
    when: bool
    default_value: Any = None
    meta: dict[str, Any] = Field(default_factory=dict)


class GraphComputeResponse(BaseModel):
    graph_key: str
    nodes: list[NodeOut]


class GraphListResponse(BaseModel):
    graphs: list[str]


class GraphLookupResponse(BaseModel):
    ecosystem: str | None
    workflow: str
    graph_key: str

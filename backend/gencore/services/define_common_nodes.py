"""Common Node Factories — reusable NodeConfig builders shared by ecosystem graphs.

Invariants:
    - Factories are pure and return new NodeConfig values (never shared mutable meta)
    - Slider defaults always lie within [min, max]
    - aspect_ratio_node default is an option dict, never a bare label

Design Decisions:
    - Factories return NodeConfig (not nodes): callers choose static vs resolver form,
      and derive visibility with NodeConfig.shown()
    - create_checkpoint_graph is a DataGraph fragment merged into every ecosystem
      graph so all of them share one `model` node definition
"""

from collections.abc import Mapping, Sequence
from typing import Any

from gencore.core.data_graph import Context, DataGraph, Extras, NodeConfig
from gencore.core.domain_types import NodeKind


MAX_SEED = 4_294_967_295
NEGATIVE_PROMPT_MAX_LENGTH = 1000

DEFAULT_SAMPLERS = [
    "Euler a", "Euler", "Heun", "DPM2", "DPM++ 2M", "DPM++ 2M Karras",
    "DPM++ SDE Karras", "DDIM", "LCM", "UniPC",
]


def slider_node(
    *,
    min: float,
    max: float,
    default_value: float,
    step: float = 1,
    presets: Sequence[Mapping[str, Any]] | None = None,
) -> NodeConfig:
    if not min <= default_value <= max:
        raise ValueError(f"default {default_value} outside [{min}, {max}]")
    meta: dict[str, Any] = {"min": min, "max": max, "step": step}
    if presets:
        meta["presets"] = [dict(p) for p in presets]
    return NodeConfig(kind=NodeKind.SLIDER, default_value=default_value, meta=meta)


def cfg_scale_node(**kwargs) -> NodeConfig:
    kwargs.setdefault("step", 0.5)
    return slider_node(**kwargs)


def steps_node(**kwargs) -> NodeConfig:
    return slider_node(**kwargs)


def enum_node(
    *, options: Sequence[Mapping[str, Any]], default_value: Any,
) -> NodeConfig:
    return NodeConfig(
        kind=NodeKind.ENUM,
        default_value=default_value,
        meta={"options": [dict(o) for o in options]},
    )


def toggle_node(default_value: bool) -> NodeConfig:
    return NodeConfig(kind=NodeKind.TOGGLE, default_value=default_value)


def seed_node() -> NodeConfig:
    return NodeConfig(kind=NodeKind.SEED, default_value=None, meta={"max": MAX_SEED})


def negative_prompt_node() -> NodeConfig:
    return NodeConfig(
        kind=NodeKind.TEXT, default_value="",
        meta={"max_length": NEGATIVE_PROMPT_MAX_LENGTH},
    )


def sampler_node(
    *, options: Sequence[str] | None = None, default_value: str | None = None,
) -> NodeConfig:
    options = list(options or DEFAULT_SAMPLERS)
    return NodeConfig(
        kind=NodeKind.ENUM,
        default_value=default_value or options[0],
        meta={"options": [{"label": o, "value": o} for o in options]},
    )


def images_node(
    *, max: int = 1, slots: Sequence[Mapping[str, Any]] | None = None,
) -> NodeConfig:
    meta: dict[str, Any] = {"max": len(slots) if slots else max}
    if slots:
        meta["slots"] = [dict(s) for s in slots]
    return NodeConfig(kind=NodeKind.IMAGES, default_value=[], meta=meta)


def aspect_ratio_node(
    *, options: Sequence[Mapping[str, Any]], default_value: str = "1:1",
) -> NodeConfig:
    options = [dict(o) for o in options]
    default = next((o for o in options if o["value"] == default_value), options[0])
    return NodeConfig(
        kind=NodeKind.ASPECT_RATIO,
        default_value={
            "value": default["value"],
            "width": default["width"],
            "height": default["height"],
        },
        meta={"options": options},
    )


def vae_node(*, ecosystem: str) -> NodeConfig:
    return NodeConfig(
        kind=NodeKind.RESOURCES,
        default_value=None,
        meta={"resource_types": ["VAE"], "ecosystem": ecosystem, "limit": 1},
    )


def resources_node(*, ecosystem: str, limit: int | None) -> NodeConfig:
    """Additional resources (LoRA, embeddings). limit None means unlimited."""
    return NodeConfig(
        kind=NodeKind.RESOURCES,
        default_value=[],
        meta={
            "resource_types": ["LORA", "TextualInversion"],
            "ecosystem": ecosystem,
            "limit": limit,
        },
    )


def max_resources(ext: Extras) -> int | None:
    """Resource limit from compute extras ({"limits": {"max_resources": n}})."""
    return (ext.get("limits") or {}).get("max_resources")


def has_images(ctx: Context) -> bool:
    images = ctx.get("images")
    return isinstance(images, list) and len(images) > 0


def model_id(ctx: Context) -> int | None:
    model = ctx.get("model")
    return model.get("id") if isinstance(model, Mapping) else None


def create_checkpoint_graph(
    *,
    versions: Mapping[str, Any] | None = None,
    default_model_id: int | None = None,
) -> DataGraph:
    """Graph fragment holding the checkpoint `model` selector."""

    def model(ctx: Context, ext: Extras) -> NodeConfig:
        return NodeConfig(
            kind=NodeKind.MODEL,
            default_value={"id": default_model_id} if default_model_id else None,
            meta={"ecosystem": ctx["ecosystem"], "versions": versions},
        )

    return DataGraph(("ecosystem",), name="checkpoint").node("model", model, ["ecosystem"])

"""HiDream Graph — form controls for the HiDream ecosystem.

Invariants:
    - hiDreamVariant derived from the selected model id; unknown/absent -> "dev"
    - fast/dev: aspectRatio + seed only (cfg, sampler, steps locked server-side)
    - full: resources, aspectRatio, negativePrompt, sampler (UniPC), cfgScale, steps, seed
    - Unknown variants fall back to the precision's "dev" version; unknown precisions raise

Design Decisions:
    - Variant subgraphs selected by discriminator; fast and dev share one graph
    - Versions exposed as a precision -> variant hierarchy in the model meta
"""

from gencore.core.data_graph import Context, DataGraph, Extras, NodeConfig
from gencore.services.define_common_nodes import (
    aspect_ratio_node,
    cfg_scale_node,
    create_checkpoint_graph,
    max_resources,
    model_id,
    negative_prompt_node,
    resources_node,
    sampler_node,
    seed_node,
    steps_node,
)


HI_DREAM_RESOURCES = [
    {"id": 1772448, "variant": "full", "precision": "fp8"},
    {"id": 1771369, "variant": "dev", "precision": "fp8"},
    {"id": 1770945, "variant": "fast", "precision": "fp8"},
    {"id": 1768354, "variant": "full", "precision": "fp16"},
    {"id": 1769068, "variant": "dev", "precision": "fp16"},
    {"id": 1768731, "variant": "fast", "precision": "fp16"},
]

VERSION_ID_TO_VARIANT = {r["id"]: r["variant"] for r in HI_DREAM_RESOURCES}

DEFAULT_VERSION_ID = 1771369  # fp8 dev

HI_DREAM_ASPECT_RATIOS = [
    {"label": "2:3", "value": "2:3", "width": 832, "height": 1216},
    {"label": "1:1", "value": "1:1", "width": 1024, "height": 1024},
    {"label": "3:2", "value": "3:2", "width": 1216, "height": 832},
]

HI_DREAM_VERSIONS = {
    "label": "Precision",
    "options": [
        {
            "label": "FP8",
            "value": 1771369,
            "children": {
                "label": "Variant",
                "options": [
                    {"label": "Fast", "value": 1770945},
                    {"label": "Dev", "value": 1771369},
                    {"label": "Full", "value": 1772448},
                ],
            },
        },
        {
            "label": "FP16",
            "value": 1769068,
            "children": {
                "label": "Variant",
                "options": [
                    {"label": "Fast", "value": 1768731},
                    {"label": "Dev", "value": 1769068},
                ],
            },
        },
    ],
}


def get_hi_dream_version_id(precision: str, variant: str) -> int:
    """Version id for a precision/variant pair, falling back to that precision's dev."""
    for resource in HI_DREAM_RESOURCES:
        if resource["precision"] == precision and resource["variant"] == variant:
            return resource["id"]
    for resource in HI_DREAM_RESOURCES:
        if resource["precision"] == precision and resource["variant"] == "dev":
            return resource["id"]
    raise ValueError(f"Unknown HiDream precision: {precision}")


_VARIANT_CONTEXT = ("ecosystem", "workflow", "model", "hiDreamVariant")

FAST_DEV_GRAPH = (
    DataGraph(_VARIANT_CONTEXT, name="hi-dream-fast-dev")
    .node("aspectRatio", aspect_ratio_node(options=HI_DREAM_ASPECT_RATIOS))
    .node("seed", seed_node())
)


def _resources(ctx: Context, ext: Extras) -> NodeConfig:
    return resources_node(ecosystem=ctx["ecosystem"], limit=max_resources(ext))


FULL_GRAPH = (
    DataGraph(_VARIANT_CONTEXT, name="hi-dream-full")
    .node("resources", _resources, ["ecosystem"])
    .node("aspectRatio", aspect_ratio_node(options=HI_DREAM_ASPECT_RATIOS))
    .node("negativePrompt", negative_prompt_node())
    .node("sampler", sampler_node(options=["UniPC"], default_value="UniPC"))
    .node("cfgScale", cfg_scale_node(min=1, max=20, default_value=5))
    .node("steps", steps_node(min=20, max=100, default_value=50))
    .node("seed", seed_node())
)


def _hi_dream_variant(ctx: Context, ext: Extras) -> str:
    return VERSION_ID_TO_VARIANT.get(model_id(ctx), "dev")


HI_DREAM_GRAPH = (
    DataGraph(("ecosystem", "workflow"), name="hi-dream")
    .merge(create_checkpoint_graph(
        versions=HI_DREAM_VERSIONS, default_model_id=DEFAULT_VERSION_ID,
    ))
    .computed("hiDreamVariant", _hi_dream_variant, ["model"])
    .discriminator("hiDreamVariant", {
        "fast": FAST_DEV_GRAPH,
        "dev": FAST_DEV_GRAPH,
        "full": FULL_GRAPH,
    })
)

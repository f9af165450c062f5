"""Kling Graph — form controls for Kling video generation (txt2vid, img2vid, ref2vid).

Invariants:
    - klingVersion is "v3" iff the selected model is the V3 version, else "legacy"
    - Legacy (V1.6/V2/V2.5): mode selector visible only for V1.6 (others are
      professional-only); aspectRatio hidden when source images are present
    - V3: operation derived from workflow; elements visible only for img2vid:ref2vid;
      img2vid exposes start + end image slots, ref2vid up to 7 reference images
    - Default model is V3

Design Decisions:
    - Model selector shared at root level (checkpoint graph); version branches
      selected by a grouped discriminator on the computed klingVersion
    - Legacy aspectRatio declares `images` as a dependency because it reads it
"""

from gencore.core.data_graph import Context, DataGraph, Extras, NodeConfig
from gencore.core.domain_types import NodeKind
from gencore.services.define_common_nodes import (
    aspect_ratio_node,
    cfg_scale_node,
    create_checkpoint_graph,
    enum_node,
    has_images,
    images_node,
    model_id,
    negative_prompt_node,
    seed_node,
    toggle_node,
)


KLING_VERSION_IDS = {
    "v1_6": 2623815,
    "v2": 2623817,
    "v2_5_turbo": 2623821,
    "v3": 2698632,
}

KLING_VERSION_OPTIONS = [
    {"label": "Kling V1.6", "value": KLING_VERSION_IDS["v1_6"]},
    {"label": "Kling V2", "value": KLING_VERSION_IDS["v2"]},
    {"label": "Kling V2.5 Turbo", "value": KLING_VERSION_IDS["v2_5_turbo"]},
    {"label": "Kling V3", "value": KLING_VERSION_IDS["v3"]},
]

KLING_ASPECT_RATIOS = [
    {"label": "16:9", "value": "16:9", "width": 1280, "height": 720},
    {"label": "1:1", "value": "1:1", "width": 1024, "height": 1024},
    {"label": "9:16", "value": "9:16", "width": 720, "height": 1280},
]

KLING_MODES = [
    {"label": "Standard", "value": "standard"},
    {"label": "Professional", "value": "professional"},
]

KLING_DURATIONS = [
    {"label": "5 seconds", "value": "5"},
    {"label": "10 seconds", "value": "10"},
]

REF2VID_MAX_IMAGES = 7

_VERSION_CONTEXT = ("ecosystem", "workflow", "model", "klingVersion")


def get_v3_operation(workflow: str) -> str:
    """Map a workflow to the V3 engine operation."""
    if workflow == "img2vid:ref2vid":
        return "reference-to-video"
    if workflow.startswith("img2vid"):
        return "image-to-video"
    return "text-to-video"


# --- Legacy sub-graph (V1.6, V2, V2.5 Turbo) ------------------------------------

def _legacy_images(ctx: Context, ext: Extras) -> NodeConfig:
    return images_node().shown(not ctx["workflow"].startswith("txt"))


def _legacy_aspect_ratio(ctx: Context, ext: Extras) -> NodeConfig:
    return aspect_ratio_node(options=KLING_ASPECT_RATIOS).shown(not has_images(ctx))


def _legacy_mode(ctx: Context, ext: Extras) -> NodeConfig:
    is_v1_6 = model_id(ctx) == KLING_VERSION_IDS["v1_6"]
    return enum_node(
        options=KLING_MODES,
        default_value="standard" if is_v1_6 else "professional",
    ).shown(is_v1_6)


KLING_LEGACY_GRAPH = (
    DataGraph(_VERSION_CONTEXT, name="kling-legacy")
    .node("images", _legacy_images, ["workflow"])
    .node("seed", seed_node())
    .node("enablePromptEnhancer", toggle_node(True))
    .node("negativePrompt", negative_prompt_node())
    .node("aspectRatio", _legacy_aspect_ratio, ["workflow", "images"])
    .node("mode", _legacy_mode, ["model"])
    .node("duration", enum_node(options=KLING_DURATIONS, default_value="5"))
    .node("cfgScale", cfg_scale_node(
        min=0.1, max=1, step=0.1, default_value=0.5,
        presets=[
            {"label": "Low", "value": 0.3},
            {"label": "Medium", "value": 0.5},
            {"label": "High", "value": 0.7},
        ],
    ))
)


# --- V3 sub-graph -------------------------------------------------------------

def _v3_images(ctx: Context, ext: Extras) -> NodeConfig:
    workflow = ctx["workflow"]
    if workflow == "img2vid":
        return images_node(
            slots=[{"label": "Start Image", "required": True}, {"label": "End Image"}],
        )
    if workflow == "img2vid:ref2vid":
        return images_node(max=REF2VID_MAX_IMAGES)
    return images_node().shown(False)


def _v3_aspect_ratio(ctx: Context, ext: Extras) -> NodeConfig:
    workflow = ctx["workflow"]
    return aspect_ratio_node(options=KLING_ASPECT_RATIOS).shown(
        workflow in ("txt2vid", "img2vid:ref2vid"),
    )


def _v3_elements(ctx: Context, ext: Extras) -> NodeConfig:
    return NodeConfig(
        kind=NodeKind.VALUE,
        default_value=[],
        when=ctx["workflow"] == "img2vid:ref2vid",
        meta={"element_fields": ["frontalImage", "referenceImages", "videoUrl"]},
    )


KLING_V3_GRAPH = (
    DataGraph(_VERSION_CONTEXT, name="kling-v3")
    .computed("operation", lambda ctx, ext: get_v3_operation(ctx["workflow"]), ["workflow"])
    .node("images", _v3_images, ["workflow"])
    .node("seed", seed_node())
    .node("mode", enum_node(options=KLING_MODES, default_value="standard"))
    .node("duration", enum_node(options=KLING_DURATIONS, default_value="5"))
    .node("aspectRatio", _v3_aspect_ratio, ["workflow"])
    .node("elements", _v3_elements, ["workflow"])
    .node("generateAudio", toggle_node(False))
    .node("multiPrompt", NodeConfig(
        kind=NodeKind.VALUE, default_value=None,
        meta={"segment_fields": ["prompt", "duration"]},
    ))
)


# --- Root graph ----------------------------------------------------------------

def _kling_version(ctx: Context, ext: Extras) -> str:
    return "v3" if model_id(ctx) == KLING_VERSION_IDS["v3"] else "legacy"


KLING_GRAPH = (
    DataGraph(("ecosystem", "workflow"), name="kling")
    .merge(create_checkpoint_graph(
        versions={"options": KLING_VERSION_OPTIONS},
        default_model_id=KLING_VERSION_IDS["v3"],
    ))
    .computed("klingVersion", _kling_version, ["model"])
    .grouped_discriminator("klingVersion", [
        (["legacy"], KLING_LEGACY_GRAPH),
        (["v3"], KLING_V3_GRAPH),
    ])
)

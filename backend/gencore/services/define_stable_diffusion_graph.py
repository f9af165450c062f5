"""Stable Diffusion Graph — form controls for SD1, SDXL, Pony, Illustrious, NoobAI.

Invariants:
    - images visible only for img2img* workflows
    - SD1 uses 512px-based aspect ratios, every other SD ecosystem 1024px-based
    - aspectRatio hidden once source images are present (size follows the image)
    - denoise visible for DENOISE_ALWAYS workflows, or txt2img with images;
      max is 1.0 when always shown or images are present, 0.75 otherwise

Design Decisions:
    - Static controls (cfgScale, steps, clipSkip, seed...) registered as NodeConfig
      values: they never recompute
    - Meta carries only dynamic props; labels belong to the client
"""

from gencore.core.data_graph import Context, DataGraph, Extras, NodeConfig
from gencore.core.domain_types import Ecosystem
from gencore.services.define_common_nodes import (
    aspect_ratio_node,
    create_checkpoint_graph,
    has_images,
    images_node,
    max_resources,
    negative_prompt_node,
    resources_node,
    sampler_node,
    seed_node,
    slider_node,
    vae_node,
)


SD_ASPECT_RATIOS = [
    {"label": "2:3", "value": "2:3", "width": 832, "height": 1216},
    {"label": "1:1", "value": "1:1", "width": 1024, "height": 1024},
    {"label": "3:2", "value": "3:2", "width": 1216, "height": 832},
]

SD1_ASPECT_RATIOS = [
    {"label": "2:3", "value": "2:3", "width": 512, "height": 768},
    {"label": "1:1", "value": "1:1", "width": 512, "height": 512},
    {"label": "3:2", "value": "3:2", "width": 768, "height": 512},
]

DENOISE_ALWAYS = frozenset({
    "img2img",
    "txt2img:face-fix",
    "img2img:face-fix",
    "txt2img:hires-fix",
    "img2img:hires-fix",
})

STABLE_DIFFUSION_ECOSYSTEMS = (
    Ecosystem.SD1, Ecosystem.SDXL, Ecosystem.PONY,
    Ecosystem.ILLUSTRIOUS, Ecosystem.NOOBAI,
)


def _images(ctx: Context, ext: Extras) -> NodeConfig:
    return images_node().shown(ctx["workflow"].startswith("img2img"))


def _resources(ctx: Context, ext: Extras) -> NodeConfig:
    return resources_node(ecosystem=ctx["ecosystem"], limit=max_resources(ext))


def _vae(ctx: Context, ext: Extras) -> NodeConfig:
    return vae_node(ecosystem=ctx["ecosystem"])


def _aspect_ratio(ctx: Context, ext: Extras) -> NodeConfig:
    options = SD1_ASPECT_RATIOS if ctx["ecosystem"] == Ecosystem.SD1 else SD_ASPECT_RATIOS
    return aspect_ratio_node(options=options).shown(not has_images(ctx))


def _denoise(ctx: Context, ext: Extras) -> NodeConfig:
    images = has_images(ctx)
    workflow = ctx["workflow"]
    always_show = workflow in DENOISE_ALWAYS
    show_for_txt2img_images = workflow == "txt2img" and images
    # img2img is in DENOISE_ALWAYS; max stays 1 so switching does not reset the value
    max_denoise = 1 if always_show or images else 0.75
    return slider_node(
        min=0, max=max_denoise, step=0.05, default_value=0.75,
    ).shown(always_show or show_for_txt2img_images)


STABLE_DIFFUSION_GRAPH = (
    DataGraph(("ecosystem", "workflow"), name="stable-diffusion")
    .merge(create_checkpoint_graph())
    .node("images", _images, ["workflow"])
    .node("resources", _resources, ["ecosystem"])
    .node("vae", _vae, ["ecosystem"])
    .node("aspectRatio", _aspect_ratio, ["ecosystem", "images"])
    .node("negativePrompt", negative_prompt_node())
    .node("sampler", sampler_node())
    .node("cfgScale", slider_node(
        min=1, max=10, step=0.5, default_value=7,
        presets=[
            {"label": "Creative", "value": 4},
            {"label": "Balanced", "value": 7},
            {"label": "Precise", "value": 10},
        ],
    ))
    .node("steps", slider_node(
        min=10, max=50, default_value=30,
        presets=[
            {"label": "Fast", "value": 20},
            {"label": "Balanced", "value": 30},
            {"label": "High", "value": 40},
        ],
    ))
    .node("clipSkip", slider_node(min=1, max=3, default_value=2))
    .node("seed", seed_node())
    .node("denoise", _denoise, ["workflow", "images"])
)

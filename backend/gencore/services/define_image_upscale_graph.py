"""Image Upscale Graph — controls for the img2img:upscale workflow (no ecosystem).

Invariants:
    - Longest output side never exceeds MAX_OUTPUT_RESOLUTION (options over it are disabled)
    - Both target sides are rounded UP to 64px boundaries, aspect ratio preserved
    - Resolution presets at or below the source's longest side are disabled
    - Default target is the first enabled multiplier; None when nothing is enabled

Design Decisions:
    - Options computed from the first source image's width/height; without a
      measured image there are no options and canUpscale is False
"""

import math
from collections.abc import Mapping

from gencore.core.data_graph import Context, DataGraph, Extras, NodeConfig
from gencore.core.domain_types import NodeKind
from gencore.services.define_common_nodes import images_node


MAX_OUTPUT_RESOLUTION = 4096
UPSCALE_MULTIPLIERS = (2, 3, 4)
UPSCALE_RESOLUTIONS = (
    {"label": "2K", "value": 2048},
    {"label": "4K", "value": 3840},
)
_ALIGNMENT = 64


def compute_upscale_dimensions(
    source_width: int, source_height: int, target: int,
) -> dict[str, int]:
    """Scale so the longest side equals target, then align both sides to 64px."""
    aspect_ratio = source_width / source_height
    if source_width >= source_height:
        width = target
        height = round(target / aspect_ratio)
    else:
        width = round(target * aspect_ratio)
        height = target
    return {
        "width": math.ceil(width / _ALIGNMENT) * _ALIGNMENT,
        "height": math.ceil(height / _ALIGNMENT) * _ALIGNMENT,
    }


def _source_size(ctx: Context) -> tuple[int | None, int | None]:
    images = ctx.get("images") or []
    first = images[0] if images else None
    if not isinstance(first, Mapping):
        return None, None
    return first.get("width"), first.get("height")


def _target_dimensions(ctx: Context, ext: Extras) -> NodeConfig:
    source_width, source_height = _source_size(ctx)
    multiplier_options: list[dict] = []
    resolution_options: list[dict] = []

    if source_width and source_height:
        longest = max(source_width, source_height)
        for multiplier in UPSCALE_MULTIPLIERS:
            dims = compute_upscale_dimensions(
                source_width, source_height, longest * multiplier,
            )
            multiplier_options.append({
                "label": f"x{multiplier}",
                **dims,
                "disabled": max(dims["width"], dims["height"]) > MAX_OUTPUT_RESOLUTION,
            })
        for preset in UPSCALE_RESOLUTIONS:
            dims = compute_upscale_dimensions(source_width, source_height, preset["value"])
            resolution_options.append({
                "label": preset["label"],
                **dims,
                "disabled": (
                    preset["value"] <= longest
                    or max(dims["width"], dims["height"]) > MAX_OUTPUT_RESOLUTION
                ),
            })

    default = next((o for o in multiplier_options if not o["disabled"]), None)
    can_upscale = any(
        not o["disabled"] for o in multiplier_options + resolution_options
    )
    return NodeConfig(
        kind=NodeKind.VALUE,
        default_value=(
            {"width": default["width"], "height": default["height"]} if default else None
        ),
        meta={
            "sourceWidth": source_width,
            "sourceHeight": source_height,
            "maxOutputResolution": MAX_OUTPUT_RESOLUTION,
            "multiplierOptions": multiplier_options,
            "resolutionOptions": resolution_options,
            "canUpscale": can_upscale,
        },
    )


IMAGE_UPSCALE_GRAPH = (
    DataGraph(name="image-upscale")
    .node("images", images_node())
    .node("targetDimensions", _target_dimensions, ["images"])
)

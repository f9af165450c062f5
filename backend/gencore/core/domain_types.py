"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - WeightedScore is 0.0–10.0 for in-range inputs (not enforced)
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Value Types ─────────────────────────────────────────────────

WeightedScore = NewType("WeightedScore", float)   # 0.0–10.0


# ─── Enums ───────────────────────────────────────────────────────

class NodeKind(str, Enum):
    """What a NodeConfig describes — drives which input the form renders."""
    VALUE = "value"
    SLIDER = "slider"
    ENUM = "enum"
    TOGGLE = "toggle"
    SEED = "seed"
    IMAGES = "images"
    ASPECT_RATIO = "aspect_ratio"
    TEXT = "text"
    RESOURCES = "resources"
    MODEL = "model"
    COMPUTED = "computed"


class MessageRole(str, Enum):
    """Chat roles accepted in review templates."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Ecosystem(str, Enum):
    """Ecosystems with a registered generation graph."""
    SD1 = "SD1"
    SDXL = "SDXL"
    PONY = "Pony"
    ILLUSTRIOUS = "Illustrious"
    NOOBAI = "NoobAI"
    KLING = "Kling"
    HIDREAM = "HiDream"


# ─── Workflows ───────────────────────────────────────────────────

WORKFLOW_UPSCALE = "img2img:upscale"

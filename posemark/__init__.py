"""
posemark - recognition message assembly

Turns object pose recognition results into pose lists, object id lists and
visualization markers, with a stable color per recognized object.
"""

__version__ = "0.1.0"

from .core.node import Node
from .core.pipeline import Pipeline
from .interfaces import (
    Frame,
    MarkerArray,
    ObjectIdsMessage,
    PoseArray,
    PoseResult,
    RecognitionCycle,
    RecognitionMessages,
)
from .nodes import MsgAssemblerNode
from .utils.registry import ObjectIdRegistry

__all__ = [
    "Pipeline",
    "Node",
    "MsgAssemblerNode",
    "ObjectIdRegistry",
    "Frame",
    "PoseResult",
    "RecognitionCycle",
    "RecognitionMessages",
    "PoseArray",
    "MarkerArray",
    "ObjectIdsMessage",
]

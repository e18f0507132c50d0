"""
Core data interfaces for posemark.

These interfaces define the standardized data structures used for communication
between the recognition stage, the assembler and downstream consumers.
"""

from .interfaces import (
    AttributeMissingError,
    ColorRGBA,
    Frame,
    Header,
    Marker,
    MarkerAction,
    MarkerArray,
    MarkerType,
    ObjectIdsMessage,
    PoseArray,
    PoseMsg,
    PoseResult,
    RecognitionCycle,
    RecognitionMessages,
)

__all__ = [
    "AttributeMissingError",
    "ColorRGBA",
    "Frame",
    "Header",
    "Marker",
    "MarkerAction",
    "MarkerArray",
    "MarkerType",
    "ObjectIdsMessage",
    "PoseArray",
    "PoseMsg",
    "PoseResult",
    "RecognitionCycle",
    "RecognitionMessages",
]

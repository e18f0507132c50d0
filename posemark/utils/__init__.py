"""Utilities for posemark: identity registry, colors, pose conversion and Rerun logging."""

from .color import color_for, hsv_to_rgb, hue_for
from .registry import ObjectIdRegistry
from .rerun_logger import RerunLogger
from .transforms import convert_pose, rotation_matrix_to_quaternion

__all__ = [
    "ObjectIdRegistry",
    "RerunLogger",
    "color_for",
    "convert_pose",
    "hsv_to_rgb",
    "hue_for",
    "rotation_matrix_to_quaternion",
]

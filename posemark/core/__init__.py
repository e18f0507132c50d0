"""Core components of posemark."""

from .node import Node
from .pipeline import Pipeline

__all__ = ["Node", "Pipeline"]

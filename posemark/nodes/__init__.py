"""
Nodes for posemark.
"""

from .msg_assembler import MsgAssemblerNode

__all__ = ["MsgAssemblerNode"]

"""
Base Node class for posemark.

All processing stages inherit from this base class and implement the process method.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class Node(ABC):
    """
    Base class for all processing nodes.

    Each node represents a single processing step in a pipeline and communicates
    through the dataclasses defined in ``posemark.interfaces``.

    Example:
        class MyNode(Node):
            def process(self, cycle: RecognitionCycle) -> RecognitionCycle:
                cycle.metadata["seen"] = True
                return cycle
    """

    def __init__(self, name: str = None, **kwargs):
        """
        Initialize the node.

        Args:
            name: Optional name for the node. If None, uses class name.
            **kwargs: Additional configuration parameters.
        """
        self.name = name or self.__class__.__name__
        self.config = kwargs
        self.metadata = {}

    @abstractmethod
    def process(self, input_data: Any) -> Any:
        """
        Process input data and return output.

        Args:
            input_data: Input data following framework interfaces

        Returns:
            Output data following framework interfaces
        """
        pass

    def __call__(self, input_data: Any = None) -> Any:
        """
        Run the node on input data, recording its runtime in the output metadata.

        Args:
            input_data: Input data, None for source nodes

        Returns:
            Output of process()
        """
        start_time = time.time()
        try:
            output = self.process(input_data)
        except Exception as e:
            logger.error(f"Error in node {self.name}: {str(e)}")
            raise

        runtime = time.time() - start_time
        if hasattr(output, "metadata"):
            output.metadata = output.metadata or {}
            output.metadata[f"{self.name}_runtime"] = runtime
        logger.debug(f"Node {self.name} completed in {runtime:.3f}s")
        return output

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"

"""
Pipeline class for posemark.

The Pipeline runs nodes in sequence, either once or for every item of a stream
produced by a source node.
"""

import logging
import time
from typing import Any, Iterator, List, Optional

from ..core.node import Node
from ..interfaces import RecognitionMessages
from ..utils.rerun_logger import RerunLogger

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Pipeline for orchestrating the execution of processing nodes.

    The pipeline manages the flow of data between nodes and optionally logs
    assembled recognition messages to Rerun.
    """

    def __init__(
        self,
        name: str = "Pipeline",
        enable_rerun_logging: bool = False,
        rerun_recording_name: Optional[str] = None,
        rerun_spawn_viewer: bool = True,
    ):
        """
        Initialize the pipeline.

        Args:
            name: Name of the pipeline
            enable_rerun_logging: Whether to log assembled messages to Rerun
            rerun_recording_name: Custom name for Rerun recording (defaults to pipeline name)
            rerun_spawn_viewer: Whether to spawn the Rerun viewer
        """
        self.name = name
        self.nodes: List[Node] = []
        self.metadata = {}
        # Number of recognition cycles completed, used as the Rerun "cycle" timeline
        self.cycle_count = 0

        self.enable_rerun_logging = enable_rerun_logging
        recording_name = (
            rerun_recording_name or f"posemark_{name.lower().replace(' ', '_')}"
        )
        self.rerun_logger = RerunLogger(
            recording_name, enabled=enable_rerun_logging, spawn=rerun_spawn_viewer
        )

    def add_node(self, node: Node) -> "Pipeline":
        """
        Add a node to the pipeline.

        Args:
            node: Node to add to the pipeline

        Returns:
            Self for method chaining
        """
        if not isinstance(node, Node):
            raise TypeError(f"Expected Node instance, got {type(node)}")

        self.nodes.append(node)
        logger.debug(f"Added node {node.name} to pipeline {self.name}")
        return self

    def _run_nodes(self, nodes: List[Node], data: Any, item_index: int) -> Any:
        for i, node in enumerate(nodes):
            logger.debug(f"Processing item {item_index}, node {i + 1}/{len(nodes)}: {node.name}")
            data = node(data)

            if data is None:
                logger.debug(f"Node {node.name} skipped item (returned None)")
                return None

        if isinstance(data, RecognitionMessages):
            if self.enable_rerun_logging:
                self.rerun_logger.set_time_sequence("cycle", self.cycle_count)
                self.rerun_logger.log_messages(data, "recognition")
            self.cycle_count += 1
        return data

    def process(self, input_data: Any) -> Any:
        """
        Process input data through all nodes in sequence.

        Args:
            input_data: Input data for the first node

        Returns:
            Output data from the last node
        """
        if not self.nodes:
            raise ValueError("Pipeline has no nodes")

        start_time = time.time()
        logger.info(f"Starting pipeline {self.name} with {len(self.nodes)} nodes")

        current_data = self._run_nodes(self.nodes, input_data, 0)

        total_runtime = time.time() - start_time
        logger.info(f"Pipeline {self.name} completed in {total_runtime:.3f}s")

        if hasattr(current_data, "metadata"):
            current_data.metadata = current_data.metadata or {}
            current_data.metadata[f"{self.name}_total_runtime"] = total_runtime
            current_data.metadata[f"{self.name}_node_count"] = len(self.nodes)

            if self.enable_rerun_logging:
                self.rerun_logger.log_metadata(
                    current_data.metadata, "pipeline/final_metadata"
                )

        return current_data

    def process_stream(self, input_data: Any = None) -> Iterator[Any]:
        """
        Process a stream of data through the pipeline.

        The first node must return an iterable (for instance a generator of
        recognition cycles); each item is processed through the remaining nodes.

        Args:
            input_data: Input data for the first node (can be None for source nodes)

        Yields:
            Output data from the last node for each input item
        """
        if not self.nodes:
            raise ValueError("Pipeline has no nodes")

        logger.info(
            f"Starting stream pipeline {self.name} with {len(self.nodes)} nodes"
        )

        first_node = self.nodes[0]
        remaining_nodes = self.nodes[1:]

        stream = first_node(input_data)

        if not hasattr(stream, "__iter__"):
            raise ValueError(
                f"First node {first_node.name} must return an iterable for stream processing"
            )

        for item_index, item in enumerate(stream):
            start_time = time.time()
            current_data = self._run_nodes(remaining_nodes, item, item_index)

            item_runtime = time.time() - start_time
            logger.debug(
                f"Pipeline item {item_index + 1} completed in {item_runtime:.3f}s"
            )

            if hasattr(current_data, "metadata"):
                current_data.metadata = current_data.metadata or {}
                current_data.metadata[f"{self.name}_item_runtime"] = item_runtime
                current_data.metadata[f"{self.name}_item_index"] = item_index

            yield current_data

    def get_node(self, name: str) -> Optional[Node]:
        """
        Get a node by name.

        Args:
            name: Name of the node to find

        Returns:
            Node if found, None otherwise
        """
        for node in self.nodes:
            if node.name == name:
                return node
        return None

    def remove_node(self, name: str) -> bool:
        """
        Remove a node by name.

        Args:
            name: Name of the node to remove

        Returns:
            True if node was removed, False if not found
        """
        for i, node in enumerate(self.nodes):
            if node.name == name:
                del self.nodes[i]
                logger.debug(f"Removed node {name} from pipeline {self.name}")
                return True
        return False

    def __len__(self) -> int:
        """Return the number of nodes in the pipeline."""
        return len(self.nodes)

    def __repr__(self) -> str:
        node_names = [node.name for node in self.nodes]
        return f"Pipeline(name='{self.name}', nodes={node_names})"

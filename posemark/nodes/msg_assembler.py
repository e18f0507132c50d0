"""
Message assembler node turning recognition results into pose, id and marker messages.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Hashable, List, Optional, Sequence

import numpy as np

from ..core.node import Node
from ..interfaces import (
    ColorRGBA,
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
from ..utils.color import DEFAULT_SATURATION, DEFAULT_VALUE, color_for
from ..utils.registry import ObjectIdRegistry
from ..utils.transforms import convert_pose

logger = logging.getLogger(__name__)


class MsgAssemblerNode(Node):
    """
    Node filling the recognition messages from the results of object recognition.

    For every cycle it emits a pose array, a JSON list of the recognized object ids
    and a marker array with a mesh marker and a text label per recognized object.
    Mesh markers are colored by object identity using the registry index of the
    object; the registry outlives the cycle, so an object keeps its color as long
    as the registry is alive.

    Args:
        registry: Shared object id registry. A private one is created if None.
        saturation: HSV saturation of mesh marker colors
        value: HSV value of mesh marker colors
        mesh_alpha: Alpha of mesh marker colors
        mesh_lifetime: Lifetime of mesh markers in seconds
        text_lifetime: Lifetime of text markers in seconds
        text_scale: Height of text markers
        **kwargs: Additional configuration parameters
    """

    def __init__(
        self,
        name: str = None,
        registry: Optional[ObjectIdRegistry] = None,
        saturation: float = DEFAULT_SATURATION,
        value: float = DEFAULT_VALUE,
        mesh_alpha: float = 0.75,
        mesh_lifetime: float = 30.0,
        text_lifetime: float = 10.0,
        text_scale: float = 0.03,
        **kwargs,
    ):
        super().__init__(name=name or "MsgAssembler", **kwargs)
        self.registry = registry if registry is not None else ObjectIdRegistry()
        self.saturation = saturation
        self.value = value
        self.mesh_alpha = mesh_alpha
        self.mesh_lifetime = mesh_lifetime
        self.text_lifetime = text_lifetime
        self.text_scale = text_scale

    def process(self, cycle: RecognitionCycle) -> RecognitionMessages:
        """
        Assemble the messages of one recognition cycle.

        Args:
            cycle: Pose results with the reference image of the cycle

        Returns:
            RecognitionMessages with the pose, object id and marker messages
        """
        frame_id = ""
        stamp = cycle.stamp
        if cycle.image is not None:
            frame_id = cycle.image.header.frame_id
            if stamp is None and cycle.image.header.stamp > 0:
                stamp = cycle.image.header.stamp
        else:
            logger.debug("No image message available, leaving frame id empty")

        messages = self.assemble(cycle.pose_results, frame_id, stamp)
        messages.metadata.update(cycle.metadata)
        return messages

    def assemble(
        self,
        pose_results: Sequence[PoseResult],
        frame_id: str = "",
        stamp: Optional[float] = None,
    ) -> RecognitionMessages:
        """
        Build the pose, object id and marker messages for a batch of pose results.

        Args:
            pose_results: Pose results in recognition order
            frame_id: Reference frame id, empty when unknown
            stamp: Capture time in seconds, None to use the current time

        Returns:
            RecognitionMessages with all three messages

        Raises:
            AttributeMissingError: If a pose result lacks mesh_uri or name
            TypeError: If an object id cannot be encoded as JSON
        """
        pose_results = list(pose_results)
        object_ids: List[Hashable] = [pose_result.object_id for pose_result in pose_results]

        # Encode before registering so a rejected cycle leaves the registry untouched
        try:
            object_ids_message = ObjectIdsMessage.from_object_ids(object_ids)
        except TypeError as e:
            raise TypeError(f"Object ids {object_ids!r} cannot be encoded as JSON: {e}") from e

        if stamp is None:
            stamp = time.time()
        header = Header(frame_id=frame_id or "", stamp=stamp)

        # Register every id first so the hue spacing covers all ids of this cycle
        indices, total = self.registry.register_all(object_ids)

        pose_array = PoseArray(header=header)
        marker_array = MarkerArray()

        marker_id = 0
        for pose_result, index in zip(pose_results, indices):
            position, orientation = convert_pose(
                pose_result.rotation, pose_result.translation
            )
            pose = PoseMsg(position=position, orientation=orientation)
            pose_array.poses.append(pose)

            r, g, b = color_for(index, total, self.saturation, self.value)
            mesh_marker = Marker(
                id=marker_id,
                type=MarkerType.MESH_RESOURCE,
                action=MarkerAction.ADD,
                header=replace(header),
                pose=pose.copy(),
                scale=np.array([1.0, 1.0, 1.0]),
                color=ColorRGBA(r=r, g=g, b=b, a=self.mesh_alpha),
                lifetime=self.mesh_lifetime,
                mesh_resource=pose_result.get_attribute("mesh_uri"),
            )
            marker_id += 1

            text_marker = Marker(
                id=marker_id,
                type=MarkerType.TEXT_VIEW_FACING,
                action=MarkerAction.ADD,
                header=replace(header),
                pose=pose.copy(),
                scale=np.array([1.0, 1.0, self.text_scale]),
                color=ColorRGBA(r=1.0, g=1.0, b=1.0, a=1.0),
                lifetime=self.text_lifetime,
                text=pose_result.get_attribute("name"),
            )
            marker_id += 1

            marker_array.markers.extend([mesh_marker, text_marker])

        logger.debug(
            f"Assembled {len(pose_array.poses)} poses and {len(marker_array.markers)} "
            f"markers in frame '{header.frame_id}' ({total} known objects)"
        )

        return RecognitionMessages(
            pose_message=pose_array,
            object_ids_message=object_ids_message,
            marker_message=marker_array,
            metadata={"num_objects": len(object_ids), "num_known_objects": total},
        )

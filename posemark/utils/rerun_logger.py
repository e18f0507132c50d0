"""
Rerun logging utility for posemark.

This module logs assembled recognition messages (poses and markers) to Rerun
for interactive visualization and debugging.
"""

import logging
import os
from typing import Any, Dict, List

import numpy as np
import rerun as rr

from ..interfaces import ColorRGBA, Marker, MarkerArray, MarkerType, PoseArray, RecognitionMessages

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _to_rgba8(color: ColorRGBA) -> List[int]:
    return [int(round(np.clip(c, 0.0, 1.0) * 255)) for c in (color.r, color.g, color.b, color.a)]


def _local_mesh_path(mesh_resource: str) -> str:
    """Filesystem path of a mesh resource, or empty string if it is not a local file."""
    path = mesh_resource[len("file://"):] if mesh_resource.startswith("file://") else mesh_resource
    return path if path and os.path.isfile(path) else ""


class RerunLogger:
    """
    Logger for recognition messages using Rerun.

    Poses are logged as points, mesh markers as transformed mesh assets (or colored
    points when the mesh is not a local file) and text markers as labeled points.
    """

    def __init__(
        self,
        recording_name: str = "posemark",
        enabled: bool = True,
        spawn: bool = True,
    ):
        """
        Initialize the Rerun logger.

        Args:
            recording_name: Name for the Rerun recording
            enabled: Whether logging is enabled
            spawn: Whether to spawn the Rerun viewer
        """
        self.recording_name = recording_name
        # Disable viewer spawning in CI environments to avoid connection issues
        self.spawn = spawn and not bool(os.getenv("CI"))
        self._initialized = False
        self.enabled = enabled

    def _ensure_initialized(self):
        """Ensure Rerun is initialized."""
        if not self.enabled:
            return

        if not self._initialized:
            rr.init(self.recording_name, spawn=self.spawn)
            self._initialized = True

    def set_time_sequence(self, timeline_name: str, sequence_number: int):
        """
        Set the time sequence for timeline-based logging.

        Args:
            timeline_name: Name of the timeline (e.g., "cycle")
            sequence_number: Sequence number for this point in time
        """
        if not self.enabled:
            return

        self._ensure_initialized()
        rr.set_time(timeline_name, sequence=sequence_number)

    def log_pose_array(self, pose_array: PoseArray, entity_path: str = "poses"):
        """
        Log the positions of a pose array as points.

        Args:
            pose_array: Pose array to log
            entity_path: Entity path for logging
        """
        if not self.enabled or not pose_array.poses:
            return

        self._ensure_initialized()

        positions = np.array([pose.position for pose in pose_array.poses])
        rr.log(entity_path, rr.Points3D(positions))

    def log_marker(self, marker: Marker, entity_path: str):
        """
        Log a single marker at its pose.

        Args:
            marker: Mesh or text marker
            entity_path: Entity path for logging
        """
        if not self.enabled:
            return

        self._ensure_initialized()

        rr.log(
            entity_path,
            rr.Transform3D(
                translation=marker.pose.position,
                quaternion=rr.Quaternion(xyzw=marker.pose.orientation),
            ),
        )

        color = _to_rgba8(marker.color)
        if marker.type == MarkerType.MESH_RESOURCE:
            mesh_path = _local_mesh_path(marker.mesh_resource)
            if mesh_path:
                rr.log(f"{entity_path}/mesh", rr.Asset3D(path=mesh_path))
            else:
                logger.debug(f"Mesh '{marker.mesh_resource}' is not a local file, logging a point")
                rr.log(f"{entity_path}/mesh", rr.Points3D([[0.0, 0.0, 0.0]], colors=[color], radii=[0.02]))
        elif marker.type == MarkerType.TEXT_VIEW_FACING:
            rr.log(
                f"{entity_path}/text",
                rr.Points3D([[0.0, 0.0, 0.0]], colors=[color], labels=[marker.text], radii=[0.0]),
            )
        else:
            logger.warning(f"Unsupported marker type {marker.type} for marker {marker.id}")

    def log_markers(self, marker_array: MarkerArray, entity_path: str = "markers"):
        """
        Log every marker of a marker array.

        Args:
            marker_array: Marker array to log
            entity_path: Entity path for logging
        """
        if not self.enabled:
            return

        for marker in marker_array.markers:
            self.log_marker(marker, f"{entity_path}/{marker.id:04d}")

    def log_messages(self, messages: RecognitionMessages, entity_path: str = "recognition"):
        """
        Log all messages of one recognition cycle.

        Args:
            messages: Assembled recognition messages
            entity_path: Entity path for logging
        """
        if not self.enabled:
            return

        self._ensure_initialized()

        frame_id = messages.pose_message.header.frame_id.strip("/") or "world"
        self.log_pose_array(messages.pose_message, f"{entity_path}/{frame_id}/poses")
        self.log_markers(messages.marker_message, f"{entity_path}/{frame_id}/markers")
        rr.log(f"{entity_path}/object_ids", rr.TextLog(messages.object_ids_message.data))

        logger.debug(
            f"Logged {len(messages.pose_message.poses)} poses and "
            f"{len(messages.marker_message.markers)} markers to '{entity_path}'"
        )

    def log_metadata(self, metadata: Dict[str, Any], entity_path: str = "metadata"):
        """
        Log metadata as text.

        Args:
            metadata: Metadata dictionary
            entity_path: Entity path for logging
        """
        if not self.enabled or not metadata:
            return

        self._ensure_initialized()

        metadata_text = "\n".join([f"{k}: {v}" for k, v in metadata.items()])
        rr.log(entity_path, rr.TextLog(metadata_text))

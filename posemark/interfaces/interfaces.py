"""
Core data interfaces for posemark.

These interfaces define the recognition inputs consumed by the assembler and the
message structures it produces for renderers, loggers and publishers.
"""

import json
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Hashable, List, Optional

import numpy as np
import numpy.typing as npt


class AttributeMissingError(KeyError):
    """Raised when a pose result lacks an attribute required for visualization."""

    def __init__(self, attribute: str, object_id: Hashable = None):
        self.attribute = attribute
        self.object_id = object_id
        super().__init__(attribute)

    def __str__(self) -> str:
        return f"Pose result for object {self.object_id!r} has no attribute '{self.attribute}'"


@dataclass
class Header:
    """
    Message header shared by every output of a cycle.

    Attributes:
        frame_id: Reference frame of the data, empty when unknown
        stamp: Capture time in seconds since the epoch
    """

    frame_id: str = ""
    stamp: float = 0.0


@dataclass
class Frame:
    """
    Reference image message. Only the header is consumed by the assembler.

    Attributes:
        header: Header with the camera frame id and capture time
        rgb: RGB image as numpy array (H, W, 3) or None
        idx: Optional global frame index
        metadata: Additional metadata dictionary
    """

    header: Header = field(default_factory=Header)
    rgb: Optional[npt.NDArray[np.uint8]] = None
    idx: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PoseResult:
    """
    One recognized object instance and its rigid-body transform.

    Attributes:
        object_id: Identifier of the recognized object
        rotation: Rotation matrix (3, 3)
        translation: Translation vector (3,)
        attributes: Named string attributes (mesh_uri, name, ...)
        confidence: Recognition confidence
        metadata: Additional metadata dictionary
    """

    object_id: Hashable
    rotation: npt.NDArray[np.float64]
    translation: npt.NDArray[np.float64]
    attributes: Dict[str, str] = field(default_factory=dict)
    confidence: float = 1.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_attribute(self, name: str) -> str:
        """
        Look up a named attribute.

        Args:
            name: Attribute name

        Returns:
            The attribute value

        Raises:
            AttributeMissingError: If the attribute is not set
        """
        try:
            return self.attributes[name]
        except KeyError:
            raise AttributeMissingError(name, self.object_id) from None


@dataclass
class RecognitionCycle:
    """
    Input of one assembly cycle.

    Attributes:
        pose_results: Pose results in recognition order
        image: Reference image message, None when unavailable
        stamp: Capture time in seconds, None to use the assembly time
        metadata: Additional metadata dictionary
    """

    pose_results: List[PoseResult] = field(default_factory=list)
    image: Optional[Frame] = None
    stamp: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PoseMsg:
    """
    Position and orientation of one recognized object.

    Attributes:
        position: Position (3,)
        orientation: Unit quaternion (4,) in [x, y, z, w] order
    """

    position: npt.NDArray[np.float64]
    orientation: npt.NDArray[np.float64]

    def copy(self) -> "PoseMsg":
        return PoseMsg(position=self.position.copy(), orientation=self.orientation.copy())


@dataclass
class PoseArray:
    """Poses of all recognized objects of a cycle."""

    header: Header = field(default_factory=Header)
    poses: List[PoseMsg] = field(default_factory=list)


@dataclass
class ColorRGBA:
    """Color with channels in [0, 1]."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0


class MarkerType(IntEnum):
    """Marker shapes, numbered like the ROS visualization marker types."""

    TEXT_VIEW_FACING = 9
    MESH_RESOURCE = 10


class MarkerAction(IntEnum):
    ADD = 0
    DELETE = 2


@dataclass
class Marker:
    """
    Visualization primitive describing how to render a recognized object.

    Attributes:
        id: Marker id, unique within one marker array
        type: Marker shape
        header: Frame id and stamp
        pose: Pose of the marker
        scale: Scale (3,)
        color: Marker color
        lifetime: Seconds before the viewer drops the marker
        action: Marker action
        mesh_resource: Mesh path or URI for mesh markers
        text: Label for text markers
    """

    id: int
    type: MarkerType
    header: Header
    pose: PoseMsg
    scale: npt.NDArray[np.float64]
    color: ColorRGBA
    lifetime: float
    action: MarkerAction = MarkerAction.ADD
    mesh_resource: str = ""
    text: str = ""


@dataclass
class MarkerArray:
    markers: List[Marker] = field(default_factory=list)


@dataclass
class ObjectIdsMessage:
    """
    Serialized list of the object ids recognized in a cycle.

    Attributes:
        data: JSON text of the form {"object_ids": [...]}
    """

    data: str = '{"object_ids": []}'

    @classmethod
    def from_object_ids(cls, object_ids: List[Hashable]) -> "ObjectIdsMessage":
        return cls(data=json.dumps({"object_ids": list(object_ids)}))

    @property
    def object_ids(self) -> List[Hashable]:
        return json.loads(self.data)["object_ids"]


@dataclass
class RecognitionMessages:
    """
    The three artifacts emitted together at the end of a cycle.

    Attributes:
        pose_message: Poses of the recognized objects
        object_ids_message: Serialized object id list
        marker_message: Mesh and text markers
        metadata: Additional metadata dictionary
    """

    pose_message: PoseArray
    object_ids_message: ObjectIdsMessage
    marker_message: MarkerArray
    metadata: Dict[str, Any] = field(default_factory=dict)

"""
Tests for the message assembler node.
"""

import json

import numpy as np
import numpy.testing as npt
import pytest
from scipy.spatial.transform import Rotation

from posemark.interfaces import (
    AttributeMissingError,
    Frame,
    Header,
    MarkerAction,
    MarkerType,
    PoseResult,
    RecognitionCycle,
    RecognitionMessages,
)
from posemark.nodes import MsgAssemblerNode
from posemark.utils.color import color_for
from posemark.utils.registry import ObjectIdRegistry

CAMERA_FRAME = "camera_rgb_frame"


def make_result(object_id, translation=(1.0, 2.0, 3.0), rotation=None, **attributes):
    attributes = attributes or {
        "mesh_uri": f"{object_id}.dae",
        "name": str(object_id).capitalize(),
    }
    return PoseResult(
        object_id=object_id,
        rotation=np.eye(3) if rotation is None else rotation,
        translation=np.array(translation, dtype=np.float64),
        attributes=attributes,
    )


def make_cycle(*pose_results, frame_id=CAMERA_FRAME, stamp=100.0):
    return RecognitionCycle(
        pose_results=list(pose_results),
        image=Frame(header=Header(frame_id=frame_id)),
        stamp=stamp,
    )


@pytest.fixture
def assembler():
    return MsgAssemblerNode(registry=ObjectIdRegistry())


def test_single_object(assembler):
    """One apple at (1, 2, 3) with identity rotation."""
    messages = assembler(make_cycle(make_result("apple")))

    assert isinstance(messages, RecognitionMessages)

    pose_array = messages.pose_message
    assert pose_array.header.frame_id == CAMERA_FRAME
    assert pose_array.header.stamp == 100.0
    assert len(pose_array.poses) == 1
    npt.assert_allclose(pose_array.poses[0].position, [1.0, 2.0, 3.0])
    npt.assert_allclose(pose_array.poses[0].orientation, [0.0, 0.0, 0.0, 1.0], atol=1e-12)

    markers = messages.marker_message.markers
    assert [marker.id for marker in markers] == [0, 1]
    assert [marker.type for marker in markers] == [
        MarkerType.MESH_RESOURCE,
        MarkerType.TEXT_VIEW_FACING,
    ]

    assert messages.object_ids_message.data == '{"object_ids": ["apple"]}'


def test_mesh_and_text_markers(assembler):
    messages = assembler(make_cycle(make_result("apple")))
    mesh, text = messages.marker_message.markers

    assert mesh.mesh_resource == "apple.dae"
    assert mesh.action == MarkerAction.ADD
    assert mesh.lifetime == 30.0
    npt.assert_array_equal(mesh.scale, [1.0, 1.0, 1.0])
    assert (mesh.color.r, mesh.color.g, mesh.color.b) == pytest.approx((1.0, 0.3, 0.3))
    assert mesh.color.a == 0.75

    assert text.text == "Apple"
    assert text.action == MarkerAction.ADD
    assert text.lifetime == 10.0
    npt.assert_array_equal(text.scale, [1.0, 1.0, 0.03])
    assert (text.color.r, text.color.g, text.color.b, text.color.a) == (1.0, 1.0, 1.0, 1.0)

    npt.assert_array_equal(text.pose.position, mesh.pose.position)
    npt.assert_array_equal(text.pose.orientation, mesh.pose.orientation)

    for marker in (mesh, text):
        assert marker.header.frame_id == CAMERA_FRAME
        assert marker.header.stamp == 100.0


def test_outputs_follow_input_order(assembler):
    rotation = Rotation.from_euler("z", 90, degrees=True).as_matrix()
    messages = assembler(
        make_cycle(
            make_result("banana", translation=(0.0, 0.0, 1.0), rotation=rotation),
            make_result("apple", translation=(1.0, 0.0, 0.0)),
            make_result("banana", translation=(0.0, 1.0, 0.0)),
        )
    )

    positions = [pose.position.tolist() for pose in messages.pose_message.poses]
    assert positions == [[0.0, 0.0, 1.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]

    orientation = messages.pose_message.poses[0].orientation
    npt.assert_allclose(Rotation.from_quat(orientation).as_matrix(), rotation, atol=1e-10)

    markers = messages.marker_message.markers
    assert [marker.id for marker in markers] == list(range(6))
    assert [marker.text for marker in markers[1::2]] == ["Banana", "Apple", "Banana"]

    assert json.loads(messages.object_ids_message.data) == {
        "object_ids": ["banana", "apple", "banana"]
    }


def test_color_is_keyed_by_identity(assembler):
    messages = assembler(
        make_cycle(make_result("apple"), make_result("banana"), make_result("apple"))
    )
    mesh_markers = messages.marker_message.markers[0::2]

    first_apple, banana, second_apple = (
        (m.color.r, m.color.g, m.color.b) for m in mesh_markers
    )
    assert first_apple == second_apple
    assert first_apple == pytest.approx(color_for(0, 2))
    assert banana == pytest.approx(color_for(1, 2))
    assert banana == pytest.approx((0.3, 1.0, 1.0))


def test_hues_shift_as_objects_are_discovered(assembler):
    """Known objects are recolored with the registry size of the current cycle."""
    first = assembler(make_cycle(make_result("apple")))
    apple_first = first.marker_message.markers[0].color
    assert (apple_first.r, apple_first.g, apple_first.b) == pytest.approx(color_for(0, 1))

    second = assembler(make_cycle(make_result("apple"), make_result("banana")))
    apple_mesh, _, banana_mesh, _ = second.marker_message.markers

    assert assembler.registry.index_of("apple") == 0
    assert assembler.registry.index_of("banana") == 1
    # hue 0 for apple, 180 for banana
    assert (apple_mesh.color.r, apple_mesh.color.g, apple_mesh.color.b) == pytest.approx(
        color_for(0, 2)
    )
    assert (banana_mesh.color.r, banana_mesh.color.g, banana_mesh.color.b) == pytest.approx(
        color_for(1, 2)
    )
    assert (banana_mesh.color.r, banana_mesh.color.g, banana_mesh.color.b) == pytest.approx(
        (0.3, 1.0, 1.0)
    )


def test_registry_outlives_cycles_not_present(assembler):
    assembler(make_cycle(make_result("apple"), make_result("banana")))
    messages = assembler(make_cycle(make_result("banana")))

    banana_mesh = messages.marker_message.markers[0]
    assert messages.metadata["num_known_objects"] == 2
    assert (banana_mesh.color.r, banana_mesh.color.g, banana_mesh.color.b) == pytest.approx(
        color_for(1, 2)
    )


def test_shared_registry_between_nodes():
    registry = ObjectIdRegistry()
    first = MsgAssemblerNode(name="first", registry=registry)
    second = MsgAssemblerNode(name="second", registry=registry)

    first(make_cycle(make_result("apple")))
    second(make_cycle(make_result("banana")))

    assert registry.items() == [("apple", 0), ("banana", 1)]


def test_empty_cycle(assembler):
    messages = assembler(make_cycle())

    assert messages.pose_message.poses == []
    assert messages.pose_message.header.frame_id == CAMERA_FRAME
    assert messages.pose_message.header.stamp == 100.0
    assert messages.marker_message.markers == []
    assert messages.object_ids_message.data == '{"object_ids": []}'
    assert len(assembler.registry) == 0


def test_missing_image_leaves_frame_id_empty(assembler):
    cycle = RecognitionCycle(pose_results=[make_result("apple")], image=None, stamp=5.0)
    messages = assembler(cycle)

    assert messages.pose_message.header.frame_id == ""
    assert all(m.header.frame_id == "" for m in messages.marker_message.markers)
    assert len(messages.pose_message.poses) == 1


def test_stamp_falls_back_to_image_then_clock(assembler):
    cycle = RecognitionCycle(
        pose_results=[make_result("apple")],
        image=Frame(header=Header(frame_id=CAMERA_FRAME, stamp=42.0)),
    )
    assert assembler(cycle).pose_message.header.stamp == 42.0

    cycle = RecognitionCycle(pose_results=[make_result("apple")])
    assert assembler(cycle).pose_message.header.stamp > 0.0


@pytest.mark.parametrize("missing", ["mesh_uri", "name"])
def test_missing_attribute_aborts_cycle(assembler, missing):
    attributes = {"mesh_uri": "apple.dae", "name": "Apple"}
    del attributes[missing]
    cycle = make_cycle(make_result("banana"), make_result("apple", **attributes))

    with pytest.raises(AttributeMissingError) as excinfo:
        assembler(cycle)

    assert excinfo.value.attribute == missing
    assert excinfo.value.object_id == "apple"


def test_assemble_direct_call(assembler):
    messages = assembler.assemble([make_result("apple")], frame_id="map", stamp=1.5)

    assert messages.pose_message.header.frame_id == "map"
    assert messages.pose_message.header.stamp == 1.5
    assert messages.metadata["num_objects"] == 1


def test_runtime_and_cycle_metadata(assembler):
    cycle = make_cycle(make_result("apple"))
    cycle.metadata["source"] = "test"

    messages = assembler(cycle)

    assert messages.metadata["source"] == "test"
    assert "MsgAssembler_runtime" in messages.metadata


def test_custom_marker_configuration():
    assembler = MsgAssemblerNode(
        saturation=1.0, mesh_alpha=0.5, mesh_lifetime=5.0, text_lifetime=2.0, text_scale=0.1
    )
    mesh, text = assembler(make_cycle(make_result("apple"))).marker_message.markers

    assert (mesh.color.r, mesh.color.g, mesh.color.b, mesh.color.a) == pytest.approx(
        (1.0, 0.0, 0.0, 0.5)
    )
    assert mesh.lifetime == 5.0
    assert text.lifetime == 2.0
    assert text.scale[2] == 0.1


def test_artifacts_do_not_share_mutable_state(assembler):
    """Editing one marker leaves the pose array and the other markers untouched."""
    messages = assembler(
        make_cycle(make_result("apple"), make_result("banana", translation=(4.0, 5.0, 6.0)))
    )
    pose_array = messages.pose_message
    mesh, text = messages.marker_message.markers[:2]

    text.pose.position[2] += 0.1
    text.pose.orientation[0] = 0.5
    text.header.frame_id = "label_frame"
    text.header.stamp = 7.0

    assert pose_array.poses[0].position[2] == 3.0
    assert mesh.pose.position[2] == 3.0
    npt.assert_array_equal(pose_array.poses[0].orientation, mesh.pose.orientation)
    assert mesh.pose.orientation[0] == pytest.approx(0.0)

    assert pose_array.header.frame_id == CAMERA_FRAME
    assert pose_array.header.stamp == 100.0
    for marker in messages.marker_message.markers:
        if marker is not text:
            assert marker.header.frame_id == CAMERA_FRAME
            assert marker.header.stamp == 100.0


def test_unencodable_object_id_leaves_registry_untouched(assembler):
    assembler(make_cycle(make_result("apple")))

    with pytest.raises(TypeError):
        assembler(make_cycle(make_result("banana"), make_result(b"cherry")))

    assert len(assembler.registry) == 1
    assert "banana" not in assembler.registry

    messages = assembler(make_cycle(make_result("apple")))
    apple_mesh = messages.marker_message.markers[0]
    assert messages.metadata["num_known_objects"] == 1
    assert (apple_mesh.color.r, apple_mesh.color.g, apple_mesh.color.b) == pytest.approx(
        color_for(0, 1)
    )

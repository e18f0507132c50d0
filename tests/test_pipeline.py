"""
Tests for driving the assembler from a pipeline.
"""

import numpy as np

from posemark import Node, Pipeline
from posemark.interfaces import Frame, Header, PoseResult, RecognitionCycle, RecognitionMessages
from posemark.nodes import MsgAssemblerNode


class CycleSourceNode(Node):
    """Source node replaying a fixed list of recognized object ids per cycle."""

    def __init__(self, cycles, name: str = None, **kwargs):
        self.cycles = cycles
        super().__init__(name=name or "CycleSource", **kwargs)

    def process(self, input_data=None):
        for idx, object_ids in enumerate(self.cycles):
            yield RecognitionCycle(
                pose_results=[
                    PoseResult(
                        object_id=object_id,
                        rotation=np.eye(3),
                        translation=np.array([float(i), 0.0, 1.0]),
                        attributes={"mesh_uri": f"{object_id}.stl", "name": object_id},
                    )
                    for i, object_id in enumerate(object_ids)
                ],
                image=Frame(header=Header(frame_id="camera"), idx=idx),
                stamp=float(idx),
            )


def test_pipeline_process_single_cycle():
    pipeline = Pipeline(name="assembly")
    pipeline.add_node(MsgAssemblerNode())

    cycle = RecognitionCycle(
        pose_results=[
            PoseResult(
                object_id="apple",
                rotation=np.eye(3),
                translation=np.array([1.0, 2.0, 3.0]),
                attributes={"mesh_uri": "apple.dae", "name": "Apple"},
            )
        ],
        image=Frame(header=Header(frame_id="camera_rgb_frame")),
    )
    messages = pipeline.process(cycle)

    assert isinstance(messages, RecognitionMessages)
    assert messages.object_ids_message.object_ids == ["apple"]
    assert messages.metadata["assembly_node_count"] == 1
    assert "assembly_total_runtime" in messages.metadata


def test_pipeline_process_stream():
    pipeline = Pipeline(name="stream")
    pipeline.add_node(CycleSourceNode([["apple"], ["apple", "banana"], []]))
    pipeline.add_node(MsgAssemblerNode())

    results = list(pipeline.process_stream())

    assert len(results) == 3
    assert [r.object_ids_message.object_ids for r in results] == [
        ["apple"],
        ["apple", "banana"],
        [],
    ]
    assert [len(r.marker_message.markers) for r in results] == [2, 4, 0]
    assert [r.pose_message.header.stamp for r in results] == [0.0, 1.0, 2.0]
    assert [r.metadata["stream_item_index"] for r in results] == [0, 1, 2]

    assembler = pipeline.get_node("MsgAssembler")
    assert len(assembler.registry) == 2


def test_repeated_process_advances_cycle_timeline(monkeypatch):
    pipeline = Pipeline(name="timeline", enable_rerun_logging=True, rerun_spawn_viewer=False)
    pipeline.add_node(MsgAssemblerNode())

    sequences = []
    monkeypatch.setattr(
        pipeline.rerun_logger,
        "set_time_sequence",
        lambda timeline, sequence: sequences.append((timeline, sequence)),
    )
    monkeypatch.setattr(pipeline.rerun_logger, "log_messages", lambda messages, path: None)
    monkeypatch.setattr(pipeline.rerun_logger, "log_metadata", lambda metadata, path: None)

    for _ in range(3):
        pipeline.process(RecognitionCycle(image=Frame(header=Header(frame_id="camera"))))

    assert sequences == [("cycle", 0), ("cycle", 1), ("cycle", 2)]
    assert pipeline.cycle_count == 3

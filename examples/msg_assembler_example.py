"""
Example assembling recognition messages over a few cycles.

A synthetic source node replays recognition cycles in which objects appear one
after another, so the output shows how each new object gets its own hue and how
the hues of known objects are respaced as the registry grows.
"""

import numpy as np
from scipy.spatial.transform import Rotation

from posemark import MsgAssemblerNode, Node, Pipeline
from posemark.interfaces import Frame, Header, PoseResult, RecognitionCycle

CATALOG = {
    "coke": {"mesh_uri": "package://object_models/coke.stl", "name": "Coke can"},
    "mug": {"mesh_uri": "package://object_models/mug.stl", "name": "Mug"},
    "bowl": {"mesh_uri": "package://object_models/bowl.stl", "name": "Bowl"},
}


class SyntheticRecognitionNode(Node):
    """Source node producing poses for a growing set of objects."""

    def __init__(self, name: str = None, **kwargs):
        super().__init__(name=name or "SyntheticRecognition", **kwargs)

    def process(self, input_data=None):
        object_ids = list(CATALOG)
        for idx in range(len(object_ids)):
            pose_results = [
                PoseResult(
                    object_id=object_id,
                    rotation=Rotation.from_euler("z", 30 * (idx + i), degrees=True).as_matrix(),
                    translation=np.array([0.2 * i, 0.0, 1.0]),
                    attributes=CATALOG[object_id],
                )
                for i, object_id in enumerate(object_ids[: idx + 1])
            ]
            yield RecognitionCycle(
                pose_results=pose_results,
                image=Frame(header=Header(frame_id="camera_rgb_optical_frame"), idx=idx),
            )


def run_msg_assembler_example(enable_rerun_logging: bool = False):
    pipeline = Pipeline(name="msg_assembler_example", enable_rerun_logging=enable_rerun_logging)
    pipeline.add_node(SyntheticRecognitionNode())
    pipeline.add_node(MsgAssemblerNode())

    for cycle_index, messages in enumerate(pipeline.process_stream()):
        print("=" * 70)
        print(f"Cycle {cycle_index}: {messages.object_ids_message.data}")
        for marker in messages.marker_message.markers[0::2]:
            color = marker.color
            print(
                f"  marker {marker.id}: {marker.mesh_resource} "
                f"rgb=({color.r:.2f}, {color.g:.2f}, {color.b:.2f})"
            )


if __name__ == "__main__":
    run_msg_assembler_example()

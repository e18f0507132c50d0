"""
Conversion of recognized rotation/translation pairs into message poses.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from scipy.spatial.transform import Rotation


def rotation_matrix_to_quaternion(
    rotation: npt.ArrayLike,
) -> npt.NDArray[np.float64]:
    """
    Convert a rotation matrix to a unit quaternion.

    The matrix is assumed to be a valid rotation; it is not checked for
    orthonormality. scipy maps a non-orthonormal or reflection matrix to a
    nearby proper rotation, so the result is still a unit quaternion but does not
    reproduce the input matrix.

    Args:
        rotation: Rotation matrix (3, 3)

    Returns:
        Quaternion (4,) in [x, y, z, w] order
    """
    matrix = np.asarray(rotation, dtype=np.float64)
    if matrix.shape != (3, 3):
        raise ValueError(f"Rotation must have shape (3, 3), got {matrix.shape}")

    # scipy uses scalar-last order, matching the message layout
    return Rotation.from_matrix(matrix).as_quat()


def convert_pose(
    rotation: npt.ArrayLike, translation: npt.ArrayLike
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Convert a rotation matrix and translation vector into position + orientation.

    Args:
        rotation: Rotation matrix (3, 3)
        translation: Translation vector (3,)

    Returns:
        Tuple of (position (3,), quaternion (4,) in [x, y, z, w] order)
    """
    position = np.asarray(translation, dtype=np.float64).reshape(-1)
    if position.shape != (3,):
        raise ValueError(f"Translation must have 3 components, got {position.shape}")

    return position.copy(), rotation_matrix_to_quaternion(rotation)

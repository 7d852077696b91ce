"""Common utility functions for the project."""

import yaml
import numpy as np
from pathlib import Path
from typing import Dict, Any, Union, Tuple
from scipy.spatial.transform import Rotation as R


def load_yaml(filepath: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file.

    Args:
        filepath: Path to YAML file

    Returns:
        Dictionary containing YAML data
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f)


def save_yaml(data: Dict[str, Any], filepath: Union[str, Path]) -> None:
    """Save data to YAML file.

    Args:
        data: Dictionary to save
        filepath: Path to output YAML file
    """
    with open(filepath, 'w', encoding='utf-8') as f:
        yaml.dump(data, f, default_flow_style=False)


def compose_matrix(position, rotation, scale) -> np.ndarray:
    """Build a 4x4 transform T * R * S.

    Args:
        position: Translation (x, y, z)
        rotation: Quaternion as [qx, qy, qz, qw]
        scale: Scale (x, y, z)

    Returns:
        4x4 row-major matrix acting on column vectors
    """
    matrix = np.eye(4)
    matrix[:3, :3] = R.from_quat(rotation).as_matrix() @ np.diag(np.asarray(scale, dtype=float))
    matrix[:3, 3] = position
    return matrix


def decompose_matrix(matrix: np.ndarray) -> Tuple[np.ndarray, R, np.ndarray]:
    """Split a 4x4 affine transform into scale, rotation and translation.

    Args:
        matrix: 4x4 row-major matrix acting on column vectors

    Returns:
        Tuple of (scale, rotation, translation)
    """
    matrix = np.asarray(matrix, dtype=float)
    basis = matrix[:3, :3]
    scale = np.linalg.norm(basis, axis=0)
    if np.linalg.det(basis) < 0:
        scale[0] = -scale[0]
    safe = np.where(scale == 0.0, 1.0, scale)
    rotation = R.from_matrix(basis / safe)
    return scale, rotation, matrix[:3, 3].copy()


def ensure_dir(directory: Union[str, Path]) -> Path:
    """Ensure directory exists, create if not.

    Args:
        directory: Path to directory

    Returns:
        Path object of the directory
    """
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path

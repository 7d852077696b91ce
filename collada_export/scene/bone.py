from typing import Optional, List, NamedTuple
import numpy as np


class VertexWeight(NamedTuple):
    """Influence of one bone on one vertex"""
    vertex_id: int
    weight: float


class Bone:
    """Skin bone binding mesh vertices to the joint node of the same name"""

    def __init__(self, name: str, offset_matrix: Optional[np.ndarray] = None):
        """
        Initialize bone

        Args:
            name: Bone name, matches the name of its joint node in the scene
            offset_matrix: 4x4 inverse bind matrix (mesh space to bone space)
        """
        self.name = name
        self.offset_matrix: np.ndarray = np.eye(4) if offset_matrix is None else np.asarray(offset_matrix, dtype=float)
        self.weights: List[VertexWeight] = []

        # Set when the bone's mesh is registered into a scene
        self.handle: Optional[int] = None

    def add_weight(self, vertex_id: int, weight: float) -> None:
        """
        Add a vertex influence

        Args:
            vertex_id: Index of the influenced vertex
            weight: Influence weight (0-1)
        """
        self.weights.append(VertexWeight(int(vertex_id), float(weight)))

    def __repr__(self) -> str:
        return f"Bone(name='{self.name}', weights={len(self.weights)})"

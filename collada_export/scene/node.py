from typing import List, Optional, Dict, Any, Iterator
import numpy as np

from ..utils.common import compose_matrix


class Node:
    """Element of the scene transform hierarchy"""

    # Metadata key requesting a specific document id for the node
    COLLADA_ID = "collada_id"

    def __init__(self, name: str = "", transform: Optional[np.ndarray] = None):
        """
        Initialize node

        Args:
            name: Node name
            transform: 4x4 local transform (row-major, column vectors), identity if None
        """
        self.name = name
        self.transform: np.ndarray = np.eye(4) if transform is None else np.asarray(transform, dtype=float)
        self.mesh_indices: List[int] = []
        self.metadata: Dict[str, Any] = {}

        # Hierarchy
        self.parent: Optional['Node'] = None
        self.children: List['Node'] = []

        # Set when the node is registered into a scene
        self.handle: Optional[int] = None

    @classmethod
    def from_trs(cls, name: str, position=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0, 1.0),
                 scale=(1.0, 1.0, 1.0)) -> 'Node':
        """
        Create a node from translation, rotation and scale

        Args:
            name: Node name
            position: Translation vector
            rotation: Quaternion (x, y, z, w)
            scale: Scale vector

        Returns:
            New Node instance
        """
        return cls(name, compose_matrix(position, rotation, scale))

    def add_child(self, child: 'Node') -> 'Node':
        """
        Attach a child node

        Args:
            child: Node to attach

        Returns:
            The attached child
        """
        child.parent = self
        self.children.append(child)
        return child

    def has_meshes(self) -> bool:
        """Check if the node instances any mesh"""
        return len(self.mesh_indices) > 0

    def iter_depth_first(self) -> Iterator['Node']:
        """Iterate this node and all descendants in depth-first order"""
        yield self
        for child in self.children:
            yield from child.iter_depth_first()

    def __repr__(self) -> str:
        return f"Node(name='{self.name}', children={len(self.children)}, meshes={self.mesh_indices})"

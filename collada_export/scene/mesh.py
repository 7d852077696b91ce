from typing import List, Optional, Dict, Sequence, Iterator, Union
import numpy as np

from .bone import Bone


class Mesh:
    """Mesh class for storing geometry data, material reference and skin bones"""

    POSITION = 'position'
    NORMAL = 'normal'
    UV0 = 'uv0'
    UV1 = 'uv1'
    UV2 = 'uv2'
    UV3 = 'uv3'
    COLOR0 = 'color0'
    COLOR1 = 'color1'
    COLOR2 = 'color2'
    COLOR3 = 'color3'

    MAX_UV_LAYERS = 4
    MAX_COLOR_LAYERS = 4

    def __init__(self, name: str = "", material_index: int = 0):
        """
        Initialize mesh

        Args:
            name: Mesh name
            material_index: Index of the mesh material in the scene material pool
        """
        self.name = name
        self.material_index = material_index
        self._vertices: Dict[str, np.ndarray] = {}  # Dictionary for vertex attributes, eg: {'position': np.ndarray, 'normal': np.ndarray, ...}
        self.faces: Union[np.ndarray, List[Sequence[int]], None] = None  # MxK index array, or a list of index sequences of mixed size
        self.bones: List[Bone] = []

    # Vertex attribute management
    def set_vertex_attribute(self, name: str, data) -> None:
        """Set vertex attribute data

        Args:
            name: Attribute name (e.g., 'position', 'normal', 'uv0', 'color0')
            data: Array-like of shape (vertex_count, components)
        """
        self._vertices[name] = np.asarray(data, dtype=float)

    def get_vertex_attribute(self, name: str) -> Optional[np.ndarray]:
        """Get vertex attribute data

        Args:
            name: Attribute name

        Returns:
            Numpy array or None if attribute doesn't exist
        """
        return self._vertices.get(name)

    def has_vertex_attribute(self, name: str) -> bool:
        """Check if vertex attribute exists

        Args:
            name: Attribute name

        Returns:
            True if attribute exists
        """
        return name in self._vertices

    def get_uv_layers(self) -> List[int]:
        """Get indices of the UV layers present on the mesh"""
        return [i for i in range(Mesh.MAX_UV_LAYERS) if f'uv{i}' in self._vertices]

    def get_color_layers(self) -> List[int]:
        """Get indices of the vertex color layers present on the mesh"""
        return [i for i in range(Mesh.MAX_COLOR_LAYERS) if f'color{i}' in self._vertices]

    # Skinning
    def add_bone(self, bone: Bone) -> Bone:
        """
        Add a skin bone to the mesh

        The bone gets its handle when the mesh joins a scene.

        Args:
            bone: Bone instance to add

        Returns:
            The added bone
        """
        self.bones.append(bone)
        return bone

    def has_bones(self) -> bool:
        """Check if mesh is skinned"""
        return len(self.bones) > 0

    def iter_faces(self) -> Iterator[Sequence[int]]:
        """Iterate faces as sequences of vertex indices"""
        if self.faces is None:
            return
        for face in self.faces:
            yield [int(i) for i in face]

    def get_vertex_count(self) -> int:
        """Get number of vertices

        Returns:
            Vertex count or 0 if vertices not set
        """
        position = self._vertices.get(Mesh.POSITION)
        return len(position) if position is not None else 0

    def get_face_count(self) -> int:
        """
        Get number of faces

        Returns:
            Face count or 0 if faces not set
        """
        return len(self.faces) if self.faces is not None else 0

    def is_empty(self) -> bool:
        """Check if the mesh has no vertices or no faces"""
        return self.get_vertex_count() == 0 or self.get_face_count() == 0

    def __repr__(self) -> str:
        return f"Mesh(name='{self.name}', vertices={self.get_vertex_count()}, faces={self.get_face_count()}, bones={len(self.bones)})"

from typing import List, Optional, Dict, Any, Iterator

from .anim import Anim
from .bone import Bone
from .camera import Camera
from .light import Light
from .material import Material
from .mesh import Mesh
from .node import Node
from .texture import Texture


class Scene:
    """Scene class holding the node hierarchy and the object pools it references"""

    def __init__(self, name: str = ""):
        """
        Initialize scene

        Args:
            name: Scene name
        """
        self.name = name
        self.metadata: Dict[str, Any] = {}
        self.root: Optional[Node] = None
        self.meshes: List[Mesh] = []
        self.materials: List[Material] = []
        self.lights: List[Light] = []
        self.cameras: List[Camera] = []
        self.textures: List[Texture] = []
        self.animations: List[Anim] = []
        self._nodes: List[Node] = []  # Node arena, indexed by node handle
        self._bones: List[Bone] = []  # Bone arena, indexed by bone handle

    # Node management
    def add_node(self, node: Node, parent: Optional[Node] = None) -> Node:
        """
        Register a node (and its existing descendants) into the scene

        The first node added without a parent becomes the root. Handles are
        minted in registration order.

        Args:
            node: Node to register
            parent: Parent node, None to add the root

        Returns:
            The registered node
        """
        if parent is not None and node.parent is not parent:
            parent.add_child(node)
        elif parent is None and self.root is None:
            self.root = node

        for item in node.iter_depth_first():
            if not self._owns(self._nodes, item):
                item.handle = len(self._nodes)
                self._nodes.append(item)
        return node

    def register_handles(self) -> None:
        """
        Mint handles for nodes and bones attached after registration

        Covers children added with Node.add_child once their parent was
        registered and bones added to a mesh already in the pool.
        """
        if self.root is not None:
            self.add_node(self.root)
        for mesh in self.meshes:
            self._register_bones(mesh)

    @staticmethod
    def _owns(arena: list, item) -> bool:
        return item.handle is not None and item.handle < len(arena) and arena[item.handle] is item

    def _register_bones(self, mesh: Mesh) -> None:
        for bone in mesh.bones:
            if not self._owns(self._bones, bone):
                bone.handle = len(self._bones)
                self._bones.append(bone)

    def get_node(self, handle: int) -> Node:
        """
        Get a registered node by handle

        Args:
            handle: Node handle

        Returns:
            Node instance
        """
        return self._nodes[handle]

    def get_node_count(self) -> int:
        """Get number of registered nodes"""
        return len(self._nodes)

    def iter_nodes(self) -> Iterator[Node]:
        """Iterate the hierarchy depth-first from the root"""
        if self.root is None:
            return iter(())
        return self.root.iter_depth_first()

    def find_node(self, name: str) -> Optional[Node]:
        """
        Find the first node with the given name, depth-first

        Args:
            name: Node name

        Returns:
            Node instance or None if not found
        """
        for node in self.iter_nodes():
            if node.name == name:
                return node
        return None

    # Pool management
    def add_mesh(self, mesh: Mesh) -> int:
        """Add a mesh, returning its pool index; its bones get handles"""
        self.meshes.append(mesh)
        self._register_bones(mesh)
        return len(self.meshes) - 1

    def add_material(self, material: Material) -> int:
        """Add a material, returning its pool index"""
        self.materials.append(material)
        return len(self.materials) - 1

    def add_light(self, light: Light) -> int:
        """Add a light, returning its pool index"""
        self.lights.append(light)
        return len(self.lights) - 1

    def add_camera(self, camera: Camera) -> int:
        """Add a camera, returning its pool index"""
        self.cameras.append(camera)
        return len(self.cameras) - 1

    def add_texture(self, texture: Texture) -> int:
        """Add an embedded texture, returning its pool index"""
        self.textures.append(texture)
        return len(self.textures) - 1

    def add_animation(self, anim: Anim) -> int:
        """Add an animation, returning its pool index"""
        self.animations.append(anim)
        return len(self.animations) - 1

    # Skeleton queries
    def find_bone(self, name: str) -> Optional[Bone]:
        """
        Find the first skin bone with the given name across all meshes

        Args:
            name: Bone name

        Returns:
            Bone instance or None if no mesh has such a bone
        """
        if not name:
            return None
        for mesh in self.meshes:
            for bone in mesh.bones:
                if bone.name == name:
                    return bone
        return None

    def is_bone_node(self, node: Optional[Node]) -> bool:
        """Check if a node is the joint of some skin bone"""
        return node is not None and self.find_bone(node.name) is not None

    def is_skinned(self) -> bool:
        """
        Check if scene has at least one skinned mesh

        Returns:
            True if any mesh has bones
        """
        return any(mesh.has_bones() for mesh in self.meshes)

    def __repr__(self) -> str:
        return (f"Scene(name='{self.name}', nodes={len(self._nodes)}, meshes={len(self.meshes)}, "
                f"materials={len(self.materials)}, animations={len(self.animations)})")

"""
State shared by the writers of one export pass.
"""

import logging
from typing import Dict, List, Optional

from ..scene import Mesh, Node, Scene
from .document import DocumentWriter
from .ids import IdentifierRegistry
from .surface import MaterialSummary

logger = logging.getLogger(__name__)


def find_skeleton_root(scene: Scene, mesh: Mesh) -> Optional[Node]:
    """
    Find the node a skinned mesh's skeleton hangs from.

    Each bone's joint node is walked up while its parent is also a joint. A
    single top joint is the root; several top joints (siblings such as L and
    R under a non-joint "Armature") are grouped under the first such joint's
    parent, which then is the root even though it is not a joint itself.
    The scene traversal recognises exactly this node as the skeleton root.

    Args:
        scene: scene holding the hierarchy
        mesh: skinned mesh

    Returns:
        Root node, or None if no bone has a joint node
    """
    tops: List[Node] = []
    for bone in mesh.bones:
        node = scene.find_node(bone.name) if bone.name else None
        if node is None:
            continue
        while node.parent is not None and scene.is_bone_node(node.parent):
            node = node.parent
        if node not in tops:
            tops.append(node)

    if not tops:
        return None
    if len(tops) == 1:
        return tops[0]
    for node in tops:
        if node.parent is not None:
            return node.parent
    return tops[0]


class ExportContext:
    """Per-pass state: writer, identifier registry and cross-reference tables."""

    def __init__(self, scene: Scene, config: dict):
        self.scene = scene
        self.config = config
        self.writer = DocumentWriter(config["indent_unit"], config["line_end"])
        self.ids = IdentifierRegistry(scene)

        # Filled by the textures step
        self.texture_names: Dict[int, str] = {}
        self.image_ids: Dict[str, str] = {}
        self.materials: List[MaterialSummary] = []
        # Controller ids by mesh index, filled by the controllers step
        self.skin_ids: Dict[int, str] = {}

        # Filled by the header analysis
        self.add_root_node = False
        self.up_axis = "Y_UP"
        self.unit_scale = 1.0

        self.scene_id = ""
        self.scene_name = ""

        # Skeleton roots, resolved before any library is written
        self.skeleton_root_id: str = config["default_skeleton_root"]
        self.mesh_skeleton_roots: Dict[int, str] = {}
        # Set by the scene traversal when it meets the first skeleton root
        self.found_skeleton_root_id: Optional[str] = None

    def register_node_ids(self) -> None:
        """Give every node its id first so nodes keep their own names."""
        self.scene.register_handles()
        for node in self.scene.iter_nodes():
            self.ids.node_id(node)

    def resolve_skeleton_roots(self) -> None:
        """
        Pre-scan skinned meshes for their skeleton roots.

        Each skinned mesh resolves through find_skeleton_root. The document
        wide skeleton root is the root of the first skinned mesh that
        resolves; without one, the first joint whose parent is not a joint.
        """
        scene = self.scene
        for index, mesh in enumerate(scene.meshes):
            if not mesh.has_bones():
                continue
            root = find_skeleton_root(scene, mesh)
            if root is None:
                logger.warning("Mesh '%s' has bones but none matches a scene node", mesh.name)
                continue
            self.mesh_skeleton_roots[index] = self.ids.node_id(root)

        if self.mesh_skeleton_roots:
            self.skeleton_root_id = next(iter(self.mesh_skeleton_roots.values()))
            return
        for node in scene.iter_nodes():
            if scene.is_bone_node(node) and not scene.is_bone_node(node.parent):
                self.skeleton_root_id = self.ids.node_id(node)
                return

    def is_skeleton_root(self, node_id: str) -> bool:
        """Check if a node id was resolved as the skeleton root of some skin."""
        if self.mesh_skeleton_roots:
            return node_id in self.mesh_skeleton_roots.values()
        return node_id == self.skeleton_root_id

    def skeleton_for_mesh(self, mesh_index: int) -> str:
        return self.mesh_skeleton_roots.get(mesh_index, self.skeleton_root_id)

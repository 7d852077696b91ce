"""
Unique identifier and name generation for document entries.

All ids handed out by one IdentifierRegistry are pairwise distinct; names
live in a separate pool so a name collision never forces an id change.
"""

import logging
import string
from enum import Enum
from typing import Dict, Set, Tuple, Union, Hashable

from ..scene import Bone, Node, Scene

logger = logging.getLogger(__name__)

ID_CHARS = frozenset(string.ascii_letters + string.digits + "_-.")


class ObjectKind(Enum):
    """Pools of the scene addressed by index"""
    MESH = "mesh"
    MATERIAL = "material"
    ANIMATION = "animation"
    LIGHT = "light"
    CAMERA = "camera"


# Appended to ids of kinds sharing names with scene nodes
_ID_POSTFIX = {
    ObjectKind.LIGHT: "-light",
    ObjectKind.CAMERA: "-camera",
}

_POOLS = {
    ObjectKind.MESH: "meshes",
    ObjectKind.MATERIAL: "materials",
    ObjectKind.ANIMATION: "animations",
    ObjectKind.LIGHT: "lights",
    ObjectKind.CAMERA: "cameras",
}


def encode_xml_id(name: str) -> str:
    """Encode a name as an xsd:ID.

    Characters outside [A-Za-z0-9_.-] become '_' plus their hex code point.
    The result starts with a letter or '_'.
    """
    if not name:
        return name
    encoded = "".join(ch if ch in ID_CHARS else f"_{ord(ch):x}" for ch in name)
    if not (encoded[0].isascii() and encoded[0].isalpha()) and encoded[0] != "_":
        encoded = "_" + encoded
    return encoded


def make_unique_id(used: Set[str], prefix: str, postfix: str = "") -> str:
    """Return `prefix + postfix`, or `prefix_N + postfix` for the lowest free N."""
    result = prefix + postfix
    number = 1
    while result in used:
        result = f"{prefix}_{number}{postfix}"
        number += 1
    return result


class IdentifierRegistry:
    """Per-pass cache of document ids and names."""

    def __init__(self, scene: Scene):
        self._scene = scene
        self._used_ids: Set[str] = set()
        self._used_names: Set[str] = set()
        self._node_ids: Dict[int, str] = {}
        self._bone_ids: Dict[Hashable, str] = {}
        self._object_ids: Dict[Tuple[ObjectKind, int], str] = {}
        self._object_names: Dict[Tuple[ObjectKind, int], str] = {}

    def reserve_id(self, candidate: str, postfix: str = "") -> str:
        """Mint a unique id derived from `candidate`."""
        id_str = make_unique_id(self._used_ids, encode_xml_id(candidate) or "id", postfix)
        self._used_ids.add(id_str)
        return id_str

    def reserve_source_id(self, candidate: str) -> str:
        """Mint a <source> id whose "-array" companion id is free as well."""
        base = encode_xml_id(candidate) or "id"
        source_id = base
        number = 1
        while source_id in self._used_ids or f"{source_id}-array" in self._used_ids:
            source_id = f"{base}_{number}"
            number += 1
        self._used_ids.update((source_id, f"{source_id}-array"))
        return source_id

    def node_id(self, node: Node) -> str:
        """Id of a scene node, keyed by its handle."""
        if node.handle is None:
            raise ValueError(f"{node!r} is not registered in the scene")
        cached = self._node_ids.get(node.handle)
        if cached is not None:
            return cached

        # Prefer an explicitly requested id
        candidate = node.metadata.get(Node.COLLADA_ID) or node.name
        id_str = self.reserve_id(candidate or "node")
        self._node_ids[node.handle] = id_str
        return id_str

    def node_name(self, node: Node) -> str:
        return node.name

    def bone_id(self, bone: Bone) -> str:
        """Id of a skin bone.

        Bones naming the same joint share one id; unnamed bones are keyed by
        their handle.
        """
        if not bone.name and bone.handle is None:
            raise ValueError(f"{bone!r} is unnamed and not registered in the scene")
        key: Union[str, Tuple[str, int]] = bone.name if bone.name else ("handle", bone.handle)
        cached = self._bone_ids.get(key)
        if cached is not None:
            return cached

        candidate = f"bone_{bone.name}" if bone.name else "bone"
        id_str = self.reserve_id(candidate)
        self._bone_ids[key] = id_str
        return id_str

    def object_id(self, kind: ObjectKind, index: int) -> str:
        key = (kind, index)
        if key not in self._object_ids:
            self._add_object(kind, index)
        return self._object_ids[key]

    def object_name(self, kind: ObjectKind, index: int) -> str:
        key = (kind, index)
        if key not in self._object_names:
            self._add_object(kind, index)
        return self._object_names[key]

    def _add_object(self, kind: ObjectKind, index: int) -> None:
        pool = getattr(self._scene, _POOLS[kind])
        if not 0 <= index < len(pool):
            raise IndexError(f"{kind.value} index {index} out of range (pool size {len(pool)})")
        name = pool[index].name or ""

        if name:
            id_candidate = name
            name_candidate = name
        else:
            id_candidate = f"{kind.value}_{index}"
            name_candidate = f"{kind.value}-{index}"

        key = (kind, index)
        self._object_ids[key] = self.reserve_id(id_candidate, _ID_POSTFIX.get(kind, ""))

        unique_name = make_unique_id(self._used_names, name_candidate)
        self._used_names.add(unique_name)
        self._object_names[key] = unique_name
        logger.debug("Registered %s %d as id=%s name=%s", kind.value, index,
                     self._object_ids[key], unique_name)

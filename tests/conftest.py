import xml.etree.ElementTree as ET

import numpy as np
import pytest

from collada_export.scene import Bone, Material, Mesh, Node, Scene, TextureType
from collada_export.storage import MemoryStorage


def make_triangle_mesh(name="Triangle", material_index=0):
    mesh = Mesh(name, material_index)
    mesh.set_vertex_attribute(Mesh.POSITION, [[0, 0, 0], [1, 0, 0], [0, 1, 0]])
    mesh.set_vertex_attribute(Mesh.NORMAL, [[0, 0, 1], [0, 0, 1], [0, 0, 1]])
    mesh.set_vertex_attribute(Mesh.UV0, [[0, 0], [1, 0], [0, 1]])
    mesh.faces = np.array([[0, 1, 2]])
    return mesh


@pytest.fixture
def parse():
    """Parse a document string into its root element."""
    def _parse(text):
        return ET.fromstring(text.encode("utf-8"))
    return _parse


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def simple_scene():
    """Root with one textured triangle child and an empty group."""
    scene = Scene("simple")
    root = scene.add_node(Node("Root"))
    body = Node("Body")
    body.mesh_indices.append(scene.add_mesh(make_triangle_mesh("Body")))
    scene.add_node(body, root)
    scene.add_node(Node("Group"), root)

    material = Material("Wood")
    material.set_numeric(Material.COLOR_DIFFUSE, [0.8, 0.6, 0.4])
    material.set_numeric(Material.SHININESS, 20.0)
    material.add_texture(TextureType.DIFFUSE, "textures/wood.png")
    scene.add_material(material)
    return scene


@pytest.fixture
def skinned_scene():
    """Root > Armature > Hips > Spine skeleton with a skinned Body mesh."""
    scene = Scene("skinned")
    root = scene.add_node(Node("Root"))
    armature = scene.add_node(Node("Armature"), root)
    hips = scene.add_node(Node.from_trs("Hips", position=(0, 1, 0)), armature)
    scene.add_node(Node.from_trs("Spine", position=(0, 0.5, 0)), hips)

    mesh = make_triangle_mesh("Body")
    hips_bone = mesh.add_bone(Bone("Hips", np.eye(4)))
    hips_bone.add_weight(0, 1.0)
    hips_bone.add_weight(1, 0.5)
    spine_bone = mesh.add_bone(Bone("Spine", np.eye(4)))
    spine_bone.add_weight(1, 0.5)
    spine_bone.add_weight(2, 1.0)

    body = Node("Body")
    body.mesh_indices.append(scene.add_mesh(mesh))
    scene.add_node(body, root)
    scene.add_material(Material("Skin"))
    return scene

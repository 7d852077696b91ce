"""Tests for the scene model and its helpers."""
import io

import numpy as np
import pytest
from PIL import Image
from scipy.spatial.transform import Rotation as R

from collada_export.scene import (
    Anim,
    Bone,
    InterpolationType,
    Mesh,
    Node,
    Scene,
    Texture,
    Track,
)
from collada_export.utils.common import compose_matrix, decompose_matrix
from collada_export.utils.image_utils import ImageUtil


def test_add_node_mints_handles_in_order():
    scene = Scene()
    root = Node("root")
    child = root.add_child(Node("child"))
    scene.add_node(root)
    late = scene.add_node(Node("late"), child)

    assert scene.root is root
    assert [root.handle, child.handle, late.handle] == [0, 1, 2]
    assert scene.get_node(2) is late
    assert late.parent is child
    assert scene.get_node_count() == 3


def test_add_node_twice_keeps_handle():
    scene = Scene()
    root = scene.add_node(Node("root"))
    scene.add_node(root)
    assert root.handle == 0
    assert scene.get_node_count() == 1


def test_find_bone_and_bone_nodes():
    scene = Scene()
    root = scene.add_node(Node("root"))
    hips = scene.add_node(Node("Hips"), root)
    mesh = Mesh("m")
    mesh.add_bone(Bone("Hips"))
    scene.add_mesh(mesh)

    assert scene.find_bone("Hips") is mesh.bones[0]
    assert scene.is_bone_node(hips)
    assert not scene.is_bone_node(root)
    assert not scene.is_bone_node(None)
    assert scene.is_skinned()


def test_mesh_layers_and_emptiness():
    mesh = Mesh("m")
    assert mesh.is_empty()
    mesh.set_vertex_attribute(Mesh.POSITION, np.zeros((4, 3)))
    mesh.set_vertex_attribute(Mesh.UV1, np.zeros((4, 2)))
    mesh.set_vertex_attribute(Mesh.COLOR0, np.ones((4, 4)))
    mesh.faces = [[0, 1], [1, 2, 3]]

    assert not mesh.is_empty()
    assert mesh.get_uv_layers() == [1]
    assert mesh.get_color_layers() == [0]
    assert list(mesh.iter_faces()) == [[0, 1], [1, 2, 3]]


def test_track_interpolation_and_clamping():
    track = Track("n", Track.POSITION)
    track.add_keyframe(1.0, [2.0, 0.0, 0.0])
    track.add_keyframe(0.0, [0.0, 0.0, 0.0])

    assert track.get_key_times() == [0.0, 1.0]
    np.testing.assert_allclose(track.get_value_at_time(0.25), [0.5, 0.0, 0.0])
    np.testing.assert_allclose(track.get_value_at_time(5.0), [2.0, 0.0, 0.0])

    track.interpolation_type = InterpolationType.STEP
    np.testing.assert_allclose(track.get_value_at_time(0.75), [0.0, 0.0, 0.0])


def test_anim_duration_from_tracks():
    anim = Anim("walk")
    track = Track("Hips", Track.ROTATION)
    track.add_keyframe(0.0, [0, 0, 0, 1])
    track.add_keyframe(2.5, [0, 0, 0, 1])
    anim.add_track(track)
    anim.update_duration_from_tracks()

    assert anim.duration == 2.5
    assert anim.get_track_by_property("Hips", Track.ROTATION) is track
    assert anim.get_track_by_property("Hips", Track.SCALE) is None
    assert anim.get_target_names() == ["Hips"]


def test_compose_decompose_round_trip():
    rotation = R.from_euler("xyz", [10, 20, 30], degrees=True)
    matrix = compose_matrix([1, 2, 3], rotation.as_quat(), [2, 2, 2])

    scale, rot, position = decompose_matrix(matrix)
    np.testing.assert_allclose(scale, [2, 2, 2])
    np.testing.assert_allclose(position, [1, 2, 3])
    np.testing.assert_allclose(rot.as_matrix(), rotation.as_matrix(), atol=1e-9)


def test_node_from_trs():
    node = Node.from_trs("n", position=(1, 0, 0), scale=(3, 3, 3))
    np.testing.assert_allclose(node.transform[:3, 3], [1, 0, 0])
    np.testing.assert_allclose(np.diag(node.transform), [3, 3, 3, 1])


def test_texture_kinds():
    compressed = Texture(b"\xff\xd8jpeg", "jpg")
    assert compressed.is_compressed()
    assert compressed.width == 6
    assert ImageUtil.file_extension(compressed) == "jpg"
    assert ImageUtil.encode_texture(compressed) == b"\xff\xd8jpeg"

    raw = Texture(np.full((2, 3, 4), 255, dtype=np.uint8), "bmp")
    assert not raw.is_compressed()
    assert (raw.height, raw.width) == (2, 3)
    assert ImageUtil.file_extension(raw) == "png"

    image = Image.open(io.BytesIO(ImageUtil.encode_texture(raw)))
    assert image.format == "PNG"
    assert image.size == (3, 2)


def test_encode_texture_rejects_bad_shape():
    with pytest.raises(ValueError):
        ImageUtil.encode_texture(Texture(np.zeros((2, 2), dtype=np.uint8)))


def test_bone_handles_minted_by_scene():
    scene = Scene()
    first, second = Mesh("a"), Mesh("b")
    hips = first.add_bone(Bone("Hips"))
    spine = first.add_bone(Bone("Spine"))
    assert hips.handle is None

    scene.add_mesh(first)
    scene.add_mesh(second)
    late = second.add_bone(Bone(""))
    assert late.handle is None
    scene.register_handles()

    assert [hips.handle, spine.handle, late.handle] == [0, 1, 2]
    scene.register_handles()
    assert late.handle == 2


def test_register_handles_picks_up_attached_children():
    scene = Scene()
    root = scene.add_node(Node("root"))
    late = root.add_child(Node("late"))
    assert late.handle is None

    scene.register_handles()
    assert late.handle == 1
    assert scene.get_node(1) is late

"""
Writers for the library sections of the document and the visual scene.

Each writer takes the ExportContext of the running pass and appends its
section through the context's DocumentWriter.
"""

import logging
import math
from contextlib import contextmanager
from typing import Dict, Iterator, List

import numpy as np
from scipy.spatial.transform import Rotation as R, Slerp

from ..scene import Anim, InterpolationType, Light, LightType, Mesh, Node, Track
from ..utils.common import compose_matrix, decompose_matrix
from .arrays import FloatDataType, format_float, format_floats, write_float_array
from .context import ExportContext
from .ids import ObjectKind
from .surface import (
    MaterialSummary,
    summarize_material,
    write_float_entry,
    write_image_entry,
    write_texture_color_entry,
    write_texture_param_entry,
)

logger = logging.getLogger(__name__)


@contextmanager
def library(ctx: ExportContext, tag: str, entry_count: int) -> Iterator[None]:
    """Open a library element, unless it would be empty and empty libraries are off."""
    if entry_count == 0 and not ctx.config["write_empty_libraries"]:
        yield
        return
    with ctx.writer.element(tag):
        yield


# ---------------------------------------------------------------------------
# Images, effects and materials
# ---------------------------------------------------------------------------

def collect_materials(ctx: ExportContext) -> None:
    """Summarize every material once, after embedded textures are named."""
    ctx.materials = [
        summarize_material(material,
                           ctx.ids.object_id(ObjectKind.MATERIAL, index),
                           ctx.ids.object_name(ObjectKind.MATERIAL, index),
                           ctx.texture_names)
        for index, material in enumerate(ctx.scene.materials)
    ]


def write_images_library(ctx: ExportContext) -> None:
    """One <image> per distinct texture path used by any material."""
    entries = []
    for summary in ctx.materials:
        for type_name, surface in summary.surfaces().items():
            if not surface.has_texture or surface.texture in ctx.image_ids:
                continue
            image_id = ctx.ids.reserve_id(f"{summary.id}-{type_name}-image")
            ctx.image_ids[surface.texture] = image_id
            entries.append((surface, image_id))

    with library(ctx, "library_images", len(entries)):
        for surface, image_id in entries:
            write_image_entry(ctx.writer, surface, image_id)


def _write_effect(ctx: ExportContext, mat: MaterialSummary, effect_id: str) -> None:
    w = ctx.writer
    surfaces = mat.surfaces()

    def channel(type_name, key=None):
        key = key or type_name
        write_texture_color_entry(w, surfaces[key], type_name, f"{mat.id}-{key}-sampler")

    with w.element("effect", id=effect_id, name=mat.name):
        with w.element("profile_COMMON"):
            for type_name, surface in surfaces.items():
                write_texture_param_entry(w, surface, type_name, mat.id,
                                          ctx.image_ids.get(surface.texture, ""))
            with w.element("technique", sid="standard"):
                with w.element(mat.shading_model):
                    channel("emission")
                    channel("ambient")
                    channel("diffuse")
                    channel("specular")
                    write_float_entry(w, mat.shininess, "shininess")
                    channel("reflective")
                    channel("transparent")
                    write_float_entry(w, mat.transparency, "transparency")
                    write_float_entry(w, mat.index_refraction, "index_of_refraction")
                    if mat.normal.has_texture:
                        channel("bump", "normal")


def write_materials(ctx: ExportContext) -> None:
    """Effects carry the shading data; materials just reference them."""
    w = ctx.writer
    effect_ids = [ctx.ids.reserve_id(f"{mat.id}-fx") for mat in ctx.materials]

    with library(ctx, "library_effects", len(ctx.materials)):
        for mat, effect_id in zip(ctx.materials, effect_ids):
            _write_effect(ctx, mat, effect_id)

    with library(ctx, "library_materials", len(ctx.materials)):
        for mat, effect_id in zip(ctx.materials, effect_ids):
            with w.element("material", id=mat.id, name=mat.name):
                w.empty_element("instance_effect", url=f"#{effect_id}")


# ---------------------------------------------------------------------------
# Cameras and lights
# ---------------------------------------------------------------------------

def write_cameras_library(ctx: ExportContext) -> None:
    with library(ctx, "library_cameras", len(ctx.scene.cameras)):
        for index in range(len(ctx.scene.cameras)):
            write_camera(ctx, index)


def write_camera(ctx: ExportContext, index: int) -> None:
    camera = ctx.scene.cameras[index]
    w = ctx.writer
    with w.element("camera", id=ctx.ids.object_id(ObjectKind.CAMERA, index),
                   name=ctx.ids.object_name(ObjectKind.CAMERA, index)):
        with w.element("optics"):
            with w.element("technique_common"):
                # Only perspective cameras are modelled
                with w.element("perspective"):
                    w.text_element("xfov", format_float(math.degrees(camera.horizontal_fov)), sid="xfov")
                    w.text_element("aspect_ratio", format_float(camera.aspect))
                    w.text_element("znear", format_float(camera.clip_near), sid="znear")
                    w.text_element("zfar", format_float(camera.clip_far), sid="zfar")


def write_lights_library(ctx: ExportContext) -> None:
    with library(ctx, "library_lights", len(ctx.scene.lights)):
        for index in range(len(ctx.scene.lights)):
            write_light(ctx, index)


def write_light(ctx: ExportContext, index: int) -> None:
    light = ctx.scene.lights[index]
    w = ctx.writer
    with w.element("light", id=ctx.ids.object_id(ObjectKind.LIGHT, index),
                   name=ctx.ids.object_name(ObjectKind.LIGHT, index)):
        with w.element("technique_common"):
            writer = _LIGHT_WRITERS.get(light.light_type)
            if writer is not None:
                writer(ctx, light)
            else:
                logger.debug("Light '%s' of type %s has no COLLADA equivalent",
                             light.name, light.light_type.value)


def _write_attenuation(ctx: ExportContext, light: Light) -> None:
    w = ctx.writer
    w.text_element("constant_attenuation", format_float(light.attenuation_constant))
    w.text_element("linear_attenuation", format_float(light.attenuation_linear))
    w.text_element("quadratic_attenuation", format_float(light.attenuation_quadratic))


def write_point_light(ctx: ExportContext, light: Light) -> None:
    w = ctx.writer
    with w.element("point"):
        w.text_element("color", format_floats(light.color_diffuse), sid="color")
        _write_attenuation(ctx, light)


def write_directional_light(ctx: ExportContext, light: Light) -> None:
    w = ctx.writer
    with w.element("directional"):
        w.text_element("color", format_floats(light.color_diffuse), sid="color")


def spot_falloff_exponent(light: Light) -> float:
    """Exponent at which intensity drops to 10% between inner and outer cone."""
    cos_delta = math.cos(light.angle_outer_cone - light.angle_inner_cone)
    if cos_delta <= 0.0 or cos_delta >= 1.0:
        return 0.0
    return 1.0 / (math.log(cos_delta) / math.log(0.1))


def write_spot_light(ctx: ExportContext, light: Light) -> None:
    w = ctx.writer
    with w.element("spot"):
        w.text_element("color", format_floats(light.color_diffuse), sid="color")
        _write_attenuation(ctx, light)
        w.text_element("falloff_angle", format_float(math.degrees(light.angle_inner_cone)),
                       sid="fall_off_angle")
        w.text_element("falloff_exponent", format_float(spot_falloff_exponent(light)),
                       sid="fall_off_exponent")


def write_ambient_light(ctx: ExportContext, light: Light) -> None:
    w = ctx.writer
    with w.element("ambient"):
        w.text_element("color", format_floats(light.color_ambient), sid="color")


_LIGHT_WRITERS = {
    LightType.POINT: write_point_light,
    LightType.DIRECTIONAL: write_directional_light,
    LightType.SPOT: write_spot_light,
    LightType.AMBIENT: write_ambient_light,
}


# ---------------------------------------------------------------------------
# Skin controllers
# ---------------------------------------------------------------------------

def _is_skinned(mesh: Mesh) -> bool:
    return mesh.has_bones() and not mesh.is_empty()


def write_controller_library(ctx: ExportContext) -> None:
    count = sum(1 for mesh in ctx.scene.meshes if _is_skinned(mesh))
    with library(ctx, "library_controllers", count):
        for index in range(len(ctx.scene.meshes)):
            write_controller(ctx, index)


def write_controller(ctx: ExportContext, index: int) -> None:
    """Skin controller binding a mesh to the joints of its bones."""
    mesh = ctx.scene.meshes[index]
    if not _is_skinned(mesh):
        return

    w = ctx.writer
    ids = ctx.ids
    mesh_id = ids.object_id(ObjectKind.MESH, index)
    mesh_name = ids.object_name(ObjectKind.MESH, index)
    skin_id = ids.reserve_id(f"{mesh_id}-skin")
    joints_id = ids.reserve_source_id(f"{mesh_id}-skin-joints")
    bind_poses_id = ids.reserve_source_id(f"{mesh_id}-skin-bind_poses")
    weights_id = ids.reserve_source_id(f"{mesh_id}-skin-weights")
    ctx.skin_ids[index] = skin_id

    bone_ids = [ids.bone_id(bone) for bone in mesh.bones]
    vertex_count = mesh.get_vertex_count()

    with w.element("controller", id=skin_id, name=f"skinCluster{index}"):
        with w.element("skin", source=f"#{mesh_id}"):
            # Mesh space equals bind space
            with w.element("bind_shape_matrix"):
                for row in np.eye(4):
                    w.line(format_floats(row))

            with w.element("source", id=joints_id, name=f"{mesh_name}-skin-joints"):
                w.text_element("Name_array", " ".join(bone_ids), id=f"{joints_id}-array",
                               count=len(bone_ids))
                with w.element("technique_common"):
                    with w.element("accessor", source=f"#{joints_id}-array",
                                   count=len(bone_ids), stride=1):
                        w.empty_element("param", name="JOINT", type="name")

            bind_poses = np.array([bone.offset_matrix for bone in mesh.bones], dtype=float)
            write_float_array(w, bind_poses_id, FloatDataType.MAT4X4, bind_poses)

            weights = [vw.weight for bone in mesh.bones for vw in bone.weights]
            write_float_array(w, weights_id, FloatDataType.WEIGHT, np.array(weights, dtype=float))

            with w.element("joints"):
                w.empty_element("input", semantic="JOINT", source=f"#{joints_id}")
                w.empty_element("input", semantic="INV_BIND_MATRIX", source=f"#{bind_poses_id}")

            # (joint index, weight index) pairs per vertex
            influences: List[List[int]] = [[] for _ in range(vertex_count)]
            weight_index = 0
            for bone_index, bone in enumerate(mesh.bones):
                for vw in bone.weights:
                    if 0 <= vw.vertex_id < vertex_count:
                        influences[vw.vertex_id].extend((bone_index, weight_index))
                    weight_index += 1

            with w.element("vertex_weights", count=vertex_count):
                w.empty_element("input", semantic="JOINT", source=f"#{joints_id}", offset=0)
                w.empty_element("input", semantic="WEIGHT", source=f"#{weights_id}", offset=1)
                w.text_element("vcount", " ".join(str(len(pairs) // 2) for pairs in influences))
                w.text_element("v", " ".join(str(i) for pairs in influences for i in pairs))

            with w.element("extra"):
                with w.element("technique", profile="collada_export"):
                    w.text_element("skeleton", f"#{ctx.skeleton_for_mesh(index)}")


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def write_geometry_library(ctx: ExportContext) -> None:
    count = sum(1 for mesh in ctx.scene.meshes if not mesh.is_empty())
    with library(ctx, "library_geometries", count):
        for index in range(len(ctx.scene.meshes)):
            write_geometry(ctx, index)


def _shared_inputs(ctx: ExportContext, vertices_id: str, source_ids: Dict[str, str]) -> None:
    """Per-primitive inputs, all reading the same index at offset 0."""
    w = ctx.writer
    w.empty_element("input", offset=0, semantic="VERTEX", source=f"#{vertices_id}")
    for attribute, source_id in source_ids.items():
        if attribute == Mesh.NORMAL:
            w.empty_element("input", offset=0, semantic="NORMAL", source=f"#{source_id}")
        elif attribute.startswith("uv"):
            w.empty_element("input", offset=0, semantic="TEXCOORD", source=f"#{source_id}",
                            set=int(attribute[2:]))
        elif attribute.startswith("color"):
            w.empty_element("input", offset=0, semantic="COLOR", source=f"#{source_id}",
                            set=int(attribute[5:]))


def _as_columns(data: np.ndarray) -> np.ndarray:
    """View per-vertex data as one row per vertex."""
    data = np.asarray(data, dtype=np.float64)
    return data.reshape(len(data), -1)


def _fit_columns(data: np.ndarray, stride: int) -> np.ndarray:
    """Cut or zero-pad rows to `stride` components."""
    if data.shape[1] < stride:
        return np.pad(data, ((0, 0), (0, stride - data.shape[1])))
    return data[:, :stride]


def write_geometry(ctx: ExportContext, index: int) -> None:
    mesh = ctx.scene.meshes[index]
    if mesh.is_empty():
        logger.debug("Mesh '%s' is empty, no geometry written", mesh.name)
        return

    w = ctx.writer
    geometry_id = ctx.ids.object_id(ObjectKind.MESH, index)
    geometry_name = ctx.ids.object_name(ObjectKind.MESH, index)
    vertex_count = mesh.get_vertex_count()

    with w.element("geometry", id=geometry_id, name=geometry_name):
        with w.element("mesh"):
            # attribute -> (id suffix, kind, data)
            sources = {Mesh.POSITION: ("positions", FloatDataType.VECTOR,
                                       mesh.get_vertex_attribute(Mesh.POSITION)[:, :3])}
            if mesh.has_vertex_attribute(Mesh.NORMAL):
                sources[Mesh.NORMAL] = ("normals", FloatDataType.VECTOR,
                                        mesh.get_vertex_attribute(Mesh.NORMAL)[:, :3])
            for layer in mesh.get_uv_layers():
                uvs = _as_columns(mesh.get_vertex_attribute(f"uv{layer}"))
                kind = FloatDataType.TEXCOORD3 if uvs.shape[1] >= 3 else FloatDataType.TEXCOORD2
                sources[f"uv{layer}"] = (f"tex{layer}", kind, _fit_columns(uvs, kind.stride))
            for layer in mesh.get_color_layers():
                colors = _as_columns(mesh.get_vertex_attribute(f"color{layer}"))
                if colors.shape[1] == 3:
                    colors = np.column_stack([colors, np.ones(len(colors))])
                sources[f"color{layer}"] = (f"color{layer}", FloatDataType.COLOR,
                                            _fit_columns(colors, FloatDataType.COLOR.stride))

            source_ids = {}
            for attribute, (suffix, kind, data) in sources.items():
                source_ids[attribute] = ctx.ids.reserve_source_id(f"{geometry_id}-{suffix}")
                write_float_array(w, source_ids[attribute], kind, data[:vertex_count])

            positions_id = source_ids.pop(Mesh.POSITION)
            vertices_id = ctx.ids.reserve_id(f"{geometry_id}-vertices")
            with w.element("vertices", id=vertices_id):
                w.empty_element("input", semantic="POSITION", source=f"#{positions_id}")

            faces = list(mesh.iter_faces())
            lines = [face for face in faces if len(face) == 2]
            polygons = [face for face in faces if len(face) >= 3]
            symbol = ctx.config["material_symbol"]

            if lines:
                with w.element("lines", count=len(lines), material=symbol):
                    _shared_inputs(ctx, vertices_id, source_ids)
                    w.text_element("p", " ".join(str(i) for face in lines for i in face))

            if polygons:
                with w.element("polylist", count=len(polygons), material=symbol):
                    _shared_inputs(ctx, vertices_id, source_ids)
                    w.text_element("vcount", " ".join(str(len(face)) for face in polygons))
                    w.text_element("p", " ".join(str(i) for face in polygons for i in face))


# ---------------------------------------------------------------------------
# Animations
# ---------------------------------------------------------------------------

def write_animations_library(ctx: ExportContext) -> None:
    count = sum(1 for anim in ctx.scene.animations if anim.get_track_count() > 0)
    with library(ctx, "library_animations", count):
        for index in range(len(ctx.scene.animations)):
            write_animation(ctx, index)


def _sample_vectors(track: Track, times: List[float], default: np.ndarray) -> np.ndarray:
    if track is None or track.get_keyframe_count() == 0:
        return np.tile(default, (len(times), 1))
    return np.array([track.get_value_at_time(t) for t in times], dtype=float)


def _sample_rotations(track: Track, times: List[float], default: R) -> R:
    if track is None or track.get_keyframe_count() == 0:
        return R.from_quat(np.tile(default.as_quat(), (len(times), 1)))

    key_times = np.array(track.get_key_times())
    keys = R.from_quat([k.value for k in track.keyframes])
    clamped = np.clip(times, key_times[0], key_times[-1])
    if len(key_times) == 1:
        return R.from_quat(np.tile(keys.as_quat()[0], (len(times), 1)))
    if track.interpolation_type == InterpolationType.STEP:
        # Last key at or before each time
        indices = np.searchsorted(key_times, clamped, side="right") - 1
        return keys[np.clip(indices, 0, len(key_times) - 1)]
    return Slerp(key_times, keys)(clamped)


def sample_node_matrices(anim: Anim, node: Node, times: List[float]) -> np.ndarray:
    """
    Local transforms of an animated node at the given times.

    Properties without a track keep the node's rest value.

    Returns:
        (len(times), 4, 4) array of T * R * S matrices
    """
    rest_scale, rest_rotation, rest_position = decompose_matrix(node.transform)
    positions = _sample_vectors(anim.get_track_by_property(node.name, Track.POSITION), times, rest_position)
    scales = _sample_vectors(anim.get_track_by_property(node.name, Track.SCALE), times, rest_scale)
    rotations = _sample_rotations(anim.get_track_by_property(node.name, Track.ROTATION),
                                  times, rest_rotation).as_quat()
    if rotations.ndim == 1:
        rotations = rotations[np.newaxis, :]

    return np.array([
        compose_matrix(position, rotation, scale)
        for position, rotation, scale in zip(positions, rotations, scales)
    ])


def write_animation(ctx: ExportContext, index: int) -> None:
    anim = ctx.scene.animations[index]
    if anim.get_track_count() == 0:
        return

    w = ctx.writer
    ids = ctx.ids
    anim_id = ids.object_id(ObjectKind.ANIMATION, index)
    anim_name = ids.object_name(ObjectKind.ANIMATION, index)

    channels = []
    with w.element("animation", id=anim_id, name=anim_name):
        for target in anim.get_target_names():
            node = ctx.scene.find_node(target)
            if node is None:
                logger.warning("Animation '%s': no node named '%s', channel skipped", anim.name, target)
                continue
            tracks = anim.get_tracks_for_target(target)
            times = sorted({t for track in tracks for t in track.get_key_times()})
            if not times:
                continue

            node_id = ids.node_id(node)
            base = f"{anim_id}-{node_id}_matrix"
            input_id = ids.reserve_source_id(f"{base}-input")
            output_id = ids.reserve_source_id(f"{base}-output")
            interpolation_id = ids.reserve_source_id(f"{base}-interpolation")
            sampler_id = ids.reserve_id(f"{base}-sampler")

            write_float_array(w, input_id, FloatDataType.TIME, np.array(times, dtype=float))
            write_float_array(w, output_id, FloatDataType.MAT4X4, sample_node_matrices(anim, node, times))

            stepped = any(track.interpolation_type == InterpolationType.STEP for track in tracks)
            names = ["STEP" if stepped else "LINEAR"] * len(times)
            with w.element("source", id=interpolation_id):
                w.text_element("Name_array", " ".join(names), id=f"{interpolation_id}-array",
                               count=len(names))
                with w.element("technique_common"):
                    with w.element("accessor", source=f"#{interpolation_id}-array",
                                   count=len(names), stride=1):
                        w.empty_element("param", name="INTERPOLATION", type="name")

            channels.append((node_id, input_id, output_id, interpolation_id, sampler_id))

        for _, input_id, output_id, interpolation_id, sampler_id in channels:
            with w.element("sampler", id=sampler_id):
                w.empty_element("input", semantic="INPUT", source=f"#{input_id}")
                w.empty_element("input", semantic="OUTPUT", source=f"#{output_id}")
                w.empty_element("input", semantic="INTERPOLATION", source=f"#{interpolation_id}")

        for node_id, _, _, _, sampler_id in channels:
            w.empty_element("channel", source=f"#{sampler_id}", target=f"{node_id}/matrix")


# ---------------------------------------------------------------------------
# Visual scene
# ---------------------------------------------------------------------------

def write_scene_library(ctx: ExportContext) -> None:
    root = ctx.scene.root
    w = ctx.writer
    with w.element("library_visual_scenes"):
        with w.element("visual_scene", id=ctx.scene_id, name=ctx.scene_name):
            if root is None:
                return
            if ctx.add_root_node:
                write_node(ctx, root)
            else:
                for child in root.children:
                    write_node(ctx, child)


def _write_instance_material(ctx: ExportContext, mesh: Mesh) -> None:
    if not 0 <= mesh.material_index < len(ctx.scene.materials):
        logger.debug("Mesh '%s' references missing material %d", mesh.name, mesh.material_index)
        return
    w = ctx.writer
    with w.element("bind_material"):
        with w.element("technique_common"):
            with w.element("instance_material", symbol=ctx.config["material_symbol"],
                           target=f"#{ctx.ids.object_id(ObjectKind.MATERIAL, mesh.material_index)}"):
                for layer in mesh.get_uv_layers():
                    w.empty_element("bind_vertex_input", semantic=f"CHANNEL{layer}",
                                    input_semantic="TEXCOORD", input_set=layer)


def _write_mesh_instances(ctx: ExportContext, node: Node) -> None:
    w = ctx.writer
    scene = ctx.scene
    for mesh_index in node.mesh_indices:
        if not 0 <= mesh_index < len(scene.meshes):
            logger.warning("Node '%s' references missing mesh %d", node.name, mesh_index)
            continue
        mesh = scene.meshes[mesh_index]
        if mesh.is_empty():
            continue
        mesh_id = ctx.ids.object_id(ObjectKind.MESH, mesh_index)
        if mesh_index in ctx.skin_ids:
            with w.element("instance_controller", url=f"#{ctx.skin_ids[mesh_index]}"):
                w.text_element("skeleton", f"#{ctx.skeleton_for_mesh(mesh_index)}")
                _write_instance_material(ctx, mesh)
        else:
            with w.element("instance_geometry", url=f"#{mesh_id}"):
                _write_instance_material(ctx, mesh)


def write_node(ctx: ExportContext, node: Node) -> None:
    """Write a node, its instances and, recursively, its children."""
    scene = ctx.scene
    w = ctx.writer
    bone = scene.find_bone(node.name)
    is_joint = bone is not None
    node_id = ctx.ids.node_id(node)

    if ctx.found_skeleton_root_id is None and ctx.is_skeleton_root(node_id):
        ctx.found_skeleton_root_id = node_id

    with w.element("node", id=node_id, sid=ctx.ids.bone_id(bone) if is_joint else None,
                   name=ctx.ids.node_name(node), type="JOINT" if is_joint else "NODE"):
        w.text_element("matrix", format_floats(node.transform), sid="matrix")

        if not node.has_meshes() and node.name:
            # Cameras and lights are placed by the node sharing their name
            for index, camera in enumerate(scene.cameras):
                if camera.name == node.name:
                    w.empty_element("instance_camera",
                                    url=f"#{ctx.ids.object_id(ObjectKind.CAMERA, index)}")
                    break
            for index, light in enumerate(scene.lights):
                if light.name == node.name:
                    w.empty_element("instance_light",
                                    url=f"#{ctx.ids.object_id(ObjectKind.LIGHT, index)}")
                    break
        else:
            _write_mesh_instances(ctx, node)

        for child in node.children:
            write_node(ctx, child)

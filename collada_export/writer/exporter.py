"""
COLLADA 1.4.1 export of a Scene.

ColladaExporter runs one write pass over a scene: it analyses the root
transform, writes embedded textures through storage, then appends every
library and the visual scene to a single document.
"""

import logging
import os
from datetime import datetime
from typing import Optional, Tuple

import numpy as np

from ..scene import Node, Scene
from ..storage import FileStorage, Storage
from ..utils.common import decompose_matrix
from ..utils.config import resolve_config
from ..utils.image_utils import ImageUtil
from .arrays import format_float
from .context import ExportContext
from .libraries import (
    collect_materials,
    write_animations_library,
    write_cameras_library,
    write_controller_library,
    write_geometry_library,
    write_images_library,
    write_lights_library,
    write_materials,
    write_scene_library,
)

logger = logging.getLogger(__name__)

XML_PROLOG = '<?xml version="1.0" encoding="UTF-8" standalone="no" ?>'
COLLADA_NAMESPACE = "http://www.collada.org/2005/11/COLLADASchema"
COLLADA_VERSION = "1.4.1"

# Root rotations that map onto a COLLADA up axis
_UP_AXIS_ROTATIONS = (
    ("X_UP", np.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])),
    ("Y_UP", np.eye(3)),
    ("Z_UP", np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 1.0], [0.0, -1.0, 0.0]])),
)

_EPSILON = 1e-6

_CONTRIBUTOR_KEYS = ("comments", "copyright", "source_data")
_ASSET_TEXT_KEYS = ("keywords", "revision", "subject", "title")


def analyze_root_transform(root: Optional[Node]) -> Tuple[bool, str, float]:
    """
    Decide how the root transform is expressed in the asset header.

    A uniform scale becomes the unit size and an axis-swapping rotation
    becomes the up axis. Anything else forces the root to be written as a
    regular node.

    Args:
        root: scene root, or None

    Returns:
        Tuple of (add_root_node, up_axis, unit_scale)
    """
    if root is None:
        return False, "Y_UP", 1.0

    scale, rotation, position = decompose_matrix(root.transform)
    add_root_node = False
    unit_scale = 1.0
    up_axis = "Y_UP"

    if abs(scale[0] - scale[1]) <= _EPSILON and abs(scale[1] - scale[2]) <= _EPSILON:
        unit_scale = float(scale[0])
    else:
        add_root_node = True

    basis = rotation.as_matrix()
    for axis, axis_basis in _UP_AXIS_ROTATIONS:
        if np.allclose(basis, axis_basis, atol=_EPSILON):
            up_axis = axis
            break
    else:
        add_root_node = True

    if np.any(np.abs(position) > _EPSILON):
        add_root_node = True
    if root.has_meshes() or not root.children:
        add_root_node = True

    if add_root_node:
        return True, "Y_UP", 1.0
    return False, up_axis, unit_scale


class ColladaExporter:
    """Writes a Scene as one COLLADA document."""

    def __init__(self, scene: Scene, path: str = "", file: str = "",
                 storage: Optional[Storage] = None, config: Optional[dict] = None):
        """
        Args:
            scene: scene to export
            path: directory embedded texture files are written to
            file: base name of the document, prefix of texture file names
            storage: where texture files go, the local file system if None
            config: overrides of the default configuration
        """
        if scene is None:
            raise ValueError("Cannot export: scene is None")
        self.scene = scene
        self.path = path
        self.file = file
        self.storage = storage if storage is not None else FileStorage()
        self.config = resolve_config(config)

        self.output = ""
        self.context: Optional[ExportContext] = None

    def write(self) -> str:
        """Build the document, keep it in `output` and return it."""
        ctx = ExportContext(self.scene, self.config)
        self.context = ctx

        ctx.register_node_ids()
        ctx.resolve_skeleton_roots()
        ctx.add_root_node, ctx.up_axis, ctx.unit_scale = analyze_root_transform(self.scene.root)
        if not ctx.add_root_node and self._root_is_referenced(ctx):
            logger.debug("Root '%s' is referenced by an animation or skin, written as a node",
                         self.scene.root.name)
            ctx.add_root_node, ctx.up_axis, ctx.unit_scale = True, "Y_UP", 1.0
        self._assign_scene_id(ctx)

        w = ctx.writer
        w.line(XML_PROLOG)
        with w.element("COLLADA", xmlns=COLLADA_NAMESPACE, version=COLLADA_VERSION):
            self._write_header(ctx)
            self._write_textures(ctx)
            collect_materials(ctx)
            write_images_library(ctx)
            write_materials(ctx)
            write_cameras_library(ctx)
            write_lights_library(ctx)
            write_controller_library(ctx)
            write_geometry_library(ctx)
            write_animations_library(ctx)
            write_scene_library(ctx)
            with w.element("scene"):
                w.empty_element("instance_visual_scene", url=f"#{ctx.scene_id}")

        self.output = w.getvalue()
        logger.debug("Scene '%s' written: %d meshes, %d materials, %d animations",
                     self.scene.name, len(self.scene.meshes), len(self.scene.materials),
                     len(self.scene.animations))
        return self.output

    def _root_is_referenced(self, ctx: ExportContext) -> bool:
        """Check if an animation channel or skeleton points at the scene root."""
        root = self.scene.root
        if root is None:
            return False
        if ctx.ids.node_id(root) in ctx.mesh_skeleton_roots.values():
            return True
        for anim in self.scene.animations:
            for target in anim.get_target_names():
                if self.scene.find_node(target) is root and anim.get_tracks_for_target(target):
                    return True
        return False

    def _assign_scene_id(self, ctx: ExportContext) -> None:
        root = self.scene.root
        if root is None:
            ctx.scene_id = ctx.ids.reserve_id("Scene")
            ctx.scene_name = self.scene.name or "Scene"
        elif ctx.add_root_node:
            ctx.scene_id = ctx.ids.reserve_id(self.scene.name or root.name or "Scene")
            ctx.scene_name = self.scene.name or root.name or "Scene"
        else:
            # The root itself is not written, so its id names the visual scene
            ctx.scene_id = ctx.ids.node_id(root)
            ctx.scene_name = ctx.ids.node_name(root) or self.scene.name or "Scene"

    def _write_header(self, ctx: ExportContext) -> None:
        w = ctx.writer
        metadata = self.scene.metadata
        now = datetime.now().strftime("%Y-%m-%dT%H:%M:%S")

        with w.element("asset"):
            with w.element("contributor"):
                w.text_element("author", metadata.get("author") or self.config["author"])
                w.text_element("authoring_tool",
                               metadata.get("authoring_tool") or self.config["authoring_tool"])
                for key in _CONTRIBUTOR_KEYS:
                    if metadata.get(key):
                        w.text_element(key, metadata[key])
            w.text_element("created", metadata.get("created") or now)
            w.text_element("modified", now)
            for key in _ASSET_TEXT_KEYS:
                if metadata.get(key):
                    w.text_element(key, metadata[key])
            w.empty_element("unit", name=self.config["unit_name"], meter=format_float(ctx.unit_scale))
            w.text_element("up_axis", ctx.up_axis)

    def _write_textures(self, ctx: ExportContext) -> None:
        """Write embedded textures as files next to the document."""
        infix = self.config["texture_file_infix"]
        for index, texture in enumerate(self.scene.textures):
            name = f"{self.file}{infix}{index + 1:04d}.{ImageUtil.file_extension(texture)}"
            self.storage.write(os.path.join(self.path, name), ImageUtil.encode_texture(texture))
            ctx.texture_names[index] = name
            logger.debug("Embedded texture %d written as %s", index, name)


def export_scene(scene: Scene, file_path: str, storage: Optional[Storage] = None,
                 config: Optional[dict] = None) -> str:
    """
    Export a scene to a COLLADA file.

    The document is written to `file_path` with its extension replaced by the
    configured one; embedded textures go to the same directory.

    Args:
        scene: scene to export
        file_path: target path
        storage: output storage, the local file system if None
        config: overrides of the default configuration

    Returns:
        The document text
    """
    directory, file_name = os.path.split(file_path)
    base = os.path.splitext(file_name)[0]

    exporter = ColladaExporter(scene, directory, base, storage, config)
    document = exporter.write()

    target = os.path.join(directory, base + exporter.config["file_extension"])
    exporter.storage.write(target, document)
    logger.info("Exported scene '%s' to %s", scene.name, target)
    return document

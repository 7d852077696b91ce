"""
Material channels as texture-or-color surfaces and scalar properties.

A channel bound to a texture is always written as a texture reference, even
when the material also declares a flat color for it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from urllib.parse import quote

from ..scene import Material, ShadingModel, TextureType
from .arrays import format_floats
from .document import DocumentWriter

logger = logging.getLogger(__name__)

RGBA = Tuple[float, float, float, float]

# Characters kept verbatim in image URLs
_URL_SAFE = ":_-./\\"

_SHADING_TAGS = {
    ShadingModel.PHONG: "phong",
    ShadingModel.BLINN: "blinn",
    ShadingModel.NO_SHADING: "constant",
    ShadingModel.GOURAUD: "lambert",
}


@dataclass
class Surface:
    """One color channel of a material: a texture, a flat color, or nothing"""
    exists: bool = False
    color: RGBA = (0.0, 0.0, 0.0, 1.0)
    texture: str = ""
    channel: int = 0

    @property
    def has_texture(self) -> bool:
        return self.exists and bool(self.texture)


@dataclass
class Property:
    """One scalar channel of a material"""
    exists: bool = False
    value: float = 0.0


@dataclass
class MaterialSummary:
    """Everything the effect and image writers need to know about a material"""
    id: str
    name: str
    shading_model: str = "phong"
    ambient: Surface = field(default_factory=Surface)
    diffuse: Surface = field(default_factory=Surface)
    specular: Surface = field(default_factory=Surface)
    emissive: Surface = field(default_factory=Surface)
    reflective: Surface = field(default_factory=Surface)
    transparent: Surface = field(default_factory=Surface)
    normal: Surface = field(default_factory=Surface)
    shininess: Property = field(default_factory=Property)
    transparency: Property = field(default_factory=Property)
    index_refraction: Property = field(default_factory=Property)

    def surfaces(self) -> Dict[str, Surface]:
        """Surfaces keyed by the type name used in effect sids"""
        return {
            "emission": self.emissive,
            "ambient": self.ambient,
            "diffuse": self.diffuse,
            "specular": self.specular,
            "reflective": self.reflective,
            "transparent": self.transparent,
            "normal": self.normal,
        }


def _as_rgba(value) -> Optional[RGBA]:
    if isinstance(value, (int, float)):
        value = [value] * 3
    components = [float(c) for c in value]
    if len(components) == 3:
        components.append(1.0)
    if len(components) != 4:
        return None
    return tuple(components)


def read_surface(material: Material, texture_type: TextureType, color_key: Optional[str],
                 slot_index: int = 0, texture_names: Optional[Dict[int, str]] = None) -> Surface:
    """
    Read one channel of a material.

    Args:
        material: source material
        texture_type: texture usage of the channel
        color_key: numeric parameter holding the flat color, None if the channel has none
        slot_index: which texture of that usage to read
        texture_names: file names of embedded textures by scene index

    Returns:
        Surface with the texture if bound, else the flat color if set, else absent
    """
    surface = Surface()
    textures = material.get_textures(texture_type)
    if slot_index < len(textures):
        param = textures[slot_index]
        path = param.texture_path
        if param.is_embedded():
            path = (texture_names or {}).get(param.embedded_index(), "")
            if not path:
                logger.warning("Material '%s': embedded texture %s not found, %s channel dropped",
                               material.name, param.texture_path, texture_type.value)
                return surface
        if path:
            surface.exists = True
            surface.texture = path
            surface.channel = param.uv_layer
            return surface

    if color_key is not None:
        param = material.get_numeric(color_key)
        color = _as_rgba(param.value) if param is not None else None
        if color is not None:
            surface.exists = True
            surface.color = color
    return surface


def read_property(material: Material, key: str) -> Property:
    param = material.get_numeric(key)
    if param is None or param.is_vector():
        return Property()
    return Property(True, float(param.value))


def summarize_material(material: Material, material_id: str, name: str,
                       texture_names: Optional[Dict[int, str]] = None) -> MaterialSummary:
    """Collect the surfaces and properties of one material."""
    def surface(texture_type, color_key):
        return read_surface(material, texture_type, color_key, 0, texture_names)

    return MaterialSummary(
        id=material_id,
        name=name,
        shading_model=_SHADING_TAGS.get(material.shading_model, "phong"),
        ambient=surface(TextureType.AMBIENT, Material.COLOR_AMBIENT),
        diffuse=surface(TextureType.DIFFUSE, Material.COLOR_DIFFUSE),
        specular=surface(TextureType.SPECULAR, Material.COLOR_SPECULAR),
        emissive=surface(TextureType.EMISSIVE, Material.COLOR_EMISSIVE),
        reflective=surface(TextureType.REFLECTION, Material.COLOR_REFLECTIVE),
        transparent=surface(TextureType.OPACITY, Material.COLOR_TRANSPARENT),
        normal=surface(TextureType.NORMAL, None),
        shininess=read_property(material, Material.SHININESS),
        transparency=read_property(material, Material.OPACITY),
        index_refraction=read_property(material, Material.REFRACTION_INDEX),
    )


def image_url(path: str) -> str:
    """URL-encode an image path, keeping alphanumerics and path punctuation."""
    return quote(path, safe=_URL_SAFE)


def write_image_entry(writer: DocumentWriter, surface: Surface, image_id: str) -> None:
    if not surface.has_texture:
        return
    with writer.element("image", id=image_id):
        writer.text_element("init_from", image_url(surface.texture))


def write_texture_param_entry(writer: DocumentWriter, surface: Surface, type_name: str,
                              material_id: str, image_id: str) -> None:
    """Write the surface and sampler newparams referencing a texture."""
    if not surface.has_texture:
        return
    surface_sid = f"{material_id}-{type_name}-surface"
    with writer.element("newparam", sid=surface_sid):
        with writer.element("surface", type="2D"):
            writer.text_element("init_from", image_id)
    with writer.element("newparam", sid=f"{material_id}-{type_name}-sampler"):
        with writer.element("sampler2D"):
            writer.text_element("source", surface_sid)


def write_texture_color_entry(writer: DocumentWriter, surface: Surface, type_name: str,
                              sampler_id: str) -> None:
    """Write a color-or-texture entry of a shading technique."""
    if not surface.exists:
        return
    with writer.element(type_name):
        if surface.texture:
            writer.empty_element("texture", texture=sampler_id, texcoord=f"CHANNEL{surface.channel}")
        else:
            writer.text_element("color", format_floats(surface.color), sid=type_name)


def write_float_entry(writer: DocumentWriter, prop: Property, type_name: str) -> None:
    if not prop.exists:
        return
    with writer.element(type_name):
        writer.text_element("float", format_floats([prop.value]), sid=type_name)

from typing import List, Optional, Dict
from enum import Enum

from .material_param import MaterialParam, NumericParam, TextureParam, TextureType


class ShadingModel(Enum):
    """Enum for material shading models"""
    FLAT = "flat"
    GOURAUD = "gouraud"
    PHONG = "phong"
    BLINN = "blinn"
    NO_SHADING = "no_shading"


class Material:
    """Material class for managing material parameters"""

    # Well-known numeric parameter names
    COLOR_AMBIENT = "color_ambient"
    COLOR_DIFFUSE = "color_diffuse"
    COLOR_SPECULAR = "color_specular"
    COLOR_EMISSIVE = "color_emissive"
    COLOR_REFLECTIVE = "color_reflective"
    COLOR_TRANSPARENT = "color_transparent"
    SHININESS = "shininess"
    OPACITY = "opacity"
    REFRACTION_INDEX = "refraction_index"

    def __init__(self, name: str, shading_model: Optional[ShadingModel] = None):
        """
        Initialize material

        Args:
            name: Material name
            shading_model: Shading model, or None if the source did not declare one
        """
        self.name = name
        self.shading_model = shading_model
        self._parameters: Dict[str, MaterialParam] = {}

    def add_parameter(self, param: MaterialParam) -> None:
        """
        Add a parameter to the material

        Args:
            param: MaterialParam instance to add
        """
        self._parameters[param.name] = param

    def set_numeric(self, name: str, value) -> None:
        """
        Set a numeric parameter, replacing any previous value

        Args:
            name: Parameter name (e.g. Material.COLOR_DIFFUSE)
            value: Float or list of floats
        """
        self.add_parameter(NumericParam(name, value))

    def add_texture(self, texture_type: TextureType, texture_path: str, uv_layer: int = 0) -> TextureParam:
        """
        Bind a texture to the next free slot of the given type

        Args:
            texture_type: Texture usage type
            texture_path: Path to texture file or "*<index>" for an embedded texture
            uv_layer: UV layer used for sampling

        Returns:
            The created TextureParam
        """
        slot = len(self.get_textures(texture_type))
        param = TextureParam(f"{texture_type.value}_{slot}", texture_path, texture_type, uv_layer)
        self.add_parameter(param)
        return param

    def get_numeric(self, name: str) -> Optional[NumericParam]:
        """Get a numeric parameter by name, None if absent or not numeric"""
        param = self._parameters.get(name)
        return param if isinstance(param, NumericParam) else None

    def get_textures(self, texture_type: TextureType) -> List[TextureParam]:
        """
        Get all textures bound for a usage type, in slot order

        Args:
            texture_type: Texture usage type

        Returns:
            List of TextureParam instances
        """
        return [
            param for param in self._parameters.values()
            if isinstance(param, TextureParam) and param.texture_type == texture_type
        ]

    def __repr__(self) -> str:
        return f"Material(name='{self.name}', params={len(self._parameters)})"

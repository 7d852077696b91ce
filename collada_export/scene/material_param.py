from abc import ABC
from typing import Union, List
from enum import Enum


class TextureType(Enum):
    """Enum for texture usage types"""
    DIFFUSE = "diffuse"
    AMBIENT = "ambient"
    SPECULAR = "specular"
    EMISSIVE = "emissive"
    REFLECTION = "reflection"
    OPACITY = "opacity"
    NORMAL = "normal"
    UNKNOWN = "unknown"


class MaterialParam(ABC):
    """Base class for material parameters"""

    def __init__(self, name: str, param_type: str):
        """
        Initialize material parameter

        Args:
            name: Parameter name
            param_type: Parameter type identifier
        """
        self.name = name
        self.param_type = param_type


class NumericParam(MaterialParam):
    """Numeric parameter class for storing float or vector values"""

    def __init__(self, name: str, value: Union[float, List[float]] = 0.0):
        """
        Initialize numeric parameter

        Args:
            name: Parameter name
            value: Numeric value (float or list of floats for colors)
        """
        super().__init__(name, "numeric")
        self.value = value

    def is_vector(self) -> bool:
        """Check if value is a vector (list)"""
        return isinstance(self.value, (list, tuple))

    def __repr__(self) -> str:
        return f"NumericParam(name='{self.name}', value={self.value})"


class TextureParam(MaterialParam):
    """Texture parameter class for storing texture path, usage type and uv layer"""

    def __init__(self, name: str, texture_path: str = "", texture_type: TextureType = TextureType.UNKNOWN, uv_layer: int = 0):
        """
        Initialize texture parameter

        Args:
            name: Parameter name
            texture_path: Path to texture file, or "*<index>" for an embedded texture
            texture_type: Texture usage type (diffuse, normal, etc.)
            uv_layer: UV layer of the mesh the texture is sampled with
        """
        super().__init__(name, "texture")
        self.texture_path = texture_path
        self.texture_type = texture_type
        self.uv_layer = uv_layer

    def is_embedded(self) -> bool:
        """Check if the path references an embedded texture of the scene"""
        return self.texture_path.startswith("*")

    def embedded_index(self) -> int:
        """
        Get the index of the referenced embedded texture

        Returns:
            Texture index, or -1 if the path is not a valid embedded reference
        """
        if not self.is_embedded():
            return -1
        digits = self.texture_path[1:]
        return int(digits) if digits.isdigit() else -1

    def __repr__(self) -> str:
        return f"TextureParam(name='{self.name}', type={self.texture_type.value}, path='{self.texture_path}')"

from enum import Enum
from typing import Sequence


class LightType(Enum):
    """Enum for light source kinds"""
    UNDEFINED = "undefined"
    DIRECTIONAL = "directional"
    POINT = "point"
    SPOT = "spot"
    AMBIENT = "ambient"
    AREA = "area"


class Light:
    """Light source, placed by the scene node sharing its name"""

    def __init__(self, name: str = "", light_type: LightType = LightType.POINT,
                 color_diffuse: Sequence[float] = (1.0, 1.0, 1.0),
                 color_ambient: Sequence[float] = (0.0, 0.0, 0.0)):
        """
        Initialize light

        Args:
            name: Light name
            light_type: Kind of light source
            color_diffuse: RGB diffuse color
            color_ambient: RGB ambient color (used by ambient lights)
        """
        self.name = name
        self.light_type = light_type
        self.color_diffuse = tuple(float(c) for c in color_diffuse)
        self.color_ambient = tuple(float(c) for c in color_ambient)
        self.attenuation_constant = 1.0
        self.attenuation_linear = 0.0
        self.attenuation_quadratic = 0.0
        # Cone angles in radians, spot lights only
        self.angle_inner_cone = 0.0
        self.angle_outer_cone = 0.0

    def __repr__(self) -> str:
        return f"Light(name='{self.name}', type={self.light_type.value})"

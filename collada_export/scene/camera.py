import math


class Camera:
    """Perspective camera, placed by the scene node sharing its name"""

    def __init__(self, name: str = "", horizontal_fov: float = math.pi / 4,
                 aspect: float = 1.0, clip_near: float = 0.1, clip_far: float = 1000.0):
        """
        Initialize camera

        Args:
            name: Camera name
            horizontal_fov: Horizontal field of view in radians
            aspect: Width / height of the viewport
            clip_near: Near clipping plane distance
            clip_far: Far clipping plane distance
        """
        self.name = name
        self.horizontal_fov = horizontal_fov
        self.aspect = aspect
        self.clip_near = clip_near
        self.clip_far = clip_far

    def __repr__(self) -> str:
        return f"Camera(name='{self.name}', fov={self.horizontal_fov})"

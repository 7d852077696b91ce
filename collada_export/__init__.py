"""
collada_export: write in-memory 3D scenes as COLLADA 1.4.1 documents.
"""

from .scene import (
    Anim,
    Bone,
    Camera,
    InterpolationType,
    Light,
    LightType,
    Material,
    Mesh,
    Node,
    Scene,
    ShadingModel,
    Texture,
    TextureType,
    Track,
)
from .storage import FileStorage, MemoryStorage, Storage
from .writer import ColladaExporter, export_scene

__version__ = "0.1.0"

__all__ = [
    'Anim',
    'Bone',
    'Camera',
    'InterpolationType',
    'Light',
    'LightType',
    'Material',
    'Mesh',
    'Node',
    'Scene',
    'ShadingModel',
    'Texture',
    'TextureType',
    'Track',
    'FileStorage',
    'MemoryStorage',
    'Storage',
    'ColladaExporter',
    'export_scene',
]

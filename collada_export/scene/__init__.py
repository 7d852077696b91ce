"""
Scene Module

This module provides classes for representing the 3D scene handed to the
exporter:
- Material parameters (numeric and texture)
- Materials
- Meshes with geometry and skin bones
- Nodes forming the transform hierarchy
- Lights, cameras and embedded textures
- Animation tracks and animations
"""

# Material parameter classes
from .material_param import (
    MaterialParam,
    NumericParam,
    TextureParam,
    TextureType
)

# Material class
from .material import Material, ShadingModel

# Mesh and bone classes
from .bone import Bone, VertexWeight
from .mesh import Mesh

# Hierarchy and scene objects
from .node import Node
from .light import Light, LightType
from .camera import Camera
from .texture import Texture

# Animation classes
from .track import (
    Track,
    Keyframe,
    InterpolationType
)
from .anim import Anim

# Scene class
from .scene import Scene

# Define public API
__all__ = [
    # Material parameters
    'MaterialParam',
    'NumericParam',
    'TextureParam',
    'TextureType',

    # Material
    'Material',
    'ShadingModel',

    # Mesh
    'Bone',
    'VertexWeight',
    'Mesh',

    # Hierarchy
    'Node',
    'Light',
    'LightType',
    'Camera',
    'Texture',

    # Animation
    'Track',
    'Keyframe',
    'InterpolationType',
    'Anim',

    # Scene
    'Scene',
]

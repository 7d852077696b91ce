"""
Writer Module

This module turns a Scene into COLLADA markup:
- Identifier registry for document ids and names
- Typed float arrays
- Material surfaces
- Indented document writer
- Library writers and the exporter driving them
"""

from .document import DocumentWriter, UnbalancedNestingError
from .ids import IdentifierRegistry, ObjectKind, encode_xml_id, make_unique_id
from .arrays import FloatDataType, write_float_array
from .surface import MaterialSummary, Property, Surface
from .context import ExportContext
from .exporter import ColladaExporter, export_scene

__all__ = [
    'DocumentWriter',
    'UnbalancedNestingError',
    'IdentifierRegistry',
    'ObjectKind',
    'encode_xml_id',
    'make_unique_id',
    'FloatDataType',
    'write_float_array',
    'MaterialSummary',
    'Property',
    'Surface',
    'ExportContext',
    'ColladaExporter',
    'export_scene',
]

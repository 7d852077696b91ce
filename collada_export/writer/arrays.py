"""
Typed float arrays: <source> entries with a <float_array> and its accessor.
"""

from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .document import DocumentWriter


class FloatDataType(Enum):
    """Kinds of float data, each with a fixed stride and accessor params"""
    VECTOR = "vector"
    TEXCOORD2 = "texcoord2"
    TEXCOORD3 = "texcoord3"
    COLOR = "color"
    MAT4X4 = "mat4x4"
    WEIGHT = "weight"
    TIME = "time"

    @property
    def stride(self) -> int:
        return _LAYOUTS[self][0]

    @property
    def params(self) -> Tuple[Tuple[str, str], ...]:
        """(name, type) of each accessor param"""
        return _LAYOUTS[self][1]


_XYZ = (("X", "float"), ("Y", "float"), ("Z", "float"))

_LAYOUTS = {
    FloatDataType.VECTOR: (3, _XYZ),
    FloatDataType.TEXCOORD2: (2, (("S", "float"), ("T", "float"))),
    FloatDataType.TEXCOORD3: (3, (("S", "float"), ("T", "float"), ("P", "float"))),
    FloatDataType.COLOR: (4, (("R", "float"), ("G", "float"), ("B", "float"), ("A", "float"))),
    FloatDataType.MAT4X4: (16, (("TRANSFORM", "float4x4"),)),
    FloatDataType.WEIGHT: (1, (("WEIGHT", "float"),)),
    FloatDataType.TIME: (1, (("TIME", "float"),)),
}


def format_float(value) -> str:
    """Shortest positional decimal that round-trips `value` at its own precision."""
    if not isinstance(value, np.floating):
        value = np.float64(value)
    return np.format_float_positional(value, unique=True, trim='0')


def format_floats(values) -> str:
    return " ".join(format_float(v) for v in np.ravel(values))


def write_float_array(writer: DocumentWriter, source_id: str, kind: FloatDataType,
                      data, count: Optional[int] = None) -> None:
    """
    Write a <source> holding `count` scalars of `data` as `count / stride` elements.

    Args:
        writer: document writer
        source_id: id of the <source>; the array gets "<source_id>-array"
        kind: data kind fixing stride and accessor params
        data: flat or shaped numeric buffer
        count: number of scalars to write, all of `data` if None

    Raises:
        ValueError: if count is not a multiple of the stride or exceeds the data
    """
    flat = np.ravel(np.asarray(data))
    if not np.issubdtype(flat.dtype, np.floating):
        flat = flat.astype(np.float64)
    if count is None:
        count = flat.size
    if count > flat.size:
        raise ValueError(f"{source_id}: count {count} exceeds data size {flat.size}")
    if count % kind.stride != 0:
        raise ValueError(
            f"{source_id}: {count} values is not a multiple of the {kind.value} stride {kind.stride}"
        )

    array_id = f"{source_id}-array"
    with writer.element("source", id=source_id, name=source_id):
        writer.text_element("float_array", format_floats(flat[:count]), escape_text=False,
                            id=array_id, count=count)
        with writer.element("technique_common"):
            with writer.element("accessor", count=count // kind.stride, offset=0,
                                source=f"#{array_id}", stride=kind.stride):
                for name, param_type in kind.params:
                    writer.empty_element("param", name=name, type=param_type)

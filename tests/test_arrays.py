"""Tests for typed float array sources."""
import numpy as np
import pytest

from collada_export.writer.arrays import FloatDataType, format_float, format_floats, write_float_array
from collada_export.writer.document import DocumentWriter


def _accessor(parse, w):
    source = parse(w.getvalue())
    return source.find("float_array"), source.find("technique_common/accessor")


@pytest.mark.parametrize("count,elements", [(16, 1), (32, 2)])
def test_mat4x4_element_count(parse, count, elements):
    w = DocumentWriter()
    write_float_array(w, "poses", FloatDataType.MAT4X4, np.zeros(count))
    array, accessor = _accessor(parse, w)

    assert array.get("id") == "poses-array"
    assert array.get("count") == str(count)
    assert accessor.get("count") == str(elements)
    assert accessor.get("stride") == "16"
    assert [(p.get("name"), p.get("type")) for p in accessor] == [("TRANSFORM", "float4x4")]


def test_vector_params_and_shaped_input(parse):
    w = DocumentWriter()
    write_float_array(w, "mesh-positions", FloatDataType.VECTOR, np.arange(6).reshape(2, 3))
    array, accessor = _accessor(parse, w)

    assert array.text == "0.0 1.0 2.0 3.0 4.0 5.0"
    assert accessor.get("count") == "2"
    assert accessor.get("source") == "#mesh-positions-array"
    assert [p.get("name") for p in accessor] == ["X", "Y", "Z"]


def test_color_stride_and_params():
    assert FloatDataType.COLOR.stride == 4
    assert [name for name, _ in FloatDataType.COLOR.params] == ["R", "G", "B", "A"]
    assert FloatDataType.TEXCOORD2.stride == 2
    assert FloatDataType.TEXCOORD3.stride == 3
    assert FloatDataType.WEIGHT.stride == FloatDataType.TIME.stride == 1


def test_explicit_count_truncates(parse):
    w = DocumentWriter()
    write_float_array(w, "t", FloatDataType.TIME, [0.0, 0.5, 1.0], count=2)
    array, accessor = _accessor(parse, w)
    assert array.text == "0.0 0.5"
    assert accessor.get("count") == "2"


def test_count_not_multiple_of_stride_raises():
    with pytest.raises(ValueError):
        write_float_array(DocumentWriter(), "m", FloatDataType.MAT4X4, np.zeros(20))


def test_count_exceeding_data_raises():
    with pytest.raises(ValueError):
        write_float_array(DocumentWriter(), "w", FloatDataType.WEIGHT, [1.0], count=2)


def test_format_float_shortest_round_trip():
    assert format_float(0.5) == "0.5"
    assert format_float(2.0) == "2.0"
    assert format_float(np.float32(0.1)) == "0.1"
    assert format_floats([[1, 0], [0, 1]]) == "1.0 0.0 0.0 1.0"

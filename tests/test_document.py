"""Tests for the indented document writer."""
import pytest

from collada_export.writer.document import DocumentWriter, UnbalancedNestingError, format_attributes


def test_element_indents_content_and_closes():
    w = DocumentWriter()
    with w.element("node", id="a"):
        w.empty_element("matrix")

    assert w.getvalue() == '<node id="a">\n  <matrix/>\n</node>\n'
    assert w.depth == 0


def test_two_children_close_before_parent():
    w = DocumentWriter()
    with w.element("node", id="parent"):
        start = w.depth
        with w.element("node", id="first"):
            pass
        with w.element("node", id="second"):
            pass
        assert w.depth == start

    lines = w.getvalue().splitlines()
    assert lines == [
        '<node id="parent">',
        '  <node id="first">',
        '  </node>',
        '  <node id="second">',
        '  </node>',
        '</node>',
    ]


def test_pop_at_root_raises():
    w = DocumentWriter()
    with pytest.raises(UnbalancedNestingError):
        w.pop_level()


def test_element_restores_depth_on_error():
    w = DocumentWriter()
    with pytest.raises(KeyError):
        with w.element("a"):
            with w.element("b"):
                raise KeyError("boom")
    assert w.depth == 0
    assert w.getvalue().endswith("  </b>\n</a>\n")


def test_custom_indent_and_line_end():
    w = DocumentWriter(indent_unit="\t", line_end="\r\n")
    with w.element("a"):
        w.line("text")
    assert w.getvalue() == "<a>\r\n\ttext\r\n</a>\r\n"


def test_text_element_escapes_content():
    w = DocumentWriter()
    w.text_element("author", "Tom & Jerry <3")
    assert w.getvalue() == "<author>Tom &amp; Jerry &lt;3</author>\n"


def test_format_attributes_escapes_and_skips_none():
    assert format_attributes({"id": "x", "sid": None, "name": "a<b"}) == ' id="x" name="a&lt;b"'


def test_level_context_manager():
    w = DocumentWriter()
    with w.level():
        assert w.depth == 1
        w.line("x")
    assert w.depth == 0
    assert w.getvalue() == "  x\n"

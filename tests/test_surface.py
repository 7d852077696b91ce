"""Tests for material surfaces and their markup."""
import logging

from collada_export.scene import Material, ShadingModel, TextureType
from collada_export.writer.document import DocumentWriter
from collada_export.writer.surface import (
    Property,
    Surface,
    image_url,
    read_property,
    read_surface,
    summarize_material,
    write_float_entry,
    write_image_entry,
    write_texture_color_entry,
    write_texture_param_entry,
)


def test_texture_takes_precedence_over_color():
    material = Material("m")
    material.set_numeric(Material.COLOR_DIFFUSE, [1.0, 0.0, 0.0])
    material.add_texture(TextureType.DIFFUSE, "albedo.png", uv_layer=1)

    surface = read_surface(material, TextureType.DIFFUSE, Material.COLOR_DIFFUSE)
    assert surface.exists
    assert surface.texture == "albedo.png"
    assert surface.channel == 1

    w = DocumentWriter()
    write_texture_color_entry(w, surface, "diffuse", "m-diffuse-sampler")
    text = w.getvalue()
    assert '<texture texture="m-diffuse-sampler" texcoord="CHANNEL1"/>' in text
    assert "<color" not in text


def test_rgb_color_gets_opaque_alpha():
    material = Material("m")
    material.set_numeric(Material.COLOR_SPECULAR, [0.25, 0.5, 0.75])

    surface = read_surface(material, TextureType.SPECULAR, Material.COLOR_SPECULAR)
    assert surface.exists and not surface.has_texture
    assert surface.color == (0.25, 0.5, 0.75, 1.0)

    w = DocumentWriter()
    write_texture_color_entry(w, surface, "specular", "unused")
    assert w.getvalue() == (
        '<specular>\n'
        '  <color sid="specular">0.25 0.5 0.75 1.0</color>\n'
        '</specular>\n'
    )


def test_absent_surface_writes_nothing():
    surface = read_surface(Material("m"), TextureType.AMBIENT, Material.COLOR_AMBIENT)
    assert surface == Surface()

    w = DocumentWriter()
    write_texture_color_entry(w, surface, "ambient", "s")
    write_texture_param_entry(w, surface, "ambient", "m", "img")
    write_image_entry(w, surface, "img")
    write_float_entry(w, Property(), "shininess")
    assert w.getvalue() == ""


def test_embedded_texture_resolves_to_file_name():
    material = Material("m")
    material.add_texture(TextureType.DIFFUSE, "*0")

    surface = read_surface(material, TextureType.DIFFUSE, None, texture_names={0: "out_texture_0001.png"})
    assert surface.texture == "out_texture_0001.png"


def test_missing_embedded_texture_degrades_to_absent(caplog):
    material = Material("m")
    material.set_numeric(Material.COLOR_DIFFUSE, [1.0, 1.0, 1.0])
    material.add_texture(TextureType.DIFFUSE, "*5")

    with caplog.at_level(logging.WARNING):
        surface = read_surface(material, TextureType.DIFFUSE, Material.COLOR_DIFFUSE, texture_names={})

    assert not surface.exists
    assert "*5" in caplog.text


def test_read_property():
    material = Material("m")
    material.set_numeric(Material.SHININESS, 32)
    assert read_property(material, Material.SHININESS) == Property(True, 32.0)
    assert not read_property(material, Material.OPACITY).exists


def test_summarize_material_shading_tags():
    assert summarize_material(Material("a", ShadingModel.BLINN), "a", "a").shading_model == "blinn"
    assert summarize_material(Material("b", ShadingModel.GOURAUD), "b", "b").shading_model == "lambert"
    assert summarize_material(Material("c", ShadingModel.NO_SHADING), "c", "c").shading_model == "constant"
    assert summarize_material(Material("d"), "d", "d").shading_model == "phong"


def test_summarize_material_maps_channels():
    material = Material("m")
    material.add_texture(TextureType.REFLECTION, "env.png")
    material.add_texture(TextureType.OPACITY, "mask.png")
    material.add_texture(TextureType.NORMAL, "normal.png")
    material.set_numeric(Material.REFRACTION_INDEX, 1.5)

    summary = summarize_material(material, "m", "m")
    assert summary.reflective.texture == "env.png"
    assert summary.transparent.texture == "mask.png"
    assert summary.normal.texture == "normal.png"
    assert summary.index_refraction == Property(True, 1.5)
    assert list(summary.surfaces()) == [
        "emission", "ambient", "diffuse", "specular", "reflective", "transparent", "normal",
    ]


def test_image_url_encoding():
    assert image_url("my textures/wood & oak.png") == "my%20textures/wood%20%26%20oak.png"
    assert image_url("C:\\maps\\a-b_c.png") == "C:\\maps\\a-b_c.png"


def test_texture_param_entry():
    surface = Surface(exists=True, texture="a.png")
    w = DocumentWriter()
    write_texture_param_entry(w, surface, "diffuse", "Wood", "Wood-diffuse-image")
    assert w.getvalue().splitlines() == [
        '<newparam sid="Wood-diffuse-surface">',
        '  <surface type="2D">',
        '    <init_from>Wood-diffuse-image</init_from>',
        '  </surface>',
        '</newparam>',
        '<newparam sid="Wood-diffuse-sampler">',
        '  <sampler2D>',
        '    <source>Wood-diffuse-surface</source>',
        '  </sampler2D>',
        '</newparam>',
    ]

"""Tests for output storage."""
from collada_export.storage import FileStorage, MemoryStorage


def test_memory_storage_keeps_text_and_bytes():
    storage = MemoryStorage()
    storage.write("out/scene.dae", "<COLLADA/>")
    storage.write("out/scene_texture_0001.png", b"\x89PNG")

    assert storage.files == {
        "out/scene.dae": "<COLLADA/>",
        "out/scene_texture_0001.png": b"\x89PNG",
    }


def test_file_storage_creates_parent_directories(tmp_path):
    target = tmp_path / "nested" / "dir" / "scene.dae"
    FileStorage().write(str(target), "line\r\n")

    assert target.read_bytes() == b"line\r\n"


def test_file_storage_writes_bytes(tmp_path):
    target = tmp_path / "tex.png"
    FileStorage().write(str(target), b"\x00\x01")
    assert target.read_bytes() == b"\x00\x01"

import pytest

from cxfer.exceptions import PayloadCopyError
from cxfer.utils.filesystem import (
    copy_file,
    copy_payload_with_thumbnail,
    ensure_directory,
    list_item_files,
    relative_folder,
    thumbnail_path,
)


def test_ensure_directory_creates_parents(tmp_path):
    path = ensure_directory(tmp_path / "a" / "b")
    assert path.is_dir()
    assert ensure_directory(path) == path


def test_copy_file_overwrites_by_default(tmp_path):
    src = tmp_path / "src.itm"
    dst = tmp_path / "dst.itm"
    src.write_text("new")
    dst.write_text("old")

    copy_file(src, dst)
    assert dst.read_text() == "new"


def test_copy_file_without_overwrite(tmp_path):
    src = tmp_path / "src.itm"
    dst = tmp_path / "dst.itm"
    src.write_text("new")
    dst.write_text("old")

    with pytest.raises(PayloadCopyError, match="already exists"):
        copy_file(src, dst, overwrite=False)


def test_copy_missing_file(tmp_path):
    with pytest.raises(PayloadCopyError, match="not found"):
        copy_file(tmp_path / "missing.itm", tmp_path / "x.itm")


def test_thumbnail_path():
    assert thumbnail_path("/a/Duct Bend.itm").name == "Duct Bend.png"


def test_copy_payload_with_thumbnail(tmp_path):
    src_dir = tmp_path / "src"
    dest = tmp_path / "dest"
    src_dir.mkdir()
    dest.mkdir()
    (src_dir / "A.itm").write_text("a")
    (src_dir / "A.png").write_bytes(b"png")
    (src_dir / "B.itm").write_text("b")

    assert copy_payload_with_thumbnail(src_dir / "A.itm", dest) == dest / "A.itm"
    copy_payload_with_thumbnail(src_dir / "B.itm", dest)

    assert sorted(p.name for p in dest.iterdir()) == ["A.itm", "A.png", "B.itm"]


def test_list_item_files(tmp_path):
    (tmp_path / "b.itm").write_text("")
    (tmp_path / "a.itm").write_text("")
    (tmp_path / "a.png").write_text("")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.itm").write_text("")

    assert [p.name for p in list_item_files(tmp_path)] == ["a.itm", "b.itm"]
    assert [p.name for p in list_item_files(tmp_path, recursive=True)] == ["a.itm", "b.itm", "c.itm"]
    assert list_item_files(tmp_path / "missing") == []


def test_relative_folder(tmp_path):
    root = tmp_path / "items"
    (root / "Ducts").mkdir(parents=True)
    assert relative_folder(root / "Ducts" / "A.itm", root) == "Ducts"
    assert relative_folder(root / "A.itm", root) == "."
    assert relative_folder(tmp_path / "A.itm", root) == str(tmp_path.resolve())
    assert relative_folder(tmp_path / "A.itm", None) == str(tmp_path.resolve())

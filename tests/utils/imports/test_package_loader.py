import json

import pytest

from cxfer.exceptions import EmptyPackageError, ManifestFormatError, PackageNotFoundError
from cxfer.utils.imports.package_loader import PackageLoader


def test_load_package(sample_package, package_dir):
    folder = package_dir(sample_package)

    package = PackageLoader.load_package(folder)

    assert package == sample_package
    assert package.file_names() == ["Straight.itm", "Bend.itm"]


def test_load_package_with_utf8_bom(sample_package, tmp_path):
    folder = tmp_path / "bom"
    folder.mkdir()
    text = json.dumps(sample_package.to_dict())
    (folder / "manifest.json").write_bytes(b"\xef\xbb\xbf" + text.encode("utf-8"))

    assert PackageLoader.load_package(folder).configuration_name == "Source"


def test_missing_manifest(tmp_path):
    with pytest.raises(PackageNotFoundError) as exc_info:
        PackageLoader.load_package(tmp_path)
    assert "No manifest.json" in str(exc_info.value)


def test_invalid_json(tmp_path):
    (tmp_path / "manifest.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ManifestFormatError, match="Invalid JSON format"):
        PackageLoader.load_package(tmp_path)


def test_wrong_shape(tmp_path):
    (tmp_path / "manifest.json").write_text('{"items": {}}', encoding="utf-8")
    with pytest.raises(ManifestFormatError):
        PackageLoader.load_package(tmp_path)


def test_empty_package(package_factory, package_dir):
    folder = package_dir(package_factory())
    with pytest.raises(EmptyPackageError):
        PackageLoader.load_package(folder)


def test_try_load_without_manifest(tmp_path):
    assert PackageLoader.try_load(tmp_path) is None


def test_try_load_still_raises_on_bad_manifest(tmp_path):
    (tmp_path / "manifest.json").write_text("[]", encoding="utf-8")
    with pytest.raises(ManifestFormatError):
        PackageLoader.try_load(tmp_path)


def test_missing_payloads(sample_package, package_dir):
    folder = package_dir(sample_package)
    (folder / "Bend.itm").unlink()

    assert PackageLoader.missing_payloads(sample_package, folder) == ["Bend.itm"]

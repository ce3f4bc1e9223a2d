from datetime import timezone

from cxfer.models.manifest import ProductList
from cxfer.models.references import ReferenceCategory
from cxfer.utils.export.metadata_builder import MetadataBuilder


def test_detect_exported_by_prefers_override(mocker):
    getuser = mocker.patch("cxfer.utils.export.metadata_builder.getpass.getuser")
    assert MetadataBuilder.detect_exported_by("  sam  ") == "sam"
    getuser.assert_not_called()


def test_detect_exported_by_falls_back_to_os_user(mocker):
    mocker.patch("cxfer.utils.export.metadata_builder.getpass.getuser", return_value="alex")
    assert MetadataBuilder.detect_exported_by(None) == "alex"
    assert MetadataBuilder.detect_exported_by("   ") == "alex"


def test_detect_exported_by_without_user(mocker):
    mocker.patch(
        "cxfer.utils.export.metadata_builder.getpass.getuser", side_effect=KeyError("uid")
    )
    assert MetadataBuilder.detect_exported_by() == "unknown"


def test_detect_configuration_name(fake_runtime):
    assert MetadataBuilder.detect_configuration_name(fake_runtime) == "Target"
    fake_runtime.name = ""
    assert MetadataBuilder.detect_configuration_name(fake_runtime) == "Unknown"


def test_export_timestamp_is_utc_whole_seconds():
    stamp = MetadataBuilder.export_timestamp()
    assert stamp.tzinfo == timezone.utc
    assert stamp.microsecond == 0


def test_build_item_captures_names_and_history(fake_runtime, tmp_path):
    fake_runtime.add_item(
        "Duct.itm",
        cid=12,
        database_id="D-1",
        references={ReferenceCategory.MATERIAL: "Galvanised"},
    )
    folder = tmp_path / "items" / "Ducts"
    folder.mkdir(parents=True)
    path = folder / "Duct.itm"
    item = fake_runtime.load_item(path)

    exported = MetadataBuilder.build_item(path, item, tmp_path / "items")

    assert exported.file_name == "Duct.itm"
    assert exported.source_folder == "Ducts"
    assert exported.cid == 12
    assert exported.database_id == "D-1"
    assert exported.references[ReferenceCategory.MATERIAL] == "Galvanised"
    assert exported.product_list is None


def test_build_item_keeps_product_list_only_for_product_list_items(fake_runtime, tmp_path):
    product_list = ProductList(revision="A")
    fake_runtime.add_item("Kit.itm", is_product_list=True, product_list=product_list)
    fake_runtime.add_item("Plain.itm", is_product_list=False, product_list=product_list)

    kit = MetadataBuilder.build_item(
        tmp_path / "Kit.itm", fake_runtime.load_item(tmp_path / "Kit.itm"), None
    )
    plain = MetadataBuilder.build_item(
        tmp_path / "Plain.itm", fake_runtime.load_item(tmp_path / "Plain.itm"), None
    )

    assert kit.is_product_list and kit.product_list == product_list
    assert plain.product_list is None

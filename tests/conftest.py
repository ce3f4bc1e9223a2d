"""Shared pytest configuration and fixtures for the CXFER test suite.

This module provides:
- An in-memory configuration runtime for unit tests
- A factory for file-backed configurations (database.json + .itm payloads)
- Sample packages and test markers
"""
import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest


# Add src/ to path so test modules can import cxfer package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from cxfer.exceptions import ItemLoadError, ItemSaveError  # noqa: E402
from cxfer.models import (  # noqa: E402
    ContentPackage,
    ExportedItem,
    ItemReferences,
    LookupSnapshot,
    ReferenceCategory,
)
from cxfer.runtime.base import ConfigurationRuntime, ItemHandle, RebindOutcome  # noqa: E402
from cxfer.runtime.file_runtime import LookupDatabase, TABLES  # noqa: E402

C = ReferenceCategory


# ==================== In-memory runtime ====================


class FakeItem(ItemHandle):
    """Item whose references are held by name"""

    def __init__(self, runtime, path, cid=0, database_id=None, is_product_list=False,
                 product_list=None, references=None):
        self._runtime = runtime
        self._path = Path(path)
        self._cid = cid
        self._database_id = database_id
        self._is_product_list = is_product_list
        self._product_list = product_list
        self.references = dict(references or {})
        self.rebind_calls = []
        self.unbind_calls = []
        self.saved = 0
        self.saved_as = []

    @property
    def path(self):
        return self._path

    @property
    def cid(self):
        return self._cid

    @property
    def database_id(self):
        return self._database_id

    @property
    def is_product_list(self):
        return self._is_product_list

    @property
    def product_list(self):
        return self._product_list

    def reference_names(self):
        return ItemReferences(self.references)

    def rebind(self, category, name):
        self.rebind_calls.append((category, name))
        if category in self._runtime.rebind_errors:
            raise RuntimeError(self._runtime.rebind_errors[category])
        if name not in self._runtime.lookups.get(category, ()):
            return RebindOutcome.NOT_FOUND
        self.references[category] = name
        return RebindOutcome.OK

    def unbind(self, category):
        self.unbind_calls.append(category)
        self.references.pop(category, None)

    def save(self):
        if self._path.name in self._runtime.save_failures:
            raise ItemSaveError(f"Cannot save {self._path.name}", self._path)
        self.saved += 1

    def save_as(self, folder, name):
        if self._path.name in self._runtime.save_as_failures:
            raise ItemSaveError(f"Cannot save {name}", folder)
        self._path = Path(folder) / f"{name}.itm"
        self.saved_as.append(self._path)
        return self._path


class FakeRuntime(ConfigurationRuntime):
    """
    In-memory runtime. Items are registered by file name; loading any path
    with that file name returns a fresh FakeItem.
    """

    def __init__(self, name="Global", lookups=None, items_root=None):
        self.name = name
        self.lookups = {category: list(names) for category, names in (lookups or {}).items()}
        self.items = {}
        self.loaded = {}
        self.load_failures = set()
        self.save_failures = set()
        self.save_as_failures = set()
        self.rebind_errors = {}
        self._items_root = items_root

    @property
    def configuration_name(self):
        return self.name

    @property
    def items_root(self):
        return self._items_root

    def add_item(self, file_name, **attrs):
        self.items[file_name] = attrs

    def snapshot(self):
        return LookupSnapshot(self.lookups)

    def load_item(self, path):
        path = Path(path)
        if path.name in self.load_failures or path.name not in self.items:
            raise ItemLoadError(f"Cannot load {path.name}", path)
        item = FakeItem(self, path, **self.items[path.name])
        self.loaded[path.name] = item
        return item


@pytest.fixture
def fake_runtime():
    """Runtime with one name per category plus a second material"""
    return FakeRuntime(
        name="Target",
        lookups={
            C.SERVICE: ["Ductwork"],
            C.MATERIAL: ["Galvanised", "Stainless"],
            C.SPECIFICATION: ["Spec A"],
            C.SECTION: ["Rectangular"],
            C.PRICE_LIST: ["List 2024"],
            C.SUPPLIER_GROUP: ["Acme"],
            C.INSTALLATION_TIMES: ["Install Std"],
            C.FABRICATION_TIMES: ["Fab Std"],
        },
    )


# ==================== Packages ====================


def make_item(file_name, database_id=None, cid=0, **references):
    """ExportedItem with references given as category-name keyword args"""
    names = {ReferenceCategory[key.upper()]: value for key, value in references.items()}
    return ExportedItem(
        file_name=file_name,
        source_folder="Ducts",
        cid=cid,
        database_id=database_id,
        references=ItemReferences(names),
    )


def make_package(*items, configuration_name="Source"):
    return ContentPackage(
        configuration_name=configuration_name,
        exported_by="tester",
        exported_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        items=tuple(items),
    )


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def package_factory():
    return make_package


@pytest.fixture
def sample_package():
    """Two items: one fully resolvable in fake_runtime, one with two misses"""
    return make_package(
        make_item(
            "Straight.itm", database_id="ID-1", cid=4,
            service="Ductwork", material="Galvanised", price_list="List 2024",
            supplier_group="Acme",
        ),
        make_item(
            "Bend.itm", database_id="ID-2", cid=9,
            service="Pipework", material="Copper", section="Rectangular",
        ),
    )


@pytest.fixture
def package_dir(tmp_path):
    """Write a package's payloads (and manifest) to a folder"""

    def _write(package, folder_name="package", write_manifest=True, thumbnails=False):
        folder = tmp_path / folder_name
        folder.mkdir(parents=True, exist_ok=True)
        for item in package.items:
            (folder / item.file_name).write_text("{}", encoding="utf-8")
            if thumbnails:
                (folder / item.file_name).with_suffix(".png").write_bytes(b"PNG")
        if write_manifest:
            with open(folder / "manifest.json", "w", encoding="utf-8") as f:
                json.dump(package.to_dict(), f, indent=2)
        return folder

    return _write


# ==================== File-backed configurations ====================


def write_configuration(
    root,
    name=None,
    id_base=1,
    services=(),
    materials=(),
    specifications=(),
    sections=(),
    supplier_groups=None,
    installation_times=(),
    fabrication_times=(),
):
    """
    Write database.json under root. Ids start at id_base so two
    configurations can give the same names different ids.
    """
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)
    counter = iter(range(id_base, id_base + 10000))

    def rows(names, field="name"):
        return [{"id": next(counter), field: n} for n in names]

    data = {
        "services": rows(services),
        "materials": rows(materials),
        "specifications": rows(specifications),
        "sections": rows(sections, "description"),
        "supplierGroups": [
            {"id": next(counter), "name": group, "priceLists": rows(price_lists)}
            for group, price_lists in (supplier_groups or {}).items()
        ],
        "installationTimesTables": rows(installation_times),
        "fabricationTimesTables": rows(fabrication_times),
    }
    if name:
        data["name"] = name
    with open(root / "database.json", "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return root


def write_item(
    config_root,
    folder,
    file_name,
    cid=0,
    database_id=None,
    references=None,
    product_list=None,
    thumbnail=False,
):
    """
    Write an .itm payload whose references (category -> name) are stored
    as the ids of config_root's database.
    """
    with open(Path(config_root) / "database.json", "r", encoding="utf-8") as f:
        database = LookupDatabase(json.load(f))

    ids = {}
    for category, ref_name in (references or {}).items():
        entity_id = database.id_for(category, ref_name)
        assert entity_id is not None, f"{ref_name} is not in {config_root}"
        ids[TABLES[category][2]] = entity_id

    payload = {
        "cid": cid,
        "databaseId": database_id,
        "isProductList": product_list is not None,
        "references": ids,
    }
    if product_list is not None:
        payload["productList"] = product_list

    folder = Path(folder)
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / file_name
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    if thumbnail:
        path.with_suffix(".png").write_bytes(b"\x89PNG")
    return path


def read_payload(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def configuration_factory():
    return write_configuration


@pytest.fixture
def item_writer():
    return write_item


@pytest.fixture
def payload_reader():
    return read_payload


@pytest.fixture
def isolated_config_store(tmp_path, mocker):
    """ConfigStore rooted in a temp XDG_CONFIG_HOME"""
    from cxfer.utils.config_store import ConfigStore

    mocker.patch("platform.system", return_value="Linux")
    mocker.patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path / "xdg")})
    return ConfigStore()


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (slower)"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on their location."""
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)

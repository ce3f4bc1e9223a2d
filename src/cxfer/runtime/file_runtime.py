"""
File-backed configuration runtime.

A configuration is a directory holding ``database.json`` (lookup tables,
each entity with its own integer id) and item payloads (``*.itm``, JSON)
whose references are stored by id. Ids are private to one configuration,
which is exactly why items have to be re-bound by name when they move.

database.json layout::

    {
      "name": "Optional display name",
      "services": [{"id": 1, "name": "..."}],
      "materials": [{"id": 1, "name": "..."}],
      "specifications": [{"id": 1, "name": "..."}],
      "sections": [{"id": 1, "description": "..."}],
      "supplierGroups": [
        {"id": 1, "name": "...", "priceLists": [{"id": 1, "name": "..."}]}
      ],
      "installationTimesTables": [{"id": 1, "name": "..."}],
      "fabricationTimesTables": [{"id": 1, "name": "..."}]
    }

Item payload layout::

    {
      "cid": 12,
      "databaseId": "ABC-123",
      "isProductList": false,
      "references": {"service": 1, "material": 3, "priceList": 7, ...},
      "productList": {"revision": "A", "rows": [...]}
    }
"""

import json
import time
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from cxfer.constants import (
    DATABASE_FILE_NAME,
    GLOBAL_CONFIGURATION_NAME,
    ITEM_FILE_EXTENSION,
    ITEMS_DIR_NAME,
    PROFILES_DIR_NAME,
)
from cxfer.exceptions import ConfigurationNotFoundError, ItemLoadError, ItemSaveError
from cxfer.logging import get_logger, log_runtime_call
from cxfer.models.lookups import LookupSnapshot
from cxfer.models.manifest import ProductList
from cxfer.models.references import ItemReferences, ReferenceCategory
from .base import ConfigurationRuntime, ItemHandle, PathLike, RebindOutcome

logger = get_logger("cxfer.runtime.file_runtime")

# category -> (database table, name field, payload reference key)
TABLES: Dict[ReferenceCategory, Tuple[str, str, str]] = {
    ReferenceCategory.SERVICE: ("services", "name", "service"),
    ReferenceCategory.MATERIAL: ("materials", "name", "material"),
    ReferenceCategory.SPECIFICATION: ("specifications", "name", "specification"),
    ReferenceCategory.SECTION: ("sections", "description", "section"),
    ReferenceCategory.PRICE_LIST: ("priceLists", "name", "priceList"),
    ReferenceCategory.SUPPLIER_GROUP: ("supplierGroups", "name", "supplierGroup"),
    ReferenceCategory.INSTALLATION_TIMES: (
        "installationTimesTables", "name", "installationTimes"
    ),
    ReferenceCategory.FABRICATION_TIMES: (
        "fabricationTimesTables", "name", "fabricationTimes"
    ),
}


def _read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


class LookupDatabase:
    """Parsed database.json"""

    def __init__(self, data: Dict[str, Any]):
        self.data = data if isinstance(data, dict) else {}

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        rows = self.data.get(table) or []
        return [row for row in rows if isinstance(row, dict)]

    def _price_lists(self) -> Iterator[Tuple[Dict[str, Any], Dict[str, Any]]]:
        """(supplier group, price list) pairs across every group"""
        for group in self._rows("supplierGroups"):
            for price_list in group.get("priceLists") or []:
                if isinstance(price_list, dict):
                    yield group, price_list

    def entities(self, category: ReferenceCategory) -> List[Dict[str, Any]]:
        if category is ReferenceCategory.PRICE_LIST:
            return [price_list for _, price_list in self._price_lists()]
        table, _, _ = TABLES[category]
        return self._rows(table)

    def names(self, category: ReferenceCategory) -> List[str]:
        _, field, _ = TABLES[category]
        return [str(e[field]) for e in self.entities(category) if e.get(field)]

    def name_for(self, category: ReferenceCategory, entity_id: Any) -> Optional[str]:
        if entity_id is None:
            return None
        _, field, _ = TABLES[category]
        for entity in self.entities(category):
            if entity.get("id") == entity_id:
                return entity.get(field)
        return None

    def id_for(self, category: ReferenceCategory, name: str) -> Optional[Any]:
        _, field, _ = TABLES[category]
        for entity in self.entities(category):
            if entity.get(field) == name:
                return entity.get("id")
        return None

    def owning_group(self, price_list_id: Any) -> Optional[Dict[str, Any]]:
        for group, price_list in self._price_lists():
            if price_list.get("id") == price_list_id:
                return group
        return None


class FileItemHandle(ItemHandle):
    """An item payload loaded from disk"""

    def __init__(self, runtime: "FileConfigurationRuntime", path: Path, data: Dict[str, Any]):
        self._runtime = runtime
        self._path = path
        self._data = data
        references = data.get("references")
        self._references: Dict[str, Any] = dict(references) if isinstance(references, dict) else {}

    @property
    def path(self) -> Path:
        return self._path

    @property
    def cid(self) -> int:
        try:
            return int(self._data.get("cid") or 0)
        except (TypeError, ValueError):
            return 0

    @property
    def database_id(self) -> Optional[str]:
        value = self._data.get("databaseId")
        return str(value) if value else None

    @property
    def is_product_list(self) -> bool:
        return bool(self._data.get("isProductList"))

    @property
    def product_list(self) -> Optional[ProductList]:
        data = self._data.get("productList")
        if not self.is_product_list or not isinstance(data, dict):
            return None
        return ProductList.from_dict(data)

    def reference_id(self, category: ReferenceCategory) -> Any:
        return self._references.get(TABLES[category][2])

    def reference_names(self) -> ItemReferences:
        database = self._runtime.database()
        names = {}
        for category in ReferenceCategory:
            entity_id = self.reference_id(category)
            name = database.name_for(category, entity_id)
            if entity_id is not None and name is None:
                logger.debug(
                    f"{self._path.name}: {category.label} id {entity_id} has no entry "
                    f"in {self._runtime.configuration_name}"
                )
            names[category] = name

        # Items rarely name their supplier group; take it from the price list's owner
        if names[ReferenceCategory.SUPPLIER_GROUP] is None:
            group = database.owning_group(self.reference_id(ReferenceCategory.PRICE_LIST))
            if group is not None:
                names[ReferenceCategory.SUPPLIER_GROUP] = group.get("name")

        return ItemReferences(names)

    def rebind(self, category: ReferenceCategory, name: str) -> RebindOutcome:
        start = time.time()
        target = f"{self._path.name} {category.override_key}={name}"

        # Tables are re-read on every call so a changed database is seen immediately
        database = self._runtime.database()
        entity_id = database.id_for(category, name)
        if entity_id is None:
            log_runtime_call("rebind", target, RebindOutcome.NOT_FOUND.value, time.time() - start)
            return RebindOutcome.NOT_FOUND

        self._references[TABLES[category][2]] = entity_id
        if category is ReferenceCategory.PRICE_LIST:
            group_key = TABLES[ReferenceCategory.SUPPLIER_GROUP][2]
            group = database.owning_group(entity_id)
            if group is not None and self._references.get(group_key) is None:
                self._references[group_key] = group.get("id")

        log_runtime_call("rebind", target, RebindOutcome.OK.value, time.time() - start)
        return RebindOutcome.OK

    def unbind(self, category: ReferenceCategory) -> None:
        # A kept id would name whatever entity the target stores under it
        removed = self._references.pop(TABLES[category][2], None)
        if removed is not None:
            log_runtime_call("unbind", f"{self._path.name} {category.override_key}")

    def _payload(self) -> Dict[str, Any]:
        payload = dict(self._data)
        payload["references"] = dict(self._references)
        return payload

    def _write(self, path: Path) -> None:
        start = time.time()
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self._payload(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            log_runtime_call("save", path.name, duration=time.time() - start, error=str(e))
            raise ItemSaveError(f"Failed to save {path.name}: {e}", path)
        log_runtime_call("save", path.name, duration=time.time() - start)

    def save(self) -> None:
        self._write(self._path)

    def save_as(self, folder: PathLike, name: str) -> Path:
        folder = Path(folder)
        if not folder.is_dir():
            raise ItemSaveError(f"Folder not found: {folder}", folder)
        path = folder / f"{name}{ITEM_FILE_EXTENSION}"
        self._write(path)
        self._path = path
        return path


class FileConfigurationRuntime(ConfigurationRuntime):
    """A configuration directory containing database.json"""

    def __init__(self, root: PathLike):
        self.root = Path(root).expanduser().resolve()
        self.database_path = self.root / DATABASE_FILE_NAME
        if not self.database_path.is_file():
            raise ConfigurationNotFoundError(
                f"No {DATABASE_FILE_NAME} found in configuration folder '{self.root}'"
            )

    def database(self) -> LookupDatabase:
        try:
            return LookupDatabase(_read_json(self.database_path))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationNotFoundError(
                f"Failed to read {self.database_path}: {e}"
            )

    @property
    def configuration_name(self) -> str:
        name = self.database().data.get("name")
        if name:
            return str(name)
        # Named profiles live under <root>/profiles/<Name>/...
        parts = self.root.parts
        lowered = [part.lower() for part in parts]
        if PROFILES_DIR_NAME in lowered:
            index = lowered.index(PROFILES_DIR_NAME)
            if index + 1 < len(parts):
                return parts[index + 1]
        return GLOBAL_CONFIGURATION_NAME

    @property
    def items_root(self) -> Optional[Path]:
        items_dir = self.root / ITEMS_DIR_NAME
        return items_dir if items_dir.is_dir() else self.root

    def snapshot(self) -> LookupSnapshot:
        database = self.database()
        return LookupSnapshot({category: database.names(category) for category in ReferenceCategory})

    def load_item(self, path: PathLike) -> FileItemHandle:
        path = Path(path)
        start = time.time()
        try:
            data = _read_json(path)
        except (OSError, json.JSONDecodeError) as e:
            log_runtime_call("load", path.name, duration=time.time() - start, error=str(e))
            raise ItemLoadError(f"Failed to load {path.name}: {e}", path)

        if not isinstance(data, dict):
            log_runtime_call("load", path.name, duration=time.time() - start,
                             error="payload is not an object")
            raise ItemLoadError(f"Failed to load {path.name}: payload is not an object", path)

        log_runtime_call("load", path.name, duration=time.time() - start)
        return FileItemHandle(self, path, data)

"""
Manifest model for content packages.

A package folder holds the copied item payloads plus one manifest.json
describing them. The manifest records every reference by name so that the
items can be re-bound against a different configuration on import.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from cxfer.exceptions import ManifestFormatError
from .references import ItemReferences

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# .NET DataContractJsonSerializer dates: /Date(1700000000000)/ or /Date(1700000000000+0000)/
_DOTNET_DATE = re.compile(r"^/Date\((-?\d+)([+-]\d{4})?\)/$")


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a manifest timestamp.

    Accepts ISO-8601 (with Z or an offset) and the /Date(ms)/ form.
    Naive values are taken as UTC.

    Raises:
        ManifestFormatError: If the value is not a recognised timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        match = _DOTNET_DATE.match(value.strip())
        if match:
            return datetime.fromtimestamp(int(match.group(1)) / 1000, tz=timezone.utc)
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ManifestFormatError(f"Invalid exportedAt timestamp: {value!r}")
    else:
        raise ManifestFormatError(f"Invalid exportedAt timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _flag(data: Dict[str, Any], key: str, where: str) -> bool:
    """A JSON boolean field; missing or null reads as False"""
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ManifestFormatError(f"Invalid {where}: '{key}' should be a boolean")
    return value


@dataclass(frozen=True)
class ProductRow:
    """One row of an item's product list"""

    name: Optional[str] = None
    alias: Optional[str] = None
    database_id: Optional[str] = None
    order_number: Optional[str] = None
    bought_out: bool = False
    weight: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "alias": self.alias,
            "databaseId": self.database_id,
            "orderNumber": self.order_number,
            "boughtOut": self.bought_out,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductRow":
        weight = data.get("weight")
        try:
            weight = float(weight) if weight is not None else None
        except (TypeError, ValueError):
            raise ManifestFormatError(f"Invalid product row weight: {weight!r}")
        return cls(
            name=_optional_str(data.get("name")),
            alias=_optional_str(data.get("alias")),
            database_id=_optional_str(data.get("databaseId")),
            order_number=_optional_str(data.get("orderNumber")),
            bought_out=_flag(data, "boughtOut", "product row"),
            weight=weight,
        )


@dataclass(frozen=True)
class ProductList:
    """Product list captured from a product-list item"""

    revision: Optional[str] = None
    rows: Tuple[ProductRow, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revision": self.revision,
            "rows": [row.to_dict() for row in self.rows],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductList":
        rows = data.get("rows") or []
        if not isinstance(rows, list):
            raise ManifestFormatError("Invalid productList: 'rows' should be an array")
        return cls(
            revision=_optional_str(data.get("revision")),
            rows=tuple(ProductRow.from_dict(row) for row in rows),
        )


@dataclass(frozen=True)
class ExportedItem:
    """
    One transferred item.

    ``cid`` is the source configuration's positional index at export time.
    It is kept as history only and is never used to match anything after
    export. ``database_id`` is compared (never dereferenced) to detect
    duplicate content.
    """

    file_name: str
    source_folder: Optional[str] = None
    cid: int = 0
    database_id: Optional[str] = None
    is_product_list: bool = False
    references: ItemReferences = field(default_factory=ItemReferences)
    product_list: Optional[ProductList] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "fileName": self.file_name,
            "sourceFolder": self.source_folder,
            "cid": self.cid,
            "databaseId": self.database_id,
            "isProductList": self.is_product_list,
            "references": self.references.to_dict(),
        }
        if self.product_list is not None:
            data["productList"] = self.product_list.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "ExportedItem":
        if not isinstance(data, dict):
            raise ManifestFormatError(f"Invalid item at index {index}: Should be an object")

        file_name = data.get("fileName")
        if not file_name:
            raise ManifestFormatError(
                f"Invalid item at index {index}: Missing required field 'fileName'"
            )

        try:
            cid = int(data.get("cid") or 0)
        except (TypeError, ValueError):
            raise ManifestFormatError(f"Invalid item at index {index}: 'cid' should be an integer")

        references = data.get("references")
        if references is not None and not isinstance(references, dict):
            raise ManifestFormatError(
                f"Invalid item at index {index}: 'references' should be an object"
            )

        product_list = data.get("productList")
        return cls(
            file_name=str(file_name),
            source_folder=_optional_str(data.get("sourceFolder")),
            cid=cid,
            database_id=_optional_str(data.get("databaseId")),
            is_product_list=_flag(data, "isProductList", f"item at index {index}"),
            references=ItemReferences.from_dict(references),
            product_list=ProductList.from_dict(product_list) if product_list else None,
        )


@dataclass(frozen=True)
class ContentPackage:
    """One export operation: header plus the ordered items"""

    configuration_name: str
    exported_by: str
    exported_at: datetime
    items: Tuple[ExportedItem, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> Dict[str, Any]:
        return {
            "configurationName": self.configuration_name,
            "exportedBy": self.exported_by,
            "exportedAt": format_timestamp(self.exported_at),
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ContentPackage":
        if not isinstance(data, dict):
            raise ManifestFormatError("Invalid manifest structure: Root should be an object")

        items = data.get("items")
        if items is None:
            items = []
        if not isinstance(items, list):
            raise ManifestFormatError("Invalid manifest structure: 'items' should be an array")

        return cls(
            configuration_name=str(data.get("configurationName") or ""),
            exported_by=str(data.get("exportedBy") or ""),
            exported_at=parse_timestamp(data.get("exportedAt")),
            items=tuple(ExportedItem.from_dict(item, i) for i, item in enumerate(items)),
        )

    def file_names(self) -> List[str]:
        return [item.file_name for item in self.items]

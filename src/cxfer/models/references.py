"""
Reference categories and per-item reference names.

An item points at up to eight kinds of lookup entity. Each kind is a member
of ReferenceCategory; the member carries its manifest key, the key operators
use for overrides, a display label and whether the target runtime allows it
to be re-assigned.
"""

from enum import Enum
from typing import Dict, Iterator, Mapping, Optional, Tuple


class ReferenceCategory(Enum):
    """Kinds of lookup entity an item can reference"""

    # (manifest key, override key, label, overridable)
    SERVICE = ("serviceName", "Service", "Service", False)
    MATERIAL = ("materialName", "Material", "Material", True)
    SPECIFICATION = ("specificationName", "Specification", "Specification", True)
    SECTION = ("sectionDescription", "Section", "Section", True)
    PRICE_LIST = ("priceListName", "PriceList", "Price List", True)
    SUPPLIER_GROUP = ("supplierGroupName", "SupplierGroup", "Supplier Group", True)
    INSTALLATION_TIMES = (
        "installationTimesTableName", "InstallationTimesTable", "Install Times", True
    )
    FABRICATION_TIMES = (
        "fabricationTimesTableName", "FabricationTimesTable", "Fab Times", True
    )

    def __init__(self, json_key: str, override_key: str, label: str, overridable: bool):
        self.json_key = json_key
        self.override_key = override_key
        self.label = label
        self.overridable = overridable

    @classmethod
    def rebindable(cls) -> Tuple["ReferenceCategory", ...]:
        """Categories the target runtime can re-assign (all but service)"""
        return tuple(category for category in cls if category.overridable)

    @classmethod
    def from_key(cls, key: str) -> "ReferenceCategory":
        """
        Parse a category from any of its spellings.

        Accepts the manifest key (materialName), the override key
        (Material), the enum name (MATERIAL / material) or the label
        (Price List), all case-insensitive.

        Raises:
            ValueError: If the key names no category
        """
        wanted = (key or "").strip().lower()
        for category in cls:
            spellings = {
                category.json_key.lower(),
                category.override_key.lower(),
                category.name.lower(),
                category.name.lower().replace("_", "-"),
                category.label.lower(),
            }
            if wanted in spellings:
                return category
        valid = ", ".join(category.override_key for category in cls)
        raise ValueError(f"Unknown reference category '{key}'. Valid: {valid}")


def _clean(name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    name = str(name)
    return name if name.strip() else None


class ItemReferences:
    """
    The eight reference slots of an item, each an optional name.

    A None slot means the item had no such reference. It is never treated
    as unresolved.
    """

    __slots__ = ("_names",)

    def __init__(self, names: Optional[Mapping[ReferenceCategory, Optional[str]]] = None):
        names = names or {}
        self._names: Dict[ReferenceCategory, Optional[str]] = {
            category: _clean(names.get(category)) for category in ReferenceCategory
        }

    def get(self, category: ReferenceCategory) -> Optional[str]:
        return self._names[category]

    def __getitem__(self, category: ReferenceCategory) -> Optional[str]:
        return self._names[category]

    def items(self) -> Iterator[Tuple[ReferenceCategory, Optional[str]]]:
        """All eight slots in category order"""
        return iter(self._names.items())

    def present(self) -> Iterator[Tuple[ReferenceCategory, str]]:
        """Only the slots that carry a name"""
        for category, name in self._names.items():
            if name is not None:
                yield category, name

    def replace(self, category: ReferenceCategory, name: Optional[str]) -> "ItemReferences":
        names = dict(self._names)
        names[category] = name
        return ItemReferences(names)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {category.json_key: name for category, name in self._names.items()}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Optional[str]]]) -> "ItemReferences":
        data = data or {}
        return cls({category: data.get(category.json_key) for category in ReferenceCategory})

    def __eq__(self, other) -> bool:
        if not isinstance(other, ItemReferences):
            return NotImplemented
        return self._names == other._names

    def __hash__(self) -> int:
        return hash(tuple(self._names.items()))

    def __repr__(self) -> str:
        present = ", ".join(f"{c.override_key}={n!r}" for c, n in self.present())
        return f"ItemReferences({present})"

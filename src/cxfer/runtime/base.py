"""
Configuration runtime interface.

The runtime is the stateful collaborator that owns a configuration's lookup
tables and knows how to load, re-bind and save item payloads. The export and
import code only ever talks to these abstract classes, so a runtime is
always injected and never constructed inside the transfer logic.
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from cxfer.models.lookups import LookupSnapshot
from cxfer.models.manifest import ProductList
from cxfer.models.references import ItemReferences, ReferenceCategory

PathLike = Union[str, Path]


class RebindOutcome(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"


class ItemHandle(ABC):
    """A loaded item payload"""

    @property
    @abstractmethod
    def path(self) -> Path:
        """Where the payload was loaded from."""
        ...

    @property
    @abstractmethod
    def cid(self) -> int:
        """Positional index in the owning configuration (not portable)."""
        ...

    @property
    @abstractmethod
    def database_id(self) -> Optional[str]:
        ...

    @property
    @abstractmethod
    def is_product_list(self) -> bool:
        ...

    @property
    @abstractmethod
    def product_list(self) -> Optional[ProductList]:
        ...

    @abstractmethod
    def reference_names(self) -> ItemReferences:
        """Names of the entities the item currently points at."""
        ...

    @abstractmethod
    def rebind(self, category: ReferenceCategory, name: str) -> RebindOutcome:
        """Point one reference at the entity with this name in the owning configuration."""
        ...

    def unbind(self, category: ReferenceCategory) -> None:
        """
        Clear one reference so the item points at nothing in that category.

        Runtimes that cannot clear a reference leave it as it is.
        """

    @abstractmethod
    def save(self) -> None:
        """Persist the item in place. Raises ItemSaveError."""
        ...

    @abstractmethod
    def save_as(self, folder: PathLike, name: str) -> Path:
        """Persist the item as ``<folder>/<name><ext>``. Raises ItemSaveError."""
        ...


class ConfigurationRuntime(ABC):
    """One configuration database and its item content"""

    @property
    @abstractmethod
    def configuration_name(self) -> str:
        ...

    @property
    def items_root(self) -> Optional[Path]:
        """Root of the configuration's item folders, if it has one."""
        return None

    @abstractmethod
    def snapshot(self) -> LookupSnapshot:
        """Read the current lookup table names."""
        ...

    @abstractmethod
    def load_item(self, path: PathLike) -> ItemHandle:
        """Load an item payload. Raises ItemLoadError."""
        ...

"""
Data model for content transfer.

- references: reference categories and per-item reference names
- manifest: the persisted package (manifest.json)
- lookups: name snapshot of a configuration's lookup tables
- resolution: transient report, override, conflict and result types
"""

from .references import ReferenceCategory, ItemReferences
from .manifest import ContentPackage, ExportedItem, ProductList, ProductRow
from .lookups import LookupSnapshot, NameMatchPolicy
from .resolution import (
    SKIP,
    BatchResult,
    BatchStatus,
    DuplicateConflict,
    ImportSummary,
    ItemImportResult,
    OverrideSelections,
    ResolutionEntry,
    ResolutionReport,
    ResolutionStatus,
)

__all__ = [
    "ReferenceCategory",
    "ItemReferences",
    "ContentPackage",
    "ExportedItem",
    "ProductList",
    "ProductRow",
    "LookupSnapshot",
    "NameMatchPolicy",
    "SKIP",
    "BatchResult",
    "BatchStatus",
    "DuplicateConflict",
    "ImportSummary",
    "ItemImportResult",
    "OverrideSelections",
    "ResolutionEntry",
    "ResolutionReport",
    "ResolutionStatus",
]

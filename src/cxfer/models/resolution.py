"""
Transient types built during one import attempt.

None of these are persisted: the resolution report and override selections
drive the import, the duplicate conflicts gate it, and the per-item results
are folded into a summary for display.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .references import ReferenceCategory


class ResolutionStatus(Enum):
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    OVERRIDDEN = "overridden"


@dataclass(frozen=True)
class ResolutionEntry:
    """Outcome of resolving one (item, category) reference"""

    item_index: int
    file_name: str
    category: ReferenceCategory
    original_name: str
    status: ResolutionStatus
    resolved_name: Optional[str] = None
    override_name: Optional[str] = None

    @property
    def overridable(self) -> bool:
        return self.category.overridable

    @property
    def key(self) -> Tuple[int, ReferenceCategory]:
        return (self.item_index, self.category)

    @property
    def applied_name(self) -> Optional[str]:
        """Name the importer should bind, or None to leave it unbound"""
        if self.status is ResolutionStatus.OVERRIDDEN:
            return self.override_name
        if self.status is ResolutionStatus.RESOLVED:
            return self.resolved_name or self.original_name
        return None


class ResolutionReport:
    """Ordered resolution entries keyed by (item index, category)"""

    def __init__(self, entries: Iterable[ResolutionEntry] = ()):
        self._entries: Dict[Tuple[int, ReferenceCategory], ResolutionEntry] = {}
        for entry in entries:
            self._entries[entry.key] = entry

    def __iter__(self) -> Iterator[ResolutionEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Tuple[int, ReferenceCategory]) -> bool:
        return key in self._entries

    def __eq__(self, other) -> bool:
        if not isinstance(other, ResolutionReport):
            return NotImplemented
        return list(self._entries.values()) == list(other._entries.values())

    def get(self, item_index: int, category: ReferenceCategory) -> Optional[ResolutionEntry]:
        return self._entries.get((item_index, category))

    def entries_for(self, item_index: int) -> List[ResolutionEntry]:
        return [e for e in self._entries.values() if e.item_index == item_index]

    def with_status(self, status: ResolutionStatus) -> List[ResolutionEntry]:
        return [e for e in self._entries.values() if e.status is status]

    def unresolved(self) -> List[ResolutionEntry]:
        return self.with_status(ResolutionStatus.UNRESOLVED)

    def overridable_unresolved(self) -> List[ResolutionEntry]:
        """Unresolved entries an operator may supply a replacement for"""
        return [e for e in self.unresolved() if e.overridable]

    @property
    def has_unresolved(self) -> bool:
        return bool(self.unresolved())

    def counts(self) -> Dict[ResolutionStatus, int]:
        counts = {status: 0 for status in ResolutionStatus}
        for entry in self._entries.values():
            counts[entry.status] += 1
        return counts

    def with_entry(self, entry: ResolutionEntry) -> "ResolutionReport":
        """Return a copy of the report with one entry replaced"""
        entries = dict(self._entries)
        entries[entry.key] = entry
        return ResolutionReport(entries.values())


class _Skip:
    """Sentinel: leave the reference unbound"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SKIP"

    def __bool__(self) -> bool:
        return False


SKIP = _Skip()

OverrideValue = Union[str, _Skip]

# Tokens that mean "skip" in override files and CLI strings
_SKIP_TOKENS = ("", "-")


class OverrideSelections:
    """
    Operator-chosen replacement names, keyed by (item index, category).

    Service references cannot be re-assigned in the target runtime, so they
    can never carry an entry. A missing entry is the same as SKIP.
    """

    def __init__(self):
        self._selections: Dict[Tuple[int, ReferenceCategory], OverrideValue] = {}

    def set(self, item_index: int, category: ReferenceCategory, name: OverrideValue) -> None:
        if not category.overridable:
            raise ValueError(
                f"{category.label} references are read-only and cannot be overridden"
            )
        if item_index < 0:
            raise ValueError(f"Invalid item index {item_index}")
        if name is not SKIP and (name is None or not str(name).strip()):
            name = SKIP
        self._selections[(item_index, category)] = name

    def skip(self, item_index: int, category: ReferenceCategory) -> None:
        self.set(item_index, category, SKIP)

    def get(self, item_index: int, category: ReferenceCategory) -> OverrideValue:
        return self._selections.get((item_index, category), SKIP)

    def items(self) -> Iterator[Tuple[Tuple[int, ReferenceCategory], OverrideValue]]:
        return iter(self._selections.items())

    def __len__(self) -> int:
        return len(self._selections)

    def __contains__(self, key: Tuple[int, ReferenceCategory]) -> bool:
        return key in self._selections

    @classmethod
    def parse(cls, specs: Iterable[str]) -> "OverrideSelections":
        """
        Build selections from CLI strings.

        Each spec is ``INDEX:CATEGORY=NAME``. An empty NAME or ``-`` means skip.

        Raises:
            ValueError: On malformed specs, unknown categories or service overrides
        """
        selections = cls()
        for spec in specs:
            head, sep, name = spec.partition("=")
            index_text, colon, category_text = head.partition(":")
            if not sep or not colon:
                raise ValueError(
                    f"Invalid override '{spec}'. Expected INDEX:CATEGORY=NAME"
                )
            try:
                index = int(index_text.strip())
            except ValueError:
                raise ValueError(f"Invalid item index in override '{spec}'")
            category = ReferenceCategory.from_key(category_text)
            value = name.strip()
            selections.set(index, category, SKIP if value.lower() in _SKIP_TOKENS else value)
        return selections

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Optional[str]]]) -> "OverrideSelections":
        """
        Build selections from ``{"<index>": {"<category>": "<name>" | null}}``.

        Raises:
            ValueError: On a malformed mapping
        """
        if not isinstance(data, Mapping):
            raise ValueError("Overrides should be an object keyed by item index")
        selections = cls()
        for index_text, per_item in data.items():
            try:
                index = int(index_text)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid item index '{index_text}' in overrides")
            if not isinstance(per_item, Mapping):
                raise ValueError(f"Overrides for item {index} should be an object")
            for category_text, name in per_item.items():
                category = ReferenceCategory.from_key(category_text)
                if name is None or str(name).strip().lower() in _SKIP_TOKENS:
                    selections.skip(index, category)
                else:
                    selections.set(index, category, str(name))
        return selections

    def merge(self, other: "OverrideSelections") -> "OverrideSelections":
        """Combine two selection sets; entries in ``other`` win"""
        merged = OverrideSelections()
        merged._selections.update(self._selections)
        merged._selections.update(other._selections)
        return merged


@dataclass(frozen=True)
class DuplicateConflict:
    """An incoming item whose databaseId already exists in the target folder"""

    import_file_name: str
    database_id: str
    existing_file_path: str


@dataclass
class ItemImportResult:
    """Outcome of importing one item"""

    file_name: str
    success: bool = False
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def fail(self, message: str) -> None:
        self.errors.append(message)

    def finish(self) -> "ItemImportResult":
        self.success = not self.errors
        return self


class BatchStatus(Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class BatchResult:
    """Per-item results of one import batch, in processing order"""

    status: BatchStatus
    results: List[ItemImportResult] = field(default_factory=list)
    selected_count: int = 0

    @property
    def cancelled(self) -> bool:
        return self.status is BatchStatus.CANCELLED


@dataclass(frozen=True)
class ImportSummary:
    """Batch results folded for display"""

    status: BatchStatus
    success_count: int
    failure_count: int
    warnings: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()
    total_errors: int = 0
    selected_count: int = 0

    @property
    def processed_count(self) -> int:
        return self.success_count + self.failure_count

    @property
    def skipped_count(self) -> int:
        """Selected items never started because the batch was cancelled"""
        return max(self.selected_count - self.processed_count, 0)

    def warning_preview(self, limit: int) -> Tuple[str, ...]:
        return self.warnings[:limit]

    def hidden_warning_count(self, limit: int) -> int:
        return max(len(self.warnings) - limit, 0)

    @property
    def hidden_error_count(self) -> int:
        return max(self.total_errors - len(self.errors), 0)

"""
Read-only snapshot of a configuration's lookup tables, by name.
"""

from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from cxfer.constants import NAME_MATCHING_EXACT, NAME_MATCHING_IGNORE_CASE
from .references import ReferenceCategory


class NameMatchPolicy(Enum):
    """How exported names are compared against target names"""

    EXACT = NAME_MATCHING_EXACT
    IGNORE_CASE = NAME_MATCHING_IGNORE_CASE

    @classmethod
    def from_setting(cls, value: Optional[str]) -> "NameMatchPolicy":
        if not value:
            return cls.EXACT
        return cls(str(value).lower().replace("-", "_"))

    def key(self, name: str) -> str:
        if self is NameMatchPolicy.IGNORE_CASE:
            return name.casefold()
        return name


class LookupSnapshot:
    """
    Names available in a configuration, per reference category.

    Sections are identified by description. Price lists are flattened across
    every supplier group, since a price list's identity is its name and not
    its owning group.
    """

    def __init__(self, names: Optional[Mapping[ReferenceCategory, Iterable[str]]] = None):
        names = names or {}
        self._names: Dict[ReferenceCategory, Tuple[str, ...]] = {}
        for category in ReferenceCategory:
            seen = []
            for name in names.get(category, ()):
                if name and name not in seen:
                    seen.append(name)
            self._names[category] = tuple(seen)

    def names(self, category: ReferenceCategory) -> Tuple[str, ...]:
        return self._names[category]

    def sorted_names(self, category: ReferenceCategory) -> List[str]:
        return sorted(self._names[category], key=str.casefold)

    def find(
        self,
        category: ReferenceCategory,
        name: str,
        policy: NameMatchPolicy = NameMatchPolicy.EXACT,
    ) -> Optional[str]:
        """
        Look a name up in one category.

        Returns:
            The target's own spelling of the name, or None if absent
        """
        if not name:
            return None
        wanted = policy.key(name)
        # An exact hit wins over a case-folded one
        if name in self._names[category]:
            return name
        for candidate in self._names[category]:
            if policy.key(candidate) == wanted:
                return candidate
        return None

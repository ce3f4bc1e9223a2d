"""
Import utilities package.

This package contains focused utility modules for import operations.
"""

from .package_loader import PackageLoader
from .reference_validator import ReferenceValidator
from .override_resolver import IgnoredOverride, OverrideOutcome, OverrideResolver
from .duplicate_checker import DuplicateChecker
from .result_aggregator import ResultAggregator

__all__ = [
    "PackageLoader",
    "ReferenceValidator",
    "IgnoredOverride",
    "OverrideOutcome",
    "OverrideResolver",
    "DuplicateChecker",
    "ResultAggregator",
]

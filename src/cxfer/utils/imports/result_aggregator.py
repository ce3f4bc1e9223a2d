"""
Result aggregator for import operations.
"""

from cxfer.constants import ERROR_PREVIEW_LIMIT
from cxfer.models.resolution import BatchResult, ImportSummary


class ResultAggregator:
    """Folds per-item results into an ImportSummary"""

    @staticmethod
    def aggregate(batch: BatchResult, error_limit: int = ERROR_PREVIEW_LIMIT) -> ImportSummary:
        """
        Count successes and failures, dedupe warnings (first occurrence
        order), and keep at most ``error_limit`` errors.
        """
        success_count = sum(1 for r in batch.results if r.success)
        failure_count = len(batch.results) - success_count

        warnings = []
        seen = set()
        for result in batch.results:
            for message in result.warnings:
                if message not in seen:
                    seen.add(message)
                    warnings.append(message)

        errors = [
            f"{result.file_name}: {message}"
            for result in batch.results
            for message in result.errors
        ]

        return ImportSummary(
            status=batch.status,
            success_count=success_count,
            failure_count=failure_count,
            warnings=tuple(warnings),
            errors=tuple(errors[:max(error_limit, 0)]),
            total_errors=len(errors),
            selected_count=batch.selected_count,
        )

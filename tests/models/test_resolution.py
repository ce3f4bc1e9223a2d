import pytest

from cxfer.models.references import ReferenceCategory
from cxfer.models.resolution import (
    SKIP,
    BatchResult,
    BatchStatus,
    ImportSummary,
    ItemImportResult,
    OverrideSelections,
    ResolutionEntry,
    ResolutionReport,
    ResolutionStatus,
)

C = ReferenceCategory


def entry(index, category, name, status, resolved=None, override=None):
    return ResolutionEntry(
        item_index=index,
        file_name=f"item{index}.itm",
        category=category,
        original_name=name,
        status=status,
        resolved_name=resolved,
        override_name=override,
    )


def test_applied_name_by_status():
    assert entry(0, C.MATERIAL, "Cu", ResolutionStatus.RESOLVED, "cu").applied_name == "cu"
    assert entry(0, C.MATERIAL, "Cu", ResolutionStatus.RESOLVED).applied_name == "Cu"
    assert entry(0, C.MATERIAL, "Cu", ResolutionStatus.OVERRIDDEN, override="Steel").applied_name == "Steel"
    assert entry(0, C.MATERIAL, "Cu", ResolutionStatus.UNRESOLVED).applied_name is None


def test_report_queries():
    report = ResolutionReport(
        [
            entry(0, C.SERVICE, "Plumbing", ResolutionStatus.UNRESOLVED),
            entry(0, C.MATERIAL, "Cu", ResolutionStatus.UNRESOLVED),
            entry(1, C.MATERIAL, "Steel", ResolutionStatus.RESOLVED, "Steel"),
        ]
    )
    assert len(report) == 3
    assert (1, C.MATERIAL) in report
    assert report.get(1, C.SECTION) is None
    assert [e.category for e in report.entries_for(0)] == [C.SERVICE, C.MATERIAL]
    assert len(report.unresolved()) == 2
    assert [e.category for e in report.overridable_unresolved()] == [C.MATERIAL]
    assert report.has_unresolved
    assert report.counts()[ResolutionStatus.RESOLVED] == 1


def test_with_entry_leaves_original_untouched():
    original = ResolutionReport([entry(0, C.MATERIAL, "Cu", ResolutionStatus.UNRESOLVED)])
    updated = original.with_entry(
        entry(0, C.MATERIAL, "Cu", ResolutionStatus.OVERRIDDEN, override="Steel")
    )
    assert original.get(0, C.MATERIAL).status is ResolutionStatus.UNRESOLVED
    assert updated.get(0, C.MATERIAL).status is ResolutionStatus.OVERRIDDEN
    assert original != updated


def test_skip_is_a_falsy_singleton():
    assert not SKIP
    assert repr(SKIP) == "SKIP"
    assert type(SKIP)() is SKIP


def test_selections_reject_service():
    selections = OverrideSelections()
    with pytest.raises(ValueError, match="read-only"):
        selections.set(0, C.SERVICE, "Plumbing")
    assert len(selections) == 0


def test_selections_reject_negative_index():
    with pytest.raises(ValueError):
        OverrideSelections().set(-1, C.MATERIAL, "Steel")


def test_missing_or_blank_selection_means_skip():
    selections = OverrideSelections()
    selections.set(0, C.MATERIAL, "  ")
    assert selections.get(0, C.MATERIAL) is SKIP
    assert selections.get(5, C.SECTION) is SKIP


def test_parse_cli_specs():
    selections = OverrideSelections.parse(
        ["0:Material=Stainless Steel", "1:priceListName=List B", "2:section=-", "3:Material="]
    )
    assert selections.get(0, C.MATERIAL) == "Stainless Steel"
    assert selections.get(1, C.PRICE_LIST) == "List B"
    assert selections.get(2, C.SECTION) is SKIP
    assert (3, C.MATERIAL) in selections


@pytest.mark.parametrize("spec", ["Material=Steel", "0-Material=Steel", "x:Material=Steel", "0:Service=X"])
def test_parse_rejects_bad_specs(spec):
    with pytest.raises(ValueError):
        OverrideSelections.parse([spec])


def test_from_mapping():
    selections = OverrideSelections.from_mapping(
        {"0": {"Material": "Steel", "Section": None}, "2": {"FabricationTimesTable": "-"}}
    )
    assert selections.get(0, C.MATERIAL) == "Steel"
    assert selections.get(0, C.SECTION) is SKIP
    assert selections.get(2, C.FABRICATION_TIMES) is SKIP


@pytest.mark.parametrize("data", [[], {"a": {}}, {"0": "Steel"}])
def test_from_mapping_rejects_bad_shapes(data):
    with pytest.raises(ValueError):
        OverrideSelections.from_mapping(data)


def test_merge_prefers_other():
    first = OverrideSelections.parse(["0:Material=Steel", "1:Section=Round"])
    second = OverrideSelections.parse(["0:Material=Copper"])
    merged = first.merge(second)
    assert merged.get(0, C.MATERIAL) == "Copper"
    assert merged.get(1, C.SECTION) == "Round"


def test_item_result_success_is_derived_from_errors():
    result = ItemImportResult("a.itm")
    result.warn("careful")
    assert result.finish().success

    failed = ItemImportResult("b.itm")
    failed.fail("broken")
    assert not failed.finish().success


def test_batch_and_summary_counts():
    batch = BatchResult(status=BatchStatus.CANCELLED, selected_count=5)
    assert batch.cancelled

    summary = ImportSummary(
        status=BatchStatus.CANCELLED,
        success_count=1,
        failure_count=1,
        warnings=tuple(f"w{i}" for i in range(12)),
        errors=("e1",),
        total_errors=3,
        selected_count=5,
    )
    assert summary.processed_count == 2
    assert summary.skipped_count == 3
    assert summary.warning_preview(10) == tuple(f"w{i}" for i in range(10))
    assert summary.hidden_warning_count(10) == 2
    assert summary.hidden_error_count == 2

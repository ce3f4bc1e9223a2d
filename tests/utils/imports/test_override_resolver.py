from cxfer.models.references import ReferenceCategory as C
from cxfer.models.resolution import OverrideSelections, ResolutionStatus
from cxfer.utils.imports.override_resolver import OverrideResolver
from cxfer.utils.imports.reference_validator import ReferenceValidator


def _report(package, runtime):
    return ReferenceValidator().validate(package, runtime.snapshot())


def test_apply_marks_unresolved_entry_overridden(sample_package, fake_runtime):
    selections = OverrideSelections()
    selections.set(1, C.MATERIAL, "Stainless")

    outcome = OverrideResolver.apply(_report(sample_package, fake_runtime), selections)

    entry = outcome.report.get(1, C.MATERIAL)
    assert entry.status is ResolutionStatus.OVERRIDDEN
    assert entry.override_name == "Stainless"
    assert entry.applied_name == "Stainless"
    assert outcome.applied == [(1, C.MATERIAL, "Stainless")]
    assert outcome.ignored == []


def test_apply_does_not_modify_input_report(sample_package, fake_runtime):
    report = _report(sample_package, fake_runtime)
    selections = OverrideSelections()
    selections.set(1, C.MATERIAL, "Stainless")

    OverrideResolver.apply(report, selections)

    assert report.get(1, C.MATERIAL).status is ResolutionStatus.UNRESOLVED


def test_skip_leaves_entry_unresolved(sample_package, fake_runtime):
    selections = OverrideSelections()
    selections.skip(1, C.MATERIAL)

    outcome = OverrideResolver.apply(_report(sample_package, fake_runtime), selections)

    assert outcome.report.get(1, C.MATERIAL).status is ResolutionStatus.UNRESOLVED
    assert outcome.applied == []
    assert outcome.ignored == []


def test_resolved_and_absent_entries_are_ignored(sample_package, fake_runtime):
    selections = OverrideSelections()
    selections.set(0, C.MATERIAL, "Stainless")
    selections.set(0, C.SECTION, "Round")
    selections.set(7, C.MATERIAL, "Stainless")

    outcome = OverrideResolver.apply(_report(sample_package, fake_runtime), selections)

    reasons = {(i.item_index, i.category): i.reason for i in outcome.ignored}
    assert reasons == {
        (0, C.MATERIAL): "reference already resolves",
        (0, C.SECTION): "item has no such reference",
        (7, C.MATERIAL): "item has no such reference",
    }
    assert outcome.report.get(0, C.MATERIAL).status is ResolutionStatus.RESOLVED


def test_override_name_is_not_checked_against_target(sample_package, fake_runtime):
    selections = OverrideSelections()
    selections.set(1, C.MATERIAL, "Unobtainium")

    outcome = OverrideResolver.apply(_report(sample_package, fake_runtime), selections)

    assert outcome.report.get(1, C.MATERIAL).override_name == "Unobtainium"

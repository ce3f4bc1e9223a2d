import pytest

from cxfer.models.references import ItemReferences, ReferenceCategory


def test_service_is_the_only_read_only_category():
    read_only = [c for c in ReferenceCategory if not c.overridable]
    assert read_only == [ReferenceCategory.SERVICE]
    assert ReferenceCategory.SERVICE not in ReferenceCategory.rebindable()
    assert len(ReferenceCategory.rebindable()) == 7


@pytest.mark.parametrize(
    "key",
    ["priceListName", "PriceList", "PRICE_LIST", "price_list", "price-list", "Price List", " pricelist "],
)
def test_from_key_accepts_every_spelling(key):
    assert ReferenceCategory.from_key(key) is ReferenceCategory.PRICE_LIST


def test_from_key_rejects_unknown():
    with pytest.raises(ValueError, match="Unknown reference category"):
        ReferenceCategory.from_key("Colour")


def test_item_references_always_has_eight_slots():
    refs = ItemReferences({ReferenceCategory.MATERIAL: "Steel"})
    slots = dict(refs.items())
    assert len(slots) == 8
    assert slots[ReferenceCategory.MATERIAL] == "Steel"
    assert slots[ReferenceCategory.SECTION] is None


def test_blank_names_become_none():
    refs = ItemReferences({ReferenceCategory.MATERIAL: "  ", ReferenceCategory.SERVICE: ""})
    assert refs.get(ReferenceCategory.MATERIAL) is None
    assert list(refs.present()) == []


def test_to_dict_uses_manifest_keys_and_round_trips():
    refs = ItemReferences(
        {ReferenceCategory.SECTION: "Round", ReferenceCategory.FABRICATION_TIMES: "Fab"}
    )
    data = refs.to_dict()
    assert data["sectionDescription"] == "Round"
    assert data["fabricationTimesTableName"] == "Fab"
    assert data["materialName"] is None
    assert ItemReferences.from_dict(data) == refs


def test_replace_returns_a_new_value():
    refs = ItemReferences({ReferenceCategory.MATERIAL: "Steel"})
    changed = refs.replace(ReferenceCategory.MATERIAL, "Copper")
    assert refs[ReferenceCategory.MATERIAL] == "Steel"
    assert changed[ReferenceCategory.MATERIAL] == "Copper"

import pytest
from datetime import date, datetime, timedelta, timezone

from lunchbay.core.exceptions import ValidationError
from lunchbay.domain.inventory.entities import Item, ItemCondition, ItemFields
from lunchbay.domain.inventory.filters import ItemFilter, annotate, sort_key
from lunchbay.domain.inventory.status import ItemStatus

TODAY = date(2025, 10, 16)


def make_item(item_id=1, name="Whole Milk", category="dairy", offset=2, created_at=None):
    return Item(
        id=item_id,
        name=name,
        category_id=1,
        category_name=category,
        quantity=3,
        unit="gallons",
        expiration_date=TODAY + timedelta(days=offset),
        condition=ItemCondition.GOOD,
        created_at=created_at or datetime(2025, 10, 1, tzinfo=timezone.utc),
    )


@pytest.mark.unit
class TestItemFilter:
    def test_empty_filter_matches_everything(self):
        item = annotate(make_item(), TODAY)
        assert ItemFilter().matches(item)

    def test_blank_values_mean_no_filter(self):
        f = ItemFilter(category="  ", search="")
        assert f.category is None
        assert f.search is None

    def test_category_is_normalized(self):
        assert ItemFilter(category=" Dairy ").category == "dairy"

    def test_status_string_is_coerced(self):
        assert ItemFilter(status="expired").status == ItemStatus.EXPIRED

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            ItemFilter(status="stale")

    def test_search_is_case_insensitive_substring(self):
        item = annotate(make_item(name="Whole Milk"), TODAY)
        assert ItemFilter(search="MILK").matches(item)
        assert ItemFilter(search="hole m").matches(item)
        assert not ItemFilter(search="bread").matches(item)

    def test_predicates_are_anded(self):
        item = annotate(make_item(category="dairy", offset=2), TODAY)
        assert ItemFilter(category="dairy", status=ItemStatus.EXPIRING, search="milk").matches(item)
        assert not ItemFilter(category="dairy", status=ItemStatus.FRESH).matches(item)
        assert not ItemFilter(category="fruits", status=ItemStatus.EXPIRING).matches(item)


@pytest.mark.unit
def test_annotate_sets_status_and_days():
    item = annotate(make_item(offset=-2), TODAY)
    assert item.status == ItemStatus.EXPIRED
    assert item.days_until_expiry == -2


@pytest.mark.unit
def test_sort_key_orders_by_expiration_then_newest():
    older = make_item(item_id=1, offset=5, created_at=datetime(2025, 10, 1, tzinfo=timezone.utc))
    newer = make_item(item_id=2, offset=5, created_at=datetime(2025, 10, 2, tzinfo=timezone.utc))
    soonest = make_item(item_id=3, offset=1)

    assert [i.id for i in sorted([older, newer, soonest], key=sort_key)] == [3, 2, 1]


@pytest.mark.unit
class TestItemFields:
    def payload(self, **overrides):
        data = {
            "name": "Milk",
            "category": "dairy",
            "quantity": 3,
            "unit": "gallons",
            "expiration_date": "2025-10-18",
            "condition": "good",
        }
        data.update(overrides)
        return data

    def test_parses_valid_payload(self):
        fields = ItemFields.from_dict(self.payload(notes="  "))
        assert fields.expiration_date == date(2025, 10, 18)
        assert fields.condition == ItemCondition.GOOD
        assert fields.notes is None

    @pytest.mark.parametrize("missing", ["name", "category", "quantity", "unit", "expiration_date", "condition"])
    def test_missing_required_field(self, missing):
        data = self.payload()
        del data[missing]
        with pytest.raises(ValidationError) as exc_info:
            ItemFields.from_dict(data)
        assert missing in exc_info.value.details["missing_fields"]
        assert exc_info.value.status_code == 400

    def test_zero_quantity_allowed(self):
        assert ItemFields.from_dict(self.payload(quantity=0)).quantity == 0

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError):
            ItemFields.from_dict(self.payload(quantity=-1))

    def test_unknown_condition_rejected(self):
        with pytest.raises(ValidationError):
            ItemFields.from_dict(self.payload(condition="rotten"))

    def test_bad_date_rejected(self):
        with pytest.raises(ValidationError):
            ItemFields.from_dict(self.payload(expiration_date="18/10/2025"))

    def test_direct_construction_rejects_negative_quantity(self):
        with pytest.raises(ValidationError) as exc_info:
            ItemFields(
                name="Milk",
                category="dairy",
                quantity=-1,
                unit="gallons",
                expiration_date=date(2025, 10, 18),
                condition=ItemCondition.GOOD,
            )
        assert exc_info.value.details == {"field": "quantity"}

    def test_direct_construction_rejects_raw_condition(self):
        with pytest.raises(ValidationError):
            ItemFields(
                name="Milk",
                category="dairy",
                quantity=1,
                unit="gallons",
                expiration_date=date(2025, 10, 18),
                condition="good",
            )

    @pytest.mark.parametrize("field", ["name", "category", "unit"])
    def test_non_string_text_field_rejected(self, field):
        with pytest.raises(ValidationError) as exc_info:
            ItemFields.from_dict(self.payload(**{field: 42}))
        assert exc_info.value.details == {"field": field}

    def test_string_quantity_rejected(self):
        with pytest.raises(ValidationError):
            ItemFields.from_dict(self.payload(quantity="3"))

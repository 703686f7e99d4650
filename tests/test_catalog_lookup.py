import uuid

import pytest

from inventory.catalog import catalog_snapshot, lookup_menu_items, normalize_item_id


class TestNormalizeItemId:

    def test_canonical_form(self):
        value = uuid.uuid4()

        assert normalize_item_id(str(value).upper()) == str(value)
        assert normalize_item_id(value) == str(value)

    @pytest.mark.parametrize("value", ["ghost", "", None, 42, "1234"])
    def test_not_an_id(self, value):
        assert normalize_item_id(value) is None


@pytest.mark.django_db
class TestLookupMenuItems:

    def test_single_query_for_distinct_ids(self, menu_item, croissant, django_assert_num_queries):
        with django_assert_num_queries(1):
            found = lookup_menu_items([str(menu_item.id), str(croissant.id), str(menu_item.id)])
            # category is joined in the same query
            names = {item_id: item.category.name for item_id, item in found.items()}

        assert names == {str(menu_item.id): "coffee", str(croissant.id): "food"}

    def test_unknown_ids_are_absent(self, menu_item):
        found = lookup_menu_items(["ghost", str(uuid.uuid4()), str(menu_item.id)])

        assert list(found) == [str(menu_item.id)]

    def test_no_valid_ids_skips_query(self, django_assert_num_queries):
        with django_assert_num_queries(0):
            assert lookup_menu_items(["ghost"]) == {}


@pytest.mark.django_db
def test_catalog_snapshot(menu_item, croissant):
    snapshot = catalog_snapshot()

    assert set(snapshot) == {str(menu_item.id), str(croissant.id)}
    assert snapshot[str(croissant.id)].name == "Croissant"

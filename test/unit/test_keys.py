from decimal import Decimal

from powered_dynamo.keys import same_key, unique_keys


class TestSameKey:
    """Test key comparison."""

    def test_equal_keys(self) -> None:
        assert same_key({"id": "1", "sort": 2}, {"id": "1", "sort": 2})

    def test_different_values(self) -> None:
        assert not same_key({"id": "1"}, {"id": "2"})

    def test_key_matches_full_item(self) -> None:
        assert same_key({"id": "1"}, {"id": "1", "name": "Homer"})

    def test_missing_attribute_does_not_match(self) -> None:
        assert not same_key({"id": "1", "sort": "a"}, {"id": "1"})

    def test_attribute_order_is_irrelevant(self) -> None:
        assert same_key({"id": "1", "sort": "a"}, {"sort": "a", "id": "1"})

    def test_numbers_compare_by_value(self) -> None:
        assert same_key({"id": 1}, {"id": Decimal("1")})


class TestUniqueKeys:
    """Test key deduplication."""

    def test_first_occurrence_wins_and_order_is_kept(self) -> None:
        keys = [{"id": "b"}, {"id": "a"}, {"id": "b"}, {"id": "c"}, {"id": "a"}]

        assert unique_keys(keys) == [{"id": "b"}, {"id": "a"}, {"id": "c"}]

    def test_composite_keys(self) -> None:
        keys = [{"id": "1", "sort": "x"}, {"id": "1", "sort": "y"}, {"id": "1", "sort": "x"}]

        assert unique_keys(keys) == [{"id": "1", "sort": "x"}, {"id": "1", "sort": "y"}]

    def test_empty(self) -> None:
        assert unique_keys([]) == []

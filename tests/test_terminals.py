import pytest

from lazy import Sequence
from fruit_models import Fruit, fruit_name, make_fruit_basket


def is_pear(fruit):
    return fruit.name == "pear"


class TestAnyAndSome:
    """Test any(), some() and all()"""

    @pytest.mark.parametrize("method", ["any", "some"])
    def test_true_if_pear_present(self, method):
        fruits = make_fruit_basket(Fruit("apple"), Fruit("pear"), Fruit("pineapple"))
        assert getattr(fruits, method)(is_pear) is True

    @pytest.mark.parametrize("method", ["any", "some"])
    def test_false_if_no_pear(self, method):
        fruits = make_fruit_basket(Fruit("apple"), Fruit("banana"))
        assert getattr(fruits, method)(is_pear) is False

    @pytest.mark.parametrize("method", ["any", "some"])
    def test_true_on_infinite_sequence(self, method):
        infinite_fruits = Sequence.repeat(Fruit("pear"))
        assert getattr(infinite_fruits, method)(is_pear) is True

    @pytest.mark.parametrize("method", ["any", "some"])
    def test_predicate_checking_for_none(self, method):
        strings = Sequence.of("abc", None, "def")
        assert getattr(strings, method)(lambda s: s is None) is True

    def test_any_without_predicate_uses_truthiness(self):
        assert Sequence.of(0, "", None, 3).any() is True
        assert Sequence.of(0, "", None).any() is False

    def test_any_stops_at_first_match(self, call_counter):
        Sequence.create(range(100)).map(call_counter).any(lambda x: x == 2)
        assert call_counter.calls == 3

    def test_all(self):
        data = Sequence.of(1, 2, 3, 4, 5)
        assert data.all(lambda x: x > 0) is True
        assert data.all(lambda x: x > 3) is False
        assert Sequence.empty().all(lambda x: False) is True

    def test_all_short_circuits_on_infinite_sequence(self):
        assert Sequence.repeat(0).all() is False


class TestFirstAndLast:
    """Test first() and last()"""

    def test_first_of_empty(self):
        assert Sequence.empty().first() is None

    def test_first_with_default(self):
        assert Sequence.empty().first("none") == "none"

    def test_first_of_non_empty(self):
        assert Sequence.of("abc", "def").first() == "abc"

    def test_first_of_infinite(self):
        assert Sequence.repeat("abc").first() == "abc"

    def test_last_of_empty(self):
        assert Sequence.empty().last() is None

    def test_last_of_non_empty(self):
        assert Sequence.of("Johnny", "Freddy", "Ringo").last() == "Ringo"


class TestLength:
    """Test length()"""

    def test_empty(self):
        assert Sequence.empty().length() == 0

    def test_non_empty(self):
        assert Sequence.of("one", "two", "three", "four", "five").length() == 5


class TestJoin:
    """Test join()"""

    def test_empty(self):
        assert Sequence.empty().join(",") == ""

    def test_singleton_has_no_delimiter(self):
        assert Sequence.singleton("xyz").join(".") == "xyz"

    def test_empty_delimiter(self):
        assert Sequence.of("ab", "cd", "efg").join("") == "abcdefg"

    def test_inserts_delimiter(self):
        assert Sequence.repeat(1).take(5).join(",") == "1,1,1,1,1"

    def test_empty_strings(self):
        assert Sequence.of("", "", "A", "").join(":") == "::A:"


class TestToMap:
    """Test to_map()"""

    def test_empty(self):
        assert Sequence.empty().to_map(fruit_name) == {}

    def test_by_fruit_name(self):
        mapping = make_fruit_basket(Fruit("apple"), Fruit("pear"), Fruit("banana")).to_map(fruit_name)

        assert mapping == {
            "apple": Fruit("apple"),
            "pear": Fruit("pear"),
            "banana": Fruit("banana"),
        }

    def test_by_fruit_name_and_name_length(self):
        mapping = (
            make_fruit_basket(Fruit("apple"), Fruit("pear"), Fruit("banana"))
            .to_map(fruit_name, lambda f: len(f.name))
        )

        assert mapping == {"apple": 5, "pear": 4, "banana": 6}

    def test_last_write_wins(self):
        mapping = Sequence.of("a1", "b1", "a2").to_map(lambda s: s[0])
        assert mapping == {"a": "a2", "b": "b1"}
        assert list(mapping) == ["a", "b"], "Key order follows first insertion"

    def test_falsy_values_are_kept(self):
        mapping = Sequence.of("x").to_map(lambda s: s, lambda s: 0)
        assert mapping == {"x": 0}


class TestToListAndSet:
    """Test to_list() and to_set()"""

    def test_to_list_keeps_order_and_duplicates(self):
        assert Sequence.of(2, 1, 2).to_list() == [2, 1, 2]

    def test_to_set_collapses_duplicates(self):
        assert Sequence.of(2, 1, 2).to_set() == {1, 2}

    def test_plain_iteration(self):
        assert [x * 10 for x in Sequence.of(1, 2)] == [10, 20]

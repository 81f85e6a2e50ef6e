"""Unit tests for nested entities, nested collections and error aggregation."""

import pytest

from core.errors import NestedValueError
from fake_domain import ChildrenEntity, FatherEntity, Order, OrderLine, OrderLines

BAR_ERROR = "foo accepts just 'bar' as value"


class TestChildren:
    def test_builds_child_entities(self):
        father = FatherEntity({"children": [{}, {}]})

        assert type(father.children[0]) is ChildrenEntity
        assert type(father.children[1]) is ChildrenEntity

    def test_includes_errors_of_children(self):
        father = FatherEntity({"foo": "test", "children": [{"foo": "bar"}]})

        assert father.get_errors() == {"foo": {"errors": [BAR_ERROR]}}

        father.children.append(ChildrenEntity({"foo": "bar invalid "}))

        assert father.get_errors() == {
            "foo": {"errors": [BAR_ERROR]},
            "children": {1: {"foo": {"errors": [BAR_ERROR]}}},
        }

    def test_child_mutations_show_in_parent_validity(self):
        father = FatherEntity({"children": [{"foo": "bar"}]})
        assert father.valid is True

        father.children[0].foo = "nope"
        assert father.valid is False

        father.children[0].foo = "bar"
        assert father.valid is True

    def test_existing_child_instances_are_kept(self):
        child = ChildrenEntity({"foo": "bar"})
        father = FatherEntity({"children": [child, {"foo": "bar"}]})

        assert father.children[0] is child

    def test_missing_children_stay_none(self):
        father = FatherEntity()

        assert father.children is None
        assert father.valid is True

    def test_single_mapping_builds_one_child(self):
        father = FatherEntity({"children": {"foo": "nope"}})

        assert isinstance(father.children, ChildrenEntity)
        assert father.get_errors() == {"children": {"foo": {"errors": [BAR_ERROR]}}}

    @pytest.mark.parametrize("value", ["bar", 3, [{"foo": "bar"}, "bar"]])
    def test_unbuildable_values_raise(self, value):
        with pytest.raises(NestedValueError):
            FatherEntity({"children": value})

    def test_assignment_builds_children(self):
        father = FatherEntity()
        father.children = [{"foo": "bar"}, {"foo": "x"}]

        assert all(isinstance(child, ChildrenEntity) for child in father.children)
        assert father.get_errors() == {"children": {1: {"foo": {"errors": [BAR_ERROR]}}}}

    def test_dump_materializes_children(self):
        father = FatherEntity({"children": [{"foo": "bar"}]})

        assert father.dump() == {"foo": "bar", "children": [{"foo": "bar"}]}
        assert isinstance(father.fetch()["children"][0], ChildrenEntity)

    def test_accidental_cycle_terminates(self):
        father = FatherEntity({"foo": "nope", "children": []})
        father.children.append(father)

        assert father.get_errors() == {"foo": {"errors": [BAR_ERROR]}}


class TestNestedCollection:
    def test_default_factory_builds_empty_collection(self):
        order = Order({"number": "A-1"})

        assert isinstance(order.lines, OrderLines)
        assert len(order.lines) == 0
        assert order.get_errors() == {"lines": {"errors": ["an order needs at least one line"]}}

    def test_line_errors_are_index_keyed(self):
        order = Order({"number": "A-1", "lines": [{"sku": "x", "qty": 1}, {"sku": "", "qty": 0}]})

        assert order.get_errors() == {
            "lines": {
                1: {
                    "sku": {"errors": ["sku is required"]},
                    "qty": {"errors": ["qty must be a positive integer"]},
                }
            }
        }

    def test_own_and_child_errors_are_merged(self):
        order = Order({"number": "A-1", "lines": []})
        order.lines.append({"sku": "", "qty": 1})

        # `lines` was validated while empty; the append does not revalidate it.
        assert order.get_errors() == {
            "lines": {
                "errors": ["an order needs at least one line"],
                0: {"sku": {"errors": ["sku is required"]}},
            }
        }

    def test_collection_instance_is_kept(self):
        lines = OrderLines([OrderLine({"sku": "x", "qty": 2})])
        order = Order({"number": "A-1", "lines": lines})

        assert order.lines is lines
        assert order.valid is True
        assert order.dump() == {"number": "A-1", "lines": [{"sku": "x", "qty": 2}]}

    def test_mapping_is_not_a_collection(self):
        with pytest.raises(NestedValueError):
            Order({"number": "A-1", "lines": {"sku": "x"}})

    def test_entity_field_keeps_matching_collection(self):
        lines = OrderLines([{"sku": "x", "qty": 1}])

        assert OrderLine.build_nested(lines) is lines

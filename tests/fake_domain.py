"""Example entity and collection types shared by the test modules."""

from __future__ import annotations

from core.domain import Entity, EntityCollection, collection_of, entity_schema

DEFAULT_FIELD = "nickname"
DEFAULT_VALUE = "Ada"


def always_valid(*_args):
    return True


def no_check(*_args):
    return None


def only_bar(data, field_name, entity_name=None):
    if data[field_name] != "bar":
        return f"{field_name} accepts just 'bar' as value"


def equals_valid(data, field_name, entity_name):
    if data[field_name] != "valid":
        return f"{field_name} wrong on {entity_name}"


def equals_valid_error(data, field_name, entity_name):
    if data[field_name] != "valid":
        return ValueError(f"{field_name} wrong on {entity_name}")


def not_empty(data, field_name, entity_name):
    if not data[field_name]:
        return f"{field_name} is required"


def positive(data, field_name, entity_name):
    value = data[field_name]
    if not isinstance(value, int) or value <= 0:
        return f"{field_name} must be a positive integer"


def has_lines(data, field_name, entity_name):
    if not data[field_name]:
        return "an order needs at least one line"


@entity_schema(
    {
        DEFAULT_FIELD: {"validator": no_check, "defaultValue": DEFAULT_VALUE},
        f"_{DEFAULT_FIELD}": {"validator": no_check, "default_value": f"_{DEFAULT_VALUE}"},
    }
)
class FakeEntityWithDefault(Entity):
    pass


@entity_schema({"name": always_valid, "price": always_valid})
class ProductEntity(Entity):
    pass


@collection_of(ProductEntity)
class ProductEntityCollection(EntityCollection):
    def sorted_by_name(self):
        return self.sort_by("name")


@entity_schema(
    {
        "field": equals_valid,
        "other_field": {"validator": equals_valid_error, "default_value": "bla"},
    }
)
class Validatable(Entity):
    pass


@entity_schema({"foo": only_bar})
class ChildrenEntity(Entity):
    pass


@entity_schema(
    {
        "foo": {"validator": only_bar, "default_value": "bar"},
        "children": {"validator": no_check, "type": ChildrenEntity},
    }
)
class FatherEntity(Entity):
    pass


@entity_schema({"sku": not_empty, "qty": positive})
class OrderLine(Entity):
    pass


@collection_of(OrderLine)
class OrderLines(EntityCollection):
    pass


@entity_schema(
    {
        "number": not_empty,
        "lines": {"validator": has_lines, "type": OrderLines, "default_factory": list},
    }
)
class Order(Entity):
    pass

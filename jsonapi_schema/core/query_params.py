"""Query Parameter Schema Builder — hrefSchema query properties and href suffix.

Invariants:
    - index routes: filter, sort, page, include; suffix "{?filter,sort,page,include}"
    - relationship mutation routes: no query parameters and no suffix (None)
    - every other route: include only; suffix "{?include}"
    - A field resolving to no attribute/relationship/aggregate raises
      UnknownFieldError; it is never skipped
    - Sort alternatives follow field order: "(a|-a|b|-b),*"
"""

from dataclasses import dataclass

from jsonapi_schema.core.domain_types import (
    PLACEHOLDER,
    PrimitiveTag,
    RELATIONSHIP_ROUTE_KINDS,
    RouteKind,
    SchemaFragment,
)
from jsonapi_schema.core.errors import UnknownFieldError
from jsonapi_schema.core.resource_model import (
    AggregateDefinition,
    ArrayType,
    AttributeDefinition,
    CustomType,
    PrimitiveType,
    ResourceDefinition,
    RouteDefinition,
)
from jsonapi_schema.core.type_mapper import normalize_type

PAGE_NUMBER_PATTERN = "^[1-9][0-9]*$"

FILTER_PREDICATES: dict[PrimitiveTag, SchemaFragment] = {
    PrimitiveTag.UUID: {"type": "string", "format": "uuid"},
    PrimitiveTag.STRING: {"type": "string"},
    PrimitiveTag.BOOLEAN: {"type": "boolean"},
    PrimitiveTag.INTEGER: {"type": "integer"},
    PrimitiveTag.UTC_DATETIME: {"type": "string", "format": "date-time"},
}

ANY_PREDICATE: SchemaFragment = {"type": "any"}


@dataclass(frozen=True)
class QueryParameters:
    properties: dict[str, SchemaFragment]
    suffix: str


def type_filter_schema(descriptor: PrimitiveType | ArrayType | CustomType) -> SchemaFragment:
    descriptor = normalize_type(descriptor)
    if isinstance(descriptor, ArrayType):
        return dict(ANY_PREDICATE)
    return dict(FILTER_PREDICATES[descriptor.tag])


def filter_properties(resource: ResourceDefinition) -> dict[str, SchemaFragment]:
    """One predicate per declared field, keyed by field name."""
    props = {}
    for name in resource.fields:
        definition = resource.resolve_field(name)
        if definition is None:
            raise UnknownFieldError(resource.type, name)
        if isinstance(definition, AttributeDefinition):
            props[name] = type_filter_schema(definition.type)
        elif isinstance(definition, AggregateDefinition):
            props[name] = type_filter_schema(definition.result_type)
        else:
            props[name] = {"type": "string"}
    return props


def sort_format(resource: ResourceDefinition) -> str:
    sorts = []
    for attr in resource.field_attributes():
        if attr.sortable:
            sorts.extend([attr.name, f"-{attr.name}"])
    return f"({'|'.join(sorts)}),*"


def page_properties() -> dict[str, SchemaFragment]:
    return {
        "limit": {"type": "string", "pattern": PAGE_NUMBER_PATTERN},
        "offset": {"type": "string", "pattern": PAGE_NUMBER_PATTERN},
    }


def include_schema() -> SchemaFragment:
    # Include path grammar is not defined yet
    return {"type": "string", "format": PLACEHOLDER}


def build_query_parameters(
    resource: ResourceDefinition, route: RouteDefinition,
) -> QueryParameters | None:
    """Query parameter properties for `route`, or None when it accepts none."""
    if route.kind in RELATIONSHIP_ROUTE_KINDS:
        return None
    if route.kind == RouteKind.INDEX:
        return QueryParameters(
            properties={
                "filter": {"type": "object", "properties": filter_properties(resource)},
                "sort": {"type": "string", "format": sort_format(resource)},
                "page": {"type": "object", "properties": page_properties()},
                "include": include_schema(),
            },
            suffix="{?filter,sort,page,include}",
        )
    return QueryParameters(properties={"include": include_schema()}, suffix="{?include}")

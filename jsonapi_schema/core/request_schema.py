"""Request Schema Builder — the inbound payload schema per route kind.

Invariants:
    - index/get/delete accept any payload: {}
    - post: attributes.required = writable AND not nullable AND no default AND not generated
    - patch: same envelope plus `id`; nothing required under attributes
    - relationship mutations: a linkage array; `meta` only for join-backed relationships
    - additionalProperties is false at every object level of a write envelope
"""

from jsonapi_schema.core.domain_types import (
    READ_ONLY_ROUTE_KINDS,
    RouteKind,
    SchemaFragment,
)
from jsonapi_schema.core.errors import UnknownFieldError, UnknownResourceError
from jsonapi_schema.core.resource_model import (
    AttributeDefinition,
    RelationshipDefinition,
    ResourceDefinition,
    ResourceModel,
    RouteDefinition,
)
from jsonapi_schema.core.resource_schema import relationship_properties
from jsonapi_schema.core.type_mapper import map_type


def require_resource(model: ResourceModel, type_name: str) -> ResourceDefinition:
    resource = model.resource(type_name)
    if resource is None:
        raise UnknownResourceError(type_name)
    return resource


def identifier_schema(resource: ResourceDefinition) -> SchemaFragment:
    """Type the resource's identifier attribute."""
    attr = resource.attribute(resource.primary_key)
    if attr is None:
        raise UnknownFieldError(resource.type, resource.primary_key)
    return map_type(attr.type)


def _writable_attributes(resource: ResourceDefinition) -> list[AttributeDefinition]:
    return [a for a in resource.field_attributes() if a.writable]


def _is_required_on_create(attr: AttributeDefinition) -> bool:
    return not (attr.nullable or attr.has_default or attr.generated)


def _write_envelope(data_properties: dict) -> SchemaFragment:
    return {
        "type": "object",
        "required": ["data"],
        "additionalProperties": False,
        "properties": {
            "data": {
                "type": "object",
                "additionalProperties": False,
                "properties": data_properties,
            },
        },
    }


def _relationships_object(resource: ResourceDefinition) -> SchemaFragment:
    return {
        "type": "object",
        "additionalProperties": False,
        "properties": relationship_properties(resource, writable_only=True),
    }


def create_schema(resource: ResourceDefinition) -> SchemaFragment:
    writable = _writable_attributes(resource)
    return _write_envelope({
        "type": {"const": resource.type},
        "attributes": {
            "type": "object",
            "additionalProperties": False,
            "required": [a.name for a in writable if _is_required_on_create(a)],
            "properties": {a.name: map_type(a.type) for a in writable},
        },
        "relationships": _relationships_object(resource),
    })


def update_schema(resource: ResourceDefinition) -> SchemaFragment:
    return _write_envelope({
        "id": identifier_schema(resource),
        "type": {"const": resource.type},
        "attributes": {
            "type": "object",
            "additionalProperties": False,
            "properties": {a.name: map_type(a.type) for a in _writable_attributes(resource)},
        },
        "relationships": _relationships_object(resource),
    })


def join_attribute_properties(
    model: ResourceModel, relationship: RelationshipDefinition,
) -> dict[str, SchemaFragment]:
    through = require_resource(model, relationship.through)
    return {
        attr.name: map_type(attr.type)
        for attr in through.attributes
        if attr.name in relationship.join_attributes and attr.writable
    }


def relationship_identifiers_schema(
    model: ResourceModel, relationship: RelationshipDefinition,
) -> SchemaFragment:
    """Linkage array document used by the relationship mutation routes."""
    destination = require_resource(model, relationship.destination)
    item_properties = {
        "id": identifier_schema(destination),
        "type": {"const": destination.type},
    }
    if relationship.is_join_backed:
        item_properties["meta"] = {
            "type": "object",
            "properties": join_attribute_properties(model, relationship),
            "additionalProperties": False,
        }
    return {
        "type": "object",
        "required": ["data"],
        "additionalProperties": False,
        "properties": {
            "data": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["id", "type"],
                    "additionalProperties": False,
                    "properties": item_properties,
                },
            },
        },
    }


def route_relationship(
    resource: ResourceDefinition, route: RouteDefinition,
) -> RelationshipDefinition:
    relationship = resource.relationship(route.relationship or "")
    if relationship is None:
        raise UnknownFieldError(resource.type, route.relationship or "")
    return relationship


def build_request_schema(
    model: ResourceModel, resource: ResourceDefinition, route: RouteDefinition,
) -> SchemaFragment:
    if route.kind in READ_ONLY_ROUTE_KINDS:
        return {}
    if route.kind == RouteKind.POST:
        return create_schema(resource)
    if route.kind == RouteKind.PATCH:
        return update_schema(resource)
    return relationship_identifiers_schema(model, route_relationship(resource, route))

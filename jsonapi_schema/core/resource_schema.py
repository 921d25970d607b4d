"""Resource Definition Compiler — the canonical `$ref`-able object per resource.

Invariants:
    - Every declared field must resolve, or UnknownFieldError is raised
    - attributes.required is exactly the non-nullable attribute fields, in field order
    - Only attribute fields appear under attributes; only relationship fields
      under relationships; aggregates are not part of the resource object
    - Relationship linkage: `one` is null or an identifier, `many` is a unique
      array of identifiers
"""

import logging

from jsonapi_schema.core.domain_types import Cardinality, SchemaFragment
from jsonapi_schema.core.errors import UnknownFieldError
from jsonapi_schema.core.resource_model import (
    RelationshipDefinition,
    ResourceDefinition,
)
from jsonapi_schema.core.type_mapper import map_type

logger = logging.getLogger(__name__)


def definition_ref(name: str) -> SchemaFragment:
    return {"$ref": f"#/definitions/{name}"}


def check_fields_resolve(resource: ResourceDefinition) -> None:
    for name in resource.fields:
        if resource.resolve_field(name) is None:
            raise UnknownFieldError(resource.type, name)


def resource_identifier_schema(destination: str) -> SchemaFragment:
    return {
        "description": f"Resource identifiers of the related {destination}",
        "type": "object",
        "required": ["type", "id"],
        "additionalProperties": False,
        "properties": {
            "type": {"const": destination},
            "id": {"type": "string"},
        },
    }


def relationship_data_schema(relationship: RelationshipDefinition) -> SchemaFragment:
    """Linkage schema for the `data` member of a relationship object."""
    destination = relationship.destination
    if relationship.cardinality == Cardinality.ONE:
        return {
            "description": f"References to the related {destination}",
            "anyOf": [
                {"type": "null"},
                resource_identifier_schema(destination),
            ],
        }
    return {
        "description": f"An array of references to the related {destination}",
        "type": "array",
        "items": resource_identifier_schema(destination),
        "uniqueItems": True,
    }


def relationship_properties(
    resource: ResourceDefinition, writable_only: bool = False,
) -> dict[str, SchemaFragment]:
    return {
        rel.name: {"data": relationship_data_schema(rel)}
        for rel in resource.field_relationships()
        if rel.writable or not writable_only
    }


def _attributes_schema(resource: ResourceDefinition) -> SchemaFragment:
    attributes = resource.field_attributes()
    return {
        "description": f"An attributes object for a {resource.type}",
        "type": "object",
        "required": [a.name for a in attributes if not a.nullable],
        "properties": {a.name: map_type(a.type) for a in attributes},
        "additionalProperties": False,
    }


def _relationships_schema(resource: ResourceDefinition) -> SchemaFragment:
    return {
        "description": f"A relationships object for a {resource.type}",
        "type": "object",
        "properties": relationship_properties(resource),
        "additionalProperties": False,
    }


def resource_object_schema(resource: ResourceDefinition) -> SchemaFragment:
    """Compile the response-side "resource object" schema for one resource."""
    check_fields_resolve(resource)
    logger.debug(
        "Compiling resource definition", extra={"resource_type": resource.type},
    )
    return {
        "description": f'A "Resource object" representing a {resource.type}',
        "type": "object",
        "required": ["type", "id"],
        "properties": {
            "type": {"additionalProperties": False},
            "id": {"type": "string"},
            "attributes": _attributes_schema(resource),
            "relationships": _relationships_schema(resource),
        },
        "additionalProperties": False,
    }

"""Response Schema Builder — the outbound payload schema per route kind."""

from jsonapi_schema.core.domain_types import (
    RELATIONSHIP_ROUTE_KINDS,
    RouteKind,
    SchemaFragment,
)
from jsonapi_schema.core.resource_model import (
    ResourceDefinition,
    ResourceModel,
    RouteDefinition,
)
from jsonapi_schema.core.request_schema import (
    relationship_identifiers_schema,
    route_relationship,
)
from jsonapi_schema.core.resource_schema import definition_ref

# A successful delete has no response body
EMPTY_BODY_SCHEMA: SchemaFragment = {"type": "null"}


def _one_of_or_errors(success: SchemaFragment) -> SchemaFragment:
    return {"oneOf": [success, definition_ref("errors")]}


def build_response_schema(
    model: ResourceModel, resource: ResourceDefinition, route: RouteDefinition,
) -> SchemaFragment:
    if route.kind == RouteKind.INDEX:
        return _one_of_or_errors({
            "data": {
                "description": f"An array of resource objects representing a {resource.type}",
                "type": "array",
                "items": definition_ref(resource.type),
                "uniqueItems": True,
            },
        })
    if route.kind == RouteKind.DELETE:
        return _one_of_or_errors(dict(EMPTY_BODY_SCHEMA))
    if route.kind in RELATIONSHIP_ROUTE_KINDS:
        return relationship_identifiers_schema(model, route_relationship(resource, route))
    return _one_of_or_errors({"data": definition_ref(resource.type)})

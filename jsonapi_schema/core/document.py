"""Document Assembler — merges definitions and link descriptions into one document.

Invariants:
    - Pure: the model is never mutated; the only outputs are the returned
      document or a raised SchemaCompilationError
    - Fatal at the first error: no partial document is ever returned
    - Deterministic: definitions follow base order then model order; links
      follow model order then route declaration order
    - Link descriptions omit `schema` for get and delete route kinds
    - POST and PATCH routes accept only [] or ["id"] as path parameters

Design Decisions:
    - compile_document raises; compile_result returns a CompileResult so the
      caller can branch on the error code without try/except
    - compile_cached memoizes on the frozen model itself (content hash/eq)
      and hands out deep copies so the cached document stays pristine
"""

import copy
import logging
from dataclasses import dataclass
from functools import lru_cache

from jsonapi_schema.core.domain_types import (
    SHAPE_EXEMPT_METHODS,
    DEFAULT_SCHEMA_ID,
    JSON_API_MEDIA_TYPE,
    PLACEHOLDER,
    SCHEMA_DIALECT,
    SCHEMALESS_ROUTE_KINDS,
    SchemaFragment,
)
from jsonapi_schema.core.errors import (
    SchemaCompilationError,
    UnsupportedRouteShapeError,
)
from jsonapi_schema.core.query_params import build_query_parameters
from jsonapi_schema.core.request_schema import build_request_schema
from jsonapi_schema.core.resource_model import (
    ResourceDefinition,
    ResourceModel,
    RouteDefinition,
)
from jsonapi_schema.core.resource_schema import definition_ref, resource_object_schema
from jsonapi_schema.core.response_schema import build_response_schema
from jsonapi_schema.core.uri_template import build_uri_template

logger = logging.getLogger(__name__)

SUPPORTED_BODY_ROUTE_PARAMETERS = ((), ("id",))


# ─── Fixed Definitions ───────────────────────────────────────────

def header_schema() -> SchemaFragment:
    return {
        "type": "object",
        "properties": {
            "content-type": {
                "type": "array",
                "items": {"const": JSON_API_MEDIA_TYPE},
            },
            "accept": {
                "type": "array",
                "items": {"type": "string"},
            },
        },
        "additionalProperties": True,
    }


def base_definitions() -> dict[str, SchemaFragment]:
    return {
        "link": {
            "description": (
                "A link **MUST** be represented as either: a string containing "
                "the link's URL or a link object."
            ),
            "type": "string",
        },
        "links": {
            "type": "object",
            "additionalProperties": definition_ref("link"),
        },
        "error": {
            "type": "object",
            "properties": {
                "id": {
                    "description": "A unique identifier for this particular occurrence of the problem.",
                    "type": "string",
                },
                "links": definition_ref("links"),
                "status": {
                    "description": (
                        "The HTTP status code applicable to this problem, "
                        "expressed as a string value."
                    ),
                    "type": "string",
                },
                "code": {
                    "description": "An application-specific error code, expressed as a string value.",
                    "type": "string",
                },
                "title": {
                    "description": (
                        "A short, human-readable summary of the problem. It **SHOULD NOT** "
                        "change from occurrence to occurrence of the problem, except for "
                        "purposes of localization."
                    ),
                    "type": "string",
                },
                "detail": {
                    "description": (
                        "A human-readable explanation specific to this occurrence "
                        "of the problem."
                    ),
                    "type": "string",
                },
                "source": {
                    "type": "object",
                    "properties": {
                        "pointer": {
                            "description": (
                                "A JSON Pointer [RFC6901] to the associated entity in the "
                                "request document [e.g. \"/data\" for a primary data object, "
                                "or \"/data/attributes/title\" for a specific attribute]."
                            ),
                            "type": "string",
                        },
                        "parameter": {
                            "description": "A string indicating which query parameter caused the error.",
                            "type": "string",
                        },
                    },
                },
            },
            "additionalProperties": False,
        },
        "errors": {
            "type": "array",
            "items": definition_ref("error"),
            "uniqueItems": True,
        },
    }


# ─── Link Descriptions ───────────────────────────────────────────

def check_route_shape(route: RouteDefinition, parameters: tuple[str, ...]) -> None:
    if route.method in SHAPE_EXEMPT_METHODS:
        return
    if parameters not in SUPPORTED_BODY_ROUTE_PARAMETERS:
        raise UnsupportedRouteShapeError(route.path, list(parameters))


def link_description(
    model: ResourceModel, resource: ResourceDefinition, route: RouteDefinition,
) -> SchemaFragment:
    """Build the Hyper-Schema link description object for one route."""
    template = build_uri_template(model.prefix, route.path)
    check_route_shape(route, template.parameters)

    path_properties = {name: {"type": "string"} for name in template.parameters}
    query = build_query_parameters(resource, route)
    if query is None:
        properties, suffix = path_properties, ""
    else:
        properties, suffix = {**query.properties, **path_properties}, query.suffix

    link = {
        "href": template.href + suffix,
        "hrefSchema": {
            "required": list(template.parameters),
            "properties": properties,
        },
        "description": PLACEHOLDER,
        "method": route.method.value.upper(),
        "rel": route.kind.value,
    }
    if route.kind not in SCHEMALESS_ROUTE_KINDS:
        link["schema"] = build_request_schema(model, resource, route)
    link["targetSchema"] = build_response_schema(model, resource, route)
    link["headerSchema"] = header_schema()
    return link


# ─── Assembly ────────────────────────────────────────────────────

def compile_document(
    model: ResourceModel, schema_id: str = DEFAULT_SCHEMA_ID,
) -> SchemaFragment:
    """Compile the full Hyper-Schema document for every eligible resource."""
    resources = model.eligible_resources()

    definitions = base_definitions()
    for resource in resources:
        definitions[resource.type] = resource_object_schema(resource)

    links = [
        link_description(model, resource, route)
        for resource in resources
        for route in resource.routes
    ]

    logger.info(
        f"Compiled schema for {len(resources)} resource(s)",
        extra={"link_count": len(links)},
    )
    return {
        "$schema": SCHEMA_DIALECT,
        "$id": schema_id,
        "definitions": definitions,
        "links": links,
    }


@dataclass(frozen=True)
class CompileResult:
    """Either a document or the error that stopped compilation, never both."""
    document: SchemaFragment | None = None
    error: SchemaCompilationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def compile_result(
    model: ResourceModel, schema_id: str = DEFAULT_SCHEMA_ID,
) -> CompileResult:
    try:
        return CompileResult(document=compile_document(model, schema_id))
    except SchemaCompilationError as e:
        return CompileResult(error=e)


@lru_cache(maxsize=32)
def _compile_memoized(model: ResourceModel, schema_id: str) -> SchemaFragment:
    return compile_document(model, schema_id)


def compile_cached(
    model: ResourceModel, schema_id: str = DEFAULT_SCHEMA_ID,
) -> SchemaFragment:
    """compile_document, memoized by model content."""
    return copy.deepcopy(_compile_memoized(model, schema_id))

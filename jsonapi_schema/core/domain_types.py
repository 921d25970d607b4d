"""Domain Types — enums and constants shared by every compiler stage.

Invariants:
    - All valid tags encoded as Enums, no raw string matching in builders
    - str Enums: .value is exactly the string written into the schema document
    - Route kind groupings are frozensets, the single source of truth for dispatch

Design Decisions:
    - str Enums: serialize to JSON without custom encoders, and load from the
      resource model file without adapters
"""

from enum import Enum
from typing import Any


# ─── Value Types ─────────────────────────────────────────────────

SchemaFragment = dict[str, Any]


# ─── Enums ───────────────────────────────────────────────────────

class PrimitiveTag(str, Enum):
    """Attribute types with a direct JSON Schema mapping."""
    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    UTC_DATETIME = "utc_datetime"
    UUID = "uuid"


class Cardinality(str, Enum):
    """Relationship cardinality: decides single vs array linkage."""
    ONE = "one"
    MANY = "many"


class AggregateKind(str, Enum):
    """Aggregate kinds: each maps to exactly one result type."""
    COUNT = "count"
    SUM = "sum"
    EXISTS = "exists"


class HttpMethod(str, Enum):
    GET = "get"
    POST = "post"
    PATCH = "patch"
    DELETE = "delete"


class RouteKind(str, Enum):
    """Route kinds. The value is emitted verbatim as the link `rel`."""
    INDEX = "index"
    GET = "get"
    POST = "post"
    PATCH = "patch"
    DELETE = "delete"
    POST_TO_RELATIONSHIP = "post_to_relationship"
    PATCH_RELATIONSHIP = "patch_relationship"
    DELETE_FROM_RELATIONSHIP = "delete_from_relationship"


# ─── Route Kind Groups ───────────────────────────────────────────

RELATIONSHIP_ROUTE_KINDS = frozenset({
    RouteKind.POST_TO_RELATIONSHIP,
    RouteKind.PATCH_RELATIONSHIP,
    RouteKind.DELETE_FROM_RELATIONSHIP,
})

# Kinds that carry no request body
READ_ONLY_ROUTE_KINDS = frozenset({
    RouteKind.INDEX,
    RouteKind.GET,
    RouteKind.DELETE,
})

# Kinds whose link description omits the `schema` key
SCHEMALESS_ROUTE_KINDS = frozenset({RouteKind.GET, RouteKind.DELETE})

# Methods exempt from the path parameter shape check, whatever the kind
SHAPE_EXEMPT_METHODS = frozenset({HttpMethod.GET, HttpMethod.DELETE})


# ─── Document Constants ──────────────────────────────────────────

SCHEMA_DIALECT = "http://json-schema.org/draft-06/schema#"
DEFAULT_SCHEMA_ID = "autogenerated_ash_json_api_schema"
JSON_API_MEDIA_TYPE = "application/vnd.api+json"
PLACEHOLDER = "pending"

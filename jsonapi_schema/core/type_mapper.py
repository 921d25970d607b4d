"""Type Mapper — attribute type descriptor to JSON Schema fragment.

Invariants:
    - Primitive tags map through PRIMITIVE_SCHEMAS, never through ad-hoc branches
    - Array(T) maps to {"type": "array", "items": map(T)}, recursively
    - Anything else gets exactly ONE redirect to its storage type; a second miss
      raises UnimplementedTypeError
    - Every call returns a fresh dict: callers may embed results without aliasing
"""

from jsonapi_schema.core.domain_types import PrimitiveTag, SchemaFragment
from jsonapi_schema.core.errors import UnimplementedTypeError
from jsonapi_schema.core.resource_model import ArrayType, CustomType, PrimitiveType

PRIMITIVE_SCHEMAS: dict[PrimitiveTag, SchemaFragment] = {
    PrimitiveTag.STRING: {"type": "string"},
    PrimitiveTag.BOOLEAN: {"type": "boolean"},
    PrimitiveTag.INTEGER: {"type": "integer"},
    PrimitiveTag.UTC_DATETIME: {"type": "string", "format": "date-time"},
    PrimitiveTag.UUID: {"type": "string", "format": "uuid"},
}


def normalize_type(
    descriptor: PrimitiveType | ArrayType | CustomType,
) -> PrimitiveType | ArrayType:
    """Resolve a custom type to its storage type, at most once."""
    if not isinstance(descriptor, CustomType):
        return descriptor
    storage = descriptor.storage_type
    if storage is None or isinstance(storage, CustomType):
        raise UnimplementedTypeError(descriptor.type_name)
    return storage


def map_type(descriptor: PrimitiveType | ArrayType | CustomType) -> SchemaFragment:
    """Map a type descriptor to its JSON Schema fragment."""
    descriptor = normalize_type(descriptor)
    if isinstance(descriptor, ArrayType):
        return {"type": "array", "items": map_type(descriptor.of)}
    return dict(PRIMITIVE_SCHEMAS[descriptor.tag])

"""Resource Model — immutable description of the API the compiler reads.

Invariants:
    - Every model is frozen and every collection is a tuple: models hash by content
    - Resource type names are unique across the model
    - Field names are unique within a resource, and attribute/relationship/aggregate
      names never collide within a resource
    - Relationship destinations and join resources exist in the model
    - Relationship route kinds name an existing relationship; other kinds name none
    - Path parameter names are distinct within a route
    - Whether every declared field resolves is NOT checked here: that is a
      compile-time UnknownFieldError

Design Decisions:
    - Pydantic models double as the schema of the JSON model file
    - Type descriptors are a discriminated union on `kind`; bare strings and
      {"array": ...} are accepted as shorthand when loading
"""

import hashlib
import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from jsonapi_schema.core.domain_types import (
    AggregateKind,
    Cardinality,
    HttpMethod,
    PrimitiveTag,
    RELATIONSHIP_ROUTE_KINDS,
    RouteKind,
)
from jsonapi_schema.core.uri_template import path_parameters


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ─── Type Descriptors ────────────────────────────────────────────

def coerce_type_descriptor(value: Any) -> Any:
    """Expand loader shorthand into the tagged descriptor form."""
    if isinstance(value, str):
        if value in {t.value for t in PrimitiveTag}:
            return {"kind": "primitive", "tag": value}
        return {"kind": "custom", "name": value}
    if isinstance(value, dict) and "kind" not in value and set(value) == {"array"}:
        return {"kind": "array", "of": coerce_type_descriptor(value["array"])}
    return value


class PrimitiveType(_Frozen):
    kind: Literal["primitive"] = "primitive"
    tag: PrimitiveTag

    @property
    def type_name(self) -> str:
        return self.tag.value


class ArrayType(_Frozen):
    kind: Literal["array"] = "array"
    of: "TypeDescriptor"

    @field_validator("of", mode="before")
    @classmethod
    def expand_shorthand(cls, v: Any) -> Any:
        return coerce_type_descriptor(v)

    @property
    def type_name(self) -> str:
        return f"array({self.of.type_name})"


class CustomType(_Frozen):
    """An opaque type that may declare the storage type it normalizes to."""
    kind: Literal["custom"] = "custom"
    name: str
    storage_type: "TypeDescriptor | None" = None

    @field_validator("storage_type", mode="before")
    @classmethod
    def expand_shorthand(cls, v: Any) -> Any:
        return coerce_type_descriptor(v) if v is not None else None

    @property
    def type_name(self) -> str:
        return self.name


TypeDescriptor = Annotated[
    Union[PrimitiveType, ArrayType, CustomType], Field(discriminator="kind"),
]

ArrayType.model_rebuild()
CustomType.model_rebuild()

STRING = PrimitiveType(tag=PrimitiveTag.STRING)
BOOLEAN = PrimitiveType(tag=PrimitiveTag.BOOLEAN)
INTEGER = PrimitiveType(tag=PrimitiveTag.INTEGER)
UTC_DATETIME = PrimitiveType(tag=PrimitiveTag.UTC_DATETIME)
UUID = PrimitiveType(tag=PrimitiveTag.UUID)


def array_of(inner: PrimitiveType | ArrayType | CustomType) -> ArrayType:
    return ArrayType(of=inner)


# ─── Field Definitions ───────────────────────────────────────────

class AttributeDefinition(_Frozen):
    name: str
    type: TypeDescriptor
    nullable: bool = True
    writable: bool = True
    has_default: bool = False
    generated: bool = False
    sortable: bool = True

    @field_validator("type", mode="before")
    @classmethod
    def expand_shorthand(cls, v: Any) -> Any:
        return coerce_type_descriptor(v)


class RelationshipDefinition(_Frozen):
    name: str
    cardinality: Cardinality
    destination: str
    through: str | None = None
    join_attributes: tuple[str, ...] = ()
    writable: bool = True

    @property
    def is_join_backed(self) -> bool:
        return self.through is not None


AGGREGATE_RESULT_TYPES: dict[AggregateKind, PrimitiveType] = {
    AggregateKind.COUNT: INTEGER,
    AggregateKind.SUM: INTEGER,
    AggregateKind.EXISTS: BOOLEAN,
}


class AggregateDefinition(_Frozen):
    name: str
    kind: AggregateKind

    @property
    def result_type(self) -> PrimitiveType:
        return AGGREGATE_RESULT_TYPES[self.kind]


FieldDefinition = AttributeDefinition | RelationshipDefinition | AggregateDefinition


class RouteDefinition(_Frozen):
    path: str
    method: HttpMethod
    kind: RouteKind
    relationship: str | None = None

    @model_validator(mode="after")
    def check_parameters_distinct(self) -> "RouteDefinition":
        params = path_parameters(self.path)
        if len(set(params)) != len(params):
            raise ValueError(f"route {self.path!r} repeats a path parameter name")
        return self


# ─── Resources ───────────────────────────────────────────────────

class ResourceDefinition(_Frozen):
    type: str
    fields: tuple[str, ...] = ()
    attributes: tuple[AttributeDefinition, ...] = ()
    relationships: tuple[RelationshipDefinition, ...] = ()
    aggregates: tuple[AggregateDefinition, ...] = ()
    routes: tuple[RouteDefinition, ...] = ()
    primary_key: str = "id"
    json_api: bool = True

    @model_validator(mode="after")
    def check_names(self) -> "ResourceDefinition":
        if len(set(self.fields)) != len(self.fields):
            raise ValueError(f"resource {self.type!r} declares a field twice")
        names = [
            *(a.name for a in self.attributes),
            *(r.name for r in self.relationships),
            *(a.name for a in self.aggregates),
        ]
        if len(set(names)) != len(names):
            raise ValueError(
                f"resource {self.type!r} reuses a name across "
                f"attributes, relationships and aggregates"
            )
        for route in self.routes:
            if route.kind in RELATIONSHIP_ROUTE_KINDS:
                if route.relationship is None or self.relationship(route.relationship) is None:
                    raise ValueError(
                        f"route {route.path!r} on {self.type!r} must name "
                        f"an existing relationship"
                    )
            elif route.relationship is not None:
                raise ValueError(
                    f"route {route.path!r} of kind {route.kind.value!r} "
                    f"cannot name a relationship"
                )
        return self

    def attribute(self, name: str) -> AttributeDefinition | None:
        return next((a for a in self.attributes if a.name == name), None)

    def relationship(self, name: str) -> RelationshipDefinition | None:
        return next((r for r in self.relationships if r.name == name), None)

    def aggregate(self, name: str) -> AggregateDefinition | None:
        return next((a for a in self.aggregates if a.name == name), None)

    def resolve_field(self, name: str) -> FieldDefinition | None:
        """Look a field name up as attribute, then relationship, then aggregate."""
        return self.attribute(name) or self.relationship(name) or self.aggregate(name)

    def field_attributes(self) -> list[AttributeDefinition]:
        """Attributes exposed through `fields`, in field order."""
        return [a for a in map(self.attribute, self.fields) if a is not None]

    def field_relationships(self) -> list[RelationshipDefinition]:
        return [r for r in map(self.relationship, self.fields) if r is not None]


class ResourceModel(_Frozen):
    """The whole API: resources plus the API-wide path prefix."""
    resources: tuple[ResourceDefinition, ...] = ()
    prefix: str = ""

    @model_validator(mode="after")
    def check_references(self) -> "ResourceModel":
        types = [r.type for r in self.resources]
        if len(set(types)) != len(types):
            raise ValueError("resource type names must be unique")
        known = set(types)
        for resource in self.resources:
            for rel in resource.relationships:
                if rel.destination not in known:
                    raise ValueError(
                        f"relationship {resource.type}.{rel.name} points at "
                        f"unknown resource {rel.destination!r}"
                    )
                if rel.through is not None and rel.through not in known:
                    raise ValueError(
                        f"relationship {resource.type}.{rel.name} joins through "
                        f"unknown resource {rel.through!r}"
                    )
        return self

    def resource(self, type_name: str) -> ResourceDefinition | None:
        return next((r for r in self.resources if r.type == type_name), None)

    def eligible_resources(self) -> tuple[ResourceDefinition, ...]:
        """Resources opted into document generation, in model order."""
        return tuple(r for r in self.resources if r.json_api)

    def content_hash(self) -> str:
        raw = json.dumps(self.model_dump(mode="json"), sort_keys=True)
        return hashlib.sha256(raw.encode()).hexdigest()

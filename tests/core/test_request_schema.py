"""Request Schema Builder — tests for create, update and linkage payloads.

Tests cover:
    - read-only kinds accept any payload
    - create requires writable, non-nullable, defaultless, non-generated attributes
    - update allows `id` and requires nothing under attributes
    - relationship linkage items type id by the destination identifier
    - `meta` appears only for join-backed relationships
"""

import pytest

from jsonapi_schema.core.errors import UnknownFieldError
from jsonapi_schema.core.request_schema import (
    build_request_schema, create_schema, identifier_schema,
)
from jsonapi_schema.core.resource_model import ResourceDefinition
from tests.factories import route_of


@pytest.mark.parametrize("kind", ["index", "get", "delete"])
def test_read_only_kinds_are_unconstrained(blog_model, posts, kind):
    assert build_request_schema(blog_model, posts, route_of(posts, kind)) == {}


def test_create_requires_only_mandatory_writable_attributes(blog_model, posts):
    schema = build_request_schema(blog_model, posts, route_of(posts, "post"))
    assert schema["required"] == ["data"]
    data = schema["properties"]["data"]
    assert data["additionalProperties"] is False
    assert data["properties"]["type"] == {"const": "posts"}
    attributes = data["properties"]["attributes"]
    assert attributes["required"] == ["title"]
    assert list(attributes["properties"]) == ["title", "body", "published", "tags_list", "slug"]
    assert attributes["properties"]["slug"] == {"type": "string"}
    assert attributes["additionalProperties"] is False


def test_create_has_no_id(blog_model, posts):
    data = build_request_schema(blog_model, posts, route_of(posts, "post"))["properties"]["data"]
    assert "id" not in data["properties"]


def test_create_lists_writable_relationships_only(blog_model, posts):
    data = build_request_schema(blog_model, posts, route_of(posts, "post"))["properties"]["data"]
    relationships = data["properties"]["relationships"]
    assert list(relationships["properties"]) == ["author", "tags"]
    assert relationships["additionalProperties"] is False
    author = relationships["properties"]["author"]["data"]
    assert author["anyOf"][0] == {"type": "null"}


def test_update_allows_id_and_requires_nothing(blog_model, posts):
    schema = build_request_schema(blog_model, posts, route_of(posts, "patch"))
    data = schema["properties"]["data"]
    assert data["properties"]["id"] == {"type": "string", "format": "uuid"}
    assert data["properties"]["type"] == {"const": "posts"}
    assert not data["properties"]["attributes"].get("required")
    assert "title" in data["properties"]["attributes"]["properties"]


def test_linkage_for_join_backed_relationship(blog_model, posts):
    schema = build_request_schema(
        blog_model, posts, route_of(posts, "post_to_relationship", "tags"),
    )
    assert schema["required"] == ["data"]
    items = schema["properties"]["data"]["items"]
    assert schema["properties"]["data"]["type"] == "array"
    assert items["required"] == ["id", "type"]
    assert items["additionalProperties"] is False
    assert items["properties"]["id"] == {"type": "string", "format": "uuid"}
    assert items["properties"]["type"] == {"const": "tags"}
    # pinned_by is not writable, post_id/tag_id are not join attributes
    assert items["properties"]["meta"] == {
        "type": "object",
        "properties": {"position": {"type": "integer"}},
        "additionalProperties": False,
    }


def test_linkage_without_join_has_no_meta(blog_model, posts):
    schema = build_request_schema(
        blog_model, posts, route_of(posts, "patch_relationship", "author"),
    )
    items = schema["properties"]["data"]["items"]
    assert items["properties"]["type"] == {"const": "authors"}
    assert "meta" not in items["properties"]


def test_create_required_excludes_nullable_default_and_generated(posts):
    required = create_schema(posts)["properties"]["data"]["properties"]["attributes"]["required"]
    assert "body" not in required
    assert "published" not in required
    assert "inserted_at" not in required
    assert "views" not in required


def test_missing_identifier_attribute_raises():
    resource = ResourceDefinition(type="orphans")
    with pytest.raises(UnknownFieldError) as exc_info:
        identifier_schema(resource)
    assert exc_info.value.field_name == "id"

"""Document Assembler — tests for the assembled Hyper-Schema document.

Tests cover:
    - Document envelope, base definitions and per-resource definitions
    - One link description per (resource, route), in model order
    - href/hrefSchema/method/rel/schema/targetSchema/headerSchema per link
    - Route shape check for POST and PATCH routes
    - Determinism, fatal errors, CompileResult and the memoized variant
"""

import json

import pytest

from jsonapi_schema.core.document import (
    base_definitions,
    compile_cached,
    compile_document,
    compile_result,
    header_schema,
    link_description,
)
from jsonapi_schema.core.errors import (
    UnimplementedTypeError, UnknownFieldError, UnsupportedRouteShapeError,
)
from jsonapi_schema.core.resource_model import (
    STRING, AttributeDefinition, CustomType, ResourceDefinition, ResourceModel,
)
from tests.factories import (
    id_attribute, make_blog_model, make_post_tags, make_posts, make_simple,
    route, route_of,
)


def _links_by(document: dict, href_prefix: str, rel: str) -> dict:
    return next(
        link for link in document["links"]
        if link["href"].startswith(href_prefix) and link["rel"] == rel
    )


def test_envelope(blog_model):
    document = compile_document(blog_model)
    assert document["$schema"] == "http://json-schema.org/draft-06/schema#"
    assert document["$id"] == "autogenerated_ash_json_api_schema"
    assert list(document) == ["$schema", "$id", "definitions", "links"]


def test_custom_schema_id(blog_model):
    assert compile_document(blog_model, schema_id="blog")["$id"] == "blog"


def test_definitions_cover_base_and_eligible_resources(blog_model):
    definitions = compile_document(blog_model)["definitions"]
    assert list(definitions) == [
        "link", "links", "error", "errors", "posts", "authors", "comments", "tags",
    ]
    assert "post_tags" not in definitions


def test_error_definition_has_source_members():
    error = base_definitions()["error"]
    assert set(error["properties"]["source"]["properties"]) == {"pointer", "parameter"}
    assert error["additionalProperties"] is False
    assert base_definitions()["errors"]["items"] == {"$ref": "#/definitions/error"}


def test_one_link_per_route_in_order(blog_model):
    links = compile_document(blog_model)["links"]
    assert len(links) == 11
    assert [link["rel"] for link in links[:5]] == ["index", "get", "post", "patch", "delete"]
    assert links[-1]["href"] == "/tags/{id}{?include}"


def test_index_link(blog_model):
    link = _links_by(compile_document(blog_model), "/posts", "index")
    assert link["href"] == "/posts{?filter,sort,page,include}"
    assert link["method"] == "GET"
    assert link["description"] == "pending"
    assert link["hrefSchema"]["required"] == []
    assert list(link["hrefSchema"]["properties"]) == ["filter", "sort", "page", "include"]
    assert link["schema"] == {}
    assert link["headerSchema"] == header_schema()


def test_get_and_delete_links_omit_schema(blog_model, posts):
    for kind in ("get", "delete"):
        link = link_description(blog_model, posts, route_of(posts, kind))
        assert "schema" not in link
        assert link["href"] == "/posts/{id}{?include}"
        assert link["hrefSchema"]["required"] == ["id"]
        assert link["hrefSchema"]["properties"]["id"] == {"type": "string"}


def test_relationship_link_has_no_query_suffix(blog_model, posts):
    link = link_description(
        blog_model, posts, route_of(posts, "delete_from_relationship", "tags"),
    )
    assert link["href"] == "/posts/{id}/relationships/tags"
    assert link["method"] == "DELETE"
    assert link["rel"] == "delete_from_relationship"
    assert link["hrefSchema"] == {
        "required": ["id"], "properties": {"id": {"type": "string"}},
    }
    assert link["schema"] == link["targetSchema"]


def test_link_key_order(blog_model, posts):
    link = link_description(blog_model, posts, route_of(posts, "post"))
    assert list(link) == [
        "href", "hrefSchema", "description", "method", "rel",
        "schema", "targetSchema", "headerSchema",
    ]


def test_prefix_applies_to_every_href():
    document = compile_document(make_blog_model(prefix="/api"))
    assert all(link["href"].startswith("/api/") for link in document["links"])


def test_header_schema_constant():
    schema = header_schema()
    assert schema["properties"]["content-type"] == {
        "type": "array", "items": {"const": "application/vnd.api+json"},
    }
    assert schema["properties"]["accept"]["items"] == {"type": "string"}
    assert schema["additionalProperties"] is True


def test_compilation_is_deterministic():
    first = json.dumps(compile_document(make_blog_model()))
    second = json.dumps(compile_document(make_blog_model()))
    assert first == second


def test_compilation_does_not_mutate_model(blog_model):
    before = blog_model.model_dump()
    compile_document(blog_model)
    assert blog_model.model_dump() == before


def _nested_model(method: str, kind: str) -> ResourceModel:
    return ResourceModel(resources=(
        ResourceDefinition(
            type="posts",
            fields=("title",),
            attributes=(id_attribute(), AttributeDefinition(name="title", type=STRING)),
            routes=(route("/authors/:author_id/posts", method, kind),),
        ),
    ))


def test_body_route_with_nested_parameters_is_unsupported():
    with pytest.raises(UnsupportedRouteShapeError) as exc_info:
        compile_document(_nested_model("post", "post"))
    assert exc_info.value.parameters == ["author_id"]
    assert exc_info.value.code == "UNSUPPORTED_ROUTE_SHAPE"


def test_read_routes_may_nest_parameters():
    document = compile_document(_nested_model("get", "index"))
    assert document["links"][0]["hrefSchema"]["required"] == ["author_id"]


def _nested_tags_model(method: str, kind: str) -> ResourceModel:
    posts = make_posts().model_copy(update={"routes": (
        route("/authors/:author_id/posts/:id/relationships/tags", method, kind, "tags"),
    )})
    return ResourceModel(resources=(
        posts,
        make_simple("authors"),
        make_simple("comments"),
        make_simple("tags"),
        make_post_tags(),
    ))


def test_relationship_delete_may_nest_parameters():
    document = compile_document(_nested_tags_model("delete", "delete_from_relationship"))
    link = document["links"][0]
    assert link["href"] == "/authors/{author_id}/posts/{id}/relationships/tags"
    assert link["hrefSchema"]["required"] == ["author_id", "id"]
    assert link["method"] == "DELETE"
    assert "schema" in link


def test_relationship_post_with_nested_parameters_is_unsupported():
    result = compile_result(_nested_tags_model("post", "post_to_relationship"))
    assert result.document is None
    assert result.error.code == "UNSUPPORTED_ROUTE_SHAPE"
    assert result.error.parameters == ["author_id", "id"]


def _storage_less_model(*routes) -> ResourceModel:
    return ResourceModel(resources=(
        ResourceDefinition(
            type="badges",
            fields=("color",),
            attributes=(
                id_attribute(),
                AttributeDefinition(name="color", type=CustomType(name="color")),
            ),
            routes=routes,
        ),
    ))


@pytest.mark.parametrize("routes", [
    (),
    (route("/badges", "get", "index"),),
])
def test_unimplemented_type_yields_no_document(routes):
    model = _storage_less_model(*routes)
    with pytest.raises(UnimplementedTypeError) as exc_info:
        compile_document(model)
    assert exc_info.value.type_name == "color"
    result = compile_result(model)
    assert not result.ok
    assert result.document is None
    assert result.error.code == "UNIMPLEMENTED_TYPE"


def test_unknown_field_yields_no_document():
    model = ResourceModel(resources=(
        ResourceDefinition(type="people", fields=("ghost",)),
    ))
    with pytest.raises(UnknownFieldError):
        compile_document(model)
    result = compile_result(model)
    assert not result.ok
    assert result.document is None
    assert result.error.code == "UNKNOWN_FIELD"


def test_compile_result_success(blog_model):
    result = compile_result(blog_model)
    assert result.ok
    assert result.error is None
    assert result.document == compile_document(blog_model)


def test_ineligible_resources_are_skipped():
    model = ResourceModel(resources=(
        ResourceDefinition(type="hidden", fields=("ghost",), json_api=False),
    ))
    document = compile_document(model)
    assert document["links"] == []
    assert "hidden" not in document["definitions"]


def test_compile_cached_returns_independent_copies(blog_model):
    first = compile_cached(blog_model)
    first["definitions"].clear()
    second = compile_cached(make_blog_model())
    assert second == compile_document(blog_model)

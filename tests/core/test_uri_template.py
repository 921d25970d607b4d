"""URI Template Builder — tests for href templating and parameter order."""

from jsonapi_schema.core.uri_template import (
    PathSegment, build_uri_template, join_path, parse_path, path_parameters,
)


def test_parameters_in_order_of_appearance():
    template = build_uri_template("", "/widgets/:id/parts/:part_id")
    assert template.href == "/widgets/{id}/parts/{part_id}"
    assert template.parameters == ("id", "part_id")


def test_static_path_has_no_parameters():
    template = build_uri_template("", "/widgets")
    assert template.href == "/widgets"
    assert template.parameters == ()


def test_prefix_is_joined():
    assert build_uri_template("/api", "/posts/:id").href == "/api/posts/{id}"
    assert build_uri_template("/api/", "posts").href == "/api/posts"


def test_empty_segments_collapse():
    assert build_uri_template("/api//v1/", "//posts").href == "/api/v1/posts"


def test_root_path():
    assert build_uri_template("", "/").href == "/"


def test_build_is_idempotent():
    assert build_uri_template("/api", "/a/:b") == build_uri_template("/api", "/a/:b")


def test_parse_path_marks_parameters():
    assert parse_path("/posts/:id") == (
        PathSegment("posts"), PathSegment("id", is_parameter=True),
    )


def test_lone_sigil_is_static():
    assert path_parameters("/posts/:") == ()


def test_join_path_without_prefix():
    assert join_path("", "/x") == "/x"

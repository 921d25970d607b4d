"""Root conftest — shared test configuration and resource model fixtures."""

import os

import pytest

# Never pick up a real resource model file from the working directory
os.environ.setdefault("RESOURCE_MODEL_PATH", "tests/does_not_exist.json")
os.environ.setdefault("LOG_FORMAT", "text")

from tests.factories import make_blog_model  # noqa: E402


@pytest.fixture
def blog_model():
    return make_blog_model()


@pytest.fixture
def posts(blog_model):
    return blog_model.resource("posts")

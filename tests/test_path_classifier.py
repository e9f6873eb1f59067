"""
Tests for the path classifier.
"""

import pytest

from profile_mirror.services import PathClassifier
from profile_mirror.services.path_classifier import STATIC_EXTENSIONS


@pytest.fixture
def classifier():
    return PathClassifier()


def test_root_is_allowed(classifier):
    """GET / is always served."""
    assert classifier.is_allowed("/", "GET")


@pytest.mark.parametrize("extension", sorted(STATIC_EXTENSIONS))
def test_single_segment_static_files_are_allowed_and_static(classifier, extension):
    """Every allowlisted extension at the root is both allowed and cacheable."""
    path = f"/asset.{extension}"
    assert classifier.is_static_resource(path)
    assert classifier.is_allowed(path, "GET")


def test_nested_static_file_outside_prefixes_is_denied(classifier):
    """Static files below an unknown directory are not allowed."""
    assert not classifier.is_allowed("/secret/logo.png", "GET")
    assert classifier.is_static_resource("/secret/logo.png")


@pytest.mark.parametrize(
    "path",
    ["/api", "/api/v1/users", "/googleapis_storage/bucket/a.png", "/_axiom/logs", "/_next/static/x.js", "/images/a"],
)
def test_allowed_prefixes(classifier, path):
    """Paths equal to or below an allowed prefix are served on GET."""
    assert classifier.is_allowed(path, "GET")


def test_prefix_match_is_separator_bounded(classifier):
    """A path merely starting with the prefix text is not under the prefix."""
    assert not classifier.is_allowed("/apix", "GET")
    assert not classifier.is_allowed("/_nextsecret/file", "GET")


def test_disallowed_paths(classifier):
    """Arbitrary paths are rejected."""
    assert not classifier.is_allowed("/etc/passwd", "GET")
    assert not classifier.is_allowed("/admin", "GET")


def test_post_only_for_cleanup_and_api(classifier):
    """POST is limited to the cleanup trigger and the API proxy."""
    assert classifier.is_allowed("/cleanup", "POST")
    assert classifier.is_allowed("/api/v1/track", "POST")
    assert not classifier.is_allowed("/", "POST")
    assert not classifier.is_allowed("/_next/static/x.js", "POST")


@pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"])
def test_other_methods_are_denied(classifier, method):
    """Only GET and POST are ever allowed."""
    assert not classifier.is_allowed("/", method)
    assert not classifier.is_allowed("/api/v1/users", method)


def test_cleanup_trigger(classifier):
    """Only POST /cleanup triggers a sweep."""
    assert classifier.is_cleanup_trigger("/cleanup", "POST")
    assert not classifier.is_cleanup_trigger("/cleanup", "GET")
    assert not classifier.is_allowed("/cleanup", "GET")


def test_static_resource_detection(classifier):
    """Extension check is case-insensitive and ignores the root and extensionless paths."""
    assert classifier.is_static_resource("/_next/static/chunks/main.JS")
    assert not classifier.is_static_resource("/")
    assert not classifier.is_static_resource("/api/v1/users")
    assert not classifier.is_static_resource("/page.html")

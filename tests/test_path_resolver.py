"""Unit tests for storage path extraction, normalization and ownership."""

import pytest

from app.modules.community.domain.models.asset import BucketName, LocatedPath
from app.modules.community.domain.services.ownership import is_owned_by
from app.modules.community.domain.services.path_resolver import (
    extract_embedded,
    extract_located_path,
    extract_path,
    normalize,
)

from .conftest import public_url


class TestExtractPath:
    def test_public_url_yields_path_after_bucket(self):
        url = public_url("community-questions", "u1/a.jpg")
        assert extract_path(url) == "u1/a.jpg"

    def test_public_url_carries_bucket(self):
        located = extract_located_path(public_url("avatars", "u1/me.png"))
        assert located == LocatedPath(path="u1/me.png", bucket=BucketName.AVATARS)

    def test_query_string_and_fragment_are_dropped(self):
        url = public_url("posts", "u1/p.jpg") + "?width=200#top"
        assert extract_path(url) == "u1/p.jpg"

    def test_unknown_bucket_yields_none(self):
        assert extract_path(public_url("somebody-elses-bucket", "u1/a.jpg")) is None

    def test_bare_relative_path_returned_verbatim(self):
        assert extract_path("u1/photo.jpg") == "u1/photo.jpg"
        assert extract_located_path("u1/photo.jpg").bucket is None

    @pytest.mark.parametrize("value", [None, "", "   ", 42, ["u1/a.jpg"], "photo.jpg"])
    def test_non_paths_yield_none(self, value):
        assert extract_path(value) is None

    def test_other_url_yields_none(self):
        assert extract_path("https://example.com/images/u1/a.jpg") is None

    def test_public_marker_without_path_yields_none(self):
        assert extract_path("https://x.supabase.co/storage/v1/object/public/avatars") is None

    @pytest.mark.parametrize("encoded, raw", [
        ("u1/my%20photo.jpg", "u1/my photo.jpg"),
        ("u1/%C3%A9rable%20rouge.png", "u1/érable rouge.png"),
        ("u1/100%25%20organic.jpg", "u1/100% organic.jpg"),
    ])
    def test_public_url_path_is_percent_decoded(self, encoded, raw):
        assert extract_path(public_url("posts", encoded)) == raw

    def test_bare_relative_path_is_not_decoded(self):
        assert extract_path("u1/my%20photo.jpg") == "u1/my%20photo.jpg"


class TestNormalize:
    @pytest.mark.parametrize("raw, expected", [
        ("u1/a.jpg", "u1/a.jpg"),
        ("  u1/a.jpg  ", "u1/a.jpg"),
        ("/u1/a.jpg/", "u1/a.jpg"),
        ("u1//sub///a.jpg", "u1/sub/a.jpg"),
        ("u1\\sub\\a.jpg", "u1/sub/a.jpg"),
        ("\\\\u1\\\\a.jpg", "u1/a.jpg"),
        ("/ u1/a.jpg", "u1/a.jpg"),
        ("", ""),
    ])
    def test_canonical_form(self, raw, expected):
        assert normalize(raw) == expected

    @pytest.mark.parametrize("raw", [
        "u1/a.jpg", "//u1//a.jpg//", " \\u1\\ ", "/ /u1/ / a.jpg", "a\\/\\/b", "///",
    ])
    def test_idempotent(self, raw):
        once = normalize(raw)
        assert normalize(once) == once

    def test_non_string_normalizes_to_empty(self):
        assert normalize(None) == ""
        assert normalize(12) == ""


class TestExtractEmbedded:
    def test_finds_known_bucket_urls_in_text(self):
        content = (
            f"Look at this ![leaf]({public_url('community-questions', 'u1/leaf.jpg')}) "
            f"and <img src=\"{public_url('posts', 'u1/root.png')}\"> ok"
        )
        found = extract_embedded(content)
        assert found == [
            LocatedPath(path="u1/leaf.jpg", bucket=BucketName.COMMUNITY_QUESTIONS),
            LocatedPath(path="u1/root.png", bucket=BucketName.POSTS),
        ]

    def test_embedded_urls_are_percent_decoded(self):
        content = f"<img src=\"{public_url('community-questions', 'u1/%C3%A9t%C3%A9%20leaf.jpg')}\">"
        assert extract_embedded(content) == [
            LocatedPath(path="u1/été leaf.jpg", bucket=BucketName.COMMUNITY_QUESTIONS),
        ]

    def test_ignores_unknown_buckets_and_plain_text(self):
        content = f"{public_url('private', 'u1/x.jpg')} and u1/y.jpg"
        assert extract_embedded(content) == []

    def test_non_string_content(self):
        assert extract_embedded(None) == []


class TestOwnership:
    @pytest.mark.parametrize("path", ["u1/a.jpg", "/u1/a.jpg", "u1//sub/a.jpg"])
    def test_owned_paths(self, path):
        assert is_owned_by(path, "u1") is True

    @pytest.mark.parametrize("path", [
        "u2/a.jpg",
        "u1",
        "u1/",
        "u10/a.jpg",
        "u1/../u2/a.jpg",
        "x/u1/a.jpg",
        "",
        None,
    ])
    def test_not_owned_paths(self, path):
        assert is_owned_by(path, "u1") is False

    @pytest.mark.parametrize("user_id", ["", None, "u1/x", 5])
    def test_invalid_user_ids_own_nothing(self, user_id):
        assert is_owned_by("u1/x/a.jpg", user_id) is False

    @pytest.mark.parametrize("user_a, user_b", [
        ("u1", "u10"),
        ("u1", "u1/x"),
        ("u1", "u2"),
        ("u1", ""),
    ])
    @pytest.mark.parametrize("path", [
        "u1/a.jpg",
        "u10/a.jpg",
        "u1/x/a.jpg",
        "u1/../u2/a.jpg",
        "u2/../u1/a.jpg",
        "//u1//a.jpg",
        "u10/../u1/a.jpg",
    ])
    def test_no_path_is_owned_by_two_users(self, path, user_a, user_b):
        assert not (is_owned_by(path, user_a) and is_owned_by(path, user_b))

    def test_encoded_traversal_in_url_is_not_owned(self):
        path = extract_path(public_url("posts", "u1/%2E%2E/u2/a.jpg"))
        assert path == "u1/../u2/a.jpg"
        assert is_owned_by(path, "u1") is False

    def test_ownership_implies_prefix_and_no_traversal(self):
        candidates = ["u1/a", "u1/b/../c", "u1/x/y", "/u1/z", "u1a/b"]
        for path in candidates:
            if is_owned_by(path, "u1"):
                normalized = normalize(path)
                assert normalized.startswith("u1/")
                assert ".." not in normalized

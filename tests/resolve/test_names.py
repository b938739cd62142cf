"""Tests for entity name helpers."""

from __future__ import annotations

import pytest

from clue.resolve.names import (
    base_name,
    build_base_name_map,
    convention_variants,
    pluralize,
    strip_suffix,
    to_pascal,
    to_snake,
    unambiguous,
)


class TestBaseNames:
    def test_base_name_is_last_segment(self) -> None:
        assert base_name("app.models.User") == "User"
        assert base_name("User") == "User"

    def test_shared_base_name_is_ambiguous(self) -> None:
        """Entities sharing a base name map to None and drop out of the unambiguous view."""
        names = ["app.Foo", "lib.Foo", "app.Bar", "[EntityManager]"]

        base_names = build_base_name_map(names)

        assert base_names == {"Foo": None, "Bar": "app.Bar"}
        assert unambiguous(base_names) == {"app.Bar": "Bar"}


class TestConventions:
    @pytest.mark.parametrize(
        ("name", "snake"),
        [("BlogPost", "blog_post"), ("HTTPLog", "http_log"), ("user", "user")],
    )
    def test_to_snake(self, name: str, snake: str) -> None:
        assert to_snake(name) == snake

    @pytest.mark.parametrize(
        ("name", "pascal"), [("blog_post", "BlogPost"), ("userRepo", "UserRepo")]
    )
    def test_to_pascal(self, name: str, pascal: str) -> None:
        assert to_pascal(name) == pascal

    @pytest.mark.parametrize(
        ("word", "plural"),
        [("post", "posts"), ("category", "categories"), ("box", "boxes"), ("day", "days")],
    )
    def test_pluralize(self, word: str, plural: str) -> None:
        assert pluralize(word) == plural

    def test_convention_variants(self) -> None:
        assert convention_variants("BlogPost") == ["blog_post", "blog_posts"]

    def test_variants_exclude_the_base_itself(self) -> None:
        assert convention_variants("user") == ["users"]

    def test_strip_suffix_requires_remainder(self) -> None:
        assert strip_suffix("userRepository", ("Repository",)) == "user"
        assert strip_suffix("Repository", ("Repository",)) is None

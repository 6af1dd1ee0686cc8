"""Slug derivation, collision handling, and truncation."""

from __future__ import annotations

import re

import pytest

from app.utils.slugify import base_slug, is_valid_slug, resolve_slug_collision, truncate_slug

SLUG_SHAPE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def test_base_slug_strips_punctuation():
    assert base_slug("Joe's Diner", "Breakfast Menu") == "joes-diner-breakfast-menu"


def test_base_slug_folds_latin_accents():
    assert base_slug("Café Français", "Menu du Jour") == "cafe-francais-menu-du-jour"


def test_base_slug_collapses_whitespace():
    assert base_slug("   Spaced   Restaurant   ", "   Spaced   Menu   ") == "spaced-restaurant-spaced-menu"


def test_base_slug_drops_characters_outside_accent_table():
    assert base_slug("寿司 Bar", "Ωmega") == "bar-mega"
    assert base_slug("Straße", "Menü") == "strae-menu"


def test_base_slug_collapses_hyphen_runs():
    assert base_slug("A -- B", "- C -") == "a-b-c"


def test_base_slug_can_be_empty():
    assert base_slug("!!!", "???") == ""
    assert not is_valid_slug(base_slug("!!!", "???"))


@pytest.mark.parametrize(
    "restaurant,menu",
    [
        ("Joe's Diner", "Breakfast Menu"),
        ("  --Tacos-- ", "  Late Night!! "),
        ("Crème brûlée", "Desserts & Wine"),
        ("123", "456"),
    ],
)
def test_base_slug_shape_and_determinism(restaurant, menu):
    slug = base_slug(restaurant, menu)
    assert slug == base_slug(restaurant, menu)
    assert SLUG_SHAPE.match(slug)
    assert is_valid_slug(slug)


def test_collision_returns_base_when_free():
    assert resolve_slug_collision("fresh-menu", {"other-menu"}) == "fresh-menu"
    assert resolve_slug_collision("fresh-menu", set()) == "fresh-menu"


def test_collision_probes_increasing_suffixes():
    existing = {"test-restaurant-menu", "test-restaurant-menu-1"}
    assert resolve_slug_collision("test-restaurant-menu", existing) == "test-restaurant-menu-2"


def test_collision_probes_from_one_ascending():
    existing = {"menu", "menu-1", "menu-3"}
    assert resolve_slug_collision("menu", existing) == "menu-2"


def test_sequential_creation_against_accumulating_set():
    existing: set[str] = set()
    first = resolve_slug_collision(base_slug("Popular Restaurant", "Menu"), existing)
    existing.add(first)
    second = resolve_slug_collision(base_slug("Popular Restaurant", "Menu"), existing)

    assert first == "popular-restaurant-menu"
    assert second == "popular-restaurant-menu-1"


def test_truncate_leaves_short_slugs_alone():
    assert truncate_slug("short-slug", 50) == "short-slug"


def test_truncate_cuts_back_to_late_hyphen():
    # hyphen at index 8 of a 10 char window is past the 70% mark
    assert truncate_slug("abcdefgh-ijklmnop", 10) == "abcdefgh"


def test_truncate_hard_cuts_when_hyphen_is_early():
    assert truncate_slug("ab-cdefghijklmnop", 10) == "ab-cdefghi"


def test_truncate_cuts_at_exact_boundary_ratio():
    # hyphen at index 7 with max 10 sits exactly on the boundary
    assert truncate_slug("abcdefg-hijklmnop", 10) == "abcdefg"


def test_truncate_without_hyphen():
    assert truncate_slug("a" * 30, 12) == "a" * 12


@pytest.mark.parametrize("max_length", [-5, -1, 0, 1, 5, 17, 64, 200])
def test_truncate_respects_bound(max_length):
    slug = base_slug("The Very Long Named Restaurant " * 8, "Seasonal Tasting Menu " * 4)
    assert len(truncate_slug(slug, max_length)) <= max_length


def test_truncate_to_non_positive_length_is_empty():
    assert truncate_slug("abc-def", 0) == ""
    assert truncate_slug("abc-def", -1) == ""
    assert truncate_slug("abc-def", -5) == ""


def test_truncate_never_leaves_trailing_hyphen():
    truncated = truncate_slug("abcdefghi-jklmnop", 10)
    assert not truncated.endswith("-")

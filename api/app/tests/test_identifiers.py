"""Identifier classification for id-or-slug menu lookups."""

from __future__ import annotations

import uuid

import pytest

from app.utils.identifiers import classify_identifier, is_uuid


@pytest.mark.parametrize(
    "identifier",
    [
        "4611407c-5aa8-4087-9dc0-97215c79a447",
        "ABCDEF01-2345-6789-ABCD-EF0123456789",
        str(uuid.uuid4()),
    ],
)
def test_canonical_uuids_classify_as_id(identifier):
    assert is_uuid(identifier)
    assert classify_identifier(identifier) == "id"


@pytest.mark.parametrize(
    "identifier",
    [
        "",
        "4611407c-5aa8-4087-9dc0",
        "123-not-uuid",
        "popular-restaurant-menu",
        "4611407c5aa840879dc097215c79a447",
        "4611407c-5aa8-4087-9dc0-97215c79a44g",
        "4611407c-5aa8-4087-9dc0-97215c79a447\n",
        " 4611407c-5aa8-4087-9dc0-97215c79a447",
        "{4611407c-5aa8-4087-9dc0-97215c79a447}",
    ],
)
def test_everything_else_classifies_as_slug(identifier):
    assert classify_identifier(identifier) == "slug"


def test_classification_never_raises_on_odd_input():
    for identifier in ["-", "é" * 36, "\x00", "a" * 1000]:
        assert classify_identifier(identifier) in {"id", "slug"}

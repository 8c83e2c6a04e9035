# tests/test_permissions.py
from dataclasses import dataclass, field
from typing import List

import pytest

from app.core.permissions import (
    Caller,
    Role,
    can_create,
    can_mutate,
    can_upload,
    is_visible,
    parse_role,
)

from tests.conftest import ADMIN, DEFAULT_1, DEFAULT_2, READONLY


@dataclass
class StubAnnotation:
    created_by: str
    visible_to: List[str] = field(default_factory=list)


def test_only_admin_can_upload():
    assert can_upload(ADMIN)
    assert not can_upload(DEFAULT_1)
    assert not can_upload(READONLY)


def test_readonly_cannot_create():
    assert can_create(ADMIN)
    assert can_create(DEFAULT_1)
    assert not can_create(READONLY)


def test_owner_or_admin_can_mutate():
    annotation = StubAnnotation(created_by="D1", visible_to=["D1", "D2"])
    assert can_mutate(annotation, DEFAULT_1)
    assert can_mutate(annotation, ADMIN)
    assert not can_mutate(annotation, DEFAULT_2)
    assert not can_mutate(annotation, READONLY)


def test_private_annotation_hidden_from_other_users_and_admin():
    annotation = StubAnnotation(created_by="D1", visible_to=["D1"])
    assert is_visible(annotation, DEFAULT_1)
    assert not is_visible(annotation, DEFAULT_2)
    assert not is_visible(annotation, ADMIN)


def test_author_sees_own_annotation_when_not_listed():
    annotation = StubAnnotation(created_by="D2", visible_to=["A1"])
    assert is_visible(annotation, DEFAULT_2)


def test_readonly_needs_to_be_listed():
    listed = StubAnnotation(created_by="D1", visible_to=["D1", "R1"])
    unlisted = StubAnnotation(created_by="D1", visible_to=["A1", "D1", "D2"])
    assert is_visible(listed, READONLY)
    assert not is_visible(unlisted, READONLY)


def test_readonly_author_not_listed_cannot_see():
    # Written by R1 while acting under another role, R1 not listed
    annotation = StubAnnotation(created_by="R1", visible_to=["A1"])
    assert not is_visible(annotation, READONLY)
    assert is_visible(annotation, Caller(id="R1", role=Role.DEFAULT))


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("admin", Role.ADMIN),
        (" Default ", Role.DEFAULT),
        ("READONLY", Role.READONLY),
        ("superuser", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_role(raw, expected):
    assert parse_role(raw) is expected

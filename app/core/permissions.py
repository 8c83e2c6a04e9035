# File: app/core/permissions.py
"""
Access policy for DocNotes.

Roles and callers are asserted by the client on every request. This module
holds the pure predicates deciding what a caller may do; repositories build
their SQL filters to match these functions exactly.

Visibility semantic: ``visible_to`` is a list of user identifiers. A
read-only caller sees an annotation only when its id is listed. Any other
caller also sees the annotations they created. Being an admin grants the
right to edit and delete, not the right to read.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Protocol


class Role(str, Enum):
    """Caller roles."""

    ADMIN = "admin"
    DEFAULT = "default"
    READONLY = "readonly"


@dataclass(frozen=True)
class Caller:
    """The identity a request acts as."""

    id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_readonly(self) -> bool:
        return self.role == Role.READONLY


class AnnotationLike(Protocol):
    created_by: str

    @property
    def visible_to(self) -> Iterable[str]: ...


def can_upload(caller: Caller) -> bool:
    """Only admins may upload documents."""
    return caller.role == Role.ADMIN


def can_create(caller: Caller) -> bool:
    """Admins and default users may annotate."""
    return caller.role != Role.READONLY


def can_mutate(annotation: AnnotationLike, caller: Caller) -> bool:
    """Edit and delete are reserved to admins and the annotation's author."""
    return caller.is_admin or caller.id == annotation.created_by


def is_visible(annotation: AnnotationLike, caller: Caller) -> bool:
    """
    Decide whether a caller may read an annotation.

    Args:
        annotation: Any object exposing ``created_by`` and ``visible_to``
        caller: The requesting caller

    Returns:
        True if the annotation should be returned to the caller
    """
    listed = caller.id in set(annotation.visible_to)
    if caller.is_readonly:
        return listed
    return listed or caller.id == annotation.created_by


def parse_role(value: Optional[str]) -> Optional[Role]:
    """Map a raw role token onto a Role, or None if it is not recognised."""
    if value is None:
        return None
    try:
        return Role(value.strip().lower())
    except ValueError:
        return None

"""
Editorial status workflow.

The status graph and the transition authority table are fixed module-level
constants. Everything here is pure: no database access, no side effects.

States:
    DRAFT → SUB_EDITOR_REVIEW → EDITOR_APPROVED → PUBLISHED → ARCHIVED
      ↑            │                  │              │           │
      └────────────┴──────────────────┴──────────────┴───────────┘

Usage:
    check_transition(ArticleStatus.SUB_EDITOR_REVIEW, ArticleStatus.EDITOR_APPROVED, Role.SUB_EDITOR)
    allowed_targets(ArticleStatus.PUBLISHED, Role.EDITOR)  # [ARCHIVED, DRAFT]
"""

from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Optional, Union

from apps.core.exceptions import ForbiddenError, InvalidTransitionError
from apps.core.roles import Role


class ArticleStatus(str, Enum):
    """Valid editorial states for an article."""
    DRAFT = 'DRAFT'
    SUB_EDITOR_REVIEW = 'SUB_EDITOR_REVIEW'
    EDITOR_APPROVED = 'EDITOR_APPROVED'
    PUBLISHED = 'PUBLISHED'
    ARCHIVED = 'ARCHIVED'

    @classmethod
    def from_string(cls, value: str) -> 'ArticleStatus':
        """Convert string to ArticleStatus."""
        for status in cls:
            if status.value == value:
                return status
        raise ValueError(f"Unknown status: {value}")

    @property
    def label(self) -> str:
        return self.value.replace('_', ' ').title()


STATUS_CHOICES = [(status.value, status.label) for status in ArticleStatus]


# Allowed next states; no self-loops, review cannot be skipped
VALID_TRANSITIONS: Mapping[ArticleStatus, FrozenSet[ArticleStatus]] = MappingProxyType({
    ArticleStatus.DRAFT: frozenset({ArticleStatus.SUB_EDITOR_REVIEW}),
    ArticleStatus.SUB_EDITOR_REVIEW: frozenset({ArticleStatus.DRAFT, ArticleStatus.EDITOR_APPROVED}),
    ArticleStatus.EDITOR_APPROVED: frozenset({ArticleStatus.DRAFT, ArticleStatus.PUBLISHED}),
    ArticleStatus.PUBLISHED: frozenset({ArticleStatus.ARCHIVED, ArticleStatus.DRAFT}),
    ArticleStatus.ARCHIVED: frozenset({ArticleStatus.DRAFT}),
})

# Roles allowed to move an article INTO each status
TRANSITION_AUTHORITY: Mapping[ArticleStatus, FrozenSet[Role]] = MappingProxyType({
    ArticleStatus.DRAFT: frozenset({Role.REPORTER, Role.SUB_EDITOR, Role.EDITOR, Role.ADMIN}),
    ArticleStatus.SUB_EDITOR_REVIEW: frozenset({Role.REPORTER, Role.SUB_EDITOR, Role.EDITOR, Role.ADMIN}),
    ArticleStatus.EDITOR_APPROVED: frozenset({Role.SUB_EDITOR, Role.EDITOR, Role.ADMIN}),
    ArticleStatus.PUBLISHED: frozenset({Role.EDITOR, Role.ADMIN}),
    ArticleStatus.ARCHIVED: frozenset({Role.EDITOR, Role.ADMIN}),
})

StatusLike = Union[ArticleStatus, str]


def _status(value: StatusLike) -> ArticleStatus:
    if isinstance(value, ArticleStatus):
        return value
    return ArticleStatus.from_string(value)


def is_reachable(current: StatusLike, target: StatusLike) -> bool:
    """Graph check only."""
    return _status(target) in VALID_TRANSITIONS[_status(current)]


def may_set(role: Optional[Role], target: StatusLike) -> bool:
    """Authority check only."""
    return role is not None and role in TRANSITION_AUTHORITY[_status(target)]


def can_transition(current: StatusLike, target: StatusLike, role: Optional[Role]) -> bool:
    """True when the edge exists and the role may set the target status."""
    return is_reachable(current, target) and may_set(role, target)


def allowed_targets(current: StatusLike, role: Optional[Role]) -> List[ArticleStatus]:
    """Statuses this role may request next, in declaration order."""
    current = _status(current)
    return [
        status for status in ArticleStatus
        if status in VALID_TRANSITIONS[current] and may_set(role, status)
    ]


def check_transition(current: StatusLike, target: StatusLike, role: Optional[Role]) -> None:
    """
    Validate a status change.

    The graph is checked before authority, so an unreachable target is an
    InvalidTransitionError whatever the caller's role.

    Raises:
        InvalidTransitionError: no edge from current to target.
        ForbiddenError: the role may not set the target status.
    """
    current = _status(current)
    target = _status(target)

    if not is_reachable(current, target):
        raise InvalidTransitionError(
            f"Cannot move article from {current.value} to {target.value}",
            field='status',
            details={
                'from': current.value,
                'to': target.value,
                'allowed': sorted(s.value for s in VALID_TRANSITIONS[current]),
            },
        )

    if not may_set(role, target):
        raise ForbiddenError(
            f"Role {role.value if role else 'ANONYMOUS'} cannot set status {target.value}",
            field='status',
            details={
                'to': target.value,
                'allowed_roles': sorted(r.value for r in TRANSITION_AUTHORITY[target]),
            },
        )

"""
Newsroom staff roles.

Roles are the only authorization key for editorial actions. The ordering
below is the seniority ladder used by ``has_role``.
"""

from enum import Enum


class Role(str, Enum):
    """Staff roles, lowest to highest seniority."""
    REPORTER = 'REPORTER'
    SUB_EDITOR = 'SUB_EDITOR'
    EDITOR = 'EDITOR'
    ADMIN = 'ADMIN'

    @classmethod
    def from_string(cls, value: str) -> 'Role':
        """Convert string to Role."""
        for role in cls:
            if role.value == value:
                return role
        raise ValueError(f"Unknown role: {value}")

    @property
    def label(self) -> str:
        return self.value.replace('_', ' ').title()

    @property
    def level(self) -> int:
        return list(Role).index(self) + 1


ROLE_CHOICES = [(role.value, role.label) for role in Role]

# Roles allowed to edit or delete any article, not just their own
ARTICLE_MODERATOR_ROLES = frozenset({Role.EDITOR, Role.ADMIN})

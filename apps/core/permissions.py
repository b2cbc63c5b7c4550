"""
Role-Based Permissions for the newsroom.

Maps StaffProfile.role to DRF permission classes and to the article
mutation rule shared by edits and deletions.

Roles:
- REPORTER: drafts articles and submits them for review
- SUB_EDITOR: reviews drafts and approves them for the editor
- EDITOR: publishes, archives, manages categories
- ADMIN: everything, including category deletion

Usage:
    from apps.core.permissions import IsStaffMember, IsEditorOrAdmin

    class MyView(APIView):
        permission_classes = [IsAuthenticated, IsEditorOrAdmin]
"""

import logging
from typing import Optional

from rest_framework.permissions import BasePermission, SAFE_METHODS

from .roles import ARTICLE_MODERATOR_ROLES, Role

logger = logging.getLogger(__name__)


def get_user_role(user) -> Optional[Role]:
    """
    Resolve a user's editorial role.

    Superusers are treated as ADMIN. Authenticated users without a profile
    fall back to the lowest role.
    """
    if not user or not user.is_authenticated:
        return None

    if user.is_superuser:
        return Role.ADMIN

    from apps.core.models import StaffProfile
    try:
        profile = user.staff_profile
    except StaffProfile.DoesNotExist:
        logger.warning("User %s has no staff profile; treating as REPORTER", user.pk)
        return Role.REPORTER

    return Role.from_string(profile.role)


def has_role(user, required_role: Role) -> bool:
    """
    Check if user has at least the required role level.

    Role ladder: ADMIN > EDITOR > SUB_EDITOR > REPORTER
    """
    user_role = get_user_role(user)
    if not user_role:
        return False
    return user_role.level >= required_role.level


def can_modify_article(user, article) -> bool:
    """
    Non-status edits and deletions: the author, or an EDITOR/ADMIN.
    """
    role = get_user_role(user)
    if role is None:
        return False
    if role in ARTICLE_MODERATOR_ROLES:
        return True
    return article.author_id == user.pk


class RolePermission(BasePermission):
    """Base class for role-based permissions."""

    # Override in subclasses
    allowed_roles = frozenset()

    def has_permission(self, request, view):
        role = get_user_role(request.user)
        if role is None:
            return False
        return role in self.allowed_roles


class IsStaffMember(RolePermission):
    """Any newsroom role may draft articles and use the assistant."""
    allowed_roles = frozenset(Role)
    message = "Newsroom staff access required."


class IsEditorOrAdmin(RolePermission):
    """Editors and admins manage categories."""
    allowed_roles = frozenset({Role.EDITOR, Role.ADMIN})
    message = "Editor access required."


class IsAdmin(RolePermission):
    """Admin-only operations."""
    allowed_roles = frozenset({Role.ADMIN})
    message = "Admin access required."


class CategoryManagePermission(BasePermission):
    """
    Public reads; EDITOR/ADMIN writes; ADMIN-only deletes.
    """
    DESTRUCTIVE_METHODS = ('DELETE',)
    message = "Insufficient permissions for category management."

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True

        role = get_user_role(request.user)
        if role is None:
            return False

        if request.method in self.DESTRUCTIVE_METHODS:
            return role == Role.ADMIN

        return role in (Role.EDITOR, Role.ADMIN)

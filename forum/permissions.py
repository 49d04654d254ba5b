from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, FrozenSet

from flask import current_app
from flask_login import current_user


class PermissionTo(enum.Enum):
    SEE_RESTRICTED_FORUMS = "see_restricted_forums"
    EDIT_FORUM_POSTS = "edit_forum_posts"
    EDIT_USERS_FORUM_POSTS = "edit_users_forum_posts"
    DELETE_FORUM_POSTS = "delete_forum_posts"


@dataclass(frozen=True)
class Requester:
    """Who is asking for a listing: an optional user id plus a set of
    capabilities. Only membership is ever tested."""

    user_id: Optional[int] = None
    permissions: FrozenSet[PermissionTo] = field(default_factory=frozenset)

    @classmethod
    def anonymous(cls) -> "Requester":
        return cls()

    def has(self, permission: PermissionTo) -> bool:
        return permission in self.permissions


def permissions_for(user) -> FrozenSet[PermissionTo]:
    if user is None:
        return frozenset()

    admins = current_app.config.get("ADMIN_USERNAMES", set())
    if user.username in admins:
        return frozenset(PermissionTo)

    return frozenset(grant.permission for grant in user.permission_grants)


def current_requester() -> Requester:
    if not current_user.is_authenticated:
        return Requester.anonymous()
    return Requester(user_id=current_user.id, permissions=permissions_for(current_user))

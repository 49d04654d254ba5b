from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Iterable, Tuple, Dict
from datetime import datetime, timedelta, timezone

from flask import current_app
from sqlalchemy import func
from sqlalchemy.orm import joinedload

from forum.extensions import db
from forum.models import (
    User, Forum, ForumTopic, ForumPost, ForumPostMood, PreferredPronounTypes, utcnow,
)
from forum.awards import AwardsService, AwardAssignmentSummary
from forum.points import PointsService
from forum.paging import PagingRequest, PageOf, paginate
from forum.permissions import PermissionTo, Requester


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are UTC; SQLite hands them back without tzinfo."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Records handed to the presentation layer

@dataclass(frozen=True)
class PostViewRecord:
    id: int
    create_timestamp: datetime
    last_update_timestamp: datetime
    post_edited_timestamp: Optional[datetime]
    text: str
    subject: Optional[str]
    enable_html: bool
    enable_bb_code: bool
    poster_mood: ForumPostMood

    topic_id: int
    topic_title: str
    topic_is_locked: bool
    forum_id: int
    forum_name: str
    restricted: bool

    poster_id: int
    poster_name: str
    poster_location: Optional[str]
    poster_avatar: Optional[str]
    poster_mood_url_base: Optional[str]
    poster_pronouns: PreferredPronounTypes
    poster_joined: datetime
    poster_post_count: int
    poster_is_banned: bool
    signature: Optional[str]
    poster_player_points: float
    poster_player_rank: str
    awards: Tuple[AwardAssignmentSummary, ...]

    is_editable: bool
    is_deletable: bool


@dataclass(frozen=True)
class LatestPostEntry:
    id: int
    create_timestamp: datetime
    topic_id: int
    topic_title: str
    forum_id: int
    forum_name: str
    text: str
    poster_name: str


@dataclass(frozen=True)
class UserPostsResult:
    found: bool
    reason: str  # "ok" | "not_found"
    posts: Optional[PageOf[PostViewRecord]] = None


@dataclass(frozen=True)
class PosterExtras:
    awards: Tuple[AwardAssignmentSummary, ...] = ()
    player_points: float = 0.0
    player_rank: str = ""


# Per-post rules

def is_banned(banned_until: Optional[datetime], now: datetime) -> bool:
    banned_until = as_utc(banned_until)
    return banned_until is not None and banned_until > now


def can_edit_post(post: ForumPost, requester: Requester) -> bool:
    if requester.has(PermissionTo.EDIT_USERS_FORUM_POSTS):
        return True

    return (
        requester.user_id is not None
        and post.poster_id == requester.user_id
        and not post.topic.is_locked
        and requester.has(PermissionTo.EDIT_FORUM_POSTS)
    )


def can_delete_post(requester: Requester) -> bool:
    return requester.has(PermissionTo.DELETE_FORUM_POSTS)


# Store queries

def _visible_posts(requester: Requester):
    query = (
        ForumPost.query
        .join(ForumPost.topic)
        .join(ForumTopic.forum)
        .options(
            joinedload(ForumPost.topic).joinedload(ForumTopic.forum),
            joinedload(ForumPost.poster),
        )
    )
    if not requester.has(PermissionTo.SEE_RESTRICTED_FORUMS):
        query = query.filter(Forum.restricted.is_(False))
    return query


def _newest_first(query):
    # post id breaks ties so equal timestamps keep a stable order
    return query.order_by(ForumPost.create_timestamp.desc(), ForumPost.id.desc())


def _post_counts(poster_ids: Iterable[int]) -> Dict[int, int]:
    ids = list(poster_ids)
    if not ids:
        return {}

    rows = (
        db.session
        .query(ForumPost.poster_id, func.count(ForumPost.id))
        .filter(ForumPost.poster_id.in_(ids))
        .group_by(ForumPost.poster_id)
        .all()
    )
    return {poster_id: int(count) for poster_id, count in rows}


# Collaborator lookups

def _awards_for(awards, user_id: int) -> Tuple[AwardAssignmentSummary, ...]:
    try:
        return tuple(awards.for_user(user_id) or ())
    except Exception:
        current_app.logger.exception("Failed to load awards for user %s", user_id)
        return ()


def _points_for(points, user_id: int) -> Tuple[float, str]:
    try:
        result = points.player_points(user_id)
    except Exception:
        current_app.logger.exception("Failed to load player points for user %s", user_id)
        return 0.0, ""

    if not result:
        return 0.0, ""
    score, rank = result
    return float(score or 0.0), rank or ""


def _poster_extras(poster_ids: Iterable[int], awards, points) -> Dict[int, PosterExtras]:
    extras = {}
    for user_id in poster_ids:
        score, rank = _points_for(points, user_id)
        extras[user_id] = PosterExtras(
            awards=_awards_for(awards, user_id),
            player_points=score,
            player_rank=rank,
        )
    return extras


def _to_view_record(
        post: ForumPost,
        requester: Requester,
        extras: PosterExtras,
        post_count: int,
        now: datetime,
) -> PostViewRecord:
    topic = post.topic
    forum = topic.forum
    poster = post.poster

    return PostViewRecord(
        id=post.id,
        create_timestamp=as_utc(post.create_timestamp),
        last_update_timestamp=as_utc(post.last_update_timestamp),
        post_edited_timestamp=as_utc(post.post_edited_timestamp),
        text=post.text,
        subject=post.subject,
        enable_html=bool(post.enable_html),
        enable_bb_code=bool(post.enable_bb_code),
        poster_mood=post.poster_mood,
        topic_id=topic.id,
        topic_title=topic.title,
        topic_is_locked=bool(topic.is_locked),
        forum_id=forum.id,
        forum_name=forum.name,
        restricted=bool(forum.restricted),
        poster_id=poster.id,
        poster_name=poster.username,
        poster_location=poster.location,
        poster_avatar=poster.avatar,
        poster_mood_url_base=poster.mood_avatar_url_base,
        poster_pronouns=poster.preferred_pronouns,
        poster_joined=as_utc(poster.created_at),
        poster_post_count=post_count,
        poster_is_banned=is_banned(poster.banned_until, now),
        signature=poster.signature,
        poster_player_points=extras.player_points,
        poster_player_rank=extras.player_rank,
        awards=extras.awards,
        is_editable=can_edit_post(post, requester),
        is_deletable=can_delete_post(requester),
    )


# Posts of a specific user

def list_user_posts(
    user_name: str,
    requester: Optional[Requester] = None,
    paging: Optional[PagingRequest] = None,
    *,
    awards=None,
    points=None,
    now: Optional[datetime] = None,
) -> UserPostsResult:
    requester = requester or Requester.anonymous()
    now = as_utc(now) or utcnow()

    # exact, case-sensitive match on the user name
    user = User.query.filter_by(username=user_name).first()
    if user is None:
        current_app.logger.info("Post listing requested for unknown user %r", user_name)
        return UserPostsResult(found=False, reason="not_found")

    if awards is None:
        awards = AwardsService()
    if points is None:
        points = PointsService()

    query = _newest_first(_visible_posts(requester).filter(ForumPost.poster_id == user.id))
    pagination, request = paginate(query, paging)

    poster_ids = sorted({post.poster_id for post in pagination.items})
    extras = _poster_extras(poster_ids, awards, points)
    post_counts = _post_counts(poster_ids)

    records = tuple(
        _to_view_record(post, requester, extras[post.poster_id], post_counts.get(post.poster_id, 0), now)
        for post in pagination.items
    )

    current_app.logger.debug(
        "Listed %d of %d posts by %s (page %d)",
        len(records), pagination.total, user.username, request.current_page,
    )
    return UserPostsResult(
        found=True,
        reason="ok",
        posts=PageOf(items=records, row_count=int(pagination.total or 0), request=request),
    )


# Site-wide latest posts

def list_latest_posts(
    requester: Optional[Requester] = None,
    paging: Optional[PagingRequest] = None,
    *,
    now: Optional[datetime] = None,
) -> PageOf[LatestPostEntry]:
    requester = requester or Requester.anonymous()
    now = as_utc(now) or utcnow()

    days = int(current_app.config.get("LATEST_POSTS_DAYS", 3))
    # the store keeps naive UTC timestamps
    since = (now - timedelta(days=days)).replace(tzinfo=None)

    query = _newest_first(_visible_posts(requester).filter(ForumPost.create_timestamp >= since))
    pagination, request = paginate(query, paging)

    entries = tuple(
        LatestPostEntry(
            id=post.id,
            create_timestamp=as_utc(post.create_timestamp),
            topic_id=post.topic.id,
            topic_title=post.topic.title,
            forum_id=post.topic.forum.id,
            forum_name=post.topic.forum.name,
            text=post.text,
            poster_name=post.poster.username,
        )
        for post in pagination.items
    )

    current_app.logger.debug(
        "Listed %d of %d posts since %s (page %d)",
        len(entries), pagination.total, since.isoformat(), request.current_page,
    )
    return PageOf(items=entries, row_count=int(pagination.total or 0), request=request)

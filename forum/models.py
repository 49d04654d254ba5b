import enum
from datetime import datetime, timezone

from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from sqlalchemy import UniqueConstraint

from forum.extensions import db, login_manager
from forum.permissions import PermissionTo


def utcnow():
    return datetime.now(timezone.utc)


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


class PreferredPronounTypes(enum.Enum):
    UNSPECIFIED = 0
    HE_HIM = 1
    SHE_HER = 2
    THEY_THEM = 3
    HE_THEY = 4
    SHE_THEY = 5
    ANY = 6


class ForumPostMood(enum.Enum):
    NONE = 0
    NORMAL = 1
    ANGRY = 2
    UNSURE = 3
    NUCLEAR = 4
    DELIGHT = 5
    HOPE = 6
    HAPPY = 7
    EVIL = 8
    CONFUSED = 9
    SAD = 10


class User(db.Model, UserMixin):
    __tablename__ = 'user'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    password_hash = db.Column(db.String(256))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    location = db.Column(db.String(256))
    avatar = db.Column(db.String(256))
    mood_avatar_url_base = db.Column(db.String(256))
    signature = db.Column(db.Text)
    preferred_pronouns = db.Column(
        db.Enum(PreferredPronounTypes),
        nullable=False,
        default=PreferredPronounTypes.UNSPECIFIED,
    )
    banned_until = db.Column(db.DateTime, nullable=True)

    # None means the user never earned any points
    player_points = db.Column(db.Float, nullable=True)

    posts = db.relationship('ForumPost', back_populates='poster', lazy=True)
    permission_grants = db.relationship(
        'UserPermission', backref='user', lazy=True, cascade='all, delete-orphan'
    )

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f'<User {self.username}>'


class UserPermission(db.Model):
    __tablename__ = 'user_permissions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    permission = db.Column(db.Enum(PermissionTo), nullable=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'permission', name='uq_user_permissions_user_permission'),
    )

    def __repr__(self):
        return f"<UserPermission user={self.user_id} {self.permission.name}>"


class Forum(db.Model):
    __tablename__ = 'forum'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    restricted = db.Column(db.Boolean, nullable=False, default=False)

    topics = db.relationship('ForumTopic', back_populates='forum', lazy=True)

    def __repr__(self):
        return f"Forum('{self.name}', restricted={self.restricted})"


class ForumTopic(db.Model):
    __tablename__ = 'forum_topic'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    is_locked = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    forum_id = db.Column(db.Integer, db.ForeignKey('forum.id'), nullable=False, index=True)
    poster_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)

    forum = db.relationship('Forum', back_populates='topics', lazy=True)
    poster = db.relationship('User', lazy=True)
    posts = db.relationship('ForumPost', back_populates='topic', lazy=True)

    def __repr__(self):
        return f"ForumTopic('{self.title}', locked={self.is_locked})"


class ForumPost(db.Model):
    __tablename__ = 'forum_post'

    id = db.Column(db.Integer, primary_key=True)
    subject = db.Column(db.String(500), nullable=True)
    text = db.Column(db.Text, nullable=False)
    create_timestamp = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    last_update_timestamp = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    post_edited_timestamp = db.Column(db.DateTime, nullable=True)
    poster_mood = db.Column(db.Enum(ForumPostMood), nullable=False, default=ForumPostMood.NONE)
    enable_html = db.Column(db.Boolean, nullable=False, default=False)
    enable_bb_code = db.Column(db.Boolean, nullable=False, default=True)

    topic_id = db.Column(db.Integer, db.ForeignKey('forum_topic.id'), nullable=False, index=True)
    poster_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)

    topic = db.relationship('ForumTopic', back_populates='posts', lazy=True)
    poster = db.relationship('User', back_populates='posts', lazy=True)

    def __repr__(self):
        return f"<ForumPost {self.id} topic={self.topic_id} poster={self.poster_id}>"


class Award(db.Model):
    __tablename__ = 'award'

    id = db.Column(db.Integer, primary_key=True)
    short_name = db.Column(db.String(25), unique=True, nullable=False)
    description = db.Column(db.String(50), nullable=False)

    def __repr__(self):
        return f"<Award {self.short_name}>"


class UserAward(db.Model):
    __tablename__ = 'user_awards'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    award_id = db.Column(db.Integer, db.ForeignKey('award.id'), nullable=False)
    year = db.Column(db.Integer, nullable=False)

    award = db.relationship('Award', lazy=True)

    __table_args__ = (
        UniqueConstraint('user_id', 'award_id', 'year', name='uq_user_awards_user_award_year'),
    )

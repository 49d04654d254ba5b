import os
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '.env'))

def _resolve_sqlite_path(uri: str, project_root: str) -> str:
    """Convert relative SQLite URI to absolute path.

    Args:
        uri: SQLite URI like 'sqlite:///instance/forum.db'
        project_root: Absolute path to project root directory

    Returns:
        Absolute SQLite URI like 'sqlite:////srv/forum/instance/forum.db'
    """
    if not uri.startswith('sqlite:///') or uri == 'sqlite:///:memory:':
        return uri

    relative_path = uri[len('sqlite:///'):]

    absolute_path = os.path.abspath(os.path.join(project_root, relative_path))

    # SQLite will not create the parent directory itself
    instance_dir = os.path.dirname(absolute_path)
    if instance_dir and not os.path.exists(instance_dir):
        os.makedirs(instance_dir, exist_ok=True)

    # SQLite expects forward slashes, also on Windows (sqlite:///E:/path/forum.db)
    absolute_path = absolute_path.replace('\\', '/')

    return f'sqlite:///{absolute_path}'


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


class Config:
    ADMIN_USERNAMES = {u.strip() for u in os.getenv("ADMIN_USERNAMES", "").split(",") if u.strip()}

    _env = os.environ.get("FLASK_ENV") or os.environ.get("ENV") or "production"
    IS_DEV = str(_env).lower() in {"development", "dev"}

    # In production SECRET_KEY must be set.
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY and IS_DEV:
        SECRET_KEY = "dev-secret-key"

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')
    if not SQLALCHEMY_DATABASE_URI and IS_DEV:
        SQLALCHEMY_DATABASE_URI = _resolve_sqlite_path('sqlite:///instance/forum.db', basedir)
    elif SQLALCHEMY_DATABASE_URI:
        SQLALCHEMY_DATABASE_URI = _resolve_sqlite_path(SQLALCHEMY_DATABASE_URI, basedir)

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_DB = os.environ.get("AUTO_CREATE_DB", "0") == "1"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Post listings
    LATEST_POSTS_DAYS = _int_env("LATEST_POSTS_DAYS", 3)
    DEFAULT_PAGE_SIZE = _int_env("DEFAULT_PAGE_SIZE", 25)
    MAX_PAGE_SIZE = _int_env("MAX_PAGE_SIZE", 100)

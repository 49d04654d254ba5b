import os

from forum import create_app, db
from forum.models import User, Forum, ForumTopic, ForumPost
from forum.permissions import current_requester
from forum.services import list_latest_posts, list_user_posts


app = create_app()

debug_mode = os.environ.get("FLASK_DEBUG", "0").lower() in {"true", "1", "t", "yes", "y"}


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "User": User,
        "Forum": Forum,
        "ForumTopic": ForumTopic,
        "ForumPost": ForumPost,
        "current_requester": current_requester,
        "list_user_posts": list_user_posts,
        "list_latest_posts": list_latest_posts,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug_mode)

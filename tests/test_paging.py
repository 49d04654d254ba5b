from datetime import datetime, timedelta, timezone

from forum.extensions import db
from forum.paging import PageOf, PagingRequest
from forum.services import list_latest_posts


def test_default_page_size_comes_from_config(app):
    with app.app_context():
        request = PagingRequest().normalized()

        assert request.current_page == 1
        assert request.page_size == 25


def test_invalid_requests_are_clamped(app):
    with app.app_context():
        assert PagingRequest(current_page=0, page_size=0).normalized() == PagingRequest(1, 1)
        assert PagingRequest(current_page=-3, page_size=-10).normalized() == PagingRequest(1, 1)
        assert PagingRequest(current_page=2, page_size=10_000).normalized() == PagingRequest(2, 100)


def test_page_of_behaves_like_a_sequence():
    page = PageOf(items=("a", "b"), row_count=12, request=PagingRequest(1, 5))

    assert len(page) == 2
    assert list(page) == ["a", "b"]
    assert page[1] == "b"
    assert page.page_count == 3


def test_empty_page():
    page = PageOf.empty(PagingRequest(3, 10))

    assert len(page) == 0
    assert page.row_count == 0
    assert page.request.current_page == 3


def test_clamped_request_still_reports_full_row_count(app, add_user, add_topic, add_post):
    with app.app_context():
        user = add_user("TestUser")
        topic = add_topic(user)
        base = datetime.now(timezone.utc) - timedelta(hours=5)
        for i in range(3):
            add_post(topic, user, text=f"Post {i}", created=base + timedelta(minutes=i))
        db.session.commit()

        posts = list_latest_posts(paging=PagingRequest(current_page=0, page_size=0))

        assert len(posts) == 1
        assert posts.row_count == 3
        assert posts.request == PagingRequest(1, 1)


def test_page_past_the_end_is_empty(app, add_user, add_topic, add_post):
    with app.app_context():
        user = add_user("TestUser")
        add_post(add_topic(user), user)
        db.session.commit()

        posts = list_latest_posts(paging=PagingRequest(current_page=5, page_size=10))

        assert len(posts) == 0
        assert posts.row_count == 1
        assert posts.request.current_page == 5

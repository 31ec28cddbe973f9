"""
Tests for the storage layer, exercised through the Database facade.
"""

import sqlite3
import time

import pytest

from community.exceptions import DuplicateEmailError


@pytest.fixture
def users(test_db):
    """Two users: an author and a reader."""
    author = test_db.create_user("author@example.com", "hash", "Ada Author")
    reader = test_db.create_user("reader@example.com", "hash", "Rex Reader", phone="555-0199")
    return author, reader


@pytest.fixture
def article(test_db, users):
    author, _ = users
    return test_db.create_article(author.id, "Storage", "Body", tags=["db"], status="published")


class TestWaitlist:
    def test_add_and_count(self, test_db):
        entry = test_db.add_to_waitlist("Wendy Waiting", "wendy@example.com")
        assert entry.id
        assert entry.email == "wendy@example.com"
        assert test_db.get_waitlist_count() == 1

    def test_duplicate_email(self, test_db):
        test_db.add_to_waitlist("Wendy Waiting", "wendy@example.com")
        with pytest.raises(DuplicateEmailError) as excinfo:
            test_db.add_to_waitlist("Wendy Again", "wendy@example.com")
        assert excinfo.value.email == "wendy@example.com"
        assert test_db.get_waitlist_count() == 1


class TestUsers:
    def test_create_user_defaults(self, test_db):
        user = test_db.create_user("new@example.com", "hash", "New User")
        assert user.role == "user"
        assert user.is_active is True
        assert user.points == 0
        assert user.phone is None

    def test_lookup_by_email_and_id(self, test_db, users):
        author, _ = users
        assert test_db.get_user_by_email("author@example.com").id == author.id
        assert test_db.get_user_by_id(author.id).email == "author@example.com"
        assert test_db.get_user_by_email("missing@example.com") is None
        assert test_db.get_user_by_id(999) is None

    def test_duplicate_email(self, test_db, users):
        with pytest.raises(DuplicateEmailError):
            test_db.create_user("author@example.com", "hash", "Imposter")

    def test_update_refreshes_updated_at(self, test_db, users):
        author, _ = users
        time.sleep(0.01)
        updated = test_db.update_user(author.id, full_name="Ada Lovelace", points=5)
        assert updated.full_name == "Ada Lovelace"
        assert updated.points == 5
        assert updated.updated_at > author.updated_at

    def test_update_rejects_unknown_columns(self, test_db, users):
        author, _ = users
        with pytest.raises(ValueError):
            test_db.update_user(author.id, email="other@example.com")

    def test_update_missing_user(self, test_db):
        assert test_db.update_user(999, full_name="Nobody") is None


class TestArticles:
    def test_create_and_get(self, test_db, users, article):
        author, _ = users
        fetched = test_db.get_article_by_id(article.id)
        assert fetched.title == "Storage"
        assert fetched.tags == ["db"]
        assert fetched.status == "published"
        assert fetched.author.id == author.id
        assert fetched.liked_by == []

    def test_get_missing(self, test_db):
        assert test_db.get_article_by_id(999) is None

    def test_invalid_status_rejected(self, test_db, users):
        author, _ = users
        with pytest.raises(sqlite3.IntegrityError):
            test_db.create_article(author.id, "Bad", "Body", status="deleted")

    def test_user_articles_newest_first(self, test_db, users):
        author, reader = users
        first = test_db.create_article(author.id, "First", "Body")
        second = test_db.create_article(author.id, "Second", "Body")
        test_db.create_article(reader.id, "Other", "Body")
        assert [a.id for a in test_db.get_user_articles(author.id)] == [second.id, first.id]
        assert len(test_db.get_all_articles()) == 3

    def test_update_article(self, test_db, article):
        updated = test_db.update_article(article.id, title="Renamed", tags=["a", "b"])
        assert updated.title == "Renamed"
        assert updated.tags == ["a", "b"]
        assert updated.content == "Body"

    def test_increment_views(self, test_db, article):
        test_db.increment_article_views(article.id)
        assert test_db.get_article_by_id(article.id).views == 1


class TestToggles:
    def test_like_toggle_keeps_counter_in_sync(self, test_db, users, article):
        author, reader = users
        assert test_db.toggle_article_like(reader.id, article.id) is True
        assert test_db.toggle_article_like(author.id, article.id) is True
        liked = test_db.get_article_by_id(article.id)
        assert liked.likes == len(liked.liked_by) == 2

        assert test_db.toggle_article_like(reader.id, article.id) is False
        after = test_db.get_article_by_id(article.id)
        assert after.likes == 1
        assert after.liked_by == [author.id]

    def test_like_missing_article(self, test_db, users):
        _, reader = users
        assert test_db.toggle_article_like(reader.id, 999) is None

    def test_bookmark_toggle(self, test_db, users, article):
        _, reader = users
        assert test_db.toggle_article_bookmark(reader.id, article.id) is True
        assert test_db.get_article_by_id(article.id).bookmarked_by == [reader.id]
        assert test_db.toggle_article_bookmark(reader.id, article.id) is False
        assert test_db.get_user_bookmarks(reader.id) == []

    def test_record_view_once(self, test_db, users, article):
        _, reader = users
        assert test_db.record_article_view(reader.id, article.id) is True
        assert test_db.record_article_view(reader.id, article.id) is False
        viewed = test_db.get_article_by_id(article.id)
        assert viewed.views == 1
        assert viewed.viewed_by == [reader.id]
        assert [a.id for a in test_db.get_user_reading_history(reader.id)] == [article.id]

    def test_record_view_missing_article(self, test_db, users):
        _, reader = users
        assert test_db.record_article_view(reader.id, 999) is None


class TestFollows:
    def test_follow_once(self, test_db, users):
        author, reader = users
        assert test_db.follow_user(reader.id, author.id) is True
        assert test_db.follow_user(reader.id, author.id) is False
        assert [u.id for u in test_db.get_followers(author.id)] == [reader.id]
        assert [u.id for u in test_db.get_following(reader.id)] == [author.id]
        assert test_db.is_following(reader.id, author.id)
        assert not test_db.is_following(author.id, reader.id)
        assert test_db.get_follow_counts(author.id) == {
            "followers_count": 1, "following_count": 0,
        }

    def test_unfollow(self, test_db, users):
        author, reader = users
        test_db.follow_user(reader.id, author.id)
        assert test_db.unfollow_user(reader.id, author.id) is True
        assert test_db.unfollow_user(reader.id, author.id) is False
        assert test_db.get_followers(author.id) == []


class TestComments:
    def test_thread_retrieval_respects_depth(self, test_db, users, article):
        author, reader = users
        top = test_db.create_comment(article.id, author.id, "Top")
        reply = test_db.create_comment(article.id, reader.id, "Reply", parent_id=top.id)
        nested = test_db.create_comment(article.id, author.id, "Nested", parent_id=reply.id)

        shallow = test_db.get_article_comments(article.id, max_depth=1)
        assert [c.id for c in shallow] == [top.id]
        assert [r.id for r in shallow[0].replies] == [reply.id]
        assert shallow[0].replies[0].replies == []

        deep = test_db.get_article_comments(article.id, max_depth=2)
        assert [r.id for r in deep[0].replies[0].replies] == [nested.id]

        flat = test_db.get_article_comments(article.id, max_depth=0)
        assert flat[0].replies == []

    def test_comment_depth(self, test_db, users, article):
        author, _ = users
        top = test_db.create_comment(article.id, author.id, "Top")
        reply = test_db.create_comment(article.id, author.id, "Reply", parent_id=top.id)
        nested = test_db.create_comment(article.id, author.id, "Nested", parent_id=reply.id)
        assert test_db.get_comment_depth(top.id) == 0
        assert test_db.get_comment_depth(reply.id) == 1
        assert test_db.get_comment_depth(nested.id) == 2

    def test_get_replies_newest_first(self, test_db, users, article):
        author, reader = users
        top = test_db.create_comment(article.id, author.id, "Top")
        first = test_db.create_comment(article.id, reader.id, "First", parent_id=top.id)
        second = test_db.create_comment(article.id, reader.id, "Second", parent_id=top.id)
        assert [r.id for r in test_db.get_replies(top.id)] == [second.id, first.id]

    def test_comment_with_author(self, test_db, users, article):
        _, reader = users
        comment = test_db.create_comment(article.id, reader.id, "Hi")
        fetched = test_db.get_comment(comment.id)
        assert fetched.user.full_name == "Rex Reader"
        assert test_db.get_comment(999) is None
        assert test_db.get_comment_with_replies(999) is None

    def test_like_comment(self, test_db, users, article):
        author, _ = users
        comment = test_db.create_comment(article.id, author.id, "Hi")
        assert test_db.like_comment(comment.id) == 1
        assert test_db.like_comment(comment.id) == 2
        assert test_db.like_comment(999) is None


class TestLibrary:
    def test_bookmarks(self, test_db, users, article):
        _, reader = users
        assert test_db.add_bookmark(reader.id, article.id) is True
        assert test_db.add_bookmark(reader.id, article.id) is False
        assert [a.id for a in test_db.get_user_bookmarks(reader.id)] == [article.id]
        assert test_db.remove_bookmark(reader.id, article.id) is True
        assert test_db.remove_bookmark(reader.id, article.id) is False

    def test_reading_history_is_a_log(self, test_db, users, article):
        _, reader = users
        test_db.add_to_reading_history(reader.id, article.id)
        test_db.add_to_reading_history(reader.id, article.id)
        assert len(test_db.get_user_reading_history(reader.id)) == 2


class TestSessions:
    def test_create_and_get(self, test_db):
        sid = test_db.create_session({"user_id": 1}, max_age=60)
        assert test_db.get_session(sid) == {"user_id": 1}
        assert test_db.get_session("unknown") is None

    def test_destroy(self, test_db):
        sid = test_db.create_session({"user_id": 1}, max_age=60)
        test_db.destroy_session(sid)
        assert test_db.get_session(sid) is None

    def test_expired_session_is_absent(self, test_db):
        sid = test_db.create_session({"user_id": 1}, max_age=-1)
        assert test_db.get_session(sid) is None

    def test_purge_expired(self, test_db):
        test_db.create_session({"user_id": 1}, max_age=-1)
        live = test_db.create_session({"user_id": 2}, max_age=60)
        assert test_db.purge_expired_sessions() == 1
        assert test_db.get_session(live) == {"user_id": 2}

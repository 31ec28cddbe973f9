"""
Tests for article routes.
"""

from conftest import create_article, login


class TestCreateArticle:
    """Tests for POST /api/articles."""

    def test_create_article(self, client, alice):
        article = create_article(client, title="  My First Post ", tags=["python"])
        assert article["title"] == "My First Post"
        assert article["author_id"] == alice["id"]
        assert article["status"] == "draft"
        assert article["views"] == 0
        assert article["likes"] == 0
        assert article["liked_by"] == []
        assert article["bookmarked_by"] == []
        assert article["viewed_by"] == []
        assert article["tags"] == ["python"]
        assert article["author"]["full_name"] == "Alice Author"

    def test_create_article_cleans_tags(self, client, alice):
        article = create_article(client, tags=[" python ", "", "python", "web"])
        assert article["tags"] == ["python", "web"]

    def test_create_article_requires_title(self, client, alice):
        response = client.post("/api/articles", json={"title": "   ", "content": "Body"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Title is required"

    def test_create_article_requires_content(self, client, alice):
        response = client.post("/api/articles", json={"title": "Title", "content": ""})
        assert response.status_code == 400
        assert response.json()["detail"] == "Content is required"

    def test_create_article_rejects_unknown_status(self, client, alice):
        response = client.post(
            "/api/articles",
            json={"title": "Title", "content": "Body", "status": "deleted"},
        )
        assert response.status_code == 400

    def test_create_article_requires_auth(self, client):
        response = client.post("/api/articles", json={"title": "Title", "content": "Body"})
        assert response.status_code == 401
        assert client.get("/api/articles").json() == []

    def test_unauthenticated_invalid_body_is_401(self, client):
        """Authentication is checked before the body is validated."""
        response = client.post("/api/articles", json={})
        assert response.status_code == 401

    def test_unauthenticated_malformed_json_is_400(self, client):
        """A body that is not JSON at all is rejected before authentication runs."""
        response = client.post(
            "/api/articles",
            content="{bad",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert client.get("/api/articles").json() == []


class TestListArticles:
    """Tests for GET /api/articles."""

    def test_list_articles_empty(self, client):
        response = client.get("/api/articles")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_articles_newest_first(self, client, alice):
        first = create_article(client, title="First")
        second = create_article(client, title="Second")
        articles = client.get("/api/articles").json()
        assert [a["id"] for a in articles] == [second["id"], first["id"]]

    def test_list_articles_includes_author(self, client, alice, article):
        articles = client.get("/api/articles").json()
        assert articles[0]["author"]["id"] == alice["id"]
        assert "email" not in articles[0]["author"]


class TestGetArticle:
    """Tests for GET /api/articles/{id}."""

    def test_get_article(self, client, article):
        response = client.get(f"/api/articles/{article['id']}")
        assert response.status_code == 200
        assert response.json()["title"] == article["title"]

    def test_get_article_not_found(self, client):
        response = client.get("/api/articles/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Article not found"

    def test_get_article_id_out_of_range(self, client):
        """Ids too large for an SQLite integer are a validation error."""
        response = client.get("/api/articles/99999999999999999999")
        assert response.status_code == 400

    def test_get_article_id_zero(self, client):
        assert client.get("/api/articles/0").status_code == 400


class TestUpdateArticle:
    """Tests for PATCH /api/articles/{id}."""

    def test_author_can_edit(self, client, article):
        response = client.patch(
            f"/api/articles/{article['id']}",
            json={"title": "Edited", "status": "archived"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Edited"
        assert data["status"] == "archived"
        assert data["content"] == article["content"]
        assert data["tags"] == article["tags"]

    def test_other_user_cannot_edit(self, other_client, bob, article):
        response = other_client.patch(
            f"/api/articles/{article['id']}", json={"title": "Hijacked"}
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "You can only edit your own articles"

    def test_editor_can_edit_any_article(self, other_client, bob, article, test_db):
        test_db.update_user(bob["id"], role="editor")
        response = other_client.patch(
            f"/api/articles/{article['id']}", json={"title": "Copy edited"}
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Copy edited"

    def test_edit_missing_article(self, client, alice):
        response = client.patch("/api/articles/999", json={"title": "Nope"})
        assert response.status_code == 404

    def test_edit_requires_auth(self, client, article):
        client.post("/api/auth/logout")
        response = client.patch(f"/api/articles/{article['id']}", json={"title": "Anon"})
        assert response.status_code == 401


class TestLikeToggle:
    """Tests for POST /api/articles/{id}/like."""

    def test_like_then_unlike(self, other_client, bob, article):
        """Liking twice should return the article to its original state."""
        liked = other_client.post(f"/api/articles/{article['id']}/like").json()
        assert liked["likes"] == 1
        assert liked["liked_by"] == [bob["id"]]

        unliked = other_client.post(f"/api/articles/{article['id']}/like").json()
        assert unliked["likes"] == 0
        assert unliked["liked_by"] == []

    def test_likes_from_two_users(self, client, other_client, alice, bob, article):
        client.post(f"/api/articles/{article['id']}/like")
        data = other_client.post(f"/api/articles/{article['id']}/like").json()
        assert data["likes"] == 2
        assert sorted(data["liked_by"]) == sorted([alice["id"], bob["id"]])

    def test_like_missing_article(self, client, alice):
        assert client.post("/api/articles/999/like").status_code == 404

    def test_like_requires_auth(self, client, other_client, article):
        response = other_client.post(f"/api/articles/{article['id']}/like")
        assert response.status_code == 401
        data = client.get(f"/api/articles/{article['id']}").json()
        assert data["likes"] == 0
        assert data["liked_by"] == []


class TestBookmarkToggle:
    """Tests for POST /api/articles/{id}/bookmark."""

    def test_bookmark_then_unbookmark(self, other_client, bob, article, test_db):
        data = other_client.post(f"/api/articles/{article['id']}/bookmark").json()
        assert data["bookmarked_by"] == [bob["id"]]
        assert [a.id for a in test_db.get_user_bookmarks(bob["id"])] == [article["id"]]

        data = other_client.post(f"/api/articles/{article['id']}/bookmark").json()
        assert data["bookmarked_by"] == []
        assert test_db.get_user_bookmarks(bob["id"]) == []

    def test_bookmark_missing_article(self, client, alice):
        assert client.post("/api/articles/999/bookmark").status_code == 404

    def test_bookmark_requires_auth(self, client, other_client, article):
        assert other_client.post(f"/api/articles/{article['id']}/bookmark").status_code == 401
        assert client.get(f"/api/articles/{article['id']}").json()["bookmarked_by"] == []


class TestRecordView:
    """Tests for POST /api/articles/{id}/view."""

    def test_view_counted_once_per_user(self, other_client, bob, article):
        other_client.post(f"/api/articles/{article['id']}/view")
        data = other_client.post(f"/api/articles/{article['id']}/view").json()
        assert data["views"] == 1
        assert data["viewed_by"] == [bob["id"]]

    def test_views_from_two_users(self, client, other_client, alice, bob, article):
        client.post(f"/api/articles/{article['id']}/view")
        data = other_client.post(f"/api/articles/{article['id']}/view").json()
        assert data["views"] == 2
        assert len(data["viewed_by"]) == 2

    def test_first_view_adds_reading_history(self, other_client, bob, article):
        other_client.post(f"/api/articles/{article['id']}/view")
        other_client.post(f"/api/articles/{article['id']}/view")
        history = other_client.get("/api/me/reading-history").json()
        assert [a["id"] for a in history] == [article["id"]]

    def test_view_missing_article(self, client, alice):
        assert client.post("/api/articles/999/view").status_code == 404

    def test_view_requires_auth(self, client, other_client, article):
        assert other_client.post(f"/api/articles/{article['id']}/view").status_code == 401
        assert client.get(f"/api/articles/{article['id']}").json()["views"] == 0

    def test_view_survives_relogin(self, client, article):
        """The same user viewing again after signing back in is not recounted."""
        client.post(f"/api/articles/{article['id']}/view")
        client.post("/api/auth/logout")
        login(client, "alice@example.com")
        data = client.post(f"/api/articles/{article['id']}/view").json()
        assert data["views"] == 1

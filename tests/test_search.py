from fastapi import status

from tests.conftest import minutes


class TestSearch:
    def test_query_must_have_two_characters(self, client):
        assert client.get("/api/search", params={"q": "a"}).status_code == status.HTTP_400_BAD_REQUEST
        assert client.get("/api/search", params={"q": "  "}).status_code == status.HTTP_400_BAD_REQUEST
        assert client.get("/api/search", params={"q": "ab"}).status_code == status.HTTP_200_OK

    def test_invalid_type(self, client):
        response = client.get("/api/search", params={"q": "hello", "type": "groups"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_all_returns_every_category(self, client, alice, bob, create_post):
        create_post(bob, "Alice in wonderland #alice")

        body = client.get("/api/search", params={"q": "alice"}).json()

        assert set(body) == {"users", "posts", "hashtags"}
        assert [u["username"] for u in body["users"]] == ["alice"]
        assert body["users"][0]["follower_count"] == 0
        assert len(body["posts"]) == 1
        assert body["posts"][0]["username"] == "bob"
        assert [h["tag"] for h in body["hashtags"]] == ["alice"]

    def test_type_filter_returns_only_that_category(self, client, alice, create_post):
        create_post(alice, "about alice")

        body = client.get("/api/search", params={"q": "alice", "type": "users"}).json()

        assert list(body) == ["users"]

    def test_user_match_is_case_insensitive_over_bio(self, client, alice, bob):
        body = client.get("/api/search", params={"q": "TRAVEL", "type": "users"}).json()
        assert [u["username"] for u in body["users"]] == ["alice"]

    def test_wildcards_are_literal(self, client, alice, create_post):
        create_post(alice, "100% sure")
        create_post(alice, "100 percent")

        body = client.get("/api/search", params={"q": "0%", "type": "posts"}).json()

        assert [p["content"] for p in body["posts"]] == ["100% sure"]

    def test_hash_marks_alone_do_not_match_every_tag(self, client, alice, create_post):
        create_post(alice, "#python #fastapi")

        only_marks = client.get("/api/search", params={"q": "##", "type": "hashtags"})
        one_letter = client.get("/api/search", params={"q": "#p", "type": "hashtags"})
        real_tag = client.get("/api/search", params={"q": "#py", "type": "hashtags"})

        assert only_marks.status_code == status.HTTP_200_OK
        assert only_marks.json()["hashtags"] == []
        assert one_letter.json()["hashtags"] == []
        assert [h["tag"] for h in real_tag.json()["hashtags"]] == ["python"]

    def test_post_results_reflect_viewer_likes(self, client, alice, bob, create_post, add_like):
        post_id = create_post(alice, "liked by bob")
        add_like(bob, post_id)

        as_bob = client.get("/api/search", params={"q": "liked", "type": "posts"}, headers=bob.headers).json()
        anonymous = client.get("/api/search", params={"q": "liked", "type": "posts"}).json()

        assert as_bob["posts"][0]["is_liked"] is True
        assert anonymous["posts"][0]["is_liked"] is False


class TestHashtagPosts:
    def test_lists_posts_for_tag_newest_first(self, client, alice, bob, create_post):
        older = create_post(alice, "hello #world", created_at=minutes(1))
        newer = create_post(bob, "bye #World", created_at=minutes(2))
        create_post(bob, "no tags here", created_at=minutes(3))

        body = client.get("/api/search/hashtag/world").json()

        assert [p["id"] for p in body["data"]] == [newer, older]
        assert body["pagination"]["total"] == 2

    def test_tag_lookup_ignores_case_and_hash(self, client, alice, create_post):
        post_id = create_post(alice, "hello #world")
        body = client.get("/api/search/hashtag/%23WORLD").json()
        assert [p["id"] for p in body["data"]] == [post_id]

    def test_hashtag_posts_reflect_viewer_likes(self, client, alice, bob, create_post, add_like):
        post_id = create_post(alice, "hello #world")
        add_like(bob, post_id)

        body = client.get("/api/search/hashtag/world", headers=bob.headers).json()

        assert body["data"][0]["is_liked"] is True

    def test_unknown_tag(self, client):
        body = client.get("/api/search/hashtag/nothing").json()
        assert body["data"] == []
        assert body["pagination"]["total"] == 0

from fastapi import status

from app.crud import follow as follow_crud
from app.db.models.follow import Block, Follow


class TestProfile:
    def test_profile_with_counts(self, client, alice, bob, carol, create_post, add_follow):
        add_follow(bob, alice)
        add_follow(carol, alice)
        add_follow(alice, bob)
        create_post(alice)

        response = client.get(f"/api/users/{alice.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["username"] == "alice"
        assert data["bio"] == "Curious traveller"
        assert (data["follower_count"], data["following_count"], data["post_count"]) == (2, 1, 1)
        assert "password" not in data

    def test_missing_user(self, client):
        assert client.get("/api/users/nobody").status_code == status.HTTP_404_NOT_FOUND


class TestMe:
    def test_get_me(self, client, alice):
        response = client.get("/api/users/me", headers=alice.headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == alice.id

    def test_get_me_requires_token(self, client):
        assert client.get("/api/users/me").status_code == status.HTTP_401_UNAUTHORIZED

    def test_partial_update(self, client, alice):
        response = client.put("/api/users/me", json={"bio": "Down the rabbit hole"}, headers=alice.headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["bio"] == "Down the rabbit hole"
        assert data["name"] == "Alice Liddell"

    def test_username_taken(self, client, alice, bob):
        response = client.put("/api/users/me", json={"username": "bob"}, headers=alice.headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Username already taken"

    def test_blank_name_rejected(self, client, alice):
        response = client.put("/api/users/me", json={"name": "  "}, headers=alice.headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_overlong_username_rejected(self, client, alice):
        response = client.put("/api/users/me", json={"username": "u" * 51}, headers=alice.headers)
        assert response.status_code == 422
        assert client.get("/api/users/me", headers=alice.headers).json()["username"] == "alice"


class TestUserSearch:
    def test_search_by_name_or_username(self, client, alice, bob, carol):
        body = client.get("/api/users/search/BUILD").json()
        assert [u["username"] for u in body] == ["bob"]

    def test_short_query(self, client):
        assert client.get("/api/users/search/a").status_code == status.HTTP_400_BAD_REQUEST


class TestBlock:
    def test_block_removes_follow_edge(self, client, alice, bob, add_follow, db):
        add_follow(alice, bob)

        response = client.post(f"/api/users/{bob.id}/block", headers=alice.headers)

        assert response.status_code == status.HTTP_200_OK
        assert db.query(Follow).filter(Follow.follower_id == alice.id).count() == 0

    def test_block_twice(self, client, alice, bob):
        client.post(f"/api/users/{bob.id}/block", headers=alice.headers)
        response = client.post(f"/api/users/{bob.id}/block", headers=alice.headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cannot_block_self(self, client, alice):
        response = client.post(f"/api/users/{alice.id}/block", headers=alice.headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_primary_key_backs_up_the_pre_check(self, client, alice, bob, add_block, db, monkeypatch):
        add_block(alice, bob)
        monkeypatch.setattr(follow_crud, "is_blocking", lambda session, blocker_id, blocked_id: False)

        response = client.post(f"/api/users/{bob.id}/block", headers=alice.headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "User already blocked"
        assert db.query(Block).filter(Block.blocker_id == alice.id).count() == 1

    def test_unblock_restores_suggestion(self, client, alice, bob):
        client.post(f"/api/users/{bob.id}/block", headers=alice.headers)
        assert client.get("/api/discover/suggested-users", headers=alice.headers).json()["data"] == []

        response = client.delete(f"/api/users/{bob.id}/block", headers=alice.headers)

        assert response.status_code == status.HTTP_200_OK
        suggested = client.get("/api/discover/suggested-users", headers=alice.headers).json()["data"]
        assert [u["username"] for u in suggested] == ["bob"]

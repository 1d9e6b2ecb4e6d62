from fastapi import status

from app.db.models.notifications import Notification
from tests.conftest import minutes


class TestConversations:
    def test_one_row_per_partner_newest_first(self, client, alice, bob, carol, add_message):
        add_message(alice, bob, "hi bob", created_at=minutes(1))
        add_message(bob, alice, "hey alice", created_at=minutes(2))
        add_message(carol, alice, "ping", created_at=minutes(3))
        add_message(carol, alice, "ping again", created_at=minutes(4))

        response = client.get("/api/messages/conversations", headers=alice.headers)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [c["username"] for c in body["data"]] == ["carol", "bob"]
        carol_row, bob_row = body["data"]
        assert carol_row["last_message"] == "ping again"
        assert carol_row["unread_count"] == 2
        assert bob_row["last_message"] == "hey alice"
        assert bob_row["unread_count"] == 1
        assert body["pagination"]["total"] == 2

    def test_sent_messages_do_not_count_as_unread(self, client, alice, bob, add_message):
        add_message(alice, bob, "only outgoing", created_at=minutes(1))

        body = client.get("/api/messages/conversations", headers=alice.headers).json()

        assert body["data"][0]["unread_count"] == 0
        assert body["data"][0]["user_id"] == bob.id

    def test_no_conversations(self, client, alice):
        body = client.get("/api/messages/conversations", headers=alice.headers).json()
        assert body["data"] == []
        assert body["pagination"]["total"] == 0


class TestChat:
    def test_thread_is_chronological_and_marks_read(self, client, alice, bob, carol, add_message):
        add_message(bob, alice, "one", created_at=minutes(1))
        add_message(alice, bob, "two", created_at=minutes(2))
        add_message(bob, alice, "three", created_at=minutes(3))
        add_message(carol, alice, "other thread", created_at=minutes(4))

        response = client.get(f"/api/messages/chat/{bob.id}", headers=alice.headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert [m["content"] for m in data] == ["one", "two", "three"]
        # Serialized before the thread was marked read
        assert data[0]["is_read"] is False

        conversations = client.get("/api/messages/conversations", headers=alice.headers).json()["data"]
        unread = {c["username"]: c["unread_count"] for c in conversations}
        assert unread == {"carol": 1, "bob": 0}
        assert client.get("/api/messages/unread/count", headers=alice.headers).json() == {"unread_count": 1}

    def test_reading_does_not_mark_the_other_side(self, client, alice, bob, add_message):
        add_message(alice, bob, "unseen", created_at=minutes(1))

        client.get(f"/api/messages/chat/{bob.id}", headers=alice.headers)

        assert client.get("/api/messages/unread/count", headers=bob.headers).json() == {"unread_count": 1}

    def test_pages_walk_backwards_in_time(self, client, alice, bob, add_message):
        for i in range(35):
            add_message(bob, alice, f"m{i}", created_at=minutes(i))

        first = client.get(f"/api/messages/chat/{bob.id}", headers=alice.headers).json()
        second = client.get(f"/api/messages/chat/{bob.id}", params={"page": 2}, headers=alice.headers).json()

        assert len(first["data"]) == 30
        assert first["data"][0]["content"] == "m5"
        assert first["data"][-1]["content"] == "m34"
        assert [m["content"] for m in second["data"]] == ["m0", "m1", "m2", "m3", "m4"]


class TestSendMessage:
    def test_send_creates_message_and_notification(self, client, alice, bob, db):
        response = client.post(
            "/api/messages",
            json={"recipient_id": bob.id, "content": " hello "},
            headers=alice.headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["content"] == "hello"
        assert data["sender_id"] == alice.id
        assert data["is_read"] is False
        notification = db.query(Notification).one()
        assert (notification.type, notification.user_id, notification.post_id) == ("message", bob.id, None)
        assert client.get("/api/messages/unread/count", headers=bob.headers).json() == {"unread_count": 1}

    def test_missing_fields(self, client, alice, bob):
        assert client.post("/api/messages", json={"recipient_id": bob.id}, headers=alice.headers).status_code == 400
        assert client.post("/api/messages", json={"content": "hi"}, headers=alice.headers).status_code == 400

    def test_cannot_message_self(self, client, alice):
        response = client.post("/api/messages", json={"recipient_id": alice.id, "content": "me"}, headers=alice.headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_recipient(self, client, alice):
        response = client.post("/api/messages", json={"recipient_id": "ghost", "content": "boo"}, headers=alice.headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_requires_authentication(self, client, bob):
        response = client.post("/api/messages", json={"recipient_id": bob.id, "content": "hi"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

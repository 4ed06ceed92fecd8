from unittest import mock

import pytest

from apps.chat.models import Conversation, Message
from apps.chat.services.chat_service import get_or_create_conversation, send_message


def open_conversation(api, client_user, freelancer, project=None):
    payload = {"client_id": client_user.id, "freelancer_id": freelancer.id}
    if project is not None:
        payload["project_id"] = project.id
    return api.post("/api/conversations/", payload, format="json")


@pytest.mark.django_db
class TestConversations:

    def test_created_lazily_once(self, auth_client, client_user, freelancer, project):
        api = auth_client(client_user)

        first = open_conversation(api, client_user, freelancer, project)
        second = open_conversation(auth_client(freelancer), client_user, freelancer, project)

        assert first.status_code == 201
        assert second.status_code == 200
        assert first.data["id"] == second.data["id"]
        assert Conversation.objects.count() == 1

    def test_direct_conversation_is_unique_too(self, client_user, freelancer):
        first, created = get_or_create_conversation(client_user, client_user.id, freelancer.id)
        again, created_again = get_or_create_conversation(freelancer, client_user.id, freelancer.id)

        assert created and not created_again
        assert first == again

    def test_outsiders_cannot_open(self, auth_client, client_user, freelancer, other_freelancer):
        response = open_conversation(auth_client(other_freelancer), client_user, freelancer)
        assert response.status_code == 403


@pytest.mark.django_db
class TestMessages:

    @pytest.fixture
    def conversation(self, client_user, freelancer, project):
        conversation, _ = get_or_create_conversation(client_user, client_user.id, freelancer.id, project.id)
        return conversation

    def test_send_updates_conversation(self, auth_client, client_user, conversation):
        response = auth_client(client_user).post(
            f"/api/conversations/{conversation.id}/messages/", {"text": "  Hello there  "}, format="json"
        )

        assert response.status_code == 201
        assert response.data["text"] == "Hello there"
        conversation.refresh_from_db()
        assert conversation.last_message == "Hello there"

    def test_broadcast_after_commit(self, client_user, conversation, django_capture_on_commit_callbacks):
        with mock.patch("apps.chat.services.chat_service.broadcast_message") as broadcast:
            with django_capture_on_commit_callbacks(execute=True):
                message = send_message(client_user, conversation, "Hi")

        broadcast.assert_called_once_with(message)

    def test_empty_text_refused(self, auth_client, client_user, conversation):
        response = auth_client(client_user).post(
            f"/api/conversations/{conversation.id}/messages/", {"text": "   "}, format="json"
        )
        assert response.status_code == 400

    def test_outsider_cannot_read_or_send(self, auth_client, other_freelancer, conversation):
        api = auth_client(other_freelancer)
        url = f"/api/conversations/{conversation.id}/messages/"

        assert api.get(url).status_code == 403
        assert api.post(url, {"text": "hi"}, format="json").status_code == 403

    def test_messages_ascending(self, auth_client, client_user, freelancer, conversation):
        send_message(client_user, conversation, "first")
        send_message(freelancer, conversation, "second")

        response = auth_client(client_user).get(f"/api/conversations/{conversation.id}/messages/")

        assert [m["text"] for m in response.data] == ["first", "second"]

    def test_unread_count_and_mark_read(self, auth_client, client_user, freelancer, conversation):
        send_message(client_user, conversation, "one")
        send_message(client_user, conversation, "two")
        send_message(freelancer, conversation, "mine")

        listing = auth_client(freelancer).get("/api/conversations/")
        assert listing.data[0]["unread_count"] == 2
        assert listing.data[0]["other_participant"]["name"] == "Cara Client"

        marked = auth_client(freelancer).post(f"/api/conversations/{conversation.id}/read/")

        assert marked.data["marked"] == 2
        assert not Message.objects.filter(sender=client_user, seen=False).exists()
        assert Message.objects.get(text="mine").seen is False

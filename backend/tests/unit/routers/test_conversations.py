from app.enums import MessageRole
from app.services.conversation_service import ConversationService


class TestConversations:

    def test_create_and_list(self, client, auth_headers):
        first = client.post("/conversations", headers=auth_headers, json={}).json()
        second = client.post("/conversations", headers=auth_headers, json={"title": "Taxes"}).json()

        assert first["title"] == "New Conversation"
        listed = client.get("/conversations", headers=auth_headers).json()
        assert [c["id"] for c in listed] == [second["id"], first["id"]]

    def test_messages_in_order(self, client, auth_headers, db_session, test_user):
        conversation = ConversationService.create_conversation(db_session, test_user.id, "Chat")
        ConversationService.append_message(db_session, conversation, MessageRole.USER, "Hi")
        ConversationService.append_message(db_session, conversation, MessageRole.ASSISTANT, "Hello")

        messages = client.get(f"/conversations/{conversation.id}/messages", headers=auth_headers).json()

        assert [(m["role"], m["content"]) for m in messages] == [("user", "Hi"), ("assistant", "Hello")]

    def test_other_users_conversation(self, client, auth_headers, db_session, other_user):
        theirs = ConversationService.create_conversation(db_session, other_user.id, "Private")

        assert client.get(f"/conversations/{theirs.id}/messages", headers=auth_headers).status_code == 404
        assert client.delete(f"/conversations/{theirs.id}", headers=auth_headers).status_code == 404

    def test_delete_removes_messages(self, client, auth_headers, db_session, test_user):
        from app import models
        conversation = ConversationService.create_conversation(db_session, test_user.id, "Chat")
        ConversationService.append_message(db_session, conversation, MessageRole.USER, "Hi")

        response = client.delete(f"/conversations/{conversation.id}", headers=auth_headers)

        assert response.status_code == 204
        assert db_session.query(models.Message).count() == 0

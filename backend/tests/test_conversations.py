# tests for conversations router — inbox, open, send, mark read
# lawyer sees every client, clients only their own threads

from tests.conftest import (
    CASE_CONVERSATION_ID,
    CLIENT_2_ID,
    CLIENT_3_ID,
    CLIENT_ID,
    GENERAL_CONVERSATION_ID,
    LAWYER_ID,
)


class TestListConversations:
    """inbox listings"""

    async def test_lawyer_inbox(self, lawyer_client):
        resp = await lawyer_client.get("/conversations")
        assert resp.status_code == 200
        data = resp.json()
        assert data["totalUnread"] == 3
        ids = [c["id"] for c in data["conversations"]]
        assert ids == [CASE_CONVERSATION_ID, f"client-{CLIENT_3_ID}", GENERAL_CONVERSATION_ID]

    async def test_lawyer_inbox_placeholder_fields(self, lawyer_client):
        resp = await lawyer_client.get("/conversations")
        placeholder = resp.json()["conversations"][1]
        assert placeholder["isPlaceholder"] is True
        assert placeholder["caseNumber"] == "N/A"
        assert placeholder["clientName"] == "Luc Petit"
        assert placeholder["unreadCount"] == 0
        assert placeholder["messages"] == []

    async def test_client_sees_own(self, client_client):
        resp = await client_client.get("/conversations")
        assert resp.status_code == 200
        data = resp.json()
        assert [c["id"] for c in data["conversations"]] == [CASE_CONVERSATION_ID]
        assert data["conversations"][0]["messages"][0]["senderId"] == CLIENT_ID

    async def test_requires_auth(self, client):
        resp = await client.get("/conversations")
        assert resp.status_code in (401, 403)


class TestOpenConversation:
    """single thread view"""

    async def test_lawyer_view_clears_badge_locally(self, lawyer_client, mock_db):
        resp = await lawyer_client.get(f"/conversations/{GENERAL_CONVERSATION_ID}")
        assert resp.status_code == 200
        assert resp.json()["unreadCount"] == 0
        # the stored counter is untouched
        resp = await lawyer_client.get("/conversations")
        general = [c for c in resp.json()["conversations"] if c["id"] == GENERAL_CONVERSATION_ID][0]
        assert general["unreadCount"] == 2

    async def test_client_view_keeps_counter(self, client_client):
        resp = await client_client.get(f"/conversations/{CASE_CONVERSATION_ID}")
        assert resp.status_code == 200
        assert resp.json()["unreadCount"] == 1

    async def test_client_cannot_open_other_thread(self, client_client):
        resp = await client_client.get(f"/conversations/{GENERAL_CONVERSATION_ID}")
        assert resp.status_code == 403

    async def test_not_found(self, lawyer_client):
        resp = await lawyer_client.get("/conversations/65f0000000000000000000ff")
        assert resp.status_code == 404
        data = resp.json()
        assert data["success"] is False
        assert data["errorCode"] == "not_found"


class TestSendMessage:
    """send endpoint"""

    async def test_lawyer_first_send_through_placeholder(self, lawyer_client):
        resp = await lawyer_client.post("/conversations/messages", json={
            "conversationId": f"client-{CLIENT_3_ID}",
            "clientId": CLIENT_3_ID,
            "content": "Bonjour Monsieur Petit",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["conversationId"] != f"client-{CLIENT_3_ID}"
        assert data["message"]["senderId"] == LAWYER_ID
        assert "error" not in data

        resp = await lawyer_client.get("/conversations")
        entries = resp.json()["conversations"]
        assert not any(c["isPlaceholder"] for c in entries)
        assert data["conversationId"] in [c["id"] for c in entries]

    async def test_client_send_without_id(self, client_client, mock_db):
        resp = await client_client.post("/conversations/messages", json={"content": "Bonjour"})
        assert resp.status_code == 200
        conv_id = resp.json()["conversationId"]
        general = [d for d in mock_db.conversations._data if str(d["_id"]) == conv_id][0]
        assert general["case_id"] == ""
        assert general["client_id"] == CLIENT_ID
        assert general["unread_count"] == 1

    async def test_client_send_to_own_thread(self, client_client):
        resp = await client_client.post("/conversations/messages", json={
            "conversationId": CASE_CONVERSATION_ID,
            "content": "Voici les documents",
        })
        assert resp.status_code == 200
        assert resp.json()["conversationId"] == CASE_CONVERSATION_ID

    async def test_client_cannot_use_other_placeholder(self, client_client):
        resp = await client_client.post("/conversations/messages", json={
            "conversationId": f"client-{CLIENT_2_ID}",
            "content": "Bonjour",
        })
        assert resp.status_code == 403

    async def test_client_cannot_write_other_thread(self, client_client):
        resp = await client_client.post("/conversations/messages", json={
            "conversationId": GENERAL_CONVERSATION_ID,
            "content": "Bonjour",
        })
        assert resp.status_code == 422
        assert resp.json()["errorCode"] == "invalid_input"

    async def test_blank_content(self, lawyer_client):
        resp = await lawyer_client.post("/conversations/messages", json={
            "conversationId": GENERAL_CONVERSATION_ID,
            "content": "   ",
        })
        assert resp.status_code == 422
        data = resp.json()
        assert data["success"] is False
        assert data["errorCode"] == "invalid_input"

    async def test_lawyer_without_selection(self, lawyer_client):
        resp = await lawyer_client.post("/conversations/messages", json={"content": "Bonjour"})
        assert resp.status_code == 422

    async def test_unknown_client(self, lawyer_client):
        resp = await lawyer_client.post("/conversations/messages", json={
            "clientId": "65f0000000000000000000ff",
            "content": "Bonjour",
        })
        assert resp.status_code == 404


class TestMarkRead:
    """remote reset of the unread counter"""

    async def test_client_marks_read(self, client_client, mock_db):
        resp = await client_client.post(f"/conversations/{CASE_CONVERSATION_ID}/read")
        assert resp.status_code == 200
        assert resp.json() == {"conversationId": CASE_CONVERSATION_ID, "read": True}
        convo = [d for d in mock_db.conversations._data if str(d["_id"]) == CASE_CONVERSATION_ID][0]
        assert convo["unread_count"] == 0

    async def test_lawyer_call_is_a_no_op(self, lawyer_client, mock_db):
        resp = await lawyer_client.post(f"/conversations/{GENERAL_CONVERSATION_ID}/read")
        assert resp.status_code == 200
        assert resp.json()["read"] is False
        convo = [d for d in mock_db.conversations._data if str(d["_id"]) == GENERAL_CONVERSATION_ID][0]
        assert convo["unread_count"] == 2

from gocinema.models import User
from gocinema.services.telegram_bot import HINT, WELCOME, local_phone

WEBHOOK = "/api/v1/telegram/webhook"


def _update(text=None, chat_id=1001, **message):
    payload = {"message_id": 7, "chat": {"id": chat_id, "type": "private"}, **message}
    if text is not None:
        payload["text"] = text
    return {"update_id": 99, "message": payload}


def test_local_phone_normalization():
    assert local_phone("077 123 456") == "077123456"
    assert local_phone("+374 77 123456") == "077123456"
    assert local_phone("(077)-123-456") == "077123456"


def test_start_sends_welcome(client, telegram):
    response = client.post(WEBHOOK, json=_update("/start"))
    assert response.json() == {"ok": True}
    assert telegram.sent == [("1001", WELCOME)]


def test_phone_links_chat_to_account(client, db, user, telegram):
    client.post(WEBHOOK, json=_update("077 123 456", chat_id=31337))

    db.refresh(user)
    assert user.telegram_chat_id == "31337"
    assert user.phone_verified is True
    assert "Բարի գալուստ" in telegram.sent[-1][1]


def test_relinking_sends_returning_message(client, db, user, telegram):
    client.post(WEBHOOK, json=_update("077123456", chat_id=1))
    client.post(WEBHOOK, json=_update("077123456", chat_id=2))

    db.refresh(user)
    assert user.telegram_chat_id == "2"
    assert telegram.sent[-1][1].startswith("✅")


def test_shared_contact_links_account(client, db, user):
    client.post(WEBHOOK, json=_update(contact={"phone_number": "+37477123456"}, chat_id=77))
    db.refresh(user)
    assert user.telegram_chat_id == "77"


def test_unknown_phone_is_reported(client, db, telegram):
    response = client.post(WEBHOOK, json=_update("091 234 567"))
    assert response.json() == {"ok": True}
    assert "չի գտնվել" in telegram.sent[-1][1]
    assert db.query(User).count() == 0


def test_other_text_gets_hint(client, telegram):
    client.post(WEBHOOK, json=_update("hello"))
    assert telegram.sent == [("1001", HINT)]


def test_update_without_message_is_acknowledged(client, telegram):
    response = client.post(WEBHOOK, json={"update_id": 5})
    assert response.json() == {"ok": True}
    assert telegram.sent == []


def test_admin_registers_webhook(client, admin_headers, telegram):
    response = client.post("/api/v1/admin/telegram/setup", headers=admin_headers)
    assert response.status_code == 200
    assert telegram.webhooks == ["http://localhost:8000/api/v1/telegram/webhook"]

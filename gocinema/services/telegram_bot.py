"""Webhook handler for the GoCinema bot: links a Telegram chat to an account by phone."""

import logging
import re
from typing import Optional

from sqlalchemy.orm import Session

from gocinema.models.user import User
from gocinema.schemas.telegram import TelegramUpdate
from gocinema.services.telegram import TelegramClient
from gocinema.utils.phone import clean_phone, is_valid_phone

logger = logging.getLogger(__name__)

WELCOME = (
    "👋 Բարի գալուստ <b>GoCinema</b> բոտ!\n\n"
    "Այս բոտը կօգնի ձեզ վերականգնել ձեր գաղտնաբառը:\n\n"
    "📱 Ուղարկեք ձեր հեռախոսահամարը հետևյալ ձևաչափով.\n"
    "<code>0XX XXX XXX</code>\n\n"
    "Օրինակ: <code>077 123 456</code>"
)
PHONE_UNKNOWN = (
    "❌ <b>{phone}</b> հեռախոսահամարով գրանցված հաշիվ չի գտնվել:\n\n"
    "Վստահեցե՛ք, որ ճիշտ համարն եք մուտքագրել:"
)
RELINKED = (
    "✅ Ձեր Telegram հաշիվը կապված է <b>{name}</b> հաշվի հետ:\n\n"
    "Հիմա կարող եք ավարտել գաղտնաբառի վերականգնումը կայքում:"
)
LINKED = (
    "🎉 Բարի գալուստ <b>GoCinema</b>-ում, <b>{name}</b>:\n\n"
    "✅ Ձեր հաշիվը հաջողությամբ վերիֆիկացված է:\n\n"
    "🎬 Այստեղ կստանաք.\n"
    "• Գաղտնաբառի վերականգնման կոդեր\n"
    "• Պրեմիերաների ծանուցումներ\n"
    "• Հատուկ առաջարկներ\n\n"
    "Հիմա կարող եք վերադառնալ կայք և ավարտել գրանցումը:"
)
HINT = "ℹ️ Ուղարկե՛ք ձեր հեռախոսահամարը (օրինակ: <code>077 123 456</code>) գաղտնաբառի վերականգնման համար:"


def local_phone(raw: Optional[str]) -> str:
    """Bring typed or shared numbers (+374 77 123456) to the local 0XXXXXXXX form."""
    phone = clean_phone(raw).lstrip("+")
    if re.match(r"^374[0-9]{8}$", phone):
        phone = "0" + phone[3:]
    return phone


def handle_update(db: Session, update: TelegramUpdate, client: TelegramClient) -> None:
    message = update.message
    if message is None:
        return

    chat_id = message.chat.id
    text = (message.text or "").strip()
    if message.contact is not None:
        text = message.contact.phone_number

    if text.startswith("/start"):
        client.send_message(chat_id, WELCOME)
        return

    phone = local_phone(text)
    if not is_valid_phone(phone):
        client.send_message(chat_id, HINT)
        return

    user = db.query(User).filter(User.phone == phone).first()
    if not user:
        client.send_message(chat_id, PHONE_UNKNOWN.format(phone=text))
        return

    was_linked = bool(user.telegram_chat_id)
    user.telegram_chat_id = str(chat_id)
    user.phone_verified = True
    db.commit()
    logger.info("Telegram chat %s linked to user %s", chat_id, user.id)

    name = user.name or phone
    client.send_message(chat_id, (RELINKED if was_linked else LINKED).format(name=name))

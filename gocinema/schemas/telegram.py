from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# Subset of the Bot API Update object the webhook reads
class TelegramChat(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int


class TelegramUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    first_name: Optional[str] = None
    username: Optional[str] = None


class TelegramContact(BaseModel):
    model_config = ConfigDict(extra="ignore")

    phone_number: str
    user_id: Optional[int] = None


class TelegramMessage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    message_id: int
    chat: TelegramChat
    from_user: Optional[TelegramUser] = Field(default=None, alias="from")
    text: Optional[str] = None
    contact: Optional[TelegramContact] = None


class TelegramUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    update_id: int
    message: Optional[TelegramMessage] = None


class WebhookAck(BaseModel):
    ok: bool = True

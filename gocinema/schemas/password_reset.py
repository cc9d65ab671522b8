from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# The password recovery flow answers in camelCase (hasTelegram, resetToken, ...)
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ForgotPasswordRequest(CamelModel):
    phone: str


class ForgotPasswordResult(CamelModel):
    success: bool = True
    has_telegram: bool
    telegram_bot_username: Optional[str] = None


class TelegramLinkStatus(CamelModel):
    linked: bool


class VerifyOtpRequest(CamelModel):
    phone: str
    otp: str


class VerifyOtpResult(CamelModel):
    success: bool = True
    reset_token: str


class ResetPasswordRequest(CamelModel):
    reset_token: str
    new_password: str


class ResetPasswordResult(CamelModel):
    success: bool = True

from __future__ import annotations

import logging

import httpx

from hoaxify.config import Settings, get_settings

logger = logging.getLogger(__name__)


class MailError(RuntimeError):
    pass


class Mailer:
    """Sends html mail through the Resend HTTP API."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.api_key = settings.resend_api_key
        self.api_url = settings.resend_api_url
        self.sender = settings.mail_from
        self.timeout = settings.mail_timeout_seconds
        self.base_url = settings.app_base_url.rstrip("/")
        self._transport = transport

    async def send_email(self, to: str, subject: str, html: str) -> dict:
        if not self.api_key:
            raise MailError("RESEND_API_KEY not set")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                r = await client.post(
                    self.api_url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json={"from": self.sender, "to": [to], "subject": subject, "html": html},
                )
                r.raise_for_status()
            except httpx.HTTPError as e:
                raise MailError(f"mail to {to} failed: {e}") from e
            return r.json()

    def activation_link(self, token: str) -> str:
        return f"{self.base_url}/#/login?token={token}"

    def reset_link(self, token: str) -> str:
        return f"{self.base_url}/#/password-reset?reset={token}"

    async def send_account_activation(self, email: str, token: str) -> dict:
        link = self.activation_link(token)
        return await self.send_email(
            to=email,
            subject="Account Activation",
            html=(
                "<div><b>Please click below link to activate your account</b></div>"
                f"<div><a href='{link}'>Activate</a></div>"
                f"<div>Token: {token}</div>"
            ),
        )

    async def send_password_reset(self, email: str, token: str) -> dict:
        link = self.reset_link(token)
        return await self.send_email(
            to=email,
            subject="Password Reset",
            html=(
                "<div><b>Please click below link to reset your password</b></div>"
                f"<div><a href='{link}'>Reset</a></div>"
                f"<div>Token: {token}</div>"
            ),
        )


def get_mailer() -> Mailer:
    return Mailer(get_settings())

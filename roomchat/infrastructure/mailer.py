# roomchat/infrastructure/mailer.py
import logging

import httpx

from roomchat.domain.exceptions import EmailSendError


class EmailClient:
    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        app_name: str,
        logger: logging.Logger,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.app_name = app_name
        self.logger = logger
        self.timeout = timeout
        self.transport = transport

    async def send(self, to: str, subject: str, message: str) -> None:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        body = {
            "to": to,
            "subject": subject,
            "message": message,
            "appName": self.app_name,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(self.api_url, json=body, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as e:
            detail = e.response.text if isinstance(e, httpx.HTTPStatusError) else str(e)
            self.logger.error(f"Failed to send email to {to}: {detail}")
            raise EmailSendError("Failed to send verification email") from e
        self.logger.info(f"Sent '{subject}' email to {to}")

    async def send_verification_code(
        self, email: str, code: str, expires_minutes: int
    ) -> None:
        await self.send(
            email,
            "Your Verification Code",
            f"Your OTP code is {code}. It expires in {expires_minutes} minutes.",
        )

"""HTTP client for the transactional email provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.core.config import Settings, get_settings
from app.core.enums import NotificationTemplateEnum

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when the provider does not accept a message."""


class EmailClient:
    """Send template-based emails through the provider REST API.

    Each call is a single attempt; retries are left to the operator.
    """

    def __init__(
        self,
        *,
        api_url: str,
        service_id: str | None,
        template_ids: dict[NotificationTemplateEnum, str | None],
        public_key: str | None,
        private_key: str | None = None,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self.service_id = service_id
        self.template_ids = template_ids
        self.public_key = public_key
        self.private_key = private_key
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailClient":
        return cls(
            api_url=settings.email_api_url,
            service_id=settings.email_service_id,
            template_ids={
                NotificationTemplateEnum.NEW_BOOKING: settings.email_template_new_booking,
                NotificationTemplateEnum.BOOKING_STATUS: settings.email_template_booking_status,
            },
            public_key=settings.email_public_key,
            private_key=settings.email_private_key,
            timeout_seconds=settings.email_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        required = [self.service_id, self.public_key, *self.template_ids.values()]
        return all(required)

    async def send(self, template: NotificationTemplateEnum, params: dict[str, Any]) -> None:
        """Deliver one message or raise EmailDeliveryError."""
        template_id = self.template_ids.get(template)
        if not self.is_configured or not template_id:
            raise EmailDeliveryError("Email provider is not configured")

        body: dict[str, Any] = {
            "service_id": self.service_id,
            "template_id": template_id,
            "user_id": self.public_key,
            "template_params": params,
        }
        if self.private_key:
            body["accessToken"] = self.private_key

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self.api_url, json=body)
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"Email provider request failed: {exc}") from exc

        if response.status_code >= 400:
            raise EmailDeliveryError(
                f"Email provider returned {response.status_code}: {response.text[:200]}",
            )
        logger.debug("Email template %s accepted by provider", template)


def get_email_client() -> EmailClient:
    """Dependency provider for the email client."""
    return EmailClient.from_settings(get_settings())

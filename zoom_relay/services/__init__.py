"""Services for the webhook relay."""

from .relay_service import WebhookRelayService

__all__ = ["WebhookRelayService"]

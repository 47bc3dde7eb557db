from app.config.settings import Settings
from app.delivery.base import BaseDeliveryClient
from app.delivery.example_adapter import ExampleDeliveryClient
from app.delivery.twilio_adapter import TwilioDeliveryClient
from app.logging.logger import Log


class DeliveryClientFactory:
    """Creates the configured delivery collaborator, or None when delivery is off."""

    PROVIDERS = ("twilio", "example")
    _PLACEHOLDER_MARKERS = ("your-", "placeholder", "xxxxxxxx")

    @classmethod
    def create(cls, settings: Settings) -> BaseDeliveryClient | None:
        if not settings.is_feature_enabled("whatsapp_delivery"):
            return None
        provider = settings.whatsapp_provider.lower()
        if provider == "example":
            return ExampleDeliveryClient()
        if provider == "twilio":
            credentials = (
                settings.twilio_account_sid,
                settings.twilio_auth_token,
                settings.twilio_whatsapp_number,
            )
            if any(cls._is_placeholder(value) for value in credentials):
                Log.warning(
                    "Twilio WhatsApp credentials not configured; delivery disabled. "
                    "Set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_WHATSAPP_NUMBER"
                )
                return None
            return TwilioDeliveryClient(
                account_sid=settings.twilio_account_sid,
                auth_token=settings.twilio_auth_token,
                whatsapp_number=settings.twilio_whatsapp_number,
                timeout_seconds=settings.delivery_timeout_seconds,
                message_interval_seconds=settings.delivery_message_interval_seconds,
            )
        raise ValueError(
            f"Unknown WhatsApp provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )

    @classmethod
    def _is_placeholder(cls, value: str) -> bool:
        return not value or any(marker in value for marker in cls._PLACEHOLDER_MARKERS)

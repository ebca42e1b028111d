"""sendpulse_client -- a typed client and CLI for the SendPulse REST API.

The package wraps the SendPulse marketing platform (address books, email
campaigns, SMTP relay, push notifications, SMS and Viber) behind one method
per remote endpoint. Every method returns the same
:class:`~sendpulse_client.models.SendPulseResponse` shape, whether the call
failed local validation, could not reach the server, or completed with any
HTTP status.

Typical usage::

    from sendpulse_client import SendPulse

    with SendPulse("client-id", "client-secret") as api:
        result = api.list_address_books(limit=10)
        if not result.is_error:
            print(result.data)

Modules:
    sendpulse: The :class:`SendPulse` facade with one method per endpoint.
    endpoints: The declarative endpoint table driving the facade and CLI.
    models: Pydantic models shared across the entire package.
    client: Encoder, transport, response normalizer and retry coordinator.
    auth: Credential store and token manager.
    config: XDG-aware configuration and profile management.
    app: Typer CLI entry point.
"""

__version__ = "0.3.0"

from sendpulse_client.models import (  # noqa: E402
    SendPulseResponse,
    ViberCampaign,
    ViberCampaignAdditional,
    ViberCampaignButton,
    ViberCampaignImage,
    ViberCampaignResendSms,
    ViberMessageType,
)
from sendpulse_client.sendpulse import SendPulse  # noqa: E402

__all__ = [
    "SendPulse",
    "SendPulseResponse",
    "ViberCampaign",
    "ViberCampaignAdditional",
    "ViberCampaignButton",
    "ViberCampaignImage",
    "ViberCampaignResendSms",
    "ViberMessageType",
]

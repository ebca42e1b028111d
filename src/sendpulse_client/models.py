"""Canonical Pydantic models shared across all sendpulse_client modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into four groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`OutputConfig`, :class:`GlobalConfig`, and
    :class:`Profile`.

**Pipeline models** -- created and consumed inside one API call:
    :class:`Credentials`, :class:`Connection`, :class:`HTTPMethod`, :class:`Encoding`,
    :class:`RequestDescriptor`, :class:`RawResponse`, and the public result
    :class:`SendPulseResponse`.

**Endpoint table models** -- rows of the declarative endpoint table:
    :class:`ParamKind`, :class:`ParamRule`, :class:`ParamSpec`, and
    :class:`EndpointSpec`.

**Viber payload models** -- the structured body of a Viber campaign:
    :class:`ViberCampaign` and its nested parts.

All models use Pydantic v2.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

DEFAULT_BASE_URL = "https://api.sendpulse.com"


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP transport settings applied to every API call in a profile."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )

    @field_validator("format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        if value not in ("auto", "json", "plain", "rich"):
            raise ValueError(f"unknown output format '{value}'")
        return value


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/sendpulse/config.json``.

    Fields here have the lowest precedence and can be overridden by project
    config, environment variables, or CLI flags. See
    :func:`~sendpulse_client.config.resolve_config` for the full chain.
    """

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)


class Profile(BaseModel):
    """One SendPulse account, stored as JSON under the ``profiles/`` directory.

    The client id and secret are never stored directly; the profile records
    *where* to read them from (``env:VAR``, ``file:/path`` or ``prompt``),
    resolved at call time by :func:`~sendpulse_client.config.resolve_credential`.

    Example::

        Profile(
            name="marketing",
            client_id_source="env:SENDPULSE_ID",
            client_secret_source="file:~/.sendpulse-secret",
        )
    """

    model_config = ConfigDict(extra="allow")

    name: str
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    client_id_source: str = Field(
        default="env:SENDPULSE_CLIENT_ID",
        description="Credential source for the API user id",
    )
    client_secret_source: str = Field(
        default="env:SENDPULSE_CLIENT_SECRET",
        description="Credential source for the API secret",
    )
    persist_token: bool = Field(
        default=True,
        description="Reuse the bearer token across invocations via the credential store",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- Request pipeline ---


class Credentials(BaseModel):
    """The API key pair exchanged for a bearer token."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str


class Connection(BaseModel):
    """Everything needed to build a client for one CLI invocation.

    Attributes:
        credentials: The resolved key pair.
        base_url: API root after CLI and environment overrides.
        request: Transport settings of the profile (defaults without one).
        token_profile: Profile whose credential file caches the bearer
            token, or ``None`` when the token lives in memory only.
    """

    credentials: Credentials
    base_url: str = DEFAULT_BASE_URL
    request: RequestConfig = Field(default_factory=RequestConfig)
    token_profile: Optional[str] = None


class HTTPMethod(str, enum.Enum):
    """HTTP verbs used by the SendPulse API."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class Encoding(str, enum.Enum):
    """How a request's parameters are serialised into the body."""

    FORM = "form"
    JSON = "json"

    @property
    def content_type(self) -> str:
        if self is Encoding.JSON:
            return "application/json"
        return "application/x-www-form-urlencoded"


class RequestDescriptor(BaseModel):
    """Everything needed to issue one HTTP request.

    Built per call by the endpoint layer (or the token manager) and handed
    unchanged to the transport, possibly twice when a 401 triggers a
    refresh-and-resend.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod = HTTPMethod.GET
    params: dict[str, Any] = Field(default_factory=dict)
    encoding: Encoding = Encoding.FORM
    use_auth: bool = True


class RawResponse(BaseModel):
    """Status code and undecoded body of one HTTP exchange."""

    status_code: int
    body: str = ""


class SendPulseResponse(BaseModel):
    """The single result shape returned by every public operation.

    Validation failures, connection failures and remote responses of any
    status all populate this model, so callers never branch on exception
    types.

    Attributes:
        http_status_code: HTTP status of the final response, or ``0`` when no
            response was received (local validation or transport failure).
        is_error: ``True`` whenever ``http_status_code != 200``.
        data: The parsed JSON body when it is an object or an array,
            otherwise ``None``.
        sdk_error_message: Client-side description of a failure that
            happened before a response was received.
    """

    http_status_code: int = 0
    is_error: bool = False
    data: Optional[Any] = None
    sdk_error_message: Optional[str] = None


# --- Endpoint table ---


class ParamKind(str, enum.Enum):
    """Python-side type of an endpoint parameter."""

    INT = "int"
    STR = "str"
    OBJECT = "object"


class ParamRule(str, enum.Enum):
    """How an endpoint parameter is validated and emitted.

    * ``REQUIRED`` -- must be a positive int / non-empty value; a violation
      short-circuits the call with a local error result.
    * ``OPTIONAL`` -- omitted from the request when zero, empty or ``None``.
    * ``ALWAYS`` -- sent as given, even when zero or empty.
    """

    REQUIRED = "required"
    OPTIONAL = "optional"
    ALWAYS = "always"


class ParamSpec(BaseModel):
    """One parameter of an :class:`EndpointSpec`.

    ``name`` is the Python keyword argument; ``wire_name`` the key sent to
    the API (defaults to ``name``). Parameters whose ``{name}`` appears in
    the endpoint path are substituted into the URL instead of the body.
    ``error`` overrides the endpoint's validation message for this
    parameter.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: ParamKind = ParamKind.STR
    rule: ParamRule = ParamRule.REQUIRED
    wire_name: Optional[str] = None
    default: Any = None
    error: Optional[str] = None
    help: Optional[str] = None

    @property
    def key(self) -> str:
        return self.wire_name or self.name


class EndpointSpec(BaseModel):
    """A row of the endpoint table: one remote operation."""

    model_config = ConfigDict(frozen=True)

    name: str
    method: HTTPMethod
    path: str
    params: tuple[ParamSpec, ...] = ()
    encoding: Encoding = Encoding.FORM
    error_message: str = "Not all data"
    group: str = "root"
    command: Optional[str] = None
    summary: str = ""

    @property
    def path_params(self) -> list[ParamSpec]:
        return [p for p in self.params if "{" + p.name + "}" in self.path]

    @property
    def body_params(self) -> list[ParamSpec]:
        return [p for p in self.params if "{" + p.name + "}" not in self.path]


# --- Viber campaign payload ---


class ViberMessageType(int, enum.Enum):
    """Viber message category, sent as its integer code."""

    TRANSACTIONAL = 2
    MARKETING = 3


class ViberCampaignButton(BaseModel):
    """Call-to-action button attached to a Viber message."""

    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    link: Optional[str] = None


class ViberCampaignImage(BaseModel):
    """Image attached to a Viber message."""

    model_config = ConfigDict(populate_by_name=True)

    link: Optional[str] = None


class ViberCampaignResendSms(BaseModel):
    """SMS fallback for recipients the Viber message could not reach."""

    model_config = ConfigDict(populate_by_name=True)

    status: bool = False
    text: Optional[str] = Field(default=None, alias="sms_text")
    sender_name: Optional[str] = Field(default=None, alias="sms_sender_name")


class ViberCampaignAdditional(BaseModel):
    """Optional extras of a :class:`ViberCampaign`."""

    model_config = ConfigDict(populate_by_name=True)

    button: Optional[ViberCampaignButton] = None
    image: Optional[ViberCampaignImage] = None
    resend_sms: Optional[ViberCampaignResendSms] = None


class ViberCampaign(BaseModel):
    """Payload of ``POST /viber``, serialised as JSON.

    Either ``address_book`` or ``recipients`` selects who receives the
    message. ``send_date`` is rendered as ``"now"`` when it is not in the
    future at serialisation time, otherwise as local ``YYYY-MM-DD HH:MM:SS``.
    The field only serialises: passing a string is rejected.

    Example::

        campaign = ViberCampaign(
            name="spring-sale",
            recipients=["380931234567"],
            message="Hello!",
            sender_id=42,
        )
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, alias="task_name")
    recipients: list[str] = Field(default_factory=list)
    address_book: int = 0
    message: str = ""
    message_live_time: int = 60
    sender_id: int = 0
    send_date: datetime = Field(default_factory=datetime.now)
    message_type: ViberMessageType = ViberMessageType.MARKETING
    additional: Optional[ViberCampaignAdditional] = None

    @field_validator("send_date", mode="before")
    @classmethod
    def _reject_text_dates(cls, value: Any) -> Any:
        if isinstance(value, str):
            raise ValueError("send_date must be a datetime; parsing date strings is not supported")
        return value

    @field_serializer("send_date")
    def _serialize_send_date(self, value: datetime) -> str:
        return format_send_date(value)

    def to_payload(self) -> dict[str, Any]:
        """Return the wire representation with ``None`` fields dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def format_send_date(value: datetime, now: Optional[datetime] = None) -> str:
    """Render a Viber send date: ``"now"`` if not in the future, else local time."""
    if value.tzinfo is not None:
        current = now or datetime.now(value.tzinfo)
        if value <= current:
            return "now"
        return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")

    current = now or datetime.now()
    if value <= current:
        return "now"
    return value.strftime("%Y-%m-%d %H:%M:%S")

"""The :class:`SendPulse` facade: one method per SendPulse REST endpoint.

Each public method is a thin typed wrapper around :meth:`SendPulse.call`,
which looks the operation up in :data:`~sendpulse_client.endpoints.ENDPOINTS`,
validates the arguments, builds a
:class:`~sendpulse_client.models.RequestDescriptor` and hands it to
:class:`~sendpulse_client.client.sync_client.SyncClient`. A handful of
operations reshape their arguments first (base64 bodies, SMTP email
serialisation, push task merging, Viber payloads).

No method raises for validation, HTTP or connection failures: every
outcome is a :class:`~sendpulse_client.models.SendPulseResponse`.
"""

from __future__ import annotations

import base64
import json
from typing import Any, Mapping, Optional, Union
from urllib.parse import quote

import httpx

from sendpulse_client.client.response import error_result
from sendpulse_client.client.sync_client import SyncClient
from sendpulse_client.endpoints import get_endpoint
from sendpulse_client.models import (
    DEFAULT_BASE_URL,
    Credentials,
    EndpointSpec,
    ParamRule,
    RequestConfig,
    RequestDescriptor,
    SendPulseResponse,
    ViberCampaign,
)


def _b64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def is_empty(value: Any) -> bool:
    """Return True when *value* fails a ``REQUIRED`` check.

    ``None``, non-positive ints, and empty strings or collections are empty.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value <= 0
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


class SendPulse:
    """SendPulse REST API client.

    Args:
        client_id: API user id from the account settings.
        client_secret: API secret.
        base_url: API root; override for testing or proxies.
        request_config: Timeout and TLS settings.
        profile_name: Persist the bearer token for this profile so later
            instances reuse it.
        transport: Optional :mod:`httpx` transport for the underlying client.

    The token is obtained lazily: the first request goes out with a
    placeholder, is rejected with 401, and the client refreshes and resends.
    Using the instance as a context manager authenticates up front and
    closes the HTTP client on exit.

    Example::

        with SendPulse("client-id", "client-secret") as api:
            books = api.list_address_books(limit=10)
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        request_config: Optional[RequestConfig] = None,
        profile_name: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = SyncClient(
            Credentials(client_id=client_id, client_secret=client_secret),
            base_url=base_url,
            request_config=request_config,
            profile_name=profile_name,
            transport=transport,
        )

    @property
    def client(self) -> SyncClient:
        return self._client

    def __enter__(self) -> SendPulse:
        self._client.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._client.__exit__(*args)

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------ #
    # Table-driven dispatch
    # ------------------------------------------------------------------ #

    def call(self, name: str, /, **kwargs: Any) -> SendPulseResponse:
        """Validate *kwargs* against endpoint *name* and send the request.

        Missing keyword arguments take the table default.

        Raises:
            KeyError: If *name* is not an endpoint.
            TypeError: If a keyword argument is not a parameter of the endpoint.
        """
        spec = get_endpoint(name)
        known = {p.name for p in spec.params}
        unknown = set(kwargs) - known
        if unknown:
            raise TypeError(f"{name}() got unexpected arguments: {', '.join(sorted(unknown))}")

        values = {p.name: kwargs.get(p.name, p.default) for p in spec.params}
        for param in spec.params:
            if param.rule == ParamRule.REQUIRED and is_empty(values[param.name]):
                return error_result(param.error or spec.error_message)

        return self._client.request(build_descriptor(spec, values))

    # ------------------------------------------------------------------ #
    # Address books
    # ------------------------------------------------------------------ #

    def list_address_books(self, limit: int = 0, offset: int = 0) -> SendPulseResponse:
        return self.call("list_address_books", limit=limit, offset=offset)

    def get_book_info(self, id: int) -> SendPulseResponse:
        return self.call("get_book_info", id=id)

    def get_emails_from_book(self, id: int) -> SendPulseResponse:
        return self.call("get_emails_from_book", id=id)

    def remove_address_book(self, id: int) -> SendPulseResponse:
        return self.call("remove_address_book", id=id)

    def edit_address_book(self, id: int, new_name: str) -> SendPulseResponse:
        return self.call("edit_address_book", id=id, new_name=new_name)

    def create_address_book(self, book_name: str) -> SendPulseResponse:
        return self.call("create_address_book", book_name=book_name)

    def add_emails(self, book_id: int, emails: str) -> SendPulseResponse:
        """Add emails to a mailing list.

        Args:
            book_id: Mailing list id.
            emails: JSON-serialized list, e.g.
                ``'[{"email": "a@x.io", "variables": {"name": "A"}}]'``.
        """
        return self.call("add_emails", book_id=book_id, emails=emails)

    def remove_emails(self, book_id: int, emails: str) -> SendPulseResponse:
        return self.call("remove_emails", book_id=book_id, emails=emails)

    def get_email_info(self, book_id: int, email: str) -> SendPulseResponse:
        return self.call("get_email_info", book_id=book_id, email=email)

    def campaign_cost(self, book_id: int) -> SendPulseResponse:
        return self.call("campaign_cost", book_id=book_id)

    # ------------------------------------------------------------------ #
    # Campaigns
    # ------------------------------------------------------------------ #

    def list_campaigns(self, limit: int = 0, offset: int = 0) -> SendPulseResponse:
        return self.call("list_campaigns", limit=limit, offset=offset)

    def get_campaign_info(self, id: int) -> SendPulseResponse:
        return self.call("get_campaign_info", id=id)

    def campaign_stat_by_countries(self, id: int) -> SendPulseResponse:
        return self.call("campaign_stat_by_countries", id=id)

    def campaign_stat_by_referrals(self, id: int) -> SendPulseResponse:
        return self.call("campaign_stat_by_referrals", id=id)

    def create_campaign(
        self,
        sender_name: str,
        sender_email: str,
        subject: str,
        body: str,
        book_id: int,
        name: str = "",
        send_date: str = "",
        attachments: str = "",
    ) -> SendPulseResponse:
        """Create an email campaign to a mailing list.

        The HTML *body* is sent base64-encoded.
        """
        return self.call(
            "create_campaign",
            sender_name=sender_name,
            sender_email=sender_email,
            subject=subject,
            body=_b64(body) if body else body,
            book_id=book_id,
            name=name,
            send_date=send_date,
            attachments=attachments,
        )

    def cancel_campaign(self, id: int) -> SendPulseResponse:
        return self.call("cancel_campaign", id=id)

    # ------------------------------------------------------------------ #
    # Senders
    # ------------------------------------------------------------------ #

    def list_senders(self) -> SendPulseResponse:
        return self.call("list_senders")

    def add_sender(self, sender_name: str, sender_email: str) -> SendPulseResponse:
        return self.call("add_sender", sender_name=sender_name, sender_email=sender_email)

    def remove_sender(self, email: str) -> SendPulseResponse:
        return self.call("remove_sender", email=email)

    def activate_sender(self, email: str, code: str) -> SendPulseResponse:
        return self.call("activate_sender", email=email, code=code)

    def get_sender_activation_mail(self, email: str) -> SendPulseResponse:
        return self.call("get_sender_activation_mail", email=email)

    # ------------------------------------------------------------------ #
    # Emails
    # ------------------------------------------------------------------ #

    def get_email_global_info(self, email: str) -> SendPulseResponse:
        return self.call("get_email_global_info", email=email)

    def remove_email_from_all_books(self, email: str) -> SendPulseResponse:
        return self.call("remove_email_from_all_books", email=email)

    def email_stat_by_campaigns(self, email: str) -> SendPulseResponse:
        return self.call("email_stat_by_campaigns", email=email)

    # ------------------------------------------------------------------ #
    # Blacklist
    # ------------------------------------------------------------------ #

    def get_blacklist(self) -> SendPulseResponse:
        return self.call("get_blacklist")

    def add_to_blacklist(self, emails: str) -> SendPulseResponse:
        """Blacklist a comma-separated list of emails (sent base64-encoded)."""
        return self.call("add_to_blacklist", emails=_b64(emails) if emails else emails)

    def remove_from_blacklist(self, emails: str) -> SendPulseResponse:
        return self.call("remove_from_blacklist", emails=_b64(emails) if emails else emails)

    # ------------------------------------------------------------------ #
    # Balance
    # ------------------------------------------------------------------ #

    def get_balance(self, currency: str = "") -> SendPulseResponse:
        """Return the account balance, optionally in one *currency* only."""
        return self.call("get_balance", currency=(currency or "").upper())

    # ------------------------------------------------------------------ #
    # SMTP
    # ------------------------------------------------------------------ #

    def smtp_send_mail(self, email_data: Mapping[str, Any]) -> SendPulseResponse:
        """Send a transactional email.

        *email_data* holds ``html``, ``text``, ``subject``, ``from`` and
        ``to`` as documented by SendPulse. The ``html`` part is
        base64-encoded and the whole mapping is sent as one JSON string in
        the ``email`` form field.
        """
        spec = get_endpoint("smtp_send_mail")
        if not email_data or not isinstance(email_data, Mapping):
            return error_result(spec.error_message)

        payload = dict(email_data)
        if payload.get("html"):
            payload["html"] = _b64(str(payload["html"]))
        return self._client.request(
            RequestDescriptor(
                path=spec.path,
                method=spec.method,
                params={"email": json.dumps(payload, ensure_ascii=False)},
                encoding=spec.encoding,
            )
        )

    def smtp_list_emails(
        self,
        limit: int = 0,
        offset: int = 0,
        from_date: str = "",
        to_date: str = "",
        sender: str = "",
        recipient: str = "",
    ) -> SendPulseResponse:
        return self.call(
            "smtp_list_emails",
            limit=limit,
            offset=offset,
            from_date=from_date,
            to_date=to_date,
            sender=sender,
            recipient=recipient,
        )

    def smtp_get_email_info_by_id(self, id: str) -> SendPulseResponse:
        return self.call("smtp_get_email_info_by_id", id=id)

    def smtp_unsubscribe_emails(self, emails: str) -> SendPulseResponse:
        return self.call("smtp_unsubscribe_emails", emails=emails)

    def smtp_remove_from_unsubscribe(self, emails: str) -> SendPulseResponse:
        return self.call("smtp_remove_from_unsubscribe", emails=emails)

    def smtp_list_ip(self) -> SendPulseResponse:
        return self.call("smtp_list_ip")

    def smtp_list_allowed_domains(self) -> SendPulseResponse:
        return self.call("smtp_list_allowed_domains")

    def smtp_add_domain(self, email: str) -> SendPulseResponse:
        return self.call("smtp_add_domain", email=email)

    def smtp_verify_domain(self, email: str) -> SendPulseResponse:
        return self.call("smtp_verify_domain", email=email)

    # ------------------------------------------------------------------ #
    # Push
    # ------------------------------------------------------------------ #

    def push_list_campaigns(self, limit: int = 0, offset: int = 0) -> SendPulseResponse:
        return self.call("push_list_campaigns", limit=limit, offset=offset)

    def push_campaign_info(self, id: int) -> SendPulseResponse:
        return self.call("push_campaign_info", id=id)

    def push_count_websites(self) -> SendPulseResponse:
        return self.call("push_count_websites")

    def push_list_websites(self, limit: int = 0, offset: int = 0) -> SendPulseResponse:
        return self.call("push_list_websites", limit=limit, offset=offset)

    def push_list_website_variables(self, id: int) -> SendPulseResponse:
        return self.call("push_list_website_variables", id=id)

    def push_list_website_subscriptions(
        self, id: int, limit: int = 0, offset: int = 0
    ) -> SendPulseResponse:
        return self.call("push_list_website_subscriptions", id=id, limit=limit, offset=offset)

    def push_count_website_subscriptions(self, id: int) -> SendPulseResponse:
        return self.call("push_count_website_subscriptions", id=id)

    def push_set_subscription_state(self, id: int, state: int) -> SendPulseResponse:
        return self.call("push_set_subscription_state", id=id, state=state)

    def create_push_task(
        self,
        task_info: Mapping[str, Any],
        additional_params: Optional[Mapping[str, Any]] = None,
    ) -> SendPulseResponse:
        """Create a push campaign.

        *task_info* must contain ``title``, ``website_id`` and ``body``;
        ``ttl`` defaults to ``0``. Entries of *additional_params* (e.g.
        ``filter_lang``, ``stretch_time``) are merged in.
        """
        spec = get_endpoint("create_push_task")
        if not isinstance(task_info, Mapping) or not isinstance(
            additional_params or {}, Mapping
        ):
            return error_result(spec.error_message)
        data = dict(task_info)
        data.setdefault("ttl", 0)
        if not all(key in data for key in ("title", "website_id", "body")):
            return error_result(spec.error_message)

        if additional_params:
            data.update(additional_params)
        return self._client.request(
            RequestDescriptor(path=spec.path, method=spec.method, params=data, encoding=spec.encoding)
        )

    # ------------------------------------------------------------------ #
    # SMS
    # ------------------------------------------------------------------ #

    def add_phones(self, book_id: int, phones: str) -> SendPulseResponse:
        return self.call("add_phones", book_id=book_id, phones=phones)

    def remove_phones(self, book_id: int, phones: str) -> SendPulseResponse:
        return self.call("remove_phones", book_id=book_id, phones=phones)

    def update_phones(self, book_id: int, phones: str, variables: str) -> SendPulseResponse:
        return self.call("update_phones", book_id=book_id, phones=phones, variables=variables)

    def get_phone_info(self, book_id: int, phone_number: str) -> SendPulseResponse:
        return self.call("get_phone_info", book_id=book_id, phone_number=phone_number)

    def add_phones_to_blacklist(
        self, phones: str, description: Optional[str] = None
    ) -> SendPulseResponse:
        return self.call("add_phones_to_blacklist", phones=phones, description=description)

    def remove_phones_from_blacklist(self, phones: str) -> SendPulseResponse:
        return self.call("remove_phones_from_blacklist", phones=phones)

    def get_blacklist_phones(self) -> SendPulseResponse:
        return self.call("get_blacklist_phones")

    def get_phones_info_in_blacklist(self, phones: str) -> SendPulseResponse:
        return self.call("get_phones_info_in_blacklist", phones=phones)

    def send_sms_campaign(
        self,
        book_id: int,
        body: str,
        transliterate: int = 1,
        sender: str = "",
        date: str = "",
    ) -> SendPulseResponse:
        return self.call(
            "send_sms_campaign",
            book_id=book_id,
            body=body,
            transliterate=transliterate,
            sender=sender,
            date=date,
        )

    def send_sms_campaign_by_phones(
        self,
        phones: str,
        body: str,
        transliterate: int = 1,
        sender: str = "",
        date: str = "",
    ) -> SendPulseResponse:
        return self.call(
            "send_sms_campaign_by_phones",
            phones=phones,
            body=body,
            transliterate=transliterate,
            sender=sender,
            date=date,
        )

    def get_sms_campaigns_list(self, date_from: str, date_to: str) -> SendPulseResponse:
        return self.call("get_sms_campaigns_list", date_from=date_from, date_to=date_to)

    def get_sms_campaign_info(self, id: int) -> SendPulseResponse:
        return self.call("get_sms_campaign_info", id=id)

    def cancel_sms_campaign(self, id: int) -> SendPulseResponse:
        return self.call("cancel_sms_campaign", id=id)

    def get_sms_campaign_cost(
        self,
        body: str,
        sender: str = "",
        address_book_id: int = 0,
        phones: str = "",
    ) -> SendPulseResponse:
        """Estimate an SMS campaign's cost.

        Recipients are either *phones* (JSON-serialized list) or a mailing
        list id; when both are given, *phones* wins.
        """
        if not body:
            return error_result("Empty Body")
        if not phones and address_book_id <= 0:
            return error_result("Empty recipients list")
        if phones:
            address_book_id = 0
        return self.call(
            "get_sms_campaign_cost",
            body=body,
            sender=sender,
            address_book_id=address_book_id,
            phones=phones,
        )

    def delete_sms_campaign(self, id: int) -> SendPulseResponse:
        return self.call("delete_sms_campaign", id=id)

    def add_phones_to_address_book(self, address_book_id: int, phones: str) -> SendPulseResponse:
        return self.call(
            "add_phones_to_address_book", address_book_id=address_book_id, phones=phones
        )

    # ------------------------------------------------------------------ #
    # Viber
    # ------------------------------------------------------------------ #

    def send_viber_campaign(
        self, campaign: Union[ViberCampaign, Mapping[str, Any]]
    ) -> SendPulseResponse:
        """Send a Viber campaign as a JSON body.

        Args:
            campaign: A :class:`~sendpulse_client.models.ViberCampaign`, or a
                mapping validated into one.
        """
        if not isinstance(campaign, ViberCampaign):
            if not isinstance(campaign, Mapping):
                return error_result("Invalid campaign: expected an object")
            try:
                campaign = ViberCampaign.model_validate(dict(campaign))
            except ValueError as exc:
                return error_result(f"Invalid campaign: {exc}")

        if campaign.address_book == 0 and not campaign.recipients:
            return error_result("Empty recipients list")
        if not campaign.message:
            return error_result("Empty message")
        if campaign.sender_id == 0:
            return error_result("Empty sender")

        spec = get_endpoint("send_viber_campaign")
        return self._client.request(
            RequestDescriptor(
                path=spec.path,
                method=spec.method,
                params=campaign.to_payload(),
                encoding=spec.encoding,
            )
        )

    def get_viber_senders(self) -> SendPulseResponse:
        return self.call("get_viber_senders")

    def get_viber_tasks_list(self, limit: int = 100, offset: int = 0) -> SendPulseResponse:
        return self.call("get_viber_tasks_list", limit=limit, offset=offset)

    def get_viber_campaign_stat(self, id: int) -> SendPulseResponse:
        return self.call("get_viber_campaign_stat", id=id)

    def get_viber_sender(self, id: int) -> SendPulseResponse:
        return self.call("get_viber_sender", id=id)

    def get_viber_task_recipients(self, id: int) -> SendPulseResponse:
        return self.call("get_viber_task_recipients", id=id)


def build_descriptor(spec: EndpointSpec, values: Mapping[str, Any]) -> RequestDescriptor:
    """Build the request for *spec* from already validated *values*.

    Path parameters are percent-encoded into the template; an empty
    ``OPTIONAL`` path parameter drops its segment (``balance/{currency}``
    becomes ``balance``). Body parameters follow their rule: ``OPTIONAL``
    ones are omitted when empty, the rest are sent as given.
    """
    path = spec.path
    for param in spec.path_params:
        value = values.get(param.name)
        placeholder = "{" + param.name + "}"
        if param.rule == ParamRule.OPTIONAL and is_empty(value):
            path = path.replace("/" + placeholder, "").replace(placeholder, "")
        else:
            path = path.replace(placeholder, quote(_path_value(value), safe="@"))

    params: dict[str, Any] = {}
    for param in spec.body_params:
        value = values.get(param.name)
        if param.rule == ParamRule.OPTIONAL and is_empty(value):
            continue
        if value is None:
            continue
        params[param.key] = value

    return RequestDescriptor(
        path=path,
        method=spec.method,
        params=params,
        encoding=spec.encoding,
    )


def _path_value(value: Any) -> str:
    return "" if value is None else str(value)

"""Declarative table of SendPulse REST endpoints.

Each row is an :class:`~sendpulse_client.models.EndpointSpec` describing one
remote operation: the method name on
:class:`~sendpulse_client.sendpulse.SendPulse`, the HTTP verb and path
template, the parameters with their validation rule, the encoding, and the
message returned when validation fails. The same rows drive the CLI
command tree in :mod:`sendpulse_client.generator.command_tree`.

Parameter rules (see :class:`~sendpulse_client.models.ParamRule`):

* ``REQUIRED`` -- positive int / non-empty value, else a local error.
* ``OPTIONAL`` -- omitted when zero or empty.
* ``ALWAYS`` -- sent as given.

Parameters named in the path (``{id}``) are substituted into the URL;
everything else is encoded into the query string (GET) or body.

Rows are grouped by API area; :data:`GROUPS` gives each group's help text.
"""

from __future__ import annotations

from typing import Any, Optional

from sendpulse_client.models import (
    EndpointSpec,
    Encoding,
    HTTPMethod,
    ParamKind,
    ParamRule,
    ParamSpec,
)

GET = HTTPMethod.GET
POST = HTTPMethod.POST
PUT = HTTPMethod.PUT
DELETE = HTTPMethod.DELETE

REQUIRED = ParamRule.REQUIRED
OPTIONAL = ParamRule.OPTIONAL
ALWAYS = ParamRule.ALWAYS


def _int(
    name: str,
    rule: ParamRule = REQUIRED,
    default: Any = None,
    wire: Optional[str] = None,
    error: Optional[str] = None,
    help: Optional[str] = None,
) -> ParamSpec:
    if default is None and rule != REQUIRED:
        default = 0
    return ParamSpec(
        name=name, kind=ParamKind.INT, rule=rule, default=default,
        wire_name=wire, error=error, help=help,
    )


def _str(
    name: str,
    rule: ParamRule = REQUIRED,
    default: Any = "",
    wire: Optional[str] = None,
    error: Optional[str] = None,
    help: Optional[str] = None,
) -> ParamSpec:
    return ParamSpec(
        name=name, kind=ParamKind.STR, rule=rule, default=default,
        wire_name=wire, error=error, help=help,
    )


def _obj(
    name: str,
    rule: ParamRule = REQUIRED,
    help: Optional[str] = None,
) -> ParamSpec:
    return ParamSpec(name=name, kind=ParamKind.OBJECT, rule=rule, help=help)


def _paging(limit: int = 0) -> tuple[ParamSpec, ParamSpec]:
    return (
        _int("limit", OPTIONAL, default=limit, help="Maximum number of records"),
        _int("offset", OPTIONAL, help="Number of records to skip"),
    )


GROUPS: dict[str, str] = {
    "addressbooks": "Mailing lists and their subscribers.",
    "campaigns": "Email campaigns.",
    "senders": "Sender addresses.",
    "emails": "Subscriber lookups across all mailing lists.",
    "blacklist": "Email blacklist.",
    "balance": "Account balance.",
    "smtp": "Transactional email (SMTP service).",
    "push": "Web push campaigns and websites.",
    "sms": "SMS numbers, blacklist and campaigns.",
    "viber": "Viber campaigns and senders.",
}


ENDPOINTS: tuple[EndpointSpec, ...] = (
    # --- Address books ---
    EndpointSpec(
        name="list_address_books", method=GET, path="addressbooks",
        params=_paging(), group="addressbooks", command="list",
        summary="List mailing lists.",
    ),
    EndpointSpec(
        name="get_book_info", method=GET, path="addressbooks/{id}",
        params=(_int("id", help="Mailing list id"),), error_message="Empty book id",
        group="addressbooks", command="get", summary="Show a mailing list.",
    ),
    EndpointSpec(
        name="get_emails_from_book", method=GET, path="addressbooks/{id}/emails",
        params=(_int("id", help="Mailing list id"),), error_message="Empty book id",
        group="addressbooks", command="emails", summary="List emails in a mailing list.",
    ),
    EndpointSpec(
        name="remove_address_book", method=DELETE, path="addressbooks/{id}",
        params=(_int("id", help="Mailing list id"),), error_message="Empty book id",
        group="addressbooks", command="delete", summary="Delete a mailing list.",
    ),
    EndpointSpec(
        name="edit_address_book", method=PUT, path="addressbooks/{id}",
        params=(_int("id", help="Mailing list id"), _str("new_name", wire="name")),
        error_message="Empty new name or book id",
        group="addressbooks", command="edit", summary="Rename a mailing list.",
    ),
    EndpointSpec(
        name="create_address_book", method=POST, path="addressbooks",
        params=(_str("book_name", wire="bookName"),), error_message="Empty book name",
        group="addressbooks", command="create", summary="Create a mailing list.",
    ),
    EndpointSpec(
        name="add_emails", method=POST, path="addressbooks/{book_id}/emails",
        params=(_int("book_id"), _str("emails", help="JSON-serialized list of emails")),
        error_message="Empty book id or emails",
        group="addressbooks", command="add-emails", summary="Add emails to a mailing list.",
    ),
    EndpointSpec(
        name="remove_emails", method=DELETE, path="addressbooks/{book_id}/emails",
        params=(_int("book_id"), _str("emails", help="JSON-serialized list of emails")),
        error_message="Empty book id or emails",
        group="addressbooks", command="remove-emails",
        summary="Remove emails from a mailing list.",
    ),
    EndpointSpec(
        name="get_email_info", method=GET, path="addressbooks/{book_id}/emails/{email}",
        params=(_int("book_id"), _str("email")), error_message="Empty book id or email",
        group="addressbooks", command="email-info",
        summary="Show one email in a mailing list.",
    ),
    EndpointSpec(
        name="campaign_cost", method=GET, path="addressbooks/{book_id}/cost",
        params=(_int("book_id"),), error_message="Empty book id",
        group="addressbooks", command="cost",
        summary="Estimate the cost of a campaign to a mailing list.",
    ),
    # --- Campaigns ---
    EndpointSpec(
        name="list_campaigns", method=GET, path="campaigns",
        params=_paging(), group="campaigns", command="list", summary="List campaigns.",
    ),
    EndpointSpec(
        name="get_campaign_info", method=GET, path="campaigns/{id}",
        params=(_int("id", ALWAYS, help="Campaign id"),),
        group="campaigns", command="get", summary="Show a campaign.",
    ),
    EndpointSpec(
        name="campaign_stat_by_countries", method=GET, path="campaigns/{id}/countries",
        params=(_int("id", help="Campaign id"),), error_message="Empty campaign id",
        group="campaigns", command="countries", summary="Campaign statistics by country.",
    ),
    EndpointSpec(
        name="campaign_stat_by_referrals", method=GET, path="campaigns/{id}/referrals",
        params=(_int("id", help="Campaign id"),), error_message="Empty campaign id",
        group="campaigns", command="referrals", summary="Campaign statistics by referral.",
    ),
    EndpointSpec(
        name="create_campaign", method=POST, path="campaigns",
        params=(
            _str("sender_name"),
            _str("sender_email"),
            _str("subject"),
            _str("body", help="HTML body; sent base64-encoded"),
            _int("book_id", wire="list_id", help="Mailing list id"),
            _str("name", OPTIONAL, help="Campaign name"),
            _str("send_date", OPTIONAL, help="YYYY-MM-DD HH:MM:SS"),
            _str("attachments", OPTIONAL),
        ),
        error_message="Not all data.",
        group="campaigns", command="create", summary="Create an email campaign.",
    ),
    EndpointSpec(
        name="cancel_campaign", method=DELETE, path="campaigns/{id}",
        params=(_int("id", help="Campaign id"),), error_message="Empty campaign id",
        group="campaigns", command="cancel", summary="Cancel a scheduled campaign.",
    ),
    # --- Senders ---
    EndpointSpec(
        name="list_senders", method=GET, path="senders",
        group="senders", command="list", summary="List senders.",
    ),
    EndpointSpec(
        name="add_sender", method=POST, path="senders",
        params=(_str("sender_name", wire="name"), _str("sender_email", wire="email")),
        error_message="Empty sender name or email",
        group="senders", command="add", summary="Add a sender.",
    ),
    EndpointSpec(
        name="remove_sender", method=DELETE, path="senders",
        params=(_str("email"),), error_message="Empty email",
        group="senders", command="delete", summary="Remove a sender.",
    ),
    EndpointSpec(
        name="activate_sender", method=POST, path="senders/{email}/code",
        params=(_str("email"), _str("code")),
        error_message="Empty email or activation code",
        group="senders", command="activate", summary="Activate a sender with a code.",
    ),
    EndpointSpec(
        name="get_sender_activation_mail", method=GET, path="senders/{email}/code",
        params=(_str("email"),), error_message="Empty email",
        group="senders", command="activation-mail",
        summary="Send the activation code to a sender.",
    ),
    # --- Emails ---
    EndpointSpec(
        name="get_email_global_info", method=GET, path="emails/{email}",
        params=(_str("email"),), error_message="Empty email",
        group="emails", command="info", summary="Show an email across all mailing lists.",
    ),
    EndpointSpec(
        name="remove_email_from_all_books", method=DELETE, path="emails/{email}",
        params=(_str("email"),), error_message="Empty email",
        group="emails", command="delete", summary="Remove an email from all mailing lists.",
    ),
    EndpointSpec(
        name="email_stat_by_campaigns", method=GET, path="emails/{email}/campaigns",
        params=(_str("email"),), error_message="Empty email",
        group="emails", command="campaigns", summary="Campaign statistics for an email.",
    ),
    # --- Blacklist ---
    EndpointSpec(
        name="get_blacklist", method=GET, path="blacklist",
        group="blacklist", command="list", summary="List blacklisted emails.",
    ),
    EndpointSpec(
        name="add_to_blacklist", method=POST, path="blacklist",
        params=(_str("emails", help="Comma-separated emails; sent base64-encoded"),),
        error_message="Empty emails",
        group="blacklist", command="add", summary="Blacklist emails.",
    ),
    EndpointSpec(
        name="remove_from_blacklist", method=DELETE, path="blacklist",
        params=(_str("emails", help="Comma-separated emails; sent base64-encoded"),),
        error_message="Empty emails",
        group="blacklist", command="remove", summary="Remove emails from the blacklist.",
    ),
    # --- Balance ---
    EndpointSpec(
        name="get_balance", method=GET, path="balance/{currency}",
        params=(_str("currency", OPTIONAL, help="Currency code, e.g. USD"),),
        group="balance", command="get", summary="Show the account balance.",
    ),
    # --- SMTP ---
    EndpointSpec(
        name="smtp_send_mail", method=POST, path="smtp/emails",
        params=(_obj("email_data", help="Email as JSON: html, text, subject, from, to"),),
        error_message="Empty email data",
        group="smtp", command="send", summary="Send a transactional email.",
    ),
    EndpointSpec(
        name="smtp_list_emails", method=GET, path="smtp/emails",
        params=(
            _int("limit", ALWAYS),
            _int("offset", ALWAYS),
            _str("from_date", OPTIONAL, wire="from"),
            _str("to_date", OPTIONAL, wire="to"),
            _str("sender", OPTIONAL),
            _str("recipient", OPTIONAL),
        ),
        group="smtp", command="list", summary="List sent transactional emails.",
    ),
    EndpointSpec(
        name="smtp_get_email_info_by_id", method=GET, path="smtp/emails/{id}",
        params=(_str("id", help="Email id"),), error_message="Empty id",
        group="smtp", command="get", summary="Show a sent transactional email.",
    ),
    EndpointSpec(
        name="smtp_unsubscribe_emails", method=POST, path="smtp/unsubscribe",
        params=(_str("emails", help="JSON-serialized list of emails"),),
        error_message="Empty emails",
        group="smtp", command="unsubscribe", summary="Unsubscribe emails.",
    ),
    EndpointSpec(
        name="smtp_remove_from_unsubscribe", method=DELETE, path="smtp/unsubscribe",
        params=(_str("emails", help="JSON-serialized list of emails"),),
        error_message="Empty emails",
        group="smtp", command="resubscribe", summary="Remove emails from the unsubscribe list.",
    ),
    EndpointSpec(
        name="smtp_list_ip", method=GET, path="smtp/ips",
        group="smtp", command="ips", summary="List sending IP addresses.",
    ),
    EndpointSpec(
        name="smtp_list_allowed_domains", method=GET, path="smtp/domains",
        group="smtp", command="domains", summary="List allowed sender domains.",
    ),
    EndpointSpec(
        name="smtp_add_domain", method=POST, path="smtp/domains",
        params=(_str("email"),), error_message="Empty email",
        group="smtp", command="add-domain", summary="Add a sender domain.",
    ),
    EndpointSpec(
        name="smtp_verify_domain", method=GET, path="smtp/domains/{email}",
        params=(_str("email"),), error_message="Empty email",
        group="smtp", command="verify-domain", summary="Send a domain verification email.",
    ),
    # --- Push ---
    EndpointSpec(
        name="push_list_campaigns", method=GET, path="push/tasks",
        params=_paging(), group="push", command="list", summary="List push campaigns.",
    ),
    EndpointSpec(
        name="push_campaign_info", method=GET, path="push/tasks/{id}",
        params=(_int("id", help="Push campaign id"),), error_message="No such push campaign",
        group="push", command="get", summary="Show a push campaign.",
    ),
    EndpointSpec(
        name="push_count_websites", method=GET, path="push/websites/total",
        group="push", command="count-websites", summary="Count websites.",
    ),
    EndpointSpec(
        name="push_list_websites", method=GET, path="push/websites",
        params=_paging(), group="push", command="websites", summary="List websites.",
    ),
    EndpointSpec(
        name="push_list_website_variables", method=GET, path="push/websites/{id}/variables",
        params=(_int("id", help="Website id"),), error_message="Empty ID",
        group="push", command="variables", summary="List a website's variables.",
    ),
    EndpointSpec(
        name="push_list_website_subscriptions", method=GET,
        path="push/websites/{id}/subscriptions",
        params=(_int("id", help="Website id"), *_paging()), error_message="Empty ID",
        group="push", command="subscriptions", summary="List a website's subscriptions.",
    ),
    EndpointSpec(
        name="push_count_website_subscriptions", method=GET,
        path="push/websites/{id}/subscriptions/total",
        params=(_int("id", help="Website id"),), error_message="Empty ID",
        group="push", command="count-subscriptions",
        summary="Count a website's subscriptions.",
    ),
    EndpointSpec(
        name="push_set_subscription_state", method=POST, path="push/subscriptions/state",
        params=(_int("id", help="Subscription id"), _int("state", ALWAYS, help="0 or 1")),
        error_message="Empty ID",
        group="push", command="set-state", summary="Activate or deactivate a subscription.",
    ),
    EndpointSpec(
        name="create_push_task", method=POST, path="push/tasks",
        params=(
            _obj("task_info", help="Task as JSON: title, website_id, body, ttl"),
            _obj("additional_params", OPTIONAL, help="Extra fields merged into the task"),
        ),
        group="push", command="create", summary="Create a push campaign.",
    ),
    # --- SMS ---
    EndpointSpec(
        name="add_phones", method=POST, path="sms/numbers",
        params=(_int("book_id", wire="addressBookId"), _str("phones")),
        error_message="Empty book id or phones",
        group="sms", command="add-phones", summary="Add phones to a mailing list.",
    ),
    EndpointSpec(
        name="remove_phones", method=DELETE, path="sms/numbers",
        params=(_int("book_id", wire="addressBookId"), _str("phones")),
        error_message="Empty book id or phones",
        group="sms", command="remove-phones", summary="Remove phones from a mailing list.",
    ),
    EndpointSpec(
        name="update_phones", method=PUT, path="sms/numbers",
        params=(
            _int("book_id", wire="addressBookId"),
            _str("phones"),
            _str("variables", ALWAYS, help="JSON-serialized variables"),
        ),
        error_message="Empty book id or phones",
        group="sms", command="update-phones", summary="Update phone variables.",
    ),
    EndpointSpec(
        name="get_phone_info", method=GET, path="sms/numbers/info/{book_id}/{phone_number}",
        params=(_int("book_id"), _str("phone_number", ALWAYS)), error_message="Empty ID",
        group="sms", command="phone-info", summary="Show a phone in a mailing list.",
    ),
    EndpointSpec(
        name="add_phones_to_blacklist", method=POST, path="sms/black_list",
        params=(_str("phones"), _str("description", ALWAYS, default=None)),
        error_message="Empty phones",
        group="sms", command="blacklist-add", summary="Blacklist phones.",
    ),
    EndpointSpec(
        name="remove_phones_from_blacklist", method=DELETE, path="sms/black_list",
        params=(_str("phones"),), error_message="Empty phones",
        group="sms", command="blacklist-remove", summary="Remove phones from the blacklist.",
    ),
    EndpointSpec(
        name="get_blacklist_phones", method=GET, path="sms/black_list",
        group="sms", command="blacklist", summary="List blacklisted phones.",
    ),
    EndpointSpec(
        name="get_phones_info_in_blacklist", method=GET, path="sms/black_list/by_numbers",
        params=(_str("phones", ALWAYS),),
        group="sms", command="blacklist-info", summary="Show blacklist entries for phones.",
    ),
    EndpointSpec(
        name="send_sms_campaign", method=POST, path="sms/campaigns",
        params=(
            _str("body", error="Empty Body"),
            _int("book_id", wire="addressBookId", error="Empty address book Id"),
            _int("transliterate", ALWAYS, default=1),
            _str("sender", ALWAYS),
            _str("date", ALWAYS),
        ),
        group="sms", command="send", summary="Send an SMS campaign to a mailing list.",
    ),
    EndpointSpec(
        name="send_sms_campaign_by_phones", method=POST, path="sms/send",
        params=(
            _str("body", error="Empty Body"),
            _str("phones", error="Empty phones"),
            _int("transliterate", ALWAYS, default=1),
            _str("sender", ALWAYS),
            _str("date", ALWAYS),
        ),
        group="sms", command="send-by-phones", summary="Send an SMS campaign to phones.",
    ),
    EndpointSpec(
        name="get_sms_campaigns_list", method=GET, path="sms/campaigns/list",
        params=(
            _str("date_from", ALWAYS, wire="dateFrom"),
            _str("date_to", ALWAYS, wire="dateTo"),
        ),
        group="sms", command="campaigns", summary="List SMS campaigns in a date range.",
    ),
    EndpointSpec(
        name="get_sms_campaign_info", method=GET, path="sms/campaigns/info/{id}",
        params=(_int("id", help="SMS campaign id"),), error_message="Empty ID",
        group="sms", command="campaign-info", summary="Show an SMS campaign.",
    ),
    EndpointSpec(
        name="cancel_sms_campaign", method=GET, path="sms/campaigns/cancel/{id}",
        params=(_int("id", help="SMS campaign id"),), error_message="Empty ID",
        group="sms", command="cancel-campaign", summary="Cancel an SMS campaign.",
    ),
    EndpointSpec(
        name="get_sms_campaign_cost", method=GET, path="sms/campaigns/cost",
        params=(
            _str("body"),
            _str("sender", ALWAYS),
            _int("address_book_id", OPTIONAL, wire="addressBookId"),
            _str("phones", OPTIONAL),
        ),
        error_message="Empty Body",
        group="sms", command="campaign-cost", summary="Estimate the cost of an SMS campaign.",
    ),
    EndpointSpec(
        name="delete_sms_campaign", method=DELETE, path="sms/campaigns",
        params=(_int("id", help="SMS campaign id"),), error_message="Empty ID",
        group="sms", command="delete-campaign", summary="Delete an SMS campaign.",
    ),
    EndpointSpec(
        name="add_phones_to_address_book", method=POST, path="sms/numbers/variables",
        params=(
            _int("address_book_id", wire="addressBookId", error="Empty address book id"),
            _str("phones", help="JSON-serialized phones with variables", error="Empty phones"),
        ),
        group="sms", command="add-phones-variables",
        summary="Add phones with variables to a mailing list.",
    ),
    # --- Viber ---
    EndpointSpec(
        name="send_viber_campaign", method=POST, path="viber", encoding=Encoding.JSON,
        params=(_obj("campaign", help="Campaign as JSON"),),
        group="viber", command="send", summary="Send a Viber campaign.",
    ),
    EndpointSpec(
        name="get_viber_senders", method=GET, path="viber/senders",
        group="viber", command="senders", summary="List Viber senders.",
    ),
    EndpointSpec(
        name="get_viber_tasks_list", method=GET, path="viber/task",
        params=(_int("limit", ALWAYS, default=100), _int("offset", ALWAYS)),
        group="viber", command="tasks", summary="List Viber campaigns.",
    ),
    EndpointSpec(
        name="get_viber_campaign_stat", method=GET, path="viber/task/{id}",
        params=(_int("id", help="Viber campaign id"),), error_message="Empty id",
        group="viber", command="task", summary="Show Viber campaign statistics.",
    ),
    EndpointSpec(
        name="get_viber_sender", method=GET, path="viber/senders/{id}",
        params=(_int("id", help="Viber sender id"),), error_message="Empty id",
        group="viber", command="sender", summary="Show a Viber sender.",
    ),
    EndpointSpec(
        name="get_viber_task_recipients", method=GET, path="viber/task/{id}/recipients",
        params=(_int("id", help="Viber campaign id"),), error_message="Empty id",
        group="viber", command="recipients", summary="List Viber campaign recipients.",
    ),
)

ENDPOINTS_BY_NAME: dict[str, EndpointSpec] = {spec.name: spec for spec in ENDPOINTS}


def get_endpoint(name: str) -> EndpointSpec:
    """Return the table row for *name*.

    Raises:
        KeyError: If no endpoint has that name.
    """
    return ENDPOINTS_BY_NAME[name]

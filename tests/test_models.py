"""Tests for sendpulse_client.models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from sendpulse_client.models import (
    DEFAULT_BASE_URL,
    Credentials,
    Encoding,
    GlobalConfig,
    ParamSpec,
    Profile,
    RequestDescriptor,
    ViberCampaign,
    ViberCampaignAdditional,
    ViberCampaignButton,
    ViberCampaignResendSms,
    ViberMessageType,
    format_send_date,
)


class TestProfile:
    def test_defaults(self) -> None:
        profile = Profile(name="main")
        assert profile.base_url == DEFAULT_BASE_URL
        assert profile.client_id_source == "env:SENDPULSE_CLIENT_ID"
        assert profile.client_secret_source == "env:SENDPULSE_CLIENT_SECRET"
        assert profile.persist_token is True
        assert profile.request.timeout == 30.0

    def test_round_trip(self) -> None:
        profile = Profile(name="main", base_url="https://proxy.local")
        assert Profile.model_validate(profile.model_dump(mode="json")) == profile

    def test_global_config_defaults(self) -> None:
        config = GlobalConfig()
        assert config.default_profile is None
        assert config.output.format == "auto"


class TestPipelineModels:
    def test_credentials_are_frozen(self) -> None:
        creds = Credentials(client_id="a", client_secret="b")
        with pytest.raises(ValidationError):
            creds.client_id = "c"

    def test_descriptor_defaults(self) -> None:
        descriptor = RequestDescriptor(path="senders")
        assert descriptor.method.value == "GET"
        assert descriptor.encoding == Encoding.FORM
        assert descriptor.use_auth is True
        assert descriptor.params == {}

    def test_content_types(self) -> None:
        assert Encoding.FORM.content_type == "application/x-www-form-urlencoded"
        assert Encoding.JSON.content_type == "application/json"

    def test_param_key_defaults_to_name(self) -> None:
        assert ParamSpec(name="email").key == "email"
        assert ParamSpec(name="book_id", wire_name="addressBookId").key == "addressBookId"


class TestSendDate:
    def test_past_is_now(self) -> None:
        assert format_send_date(datetime(2000, 1, 1)) == "now"

    def test_present_is_now(self) -> None:
        moment = datetime(2030, 5, 1, 12, 0, 0)
        assert format_send_date(moment, now=moment) == "now"

    def test_future_is_formatted(self) -> None:
        now = datetime(2030, 5, 1, 12, 0, 0)
        assert format_send_date(now + timedelta(hours=1, seconds=5), now=now) == "2030-05-01 13:00:05"

    def test_aware_past_is_now(self) -> None:
        assert format_send_date(datetime(2000, 1, 1, tzinfo=timezone.utc)) == "now"

    def test_aware_future_rendered_in_local_time(self) -> None:
        when = datetime.now(timezone.utc) + timedelta(days=1)
        expected = when.astimezone().strftime("%Y-%m-%d %H:%M:%S")
        assert format_send_date(when) == expected


class TestViberCampaign:
    def test_default_send_date_serializes_as_now(self) -> None:
        payload = ViberCampaign(recipients=["1"], message="m", sender_id=1).to_payload()
        assert payload["send_date"] == "now"

    def test_string_send_date_rejected(self) -> None:
        with pytest.raises(ValidationError, match="send_date"):
            ViberCampaign(send_date="2030-01-01 10:00:00")

    def test_message_type_is_integer(self) -> None:
        payload = ViberCampaign(message_type=ViberMessageType.TRANSACTIONAL).to_payload()
        assert payload["message_type"] == 2

    def test_aliases_in_payload(self) -> None:
        campaign = ViberCampaign(
            name="promo",
            recipients=["380931234567"],
            message="Hi",
            sender_id=3,
            additional=ViberCampaignAdditional(
                button=ViberCampaignButton(text="Open", link="https://x.io"),
                resend_sms=ViberCampaignResendSms(status=True, text="Hi", sender_name="Shop"),
            ),
        )

        payload = campaign.to_payload()

        assert payload["task_name"] == "promo"
        assert "name" not in payload
        assert payload["additional"]["button"] == {"text": "Open", "link": "https://x.io"}
        assert payload["additional"]["resend_sms"] == {
            "status": True,
            "sms_text": "Hi",
            "sms_sender_name": "Shop",
        }
        assert "image" not in payload["additional"]

    def test_accepts_wire_names(self) -> None:
        campaign = ViberCampaign.model_validate(
            {"task_name": "t", "additional": {"resend_sms": {"sms_text": "x"}}}
        )
        assert campaign.name == "t"
        assert campaign.additional.resend_sms.text == "x"

"""Tests for request parameter encoding."""

from __future__ import annotations

import json

import pytest

from sendpulse_client.client.encoder import encode, encode_form, encode_json
from sendpulse_client.models import Encoding, ViberCampaign


class TestFormEncoding:
    def test_keeps_insertion_order(self) -> None:
        assert encode_form({"b": 1, "a": 2}) == "b=1&a=2"

    def test_escapes_reserved_characters(self) -> None:
        assert encode_form({"email": "a+b@x.io", "name": "My list"}) == (
            "email=a%2Bb%40x.io&name=My+list"
        )

    def test_lists_expand_to_bracket_keys(self) -> None:
        assert encode_form({"emails": ["a@x.io", "b@x.io"]}) == (
            "emails[]=a%40x.io&emails[]=b%40x.io"
        )

    def test_none_is_skipped(self) -> None:
        assert encode_form({"a": None, "b": "x"}) == "b=x"

    def test_booleans_are_lowercase(self) -> None:
        assert encode_form({"flag": True, "other": False}) == "flag=true&other=false"

    def test_nested_dict_is_json(self) -> None:
        encoded = encode_form({"filter": {"lang": "en"}})
        assert encoded == "filter=" + "%7B%22lang%22%3A%22en%22%7D"

    def test_zero_and_empty_string_are_sent(self) -> None:
        assert encode_form({"limit": 0, "sender": ""}) == "limit=0&sender="

    def test_empty_params(self) -> None:
        assert encode({}, Encoding.FORM) == ""
        assert encode(None, Encoding.FORM) == ""


class TestJsonEncoding:
    def test_drops_none_recursively(self) -> None:
        data = {"a": 1, "b": None, "c": {"d": None, "e": [1, None, 2]}}
        assert json.loads(encode_json(data)) == {"a": 1, "c": {"e": [1, 2]}}

    def test_compact_and_unicode(self) -> None:
        assert encode_json({"text": "Привіт"}) == '{"text":"Привіт"}'

    def test_empty_params(self) -> None:
        assert encode(None, Encoding.JSON) == "{}"

    def test_model_dumped_by_alias(self) -> None:
        campaign = ViberCampaign(name="spring", recipients=["380931234567"], message="Hi", sender_id=1)
        data = json.loads(encode(campaign, Encoding.JSON))
        assert data["task_name"] == "spring"
        assert "additional" not in data

    @pytest.mark.parametrize("style", [Encoding.FORM, Encoding.JSON])
    def test_dispatch_by_style(self, style: Encoding) -> None:
        result = encode({"k": "v"}, style)
        assert result == ("k=v" if style == Encoding.FORM else '{"k":"v"}')

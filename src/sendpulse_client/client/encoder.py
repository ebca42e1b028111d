"""Serialisation of request parameters into a query string or request body.

Two styles are supported, selected by
:class:`~sendpulse_client.models.Encoding`:

* ``FORM`` -- ``application/x-www-form-urlencoded``. Keys keep their
  insertion order; list values expand into repeated ``key[]=value`` pairs.
* ``JSON`` -- ``application/json``. ``None`` values are dropped at every
  nesting level.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Union
from urllib.parse import quote_plus

from pydantic import BaseModel

from sendpulse_client.models import Encoding


def encode(params: Union[Mapping[str, Any], BaseModel, None], style: Encoding) -> str:
    """Encode *params* in the given style.

    Args:
        params: The parameter map. A Pydantic model is accepted for the
            ``JSON`` style and dumped by alias.
        style: Target encoding.

    Returns:
        The encoded string. Empty params give ``""`` for ``FORM`` and
        ``"{}"`` for ``JSON``.
    """
    if style == Encoding.JSON:
        return encode_json(params)
    if isinstance(params, BaseModel):
        params = params.model_dump(mode="json", by_alias=True, exclude_none=True)
    return encode_form(params or {})


def encode_form(params: Mapping[str, Any]) -> str:
    """URL-form encode *params*.

    Example::

        >>> encode_form({"emails": ["a@x.io", "b@x.io"], "limit": 10})
        'emails[]=a%40x.io&emails[]=b%40x.io&limit=10'
    """
    pairs: list[str] = []
    for key, value in params.items():
        if value is None:
            continue
        encoded_key = quote_plus(str(key))
        if isinstance(value, (list, tuple)):
            for item in value:
                pairs.append(f"{encoded_key}[]={quote_plus(_form_scalar(item))}")
        else:
            pairs.append(f"{encoded_key}={quote_plus(_form_scalar(value))}")
    return "&".join(pairs)


def encode_json(params: Union[Mapping[str, Any], BaseModel, None]) -> str:
    """JSON encode *params*, omitting ``None`` values recursively."""
    if isinstance(params, BaseModel):
        data: Any = params.model_dump(mode="json", by_alias=True, exclude_none=True)
    else:
        data = _drop_none(params or {})
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def _form_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def _drop_none(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Mapping):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_drop_none(v) for v in value if v is not None]
    return value

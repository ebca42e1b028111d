"""Map endpoint parameters to Typer CLI options and arguments.

This module converts :class:`~sendpulse_client.models.ParamSpec` rows into
descriptor dictionaries that
:func:`~sendpulse_client.generator.command_tree._build_command_function`
uses to construct dynamically generated function signatures.

**Mapping rules:**

* **Path parameters** (``{name}`` in the endpoint path) that are not
  ``OPTIONAL`` become positional :func:`typer.Argument` values.
* **Everything else** becomes an ``--option`` flag via :func:`typer.Option`.
  ``REQUIRED`` parameters use ``...`` (Typer's "required" sentinel); the
  others default to the table default.
* **Kinds** are mapped to Python types: ``INT`` to ``int``, ``STR`` to
  ``str``. ``OBJECT`` values are passed as JSON object strings (or
  ``@filename``) since Typer does not support composite types natively.
"""

from __future__ import annotations

import keyword
from typing import Any, Optional

import typer

from sendpulse_client.models import EndpointSpec, ParamKind, ParamRule, ParamSpec


# ---------------------------------------------------------------------------
# Type mapping
# ---------------------------------------------------------------------------

_KIND_MAP: dict[ParamKind, type] = {
    ParamKind.INT: int,
    ParamKind.STR: str,
    ParamKind.OBJECT: str,  # Serialised as JSON string
}

JSON_KINDS = frozenset({ParamKind.OBJECT})


def kind_to_python(kind: ParamKind) -> type:
    """Return the Python type a CLI value of *kind* is parsed as."""
    return _KIND_MAP.get(kind, str)


def option_name(param: ParamSpec) -> str:
    """Return the ``--flag`` spelling for *param* (underscores become hyphens)."""
    return "--" + param.name.replace("_", "-")


def python_name(param: ParamSpec) -> str:
    """Return a function-parameter name for *param*, escaping keywords."""
    name = param.name
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


# ---------------------------------------------------------------------------
# Parameter mapping
# ---------------------------------------------------------------------------


def map_parameter_to_typer(spec: EndpointSpec, param: ParamSpec) -> dict[str, Any]:
    """Map one :class:`~sendpulse_client.models.ParamSpec` to a Typer descriptor dict.

    Args:
        spec: The endpoint the parameter belongs to; used to tell path
            parameters from body parameters.
        param: The parameter to map.

    Returns:
        A dict with the following keys:

        * ``name`` (``str``) -- Python-safe parameter name.
        * ``original_name`` (``str``) -- The keyword argument of the
          :class:`~sendpulse_client.sendpulse.SendPulse` method.
        * ``type`` -- Python type annotation for the parameter.
        * ``default`` -- A :func:`typer.Option` or :func:`typer.Argument`
          descriptor.
        * ``help`` (``str``) -- Help text for ``--help`` output.
        * ``is_argument`` (``bool``) -- ``True`` for positional arguments.
        * ``is_json`` (``bool``) -- ``True`` when the value must be decoded
          from JSON before the call.
    """
    py_type: Any = kind_to_python(param.kind)
    is_json = param.kind in JSON_KINDS
    in_path = "{" + param.name + "}" in spec.path
    is_argument = in_path and param.rule != ParamRule.OPTIONAL

    help_text = param.help or ""
    if is_json:
        hint = "JSON object, or @filename to read from file"
        help_text = f"{help_text} ({hint})" if help_text else hint

    if is_argument:
        default = typer.Argument(..., help=help_text or None)
    elif param.rule == ParamRule.REQUIRED:
        default = typer.Option(..., option_name(param), help=help_text or None)
    else:
        fallback = None if is_json else param.default
        if fallback is None:
            py_type = Optional[py_type]
        default = typer.Option(fallback, option_name(param), help=help_text or None)

    return {
        "name": python_name(param),
        "original_name": param.name,
        "type": py_type,
        "default": default,
        "help": help_text,
        "is_argument": is_argument,
        "is_json": is_json,
    }


def map_endpoint_params(spec: EndpointSpec) -> list[dict[str, Any]]:
    """Map every parameter of *spec*, arguments first in table order."""
    descriptors = [map_parameter_to_typer(spec, p) for p in spec.params]
    arguments = [d for d in descriptors if d["is_argument"]]
    options = [d for d in descriptors if not d["is_argument"]]
    return arguments + options

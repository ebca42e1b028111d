"""Build a Typer command tree from the endpoint table.

Every row of :data:`~sendpulse_client.endpoints.ENDPOINTS` becomes a leaf
command, grouped into one :class:`typer.Typer` sub-app per API area
(``sendpulse addressbooks list``, ``sendpulse smtp send``, ...).

**Algorithm summary**

1. Group the endpoint rows by their ``group``.
2. Create a sub-app per group, with help text from
   :data:`~sendpulse_client.endpoints.GROUPS`.
3. Attach a leaf command per row, named after its ``command``.
4. Each leaf command is a dynamically generated function whose signature
   matches the endpoint's parameters. When invoked it collects the values,
   decodes JSON parameters (resolving ``@filename`` references) and hands
   the invocation context, method name and keyword arguments to the
   request callback.
"""

from __future__ import annotations

import json
from collections import defaultdict
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional

import typer

from sendpulse_client.exit_codes import EXIT_INVALID_USAGE
from sendpulse_client.generator.param_mapper import map_endpoint_params
from sendpulse_client.models import EndpointSpec
from sendpulse_client.output import error

RequestCallback = Callable[[typer.Context, str, dict[str, Any]], Any]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def build_command_tree(
    endpoints: Iterable[EndpointSpec],
    groups: Optional[Mapping[str, str]] = None,
    request_callback: Optional[RequestCallback] = None,
    app: Optional[typer.Typer] = None,
) -> typer.Typer:
    """Build a nested :class:`typer.Typer` command tree from endpoint rows.

    Args:
        endpoints: The endpoint rows to expose.
        groups: Help text per group name. Groups without an entry get a
            humanized name.
        request_callback: Called as ``callback(ctx, method_name, kwargs)`` when
            a command runs. When ``None``, commands print a dry-run summary
            instead.
        app: Attach the groups to this existing app instead of a new one.

    Returns:
        The :class:`typer.Typer` app whose sub-apps are the endpoint groups.
        Rows in the ``root`` group are attached to it directly.

    Example::

        from sendpulse_client.endpoints import ENDPOINTS, GROUPS

        app = build_command_tree(ENDPOINTS, GROUPS, request_callback=run)
        app(["addressbooks", "list", "--limit", "10"])
    """
    groups = groups or {}
    root = app if app is not None else typer.Typer(no_args_is_help=True)

    grouped: dict[str, list[EndpointSpec]] = defaultdict(list)
    for spec in endpoints:
        grouped[spec.group].append(spec)

    for group_name, specs in grouped.items():
        if group_name == "root":
            target = root
        else:
            target = typer.Typer(no_args_is_help=True)
            root.add_typer(
                target,
                name=group_name,
                help=groups.get(group_name) or _humanize_group(group_name),
            )

        for spec in specs:
            fn = _build_command_function(spec, request_callback)
            target.command(command_name(spec), help=fn.__doc__)(fn)

    return root


def command_name(spec: EndpointSpec) -> str:
    """Return the CLI name of *spec*'s leaf command."""
    return spec.command or spec.name.replace("_", "-")


# ---------------------------------------------------------------------------
# Dynamic function generation
# ---------------------------------------------------------------------------


def _build_command_function(
    spec: EndpointSpec,
    request_callback: Optional[RequestCallback],
) -> Callable[..., Any]:
    """Dynamically generate a Typer-compatible function for *spec*.

    Constructs a Python function whose signature mirrors the endpoint's
    parameters (see :func:`~sendpulse_client.generator.param_mapper.map_parameter_to_typer`).

    The function source is built as a string, compiled, and executed into
    a namespace so that :mod:`inspect` (which Typer relies on) can read its
    signature. When invoked, the generated function collects all parameter
    values, decodes JSON ones, and delegates to the *request_callback* (or
    prints a dry-run summary).

    Args:
        spec: The endpoint to generate a command for.
        request_callback: The callback to invoke when the command runs, or
            ``None`` for dry-run mode.

    Returns:
        A callable suitable for registration via
        :meth:`typer.Typer.command`.
    """
    descriptors = map_endpoint_params(spec)

    func_name = f"_cmd_{spec.name}"
    namespace: dict[str, Any] = {}

    namespace["_ctx_ann"] = typer.Context
    sig_parts: list[str] = ["_ctx: _ctx_ann"]
    for idx, desc in enumerate(descriptors):
        sentinel = f"_default_{idx}"
        namespace[sentinel] = desc["default"]
        ann = f"_ann_{idx}"
        namespace[ann] = desc["type"]
        sig_parts.append(f"{desc['name']}: {ann} = {sentinel}")
    sig = ", ".join(sig_parts)

    body_lines = ["    kwargs = {}"]
    for desc in descriptors:
        py_name = desc["name"]
        orig_name = desc["original_name"]
        if desc["is_json"]:
            body_lines.append(
                f"    kwargs[{orig_name!r}] = _load_json({orig_name!r}, {py_name})"
            )
        else:
            body_lines.append(f"    kwargs[{orig_name!r}] = {py_name}")
    body_lines.append(f"    return _dispatch(_ctx, {spec.name!r}, kwargs)")

    source = f"def {func_name}({sig}):\n" + "\n".join(body_lines) + "\n"

    namespace["_load_json"] = _load_json
    namespace["_dispatch"] = _make_dispatch(request_callback)

    code = compile(source, f"<sendpulse:{spec.name}>", "exec")
    exec(code, namespace)  # noqa: S102 -- controlled code generation
    fn = namespace[func_name]

    fn.__doc__ = _build_help_text(spec)
    fn.__name__ = func_name
    fn.__qualname__ = func_name

    return fn


def _build_help_text(spec: EndpointSpec) -> str:
    """Return the command help: the summary, then the HTTP route."""
    summary = spec.summary or spec.name.replace("_", " ").capitalize() + "."
    return f"{summary}\n\n{spec.method.value} /{spec.path}"


# ---------------------------------------------------------------------------
# Dispatch / callback helper
# ---------------------------------------------------------------------------


def _make_dispatch(
    callback: Optional[RequestCallback],
) -> Callable[[typer.Context, str, dict[str, Any]], Any]:
    """Return a dispatch function that either calls *callback* or prints a dry-run summary."""

    if callback is not None:

        def _dispatch(ctx: typer.Context, name: str, kwargs: dict[str, Any]) -> Any:
            return callback(ctx, name, kwargs)

    else:

        def _dispatch(ctx: typer.Context, name: str, kwargs: dict[str, Any]) -> None:
            summary = name
            non_none = {k: v for k, v in kwargs.items() if v is not None}
            if non_none:
                summary += f"\n  params: {json.dumps(non_none, default=str)}"
            typer.echo(summary)

    return _dispatch


# ---------------------------------------------------------------------------
# JSON parameter resolution
# ---------------------------------------------------------------------------


def _resolve_body(raw: Optional[str]) -> Optional[str]:
    """Resolve a JSON option value, supporting ``@filename`` file references.

    Raises:
        typer.Exit: If *raw* starts with ``@`` but the referenced file
            does not exist.
    """
    if raw is None:
        return None
    if raw.startswith("@"):
        file_path = Path(raw[1:])
        if not file_path.is_file():
            error(f"File not found: {file_path}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        return file_path.read_text(encoding="utf-8")
    return raw


def _load_json(name: str, raw: Optional[str]) -> Any:
    """Decode the JSON object given for option *name* (``None`` passes through).

    Raises:
        typer.Exit: If the value is not valid JSON or not a JSON object.
    """
    text = _resolve_body(raw)
    if text is None:
        return None
    flag = "--" + name.replace("_", "-")
    try:
        value = json.loads(text)
    except ValueError as exc:
        error(f"Invalid JSON for {flag}: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None
    if not isinstance(value, dict):
        error(f"{flag} must be a JSON object, got {type(value).__name__}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)
    return value


def _humanize_group(name: str) -> str:
    return name.replace("-", " ").replace("_", " ").capitalize() + "."

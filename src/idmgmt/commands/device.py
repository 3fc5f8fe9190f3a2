"""Device code commands -- verify and activate codes from the command line.

Provides the ``idmgmt device`` sub-command group.  Both commands build a
JSON body from ``--data``, ``--data-file`` and the convenience flags,
send it through :class:`~idmgmt.management.device_code.DeviceCodeManager`
and print the response body to stdout.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from idmgmt.exceptions import IdmgmtError
from idmgmt.output import debug, error, format_response, success

device_app = typer.Typer(no_args_is_help=True)


_DATA_OPTION = typer.Option(
    None, "--data", "-d", help="Request body as a JSON string."
)
_DATA_FILE_OPTION = typer.Option(
    None, "--data-file", help="Read the JSON request body from a file ('-' for stdin)."
)
_USER_CODE_OPTION = typer.Option(
    None, "--user-code", "-u", help="Device user code (sets 'user_code' in the body)."
)


@device_app.command("verify")
def device_verify(
    ctx: typer.Context,
    data: Optional[str] = _DATA_OPTION,
    data_file: Optional[str] = _DATA_FILE_OPTION,
    user_code: Optional[str] = _USER_CODE_OPTION,
) -> None:
    """Verify a device code.

    Example::

        idmgmt device verify --user-code ABCD-EFGH
        idmgmt device verify --data '{"user_code": "ABCD-EFGH"}' --json
    """
    body = _build_body(data, data_file, {"user_code": user_code})
    manager = _device_code_manager(ctx)
    try:
        result = manager.verify(body)
    except IdmgmtError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if result is not None:
        format_response(result)
    else:
        success("Device code verified.")


@device_app.command("activate")
def device_activate(
    ctx: typer.Context,
    data: Optional[str] = _DATA_OPTION,
    data_file: Optional[str] = _DATA_FILE_OPTION,
    user_code: Optional[str] = _USER_CODE_OPTION,
    subject_token: Optional[str] = typer.Option(
        None,
        "--subject-token",
        help="Access token of the approving user (sets 'subject_token' in the body).",
    ),
) -> None:
    """Activate (approve) a device code.

    Example::

        idmgmt device activate --user-code ABCD-EFGH --subject-token "$ACCESS_TOKEN"
    """
    body = _build_body(
        data, data_file, {"user_code": user_code, "subject_token": subject_token},
    )
    manager = _device_code_manager(ctx)
    try:
        result = manager.activate(body)
    except IdmgmtError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if result is not None:
        format_response(result)
    else:
        success("Device code activated.")


def _device_code_manager(ctx: typer.Context):
    """Resolve configuration and credentials into a ``DeviceCodeManager``."""
    from idmgmt.config import build_manager_options, resolve_config, resolve_token
    from idmgmt.management import ManagementClient

    obj = ctx.obj or {}
    try:
        config = resolve_config(
            cli_base_url=obj.get("base_url"),
            cli_token_source=obj.get("token_source"),
        )
        token = resolve_token(config)
        options = build_manager_options(config, token)
        management = ManagementClient(options, dry_run=obj.get("dry_run", False))
    except IdmgmtError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if token is None:
        debug("No API token configured; sending requests without Authorization")
    return management.device_code


def _build_body(
    data: Optional[str],
    data_file: Optional[str],
    fields: dict[str, Optional[str]],
) -> Any:
    """Combine ``--data``/``--data-file`` with flag-supplied fields.

    Raises:
        typer.Exit: With code 2 on invalid JSON, when both body sources are
            given, or when flags are combined with a non-object body.
    """
    if data is not None and data_file is not None:
        error("Use either --data or --data-file, not both")
        raise typer.Exit(code=2)

    raw: Optional[str] = data
    if data_file is not None:
        raw = _read_data_file(data_file)

    body: Any = None
    if raw is not None:
        try:
            body = json.loads(raw)
        except json.JSONDecodeError as exc:
            error(f"Invalid JSON body: {exc}")
            raise typer.Exit(code=2) from None

    extra = {k: v for k, v in fields.items() if v is not None}
    if not extra:
        return body
    if body is None:
        return extra
    if not isinstance(body, dict):
        error("--user-code/--subject-token require a JSON object body")
        raise typer.Exit(code=2)
    return {**body, **extra}


def _read_data_file(data_file: str) -> str:
    if data_file == "-":
        return sys.stdin.read()
    path = Path(data_file).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        error(f"Cannot read {path}: {exc}")
        raise typer.Exit(code=2) from None

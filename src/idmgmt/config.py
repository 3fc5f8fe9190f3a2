"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for the ``idmgmt`` CLI:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.idmgmt/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~idmgmt.models.GlobalConfig`
  JSON file storing the API base URL, token source and defaults.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config.
* **Credential resolution** -- :func:`resolve_credential` reads the bearer
  token from an env var, a file, or an interactive prompt.

The library API (:class:`~idmgmt.management.ManagementClient`) never reads
these files; it only sees the :class:`~idmgmt.models.ManagerOptions` built
by :func:`build_manager_options`.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from idmgmt.exceptions import ArgumentError, ConfigError
from idmgmt.models import GlobalConfig, ManagerOptions

_APP_NAME = "idmgmt"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "idmgmt.json"

ENV_BASE_URL = "IDMGMT_BASE_URL"
ENV_TOKEN_SOURCE = "IDMGMT_TOKEN_SOURCE"
DEFAULT_TOKEN_SOURCE = "env:IDMGMT_TOKEN"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/idmgmt/`` (default ``~/.config/idmgmt/``).
    On macOS/Windows: ``~/.idmgmt/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/idmgmt/`` (default ``~/.local/share/idmgmt/``).
    On macOS/Windows: ``~/.idmgmt/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX.  On any failure the temp
    file is removed and the original file is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~idmgmt.models.GlobalConfig`, or a default
        instance when the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./idmgmt.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_base_url: Optional[str] = None,
    cli_token_source: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``--base-url``, ``--token-source``, ``--json``/``--plain``)
        2. Environment variables (``IDMGMT_BASE_URL``, ``IDMGMT_TOKEN_SOURCE``)
        3. Project config (``./idmgmt.json``)
        4. User config (``~/.config/idmgmt/config.json``)
        5. Defaults
    """
    data = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        for key in ("base_url", "token_source"):
            if project.get(key) is not None:
                data[key] = project[key]
        for section in ("request", "output"):
            if isinstance(project.get(section), dict):
                data[section].update(project[section])

    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        data["base_url"] = env_base_url
    env_token_source = os.environ.get(ENV_TOKEN_SOURCE)
    if env_token_source:
        data["token_source"] = env_token_source

    if cli_base_url is not None:
        data["base_url"] = cli_base_url
    if cli_token_source is not None:
        data["token_source"] = cli_token_source
    if cli_format is not None:
        data["output"]["format"] = cli_format

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def build_manager_options(config: GlobalConfig, token: Optional[str] = None) -> ManagerOptions:
    """Build :class:`~idmgmt.models.ManagerOptions` from a resolved config.

    Raises:
        ArgumentError: If no base URL is configured.
    """
    if not config.base_url:
        raise ArgumentError(
            "Must provide a base URL for the API "
            f"(use --base-url, {ENV_BASE_URL} or 'idmgmt config set base_url URL')"
        )
    return ManagerOptions(base_url=config.base_url, token=token, request=config.request)


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts interactively (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Enter API token: ")

    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_token(config: GlobalConfig) -> Optional[str]:
    """Resolve the bearer token for *config*.

    An explicitly configured ``token_source`` must resolve.  Without one, the
    ``IDMGMT_TOKEN`` environment variable is used when set, and requests go
    out without an Authorization header otherwise.
    """
    if config.token_source:
        return resolve_credential(config.token_source)
    try:
        return resolve_credential(DEFAULT_TOKEN_SOURCE)
    except ConfigError:
        return None

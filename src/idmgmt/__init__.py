"""idmgmt -- Python binding and CLI for the identity-management device code API.

The package wraps the ``/device/verify`` and ``/device/activate`` endpoints
used by OAuth device-authorization grants. A :class:`ManagementClient`
(or a bare :class:`DeviceCodeManager`) is configured with a base URL and a
bearer token, and forwards caller-supplied bodies to the service.

Typical usage::

    from idmgmt import ManagementClient

    management = ManagementClient({"base_url": "https://tenant.example.com/api/v2",
                                   "token": token})
    management.device_code.activate({"user_code": "ABCD-EFGH",
                                      "subject_token": access_token})

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"

from idmgmt.management import DeviceCodeManager, ManagementClient  # noqa: E402

__all__ = ["DeviceCodeManager", "ManagementClient", "__version__"]

"""Exception hierarchy for backend detection, reading and writing."""

from cdns.core.models import Backend


class CdnsError(Exception):
    """Base class for all cdns errors."""


class ServiceQueryError(CdnsError):
    """The init system could not be asked about a service."""

    def __init__(self, service: str, cause: BaseException):
        self.service = service
        self.cause = cause
        super().__init__(f"failed to check service status for {service}: {cause}")


class DetectionError(CdnsError):
    """No single authoritative DNS backend could be selected."""

    def __init__(self, message: str, reason: str | None = None, remediation: str | None = None):
        self.reason = reason or message
        self.remediation = remediation
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.remediation:
            return f"{message}\n\n{self.remediation}"
        return message


class UnsupportedBackendError(CdnsError):
    def __init__(self, backend: Backend | str, operation: str):
        self.backend = backend
        self.operation = operation
        name = backend.value if isinstance(backend, Backend) else backend
        super().__init__(f"unsupported backend for {operation}: {name}")


class BackendCommandError(CdnsError):
    """An external backend tool failed or could not be run."""

    def __init__(
        self,
        backend: Backend,
        operation: str,
        message: str,
        command: list[str] | None = None,
        output: str = "",
    ):
        self.backend = backend
        self.operation = operation
        self.command = command or []
        self.output = output
        detail = f"{backend.value}: {operation}: {message}"
        if output:
            detail = f"{detail}: {output}"
        super().__init__(detail)


class InterfaceWriteError(BackendCommandError):
    """Applying or reverting DNS settings failed for one interface."""

    def __init__(
        self,
        backend: Backend,
        interface: str,
        step: str,
        message: str,
        connection: str | None = None,
        command: list[str] | None = None,
        output: str = "",
    ):
        self.interface = interface
        self.step = step
        self.connection = connection
        super().__init__(backend, step, message, command=command, output=output)


class PartialWriteError(CdnsError):
    """Some interfaces were changed, others failed."""

    def __init__(self, failures: list[InterfaceWriteError], succeeded: list[str]):
        self.failures = failures
        self.succeeded = succeeded
        failed = ", ".join(f.interface for f in failures)
        lines = [f"failed to configure {len(failures)} interface(s): {failed}"]
        lines.extend(f"  - {f}" for f in failures)
        if succeeded:
            lines.append(f"changed: {', '.join(succeeded)}")
        super().__init__("\n".join(lines))


class ValidationError(CdnsError):
    """User supplied input is not usable."""

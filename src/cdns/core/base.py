"""Abstract base classes defining the host-facing interfaces."""

from abc import ABC, abstractmethod

from cdns.core.models import CommandResult, InterfaceStatus


class SystemProbe(ABC):
    """Primitive questions about the host, without interpretation."""

    @abstractmethod
    def command_exists(self, name: str) -> bool:
        """True if the executable resolves on PATH."""
        ...

    @abstractmethod
    def service_running(self, name: str) -> bool:
        """
        True if the init system reports the unit as active.

        An inactive unit is a plain False. ServiceQueryError is raised only
        when the query itself could not be made.
        """
        ...

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def is_regular_file(self, path: str) -> bool:
        """Raises OSError when the path cannot be stat'ed."""
        ...

    @abstractmethod
    def is_symlink(self, path: str) -> bool:
        """Raises OSError when the path cannot be lstat'ed."""
        ...


class CommandRunner(ABC):
    """Runs external tools and captures their output."""

    @abstractmethod
    async def run(self, *args: str) -> CommandResult:
        """
        Run a command to completion.

        A non-zero exit status is reported through the result. OSError is
        raised when the executable cannot be started.
        """
        ...


class BaseStatusParser(ABC):
    """Turns a backend tool's status text into per-interface observations."""

    @abstractmethod
    def parse(self, text: str) -> list[InterfaceStatus]:
        ...

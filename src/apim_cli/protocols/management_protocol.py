"""
Protocol definitions for the Management API collaborator and CLI commands.

Commands receive their Management API client by injection and only rely on
the operations declared here, so tests can hand them any object with the
same shape.
"""

from abc import abstractmethod
from typing import Any, AsyncIterator, Protocol, runtime_checkable

from ..management.models import Application


@runtime_checkable
class ManagementApiClient(Protocol):
    """Protocol for the Management API operations commands consume."""

    @abstractmethod
    async def login(self, username: str, password: str) -> Any:
        """
        Authenticate and keep the session for subsequent calls.

        Args:
            username: Management API user
            password: Password of that user

        Raises:
            AuthenticationError: if authentication does not complete

        Example:
            >>> await api.login("admin", "admin")
        """
        ...

    @abstractmethod
    def list_applications(self, delay_period: int = ...) -> AsyncIterator[Application]:
        """
        List the applications visible to the authenticated user.

        Args:
            delay_period: Milliseconds between two emitted applications,
                0 for no delay

        Returns:
            Async iterator over every application; may span several pages

        Example:
            >>> async for app in api.list_applications(0):
            ...     print(app.name)
        """
        ...


@runtime_checkable
class RunnableCommand(Protocol):
    """Protocol for a CLI command with a single entry operation."""

    name: str
    description: str

    @abstractmethod
    async def run(self, username: str, password: str) -> Any:
        """
        Execute the command once.

        Failures are raised, not handled, so that the CLI entry point can
        report them in one place.
        """
        ...

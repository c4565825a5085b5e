"""Exception hierarchy shared by the service layer and the CLI."""

from __future__ import annotations


class GameBuildError(RuntimeError):
    """Base class for every error the CLI reports to the user."""


class ConfigError(GameBuildError):
    """The local config file could not be written."""


class ProjectError(GameBuildError):
    """The working directory is not a usable GameBuild project."""


class ApiError(GameBuildError):
    """A backend call failed.

    Args:
        message: Human-readable message, already prefixed with the action.
        status_code: HTTP status when the server answered, else None.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

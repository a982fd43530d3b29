"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class SignupCommand:
    """Create account credentials."""

    identity: str
    password: str
    command: Literal["signup"] = "signup"


@dataclass(frozen=True)
class LoginCommand:
    """Login with identity and password."""

    identity: str
    password: str
    command: Literal["login"] = "login"


@dataclass(frozen=True)
class RegisterCommand:
    """Register a profile name for the logged-in identity."""

    name: str
    command: Literal["register"] = "register"


@dataclass(frozen=True)
class UploadCommand:
    """Hash a local file and register it."""

    path: str
    fee: int | None = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class DownloadCommand:
    file_hash: str
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class AuthorizeCommand:
    file_hash: str
    grantee: str
    command: Literal["authorize"] = "authorize"


@dataclass(frozen=True)
class RevokeCommand:
    file_hash: str
    grantee: str
    command: Literal["revoke"] = "revoke"


@dataclass(frozen=True)
class ProveCommand:
    """Prove inclusion of one chunk of a local file."""

    path: str
    chunk_index: int = 0
    command: Literal["prove"] = "prove"


@dataclass(frozen=True)
class InfoCommand:
    file_hash: str
    command: Literal["info"] = "info"


@dataclass(frozen=True)
class ProfileCommand:
    identity: str | None = None
    command: Literal["profile"] = "profile"


@dataclass(frozen=True)
class FilesCommand:
    identity: str | None = None
    command: Literal["files"] = "files"


@dataclass(frozen=True)
class StatsCommand:
    command: Literal["stats"] = "stats"


@dataclass(frozen=True)
class SettingsCommand:
    command: Literal["settings"] = "settings"


@dataclass(frozen=True)
class AdminCommand:
    """Administrator action with its already-validated arguments."""

    action: str
    identity: str | None = None
    value: int | None = None
    command: Literal["admin"] = "admin"


CommandRequest = (
    SignupCommand
    | LoginCommand
    | RegisterCommand
    | UploadCommand
    | DownloadCommand
    | AuthorizeCommand
    | RevokeCommand
    | ProveCommand
    | InfoCommand
    | ProfileCommand
    | FilesCommand
    | StatsCommand
    | SettingsCommand
    | AdminCommand
)

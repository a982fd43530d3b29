"""Command parser for CLI input."""

import shlex

from cli.constants import ADMIN_ACTIONS
from cli.models import (
    AdminCommand,
    AuthorizeCommand,
    CommandRequest,
    DownloadCommand,
    FilesCommand,
    InfoCommand,
    LoginCommand,
    ProfileCommand,
    ProveCommand,
    RegisterCommand,
    RevokeCommand,
    SettingsCommand,
    SignupCommand,
    StatsCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        One of the command dataclasses in cli.models

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]
    args = tokens[1:]

    if command_name == "signup":
        identity, password = _exactly(args, 2, "signup <identity> <password>")
        return SignupCommand(identity=identity, password=password)
    elif command_name == "login":
        identity, password = _exactly(args, 2, "login <identity> <password>")
        return LoginCommand(identity=identity, password=password)
    elif command_name == "register":
        if not args:
            raise ParseError("register requires a name: register <name>")
        return RegisterCommand(name=" ".join(args))
    elif command_name == "upload":
        return _parse_upload(args)
    elif command_name == "download":
        (file_hash,) = _exactly(args, 1, "download <file_hash>")
        return DownloadCommand(file_hash=file_hash)
    elif command_name == "authorize":
        file_hash, grantee = _exactly(args, 2, "authorize <file_hash> <identity>")
        return AuthorizeCommand(file_hash=file_hash, grantee=grantee)
    elif command_name == "revoke":
        file_hash, grantee = _exactly(args, 2, "revoke <file_hash> <identity>")
        return RevokeCommand(file_hash=file_hash, grantee=grantee)
    elif command_name == "prove":
        return _parse_prove(args)
    elif command_name == "info":
        (file_hash,) = _exactly(args, 1, "info <file_hash>")
        return InfoCommand(file_hash=file_hash)
    elif command_name == "profile":
        return ProfileCommand(identity=_optional_single(args, "profile [identity]"))
    elif command_name == "files":
        return FilesCommand(identity=_optional_single(args, "files [identity]"))
    elif command_name == "stats":
        _exactly(args, 0, "stats")
        return StatsCommand()
    elif command_name == "settings":
        _exactly(args, 0, "settings")
        return SettingsCommand()
    elif command_name == "admin":
        return _parse_admin(args)
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _exactly(args: list[str], count: int, usage: str) -> list[str]:
    if len(args) != count:
        raise ParseError(f"Usage: {usage}")
    return args


def _optional_single(args: list[str], usage: str) -> str | None:
    if len(args) > 1:
        raise ParseError(f"Usage: {usage}")
    return args[0] if args else None


def _parse_int(value: str, field_name: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ParseError(f"{field_name} must be an integer, got '{value}'")
    if number < 0:
        raise ParseError(f"{field_name} must not be negative")
    return number


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path> [fee]' command."""
    if len(args) not in (1, 2):
        raise ParseError("Usage: upload <path> [fee]")

    fee = _parse_int(args[1], "fee") if len(args) == 2 else None
    return UploadCommand(path=args[0], fee=fee)


def _parse_prove(args: list[str]) -> ProveCommand:
    """Parse 'prove <path> [chunk_index]' command."""
    if len(args) not in (1, 2):
        raise ParseError("Usage: prove <path> [chunk_index]")

    chunk_index = _parse_int(args[1], "chunk_index") if len(args) == 2 else 0
    return ProveCommand(path=args[0], chunk_index=chunk_index)


def _parse_admin(args: list[str]) -> AdminCommand:
    """Parse 'admin <action> [args]' command."""
    if not args:
        raise ParseError(f"admin requires an action: {', '.join(ADMIN_ACTIONS)}")

    action, rest = args[0], args[1:]

    if action in ("pause", "unpause"):
        _exactly(rest, 0, f"admin {action}")
        return AdminCommand(action=action)
    elif action in ("set-fee", "set-threshold", "set-default-quota", "set-max-quota"):
        (value,) = _exactly(rest, 1, f"admin {action} <n>")
        return AdminCommand(action=action, value=_parse_int(value, "value"))
    elif action == "set-quota":
        identity, value = _exactly(rest, 2, "admin set-quota <identity> <bytes>")
        return AdminCommand(action=action, identity=identity, value=_parse_int(value, "value"))
    elif action in ("suspend", "unsuspend"):
        (identity,) = _exactly(rest, 1, f"admin {action} <identity>")
        return AdminCommand(action=action, identity=identity)
    else:
        raise ParseError(f"Unknown admin action: {action}")

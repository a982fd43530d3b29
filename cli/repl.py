"""REPL with prompt_toolkit for user interaction."""

import os
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    handle_admin,
    handle_authorize,
    handle_download,
    handle_files,
    handle_info,
    handle_login,
    handle_profile,
    handle_prove,
    handle_register,
    handle_revoke,
    handle_settings,
    handle_signup,
    handle_stats,
    handle_upload,
)
from cli.constants import (
    ADMIN_ACTIONS,
    COMMANDS,
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    AdminCommand,
    AuthorizeCommand,
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
from cli.parser import ParseError, parse_command

_HANDLERS = {
    SignupCommand: handle_signup,
    LoginCommand: handle_login,
    RegisterCommand: handle_register,
    UploadCommand: handle_upload,
    DownloadCommand: handle_download,
    AuthorizeCommand: handle_authorize,
    RevokeCommand: handle_revoke,
    ProveCommand: handle_prove,
    InfoCommand: handle_info,
    ProfileCommand: handle_profile,
    FilesCommand: handle_files,
    StatsCommand: handle_stats,
    SettingsCommand: handle_settings,
    AdminCommand: handle_admin,
}


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def dispatch_command(cmd_obj, client=None) -> str:
    """Dispatch parsed command to appropriate handler."""
    handler = _HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj)}"
    return handler(cmd_obj, client)


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    completer = WordCompleter(COMMANDS + ADMIN_ACTIONS, ignore_case=True)
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=completer, history=history, style=STYLE
    )

    clear_screen()
    show_welcome()

    while True:
        try:
            user_input = session.prompt([("class:prompt", PROMPT_TEXT)])

            if not user_input.strip():
                continue

            if user_input.strip() == "exit":
                print("Goodbye!")
                break

            if user_input.strip() == "help":
                print(HELP_TEXT)
                continue

            if user_input.strip() == "clear":
                clear_screen()
                show_welcome()
                continue

            cmd_obj = parse_command(user_input)
            print(dispatch_command(cmd_obj))

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break

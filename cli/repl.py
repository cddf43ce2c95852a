"""REPL with prompt_toolkit for user interaction."""

import os
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from cli.commands import (
    handle_cd,
    handle_copy,
    handle_mkdir,
    handle_pwd,
    handle_queue,
    handle_upload,
)
from cli.completer import FlareDriveCompleter
from cli.constants import (
    HELP_TEXT,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.context import TransferContext
from cli.models import (
    CdCommand,
    CopyCommand,
    MkdirCommand,
    PwdCommand,
    QueueCommand,
    UploadCommand,
)
from cli.parser import ParseError, parse_command


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def show_sign_in_required(url: str) -> None:
    print(f"\nSession expired. Sign in at {url} and retry.")


async def dispatch_command(cmd_obj, ctx: TransferContext) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, UploadCommand):
        return await handle_upload(cmd_obj, ctx)
    elif isinstance(cmd_obj, CopyCommand):
        return await handle_copy(cmd_obj, ctx)
    elif isinstance(cmd_obj, MkdirCommand):
        return await handle_mkdir(cmd_obj, ctx)
    elif isinstance(cmd_obj, CdCommand):
        return await handle_cd(cmd_obj, ctx)
    elif isinstance(cmd_obj, PwdCommand):
        return await handle_pwd(cmd_obj, ctx)
    elif isinstance(cmd_obj, QueueCommand):
        return await handle_queue(cmd_obj, ctx)
    else:
        return f"Unknown command type: {type(cmd_obj)}"


async def _prompt_until_exit(session: PromptSession, ctx: TransferContext) -> None:
    while True:
        try:
            prompt = PROMPT_TEXT.format(directory=ctx.config.get_remote_directory())
            user_input = await session.prompt_async([("class:prompt", prompt)])

            if not user_input.strip():
                continue

            if user_input.strip() == "exit":
                if len(ctx.queue) or ctx.queue.is_draining:
                    print("Waiting for queued uploads to finish...")
                return

            if user_input.strip() == "help":
                print(HELP_TEXT)
                continue

            if user_input.strip() == "clear":
                clear_screen()
                show_welcome()
                continue

            cmd_obj = parse_command(user_input)
            result = await dispatch_command(cmd_obj, ctx)
            print(result)

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            return


async def repl_loop(ctx: TransferContext) -> None:
    """
    Run the interactive REPL.

    Prompts are awaited on the same event loop that drains the upload queue,
    so uploads keep going while the user types.
    """
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=FlareDriveCompleter(), history=history, style=STYLE
    )

    clear_screen()
    show_welcome()

    with patch_stdout():
        try:
            await _prompt_until_exit(session, ctx)
        finally:
            await ctx.close()
    print("Goodbye!")

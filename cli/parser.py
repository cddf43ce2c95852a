"""Command parser for CLI input."""

import shlex

from cli.models import (
    CdCommand,
    CommandRequest,
    CopyCommand,
    MkdirCommand,
    PwdCommand,
    QueueCommand,
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
        CommandRequest object (one of Upload/Copy/Mkdir/Cd/Pwd/Queue)

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

    if command_name == "upload":
        return _parse_upload(args)
    elif command_name == "copy":
        return _parse_copy(args)
    elif command_name == "mkdir":
        return _parse_mkdir(args)
    elif command_name == "cd":
        return _parse_cd(args)
    elif command_name == "pwd":
        return PwdCommand()
    elif command_name == "queue":
        return QueueCommand()
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <file> [file ...]' command."""
    if not args:
        raise ParseError("upload requires at least one file")

    return UploadCommand(file_list=tuple(args))


def _parse_copy(args: list[str]) -> CopyCommand:
    """Parse 'copy <source> <target>' command."""
    if len(args) != 2:
        raise ParseError("copy requires exactly 2 arguments: <source> <target>")

    source, target = args
    return CopyCommand(source=source.lstrip("/"), target=target.lstrip("/"))


def _parse_mkdir(args: list[str]) -> MkdirCommand:
    """Parse 'mkdir <name>' command. The name itself is validated by the client."""
    if len(args) != 1:
        raise ParseError("mkdir requires exactly 1 argument: <name>")

    return MkdirCommand(name=args[0])


def _parse_cd(args: list[str]) -> CdCommand:
    """Parse 'cd [directory]' command."""
    if len(args) > 1:
        raise ParseError("cd takes at most 1 argument: [directory]")

    return CdCommand(directory=args[0] if args else None)

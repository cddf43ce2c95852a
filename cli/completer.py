"""Custom completer for the FlareDrive CLI with local file autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class FlareDriveCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file path completion for 'upload' arguments
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        if tokens[0].lower() != "upload":
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        already_typed = set(tokens[1:])
        if not is_typing_new_token:
            already_typed.discard(current_word)

        yield from self._complete_local_paths(current_word, already_typed)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_local_paths(self, partial: str, exclude: set) -> Iterable[Completion]:
        """
        Complete entries of the directory named by partial (cwd if none).

        Directories are offered with a trailing '/' so completion can descend.
        """
        head, separator, prefix = partial.rpartition("/")
        if separator:
            directory = Path(head) if head else Path("/")
            base = f"{head}/"
        else:
            directory = Path(".")
            base = ""

        if not directory.is_dir():
            return

        candidates = []
        for item in directory.iterdir():
            if not item.name.startswith(prefix):
                continue
            if item.name.startswith(".") and not prefix.startswith("."):
                continue
            candidate = f"{base}{item.name}"
            if item.is_dir():
                candidate += "/"
            elif candidate in exclude:
                continue
            candidates.append(candidate)

        for candidate in sorted(candidates):
            yield Completion(candidate, start_position=-len(partial))

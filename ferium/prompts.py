"""Interactive terminal prompts."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from pathlib import Path

from termcolor import colored


class PromptCancelled(Exception):
    """The user cancelled a prompt or there was nothing to answer."""


def _ask(message: str) -> str:
    try:
        return input(message)
    except (EOFError, KeyboardInterrupt) as err:
        raise PromptCancelled from err


def _complain(message: str) -> None:
    print(colored(message, "red"))


def _list_options(message: str, options: list[str], marked: set[int]) -> None:
    print(message)
    for index, option in enumerate(options):
        marker = ">" if index in marked else " "
        print(f"{marker} {index + 1}. {option}")


def select(message: str, options: Iterable[str], default: int = 0) -> int:
    """Ask for one of `options` and return its index."""
    options = list(options)
    if not options:
        raise PromptCancelled("There is nothing to select from")
    if not 0 <= default < len(options):
        default = 0
    _list_options(message, options, {default})
    while True:
        answer = _ask(f"Choice [{default + 1}]: ").strip()
        if not answer:
            return default
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return int(answer) - 1
        _complain(f"Enter a number between 1 and {len(options)}")


def multi_select(
    message: str, options: Iterable[str], defaults: Iterable[int] = ()
) -> list[int]:
    """Ask for any number of `options` and return their indices in ascending order."""
    options = list(options)
    if not options:
        raise PromptCancelled("There is nothing to select from")
    chosen = sorted({i for i in defaults if 0 <= i < len(options)})
    _list_options(message, options, set(chosen))
    while True:
        answer = _ask("Choices (numbers separated by commas, 'none' for nothing): ").strip()
        if not answer:
            return chosen
        if answer.lower() == "none":
            return []
        tokens = [t for t in re.split(r"[,\s]+", answer) if t]
        if all(t.isdigit() and 1 <= int(t) <= len(options) for t in tokens):
            return sorted({int(t) - 1 for t in tokens})
        _complain(f"Enter numbers between 1 and {len(options)}")


def confirm(message: str, default: bool = False) -> bool:
    """Ask a yes or no question."""
    hint = "[Y/n]" if default else "[y/N]"
    while True:
        answer = _ask(f"{message} {hint} ").strip().lower()
        if not answer:
            return default
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        _complain("Answer with y or n")


def text(
    message: str,
    default: str | None = None,
    validator: Callable[[str], str | None] | None = None,
) -> str:
    """Ask for a line of text; `validator` returns an error message or None."""
    hint = f" [{default}]" if default is not None else ""
    while True:
        answer = _ask(f"{message}{hint}: ").strip()
        if not answer and default is not None:
            answer = default
        error = validator(answer) if validator is not None else None
        if error is None:
            return answer
        _complain(error)


def pick_folder(default: str | Path, prompt: str, title: str) -> Path | None:
    """Ask for a folder, returning None if the user cancels."""
    print(prompt)
    try:
        answer = _ask(f"{title} [{default}]: ").strip()
    except PromptCancelled:
        return None
    if not answer:
        return Path(default)
    return Path(answer).expanduser()
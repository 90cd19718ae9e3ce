"""
Console and shared helpers for the battle engine.

Everything the front end prints goes through one rich Console, so that
tests and embedding applications can capture or redirect the output in a
single place.
"""

from __future__ import annotations

from typing import Any, Generic

from rich.console import Console
from rich.rule import Rule
from typing_extensions import TypeVar

_console = Console(markup=True, width=120, force_jupyter=False, highlight=False)


def set_console(console: Console) -> Console:
    """
    Replaces the shared console.

    Args:
        console (Console): The console used by every following print.

    Returns:
        Console: The console that was replaced.

    """
    global _console
    previous, _console = _console, console
    return previous


def cprint(*args: Any, **kwargs: Any) -> None:
    """Prints rich markup on the shared console."""
    _console.print(*args, **kwargs)


def crule(title: str = "", **kwargs: Any) -> None:
    """Prints a horizontal rule with an optional title."""
    _console.print(Rule(title, **kwargs))


def ccapture(content: Any) -> str:
    """
    Renders content to a string with the shared console settings.

    Args:
        content (Any): A renderable or markup string.

    Returns:
        str: The rendered text, including ANSI styles when the console has
            a color system.

    """
    with _console.capture() as capture:
        _console.print(content, markup=True, end="")
    return capture.get()


_T = TypeVar("_T")


class Singleton(type, Generic[_T]):
    """
    Metaclass that keeps one instance per class.

    Calling the class again with arguments re-runs `__init__` on the existing
    instance, so a registry can be pointed at another data directory without
    handing out a second object.
    """

    _instances: dict[Singleton[_T], _T] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> _T:
        instance = cls._instances.get(cls)
        if instance is None:
            instance = super().__call__(*args, **kwargs)
            cls._instances[cls] = instance
        elif args or kwargs:
            instance.__init__(*args, **kwargs)
        return instance

    def reset(cls) -> None:
        """Forgets the instance, the next call builds a fresh one."""
        cls._instances.pop(cls, None)


def make_bar(
    current: int,
    maximum: int,
    length: int = 10,
    color: str = "white",
    empty_color: str = "dim white",
) -> str:
    """
    Draws a resource pool as a bar of filled and empty cells.

    Args:
        current (int): The current value.
        maximum (int): The size of the pool; an empty pool draws no filled cell.
        length (int): The number of cells. Defaults to 10.
        color (str): Style of the filled cells. Defaults to "white".
        empty_color (str): Style of the empty cells. Defaults to "dim white".

    Returns:
        str: The bar as rich markup.

    """
    filled = 0
    if maximum > 0:
        filled = max(0, min(length, int(current / maximum * length)))
    pieces = [f"[{color}]", "▮" * filled]
    if filled < length:
        pieces.append(f"[{empty_color}]{'▯' * (length - filled)}[/]")
    pieces.append("[/]")
    return "".join(pieces)

"""ANSI colouring helpers for rendering keys and bytes."""

from __future__ import annotations

import os
from collections.abc import Callable

ANSI_RESET = "\x1b[0m"
ANSI_BRIGHT = "\x1b[1m"

ANSI_FG_GREEN = "\x1b[32m"
ANSI_FG_BLUE = "\x1b[34m"
ANSI_FG_CYAN = "\x1b[36m"

COLORS_ENV_VAR = "TENDERMINT_IAVL_COLORS_ON"


def treat(s: str, color: str) -> str:
    """Wrap ``s`` in ``color`` unless it is already coloured."""
    if len(s) > 2 and s[:2] == "\x1b[":
        return s
    return color + s + ANSI_RESET


def _treat_all(color: str, *args: object) -> str:
    return "".join(treat(str(arg), color) for arg in args)


def green(*args: object) -> str:
    return _treat_all(ANSI_FG_GREEN, *args)


def blue(*args: object) -> str:
    return _treat_all(ANSI_FG_BLUE, *args)


def cyan(*args: object) -> str:
    return _treat_all(ANSI_FG_CYAN, *args)


def colored_bytes(
    data: bytes,
    text_color: Callable[..., str],
    bytes_color: Callable[..., str],
) -> str:
    """Render ``data`` with printable characters and hex bytes in separate colours.

    Colouring only happens when the colours environment variable is set; otherwise
    only the first byte is returned as a character.
    """
    if not os.environ.get(COLORS_ENV_VAR, ""):
        return chr(data[0]) if data else ""
    parts = []
    for b in data:
        if 0x21 <= b < 0x7F:
            parts.append(text_color(chr(b)))
        else:
            parts.append(bytes_color(f"{b:02X}"))
    return "".join(parts)
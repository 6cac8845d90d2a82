"""Undo git's C-style path quoting (``core.quotePath``)."""

from __future__ import annotations

_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    '"': 0x22,
    "\\": 0x5C,
}

_OCTAL = "01234567"


def is_quoted(path: str) -> bool:
    return len(path) >= 2 and path.startswith('"') and path.endswith('"')


def unquote(path: str) -> str:
    """Return *path* with git's quoting removed.

    Unquoted input is returned unchanged. Octal escapes are raw bytes of the
    UTF-8 encoded name, so they are collected and decoded together. Raises
    ValueError on a dangling or unknown escape.
    """
    if not is_quoted(path):
        return path

    body = path[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out.extend(ch.encode("utf-8"))
            i += 1
            continue
        if i + 1 >= len(body):
            raise ValueError(f"dangling escape in quoted path: {path}")
        nxt = body[i + 1]
        if nxt in _ESCAPES:
            out.append(_ESCAPES[nxt])
            i += 2
        elif nxt in _OCTAL:
            digits = body[i + 1:i + 4]
            if len(digits) != 3 or any(d not in _OCTAL for d in digits):
                raise ValueError(f"bad octal escape in quoted path: {path}")
            out.append(int(digits, 8) & 0xFF)
            i += 4
        else:
            raise ValueError(f"unknown escape \\{nxt} in quoted path: {path}")

    return out.decode("utf-8", errors="surrogateescape")


def split_quoted(text: str) -> tuple[str, str]:
    """Split ``"quoted" rest`` into the still-quoted first token and the remainder.

    Used for the two-path form of the ``diff --git`` header where the first
    path is quoted. Raises ValueError if a quoted token is never closed.
    """
    if not text.startswith('"'):
        raise ValueError("text does not start with a quoted token")
    i = 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return text[:i + 1], text[i + 1:].lstrip(" ")
        i += 1
    raise ValueError(f"unterminated quoted path: {text}")


_QUOTE_ESCAPES = {value: key for key, value in _ESCAPES.items()}


def quote(path: str) -> str:
    """Quote *path* the way git does when it holds special characters.

    Plain paths come back unchanged. Non-ASCII names are written as octal
    UTF-8 bytes, matching git's default ``core.quotePath=true``.
    """
    raw = path.encode("utf-8", errors="surrogateescape")
    if all(0x20 <= b < 0x7F and b not in (0x22, 0x5C) for b in raw):
        return path
    out = ['"']
    for b in raw:
        if b in _QUOTE_ESCAPES:
            out.append("\\" + _QUOTE_ESCAPES[b])
        elif 0x20 <= b < 0x7F:
            out.append(chr(b))
        else:
            out.append(f"\\{b:03o}")
    out.append('"')
    return "".join(out)

"""Operating-system library: dates and times, environment, files, processes."""

from __future__ import annotations

import locale as _locale
import os as _os
import shutil
import subprocess
import tempfile
import time as _time
from collections.abc import Mapping
from typing import Any

from .objects import str2number

_STRFTIME_OPTIONS = (
    ("aAbBcCdDeFgGhHIjmMnprRStTuUVwWxXyYzZ%", ""),
    ("E", "cCxXyY"),
    ("O", "deHImMSuUVwWy"),
)

_LOCALE_CATEGORIES = {
    "all": _locale.LC_ALL,
    "collate": _locale.LC_COLLATE,
    "ctype": _locale.LC_CTYPE,
    "monetary": _locale.LC_MONETARY,
    "numeric": _locale.LC_NUMERIC,
    "time": _locale.LC_TIME,
}


def _number(value: Any, arg: int, fname: str) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return str2number(value)
        except ValueError:
            pass
    raise TypeError(f"bad argument #{arg} to '{fname}' (number expected)")


def check_option(conv: str) -> tuple[str, str]:
    """Read one conversion specifier (without its ``%``) from ``conv``.

    Return the full ``strftime`` specifier and the text after it.
    """
    if conv:
        for first, second in _STRFTIME_OPTIONS:
            if conv[0] in first:
                if not second:
                    return "%" + conv[0], conv[1:]
                if len(conv) > 1 and conv[1] in second:
                    return "%" + conv[:2], conv[2:]
    raise ValueError(
        f"bad argument #1 to 'date' (invalid conversion specifier '%{conv}')"
    )


def date(fmt: str = "%c", t: Any = None) -> str | dict[str, Any] | None:
    """Format a time; ``!`` selects UTC and ``*t`` returns a field table.

    Returns ``None`` if the time cannot be represented.
    """
    stamp = int(_time.time()) if t is None else int(_number(t, 2, "date"))
    utc = fmt.startswith("!")
    if utc:
        fmt = fmt[1:]
    try:
        stm = _time.gmtime(stamp) if utc else _time.localtime(stamp)
    except (OverflowError, OSError, ValueError):
        return None
    if fmt == "*t":
        fields: dict[str, Any] = {
            "sec": stm.tm_sec,
            "min": stm.tm_min,
            "hour": stm.tm_hour,
            "day": stm.tm_mday,
            "month": stm.tm_mon,
            "year": stm.tm_year,
            "wday": (stm.tm_wday + 1) % 7 + 1,
            "yday": stm.tm_yday,
        }
        if stm.tm_isdst >= 0:
            fields["isdst"] = bool(stm.tm_isdst)
        return fields
    parts: list[str] = []
    pos = 0
    while pos < len(fmt):
        if fmt[pos] != "%":
            parts.append(fmt[pos])
            pos += 1
        else:
            spec, rest = check_option(fmt[pos + 1:])
            parts.append(_time.strftime(spec, stm))
            pos = len(fmt) - len(rest)
    return "".join(parts)


def _to_integer(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = str2number(value)
        except ValueError:
            return None
    if isinstance(value, (int, float)):
        try:
            return int(value)
        except (OverflowError, ValueError):
            return None
    return None


def _getfield(table: Mapping[str, Any], key: str, default: int | None) -> int:
    result = _to_integer(table.get(key))
    if result is None:
        if default is None:
            raise ValueError(f"field '{key}' missing in date table")
        return default
    return result


def time(table: Mapping[str, Any] | None = None) -> int | None:
    """Current time, or the time described by a date table.

    Returns ``None`` if the table describes a time that cannot be represented.
    """
    if table is None:
        return int(_time.time())
    if not isinstance(table, Mapping):
        raise TypeError("bad argument #1 to 'time' (table expected)")
    sec = _getfield(table, "sec", 0)
    minute = _getfield(table, "min", 0)
    hour = _getfield(table, "hour", 12)
    day = _getfield(table, "day", None)
    month = _getfield(table, "month", None)
    year = _getfield(table, "year", None)
    flag = table.get("isdst")
    isdst = -1 if flag is None else (0 if flag is False else 1)
    try:
        return int(_time.mktime((year, month, day, hour, minute, sec, 0, 0, isdst)))
    except (OverflowError, ValueError):
        return None


def difftime(t2: Any, t1: Any = 0) -> float:
    """Number of seconds from ``t1`` to ``t2``."""
    return float(int(_number(t2, 1, "difftime")) - int(_number(t1, 2, "difftime")))


def clock() -> float:
    """Processor time used by the program, in seconds."""
    return _time.process_time()


def getenv(name: str) -> str | None:
    """Value of an environment variable, or ``None`` if it is not set."""
    return _os.environ.get(name)


def remove(filename: str) -> None:
    """Delete a file or an empty directory; raise :class:`OSError` on failure."""
    if _os.path.isdir(filename) and not _os.path.islink(filename):
        _os.rmdir(filename)
    else:
        _os.remove(filename)


def rename(src: str, dst: str) -> None:
    """Rename a file; raise :class:`OSError` on failure."""
    _os.rename(src, dst)


def tmpname() -> str:
    """Create an empty temporary file and return its name."""
    try:
        fd, name = tempfile.mkstemp(prefix="lua_")
    except OSError as exc:
        raise OSError("unable to generate a unique filename") from exc
    _os.close(fd)
    return name


def execute(command: str | None = None) -> bool | tuple[bool, str, int]:
    """Run a shell command.

    Without a command, report whether a shell is available. Otherwise return
    ``(success, "exit" | "signal", code)``.
    """
    if command is None:
        shell = _os.environ.get("COMSPEC") if _os.name == "nt" else shutil.which("sh")
        return bool(shell)
    rc = subprocess.run(command, shell=True).returncode
    if rc < 0:
        return False, "signal", -rc
    return rc == 0, "exit", rc


def setlocale(locale_name: str | None = None, category: str = "all") -> str | None:
    """Set or query the locale of a category; ``None`` if the request fails."""
    try:
        cat = _LOCALE_CATEGORIES[category]
    except KeyError:
        raise ValueError(
            f"bad argument #2 to 'setlocale' (invalid option '{category}')"
        ) from None
    try:
        return _locale.setlocale(cat, locale_name)
    except _locale.Error:
        return None


def exit(status: bool | int | None = None, close: bool = False) -> None:
    """Terminate the program: ``True`` means success, ``False`` failure.

    ``close`` is accepted for compatibility; no interpreter state needs closing.
    """
    if isinstance(status, bool):
        code = 0 if status else 1
    elif status is None:
        code = 0
    else:
        code = int(_number(status, 1, "exit"))
    raise SystemExit(code)


def open_os() -> dict[str, Any]:
    """Build the ``os`` library table."""
    return {
        "clock": clock,
        "date": date,
        "difftime": difftime,
        "execute": execute,
        "exit": exit,
        "getenv": getenv,
        "remove": remove,
        "rename": rename,
        "setlocale": setlocale,
        "time": time,
        "tmpname": tmpname,
    }
"""Module loading: search paths, preload table, file and native-library searchers."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

VERSION_SUFFIX = "_5_2"
PATH_ENV = "LUA_PATH"
CPATH_ENV = "LUA_CPATH"

PATH_SEP = ";"
PATH_MARK = "?"
EXEC_DIR = "!"
IGMARK = "-"
DIRSEP = os.sep
LSUBSEP = DIRSEP
CSUBSEP = DIRSEP

OPEN_PREFIX = "luaopen_"
OPEN_SEP = "_"

DEFAULT_PATH = "." + DIRSEP + "?.lua"
DEFAULT_CPATH = "." + DIRSEP + "?.so"

DLMSG = "dynamic libraries not enabled; check your Lua installation"

_AUXMARK = "\1"

Searcher = Callable[[str], "tuple[Callable[..., Any], Any] | str | None"]
ChunkLoader = Callable[[str], Callable[..., Any]]
LibraryOpener = Callable[[str, bool], Mapping[str, Any]]


class ModuleNotFound(ImportError):
    """Raised by ``require`` when no searcher finds a loader."""

    def __init__(self, name: str, details: str) -> None:
        super().__init__(f"module '{name}' not found:{details}")
        self.module_name = name
        self.details = details


class LoadError(Exception):
    """Raised when a module or a library is found but cannot be loaded.

    ``where`` is ``"open"`` or ``"absent"`` when the library itself failed,
    ``"init"`` when its entry function is missing, and ``None`` otherwise.
    """

    def __init__(self, message: str, where: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.where = where


class _NativeError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class _LibraryError(_NativeError):
    """The library could not be opened."""


class _SymbolError(_NativeError):
    """The library was opened but the symbol is missing."""


def _readable(filename: str) -> bool:
    try:
        with open(filename, "rb"):
            return True
    except OSError:
        return False


def _templates(path: str) -> list[str]:
    return [template for template in path.split(PATH_SEP) if template]


def _search(name: str, path: str, sep: str, dirsep: str) -> tuple[str | None, str]:
    if sep:
        name = name.replace(sep, dirsep)
    messages: list[str] = []
    for template in _templates(path):
        filename = template.replace(PATH_MARK, name)
        if _readable(filename):
            return filename, ""
        messages.append(f"\n\tno file '{filename}'")
    return None, "".join(messages)


def searchpath(name: str, path: str, sep: str = ".", dirsep: str = DIRSEP) -> str:
    """Return the first readable file that ``path`` yields for ``name``.

    Raises :class:`FileNotFoundError` whose message lists every file tried.
    """
    filename, message = _search(name, path, sep, dirsep)
    if filename is None:
        raise FileNotFoundError(message)
    return filename


def make_path(env_value: str | None, default: str) -> str:
    """Build a search path from an environment value; ``;;`` stands for ``default``."""
    if env_value is None:
        return default
    marked = env_value.replace(PATH_SEP + PATH_SEP, PATH_SEP + _AUXMARK + PATH_SEP)
    return marked.replace(_AUXMARK, default)


def _no_chunk_loader(filename: str) -> Callable[..., Any]:
    raise LoadError(f"cannot load '{filename}': no chunk loader configured")


class Package:
    """The ``package`` library: loaded and preloaded modules, paths and searchers."""

    def __init__(
        self,
        path: str | None = None,
        cpath: str | None = None,
        *,
        chunk_loader: ChunkLoader | None = None,
        library_opener: LibraryOpener | None = None,
        environ: Mapping[str, str] | None = None,
        ignore_environment: bool = False,
    ) -> None:
        env = os.environ if environ is None else environ
        self.path = path if path is not None else self._env_path(
            env, PATH_ENV, DEFAULT_PATH, ignore_environment)
        self.cpath = cpath if cpath is not None else self._env_path(
            env, CPATH_ENV, DEFAULT_CPATH, ignore_environment)
        self.config = f"{DIRSEP}\n{PATH_SEP}\n{PATH_MARK}\n{EXEC_DIR}\n{IGMARK}\n"
        self.loaded: MutableMapping[str, Any] = {}
        self.preload: MutableMapping[str, Any] = {}
        self.chunk_loader: ChunkLoader = chunk_loader or _no_chunk_loader
        self._library_opener = library_opener
        self._clibs: dict[str, Mapping[str, Any]] = {}
        self.searchers: list[Searcher] = [
            self.searcher_preload,
            self.searcher_lua,
            self.searcher_c,
            self.searcher_croot,
        ]

    @staticmethod
    def _env_path(env: Mapping[str, str], base: str, default: str, ignore: bool) -> str:
        value = env.get(base + VERSION_SUFFIX)
        if value is None:
            value = env.get(base)
        if value is None or ignore:
            return default
        return make_path(value, default)

    @property
    def _lib_fail(self) -> str:
        return "absent" if self._library_opener is None else "open"

    def _open_library(self, path: str, global_symbols: bool) -> Mapping[str, Any]:
        if self._library_opener is None:
            raise _LibraryError(DLMSG)
        try:
            return self._library_opener(path, global_symbols)
        except (OSError, LoadError) as exc:
            raise _LibraryError(str(exc)) from exc

    def _loadfunc(self, path: str, sym: str) -> Any:
        lib = self._clibs.get(path)
        if lib is None:
            lib = self._open_library(path, sym.startswith("*"))
            self._clibs[path] = lib
        if sym.startswith("*"):
            return True
        try:
            return lib[sym]
        except KeyError:
            raise _SymbolError(f"undefined symbol: {sym}") from None

    def loadlib(self, path: str, init: str) -> Any:
        """Load a native library and return its function ``init``.

        With ``init`` starting with ``*`` only the library is loaded and
        ``True`` is returned.
        """
        try:
            return self._loadfunc(path, init)
        except _LibraryError as exc:
            raise LoadError(exc.message, self._lib_fail) from None
        except _SymbolError as exc:
            raise LoadError(exc.message, "init") from None

    def close(self) -> None:
        """Unload every native library, most recent first."""
        for lib in reversed(list(self._clibs.values())):
            closer = getattr(lib, "close", None)
            if callable(closer):
                closer()
        self._clibs.clear()

    def _findfile(self, name: str, pname: str, dirsep: str) -> tuple[str | None, str]:
        path = getattr(self, pname)
        if not isinstance(path, str):
            raise TypeError(f"'package.{pname}' must be a string")
        return _search(name, path, ".", dirsep)

    @staticmethod
    def _load_error(name: str, filename: str, detail: str) -> LoadError:
        return LoadError(
            f"error loading module '{name}' from file '{filename}':\n\t{detail}")

    def _open_function(self, filename: str, modname: str) -> Any:
        modname = modname.replace(".", OPEN_SEP)
        mark = modname.find(IGMARK)
        if mark >= 0:
            try:
                return self._loadfunc(filename, OPEN_PREFIX + modname[:mark])
            except _SymbolError:
                modname = modname[mark + 1:]
        return self._loadfunc(filename, OPEN_PREFIX + modname)

    def searcher_preload(self, name: str) -> tuple[Any, None] | str:
        """Look the module up in ``preload``."""
        loader = self.preload.get(name)
        if loader is None:
            return f"\n\tno field package.preload['{name}']"
        return loader, None

    def searcher_lua(self, name: str) -> tuple[Callable[..., Any], str] | str:
        """Find a source file on ``path`` and load it with the chunk loader."""
        filename, message = self._findfile(name, "path", LSUBSEP)
        if filename is None:
            return message
        try:
            loader = self.chunk_loader(filename)
        except Exception as exc:
            raise self._load_error(name, filename, str(exc)) from exc
        return loader, filename

    def searcher_c(self, name: str) -> tuple[Any, str] | str:
        """Find a native library on ``cpath`` and take its open function."""
        filename, message = self._findfile(name, "cpath", CSUBSEP)
        if filename is None:
            return message
        try:
            func = self._open_function(filename, name)
        except _NativeError as exc:
            raise self._load_error(name, filename, exc.message) from None
        return func, filename

    def searcher_croot(self, name: str) -> tuple[Any, str] | str | None:
        """Find a submodule's open function in the library of its root module."""
        dot = name.find(".")
        if dot < 0:
            return None
        filename, message = self._findfile(name[:dot], "cpath", CSUBSEP)
        if filename is None:
            return message
        try:
            func = self._open_function(filename, name)
        except _SymbolError:
            return f"\n\tno module '{name}' in file '{filename}'"
        except _LibraryError as exc:
            raise self._load_error(name, filename, exc.message) from None
        return func, filename

    def _findloader(self, name: str) -> tuple[Callable[..., Any], Any]:
        if not isinstance(self.searchers, list):
            raise TypeError("'package.searchers' must be a table")
        messages: list[str] = []
        for searcher in self.searchers:
            result = searcher(name)
            if isinstance(result, tuple) and result and callable(result[0]):
                extra = result[1] if len(result) > 1 else None
                return result[0], extra
            if isinstance(result, str):
                messages.append(result)
        raise ModuleNotFound(name, "".join(messages))

    def require(self, name: str) -> Any:
        """Load a module once and return the value stored in ``loaded``."""
        current = self.loaded.get(name)
        if current is not None and current is not False:
            return current
        loader, extra = self._findloader(name)
        value = loader(name, extra)
        if value is not None:
            self.loaded[name] = value
        if self.loaded.get(name) is None:
            self.loaded[name] = True
        return self.loaded[name]
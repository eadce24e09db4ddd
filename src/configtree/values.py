"""Values: file-backed property content with origin tracking.

A ``PropertyFile`` is created for every entry found when a source is built.
In caching mode it reads the file once and hands out one frozen ``Value``;
with ``ALWAYS_READ`` it hands out a fresh ``Value`` per lookup and every
access goes back to the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass
import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from configtree._once import Once
from configtree.errors import AccessError, ValueUnreadableError, ValueVanishedError

if TYPE_CHECKING:
    from collections.abc import Callable

    from configtree.options import OptionSet

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Origin:
    """Where a value came from. Positions always point at the start of file."""

    resource: Path
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        return f"{self.resource} @ line {self.line}, column {self.column}"


def trim_trailing_newline(text: str) -> str:
    """Strip one trailing ``\\n`` or ``\\r\\n`` from single-line text.

    Text with two or more line breaks is returned unchanged so multi-line
    content such as PEM blocks keeps its final terminator.
    """
    if not text.endswith("\n") or text.count("\n") > 1:
        return text
    return text[:-2] if text.endswith("\r\n") else text[:-1]


def _read(path: Path) -> bytes:
    if not path.exists():
        raise ValueVanishedError(path)
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise ValueVanishedError(path) from exc
    except OSError as exc:
        raise ValueUnreadableError(path, exc.strerror) from exc


class Value:
    """Content of a property file, viewable as text or as bytes.

    ``str(value)`` is the text view.
    """

    __slots__ = ("_loader", "_trim", "origin", "path")

    def __init__(
        self,
        path: Path,
        origin: Origin,
        loader: Callable[[], bytes],
        *,
        trim: bool,
    ) -> None:
        self.path = path
        self.origin = origin
        self._loader = loader
        self._trim = trim

    def as_bytes(self) -> bytes:
        """Return the raw file content; the trim option never applies here."""
        return self._loader()

    def as_text(self) -> str:
        text = self._loader().decode("utf-8", errors="replace")
        return trim_trailing_newline(text) if self._trim else text

    def open(self) -> BinaryIO:
        """Return a binary stream over the content."""
        return io.BytesIO(self._loader())

    def __str__(self) -> str:
        return self.as_text()

    def __repr__(self) -> str:
        return f"Value(path={str(self.path)!r})"


class PropertyFile:
    """A single file found when a source was created."""

    __slots__ = ("_cached", "_options", "origin", "path")

    def __init__(self, path: Path, options: OptionSet) -> None:
        self.path = path
        self.origin = Origin(path)
        self._options = options
        self._cached: Value | None = None
        if not options.always_read:
            cell: Once[bytes] = Once(lambda: _read(path))
            self._cached = Value(
                path, self.origin, cell.get, trim=options.trim_trailing_newline
            )
            try:
                cell.get()
            except AccessError as exc:
                # Retried through the same cell on first access.
                log.warning("Deferred read of %s: %s", path, exc)

    @property
    def cached(self) -> bool:
        return self._cached is not None

    def content(self) -> Value:
        """Return the value for this file.

        Caching mode returns the same instance every time. ``ALWAYS_READ``
        returns a new instance whose every access re-reads the file.
        """
        if self._cached is not None:
            return self._cached
        return Value(
            self.path,
            self.origin,
            lambda: _read(self.path),
            trim=self._options.trim_trailing_newline,
        )

    def __repr__(self) -> str:
        return f"PropertyFile(path={str(self.path)!r}, cached={self.cached})"

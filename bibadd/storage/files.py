"""Bibliography files on disk."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from bibadd.exceptions import BibaddError, ErrorKind

if TYPE_CHECKING:
    from bibadd.core.bibtex import Format

logger = logging.getLogger(__name__)

DEFAULT_FILE_STEM = "bibliography"


class FormatFile:
    """A file holding text in one bibliography format.

    Reads return the whole file. Writes replace the content atomically, so
    a shorter bibliography never leaves stale text behind.
    """

    def __init__(self, path: Path, fmt: type[Format]):
        self.path = Path(path)
        self.format = fmt

    @classmethod
    def open(cls, path: Path | str, fmt: type[Format]) -> FormatFile:
        """Open an existing file, forcing the format's extension.

        Raises:
            BibaddError: If the file does not exist or is not readable and
                writable
        """
        path = Path(path).with_suffix(f".{fmt.ext}")
        try:
            with open(path, "r+", encoding="utf-8"):
                pass
        except OSError as e:
            raise BibaddError.wrap(
                ErrorKind.IO,
                e,
                f"Failed to open the '{path}' file for reading and writing",
            ) from e
        return cls(path, fmt)

    @classmethod
    def create(cls, path: Path | str, fmt: type[Format]) -> FormatFile:
        """Create a new empty file, forcing the format's extension.

        Raises:
            BibaddError: If the file already exists or cannot be created
        """
        path = Path(path).with_suffix(f".{fmt.ext}")
        try:
            with open(path, "x", encoding="utf-8"):
                pass
        except OSError as e:
            raise BibaddError.wrap(
                ErrorKind.IO,
                e,
                f"Failed to create and open the '{path}' file for reading and writing",
            ) from e
        logger.info("Created %s file %s", fmt.name, path)
        return cls(path, fmt)

    @classmethod
    def find(cls, directory: Path | str, fmt: type[Format]) -> FormatFile:
        """Find the single file with the format's extension in ``directory``.

        Raises:
            BibaddError: If the path is not a directory, or it holds no file
                or more than one file with the extension
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise BibaddError(ErrorKind.IO, f"{directory} is not a directory")

        candidates = sorted(directory.glob(f"*.{fmt.ext}"))
        if not candidates:
            raise BibaddError(
                ErrorKind.IO,
                f"No .{fmt.ext} file found in the '{directory}' directory",
            )
        if len(candidates) > 1:
            raise BibaddError(
                ErrorKind.IO,
                f"More than one .{fmt.ext} file found - use the --file option "
                "to select one",
            )
        return cls.open(candidates[0], fmt)

    def read(self) -> str:
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise BibaddError.wrap(
                ErrorKind.IO, e, "Cannot read contents of file"
            ) from e
        logger.debug("%d characters read from %s", len(text), self.path)
        return text

    def write(self, text: str) -> None:
        """Replace the file content with ``text``."""
        temp_fd, temp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(text)
            if self.path.exists():
                os.chmod(temp_path, stat.S_IMODE(os.stat(self.path).st_mode))
            os.replace(temp_path, self.path)
        except OSError as e:
            Path(temp_path).unlink(missing_ok=True)
            raise BibaddError.wrap(
                ErrorKind.IO, e, f"Cannot write to the '{self.path}' file"
            ) from e
        logger.debug("%d characters written to %s", len(text), self.path)


def open_or_create(
    path: Path | str | None, fmt: type[Format], directory: Path | str = "."
) -> FormatFile:
    """Open the bibliography file to work on.

    With a path the file is opened, or created when it does not exist.
    Without one the single file of the format in ``directory`` is used, and
    ``bibliography.<ext>`` is created there when it holds none.
    """
    if path is not None:
        logger.debug("Opening %s as a %s file", path, fmt.name)
        target = Path(path).with_suffix(f".{fmt.ext}")
        if target.exists():
            return FormatFile.open(target, fmt)
        logger.info(
            "No .%s file found - creating the file '%s'", fmt.ext, target
        )
        return FormatFile.create(target, fmt)

    logger.debug("Searching %s for any %s files", directory, fmt.name)
    directory = Path(directory)
    if not any(directory.glob(f"*.{fmt.ext}")):
        return FormatFile.create(directory / DEFAULT_FILE_STEM, fmt)
    return FormatFile.find(directory, fmt)

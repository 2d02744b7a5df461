from pathlib import Path
from typing import Any, Callable
import logging
import re

from .config import StoreConfig
from .exceptions import PropertyNotFoundError, InvalidPropertyTypeError
from .filesystem import TextFile

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")


class Properties:
    """Read and write key=value files, keeping every line that was not changed exactly as it was.

    Values are looked up lazily in the lines read from disk. Values set at runtime are kept apart
    from them and always take precedence, until they are written back by save()."""

    def __init__(self, path: Path, create_file: bool = True, separator: str = "=",
                 file_handle: TextFile | None = None) -> None:
        if not separator:
            raise ValueError("The separator must not be empty.")
        self._path = Path(path)
        self._separator = separator
        self._file = file_handle if file_handle is not None else TextFile()
        self._lines: tuple[str, ...] = ()
        self._parsed: dict[str, str] = {}
        self._overrides: dict[str, str] = {}
        if create_file:
            try:
                self._file.create(self._path)
            except OSError as e:
                logger.error("Failed to create properties file %s.", self._path)
                logger.error(e)
        self.reload()

    @classmethod
    def from_config(cls, path: Path, config: StoreConfig, file_handle: TextFile | None = None) -> 'Properties':
        return cls(path, create_file=config.create_file, separator=config.separator, file_handle=file_handle)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def separator(self) -> str:
        return self._separator

    @property
    def lines(self) -> tuple[str, ...]:
        return self._lines

    def get_file(self) -> Path:
        """Return the backing file. It does not have to exist."""
        return self._path

    def reload(self) -> None:
        """
        Read the backing file again, dropping every unsaved value.

        Nothing happens if the file does not exist.

        Raises:
            OSError: If the file exists but cannot be read.
        """
        if not self._file.exists(self._path):
            logger.debug("Properties file %s does not exist, nothing to load.", self._path)
            return
        self.clear()
        self._lines = tuple(self._file.read_all_lines(self._path))

    def save(self) -> None:
        """
        Write all set values to the backing file, creating it if needed.

        Keys already present in the file are rewritten on the line they came from, new keys are
        appended at the end. All other lines are written back unchanged.

        Raises:
            OSError: If the file cannot be created or written.
        """
        self._file.create(self._path)
        new_lines = list(self._lines)
        for key, value in self._overrides.items():
            index = self._find(key)
            line = self._format(key, value)
            if index is None:
                new_lines.append(line)
            else:
                new_lines[index] = line
        self._file.write_all_text(self._path, "".join(f"{line}\n" for line in new_lines))
        logger.info("Saved %s lines to %s.", len(new_lines), self._path)
        self._lines = tuple(new_lines)
        self._parsed.clear()

    def clear(self) -> None:
        """Forget the loaded lines and every set value."""
        self._lines = ()
        self._parsed.clear()
        self._overrides.clear()

    def get_string(self, key: str) -> str:
        if key in self._overrides:
            return self._overrides[key]
        if key not in self._parsed:
            index = self._find(key)
            if index is None:
                raise PropertyNotFoundError(key, self._path.name)
            self._parsed[key] = self._line_value(self._lines[index])
        return self._parsed[key]

    def get_int(self, key: str) -> int:
        return self._convert(key, int, _parse_int)

    def get_double(self, key: str) -> float:
        return self._convert(key, float, float)

    def get_float(self, key: str) -> float:
        return self._convert(key, float, lambda value: float(value.replace(" ", "")))

    def get_byte(self, key: str) -> int:
        return self._convert(key, int, _parse_byte)

    def get_boolean(self, key: str) -> bool:
        """Anything other than "true" (in any case) reads as False."""
        return self.get_string(key).lower() == "true"

    def get(self, key: str, default: str | None = None) -> str | None:
        try:
            return self.get_string(key)
        except PropertyNotFoundError:
            return default

    def set_value(self, key: str, value: Any) -> None:
        """
        Set a value at runtime. It is only written to disk by save().

        Args:
            key: The key to set, used as is.
            value: Any value, stored as its string form. Booleans are stored as "true" or "false".
        """
        if value is True:
            value = "true"
        elif value is False:
            value = "false"
        self._overrides[key] = str(value)

    def as_dict(self) -> dict[str, str]:
        return {key: self.get_string(key) for key in self}

    def _find(self, key: str) -> int | None:
        prefix = key + self._separator
        for i, line in enumerate(self._lines):
            if line.startswith(prefix):
                return i
        return None

    def _format(self, key: str, value: str) -> str:
        return f"{key}{self._separator}{value}"

    def _line_value(self, line: str) -> str:
        tokens = line.split(self._separator, 1)
        if len(tokens) == 2:
            return tokens[1]
        return ""

    def _convert(self, key: str, expected: type, parse: Callable[[str], Any]) -> Any:
        value = self.get_string(key)
        try:
            return parse(value)
        except ValueError as e:
            raise InvalidPropertyTypeError(key, expected) from e

    def __getitem__(self, key: str) -> str:
        return self.get_string(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set_value(key, value)

    def __contains__(self, key: object) -> bool:
        """Keys of # comment lines are not members, as in iteration. get_string() still finds them."""
        if not isinstance(key, str):
            return False
        if key in self._overrides:
            return True
        return not key.startswith("#") and self._find(key) is not None

    def __iter__(self):
        seen = set()
        for line in self._lines:
            if self._separator not in line or line.startswith("#"):
                continue
            key = line.split(self._separator, 1)[0]
            if key not in seen:
                seen.add(key)
                yield key
        for key in self._overrides:
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __str__(self) -> str:
        return str(self.as_dict())

    def __repr__(self) -> str:
        return f"Properties(path={str(self._path)!r}, separator={self._separator!r})"


def _parse_int(value: str) -> int:
    if not _INTEGER.fullmatch(value):
        raise ValueError(f"{value!r} is not a decimal integer")
    return int(value)


def _parse_byte(value: str) -> int:
    number = _parse_int(value.replace(" ", ""))
    if not -128 <= number <= 127:
        raise ValueError(f"{number} is out of the byte range")
    return number

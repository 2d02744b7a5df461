import json
import logging
from dataclasses import dataclass
from pathlib import Path
from collections import defaultdict

logger = logging.getLogger(__name__)


@dataclass
class StoreConfig:
    separator: str = "="
    create_file: bool = True

    def __post_init__(self):
        if not self.separator:
            raise ValueError("The separator must not be empty.")


def _load_jsonc(filepath: Path) -> defaultdict:
    """
    Process a .jsonc file and return a JSON object. Comments are removed.

    Args:
        filepath (Path): The path to the JSON file.
    """
    with filepath.open() as f:
        json_text = f.read()
    lines = [_strip_comment(line) for line in json_text.splitlines()]
    return json.loads("\n".join(lines), object_hook=defaultdict_from_dict)


def _strip_comment(line: str) -> str:
    """Cut a line at the first // that is not inside a JSON string."""
    in_string = False
    escaped = False
    for i, char in enumerate(line):
        if escaped:
            escaped = False
        elif in_string and char == "\\":
            escaped = True
        elif char == '"':
            in_string = not in_string
        elif not in_string and line.startswith("//", i):
            return line[:i]
    return line


def handle_missing_key():
    return None


def defaultdict_from_dict(d: dict):
    """
    Convert a dict to a defaultdict.

    Args:
        d (dict): The dictionary to convert.

    Returns:
        defaultdict: The converted defaultdict.
    """
    dd = defaultdict(handle_missing_key)
    for k, v in d.items():
        if isinstance(v, dict):
            dd[k] = defaultdict_from_dict(v)
        else:
            dd[k] = v
    return dd


def load_config(filepath: Path) -> StoreConfig:
    """
    Load the store configuration from a JSON or JSONC file.

    Only the "properties" object of the file is read, keys missing from it keep their defaults.

    Args:
        filepath (Path): The path to the JSON file.

    Returns:
        StoreConfig: The configuration object.

    Raises:
        ValueError: If the file is not valid JSON, sets an empty separator or a non-boolean create_file.
    """
    data = _load_jsonc(Path(filepath))
    section = data["properties"] or defaultdict(handle_missing_key)
    config = StoreConfig()
    if section["separator"] is not None:
        config.separator = section["separator"]
    if section["create_file"] is not None:
        if not isinstance(section["create_file"], bool):
            raise ValueError(f"create_file must be true or false, not {section['create_file']!r}.")
        config.create_file = section["create_file"]
    if not config.separator:
        raise ValueError("The separator must not be empty.")
    logger.debug("Loaded store config from %s: %s", filepath, config)
    return config


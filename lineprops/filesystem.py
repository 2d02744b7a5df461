from pathlib import Path
import logging

logger = logging.getLogger(__name__)


class TextFile:
    """Plain text file access used by the property store.

    Every method takes the path to operate on, so a single instance can serve any number of stores.
    Errors from the operating system are raised as OSError and never swallowed here."""

    def exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def create(self, path: Path) -> None:
        """
        Create an empty file if nothing exists at the path yet.

        Args:
            path: The file to create.

        Raises:
            OSError: If the file cannot be created, e.g. the parent directory is missing.
        """
        path = Path(path)
        if path.exists():
            return
        logger.info("Creating empty properties file %s.", path)
        path.touch(exist_ok=True)

    def read_all_lines(self, path: Path) -> list[str]:
        """
        Read a text file line by line.

        Args:
            path: The file to read.

        Returns:
            The lines of the file without their terminators. Bytes the platform encoding cannot
            decode are kept as surrogate escapes, so write_all_text() restores them unchanged.

        Raises:
            OSError: If the file cannot be opened or read.
        """
        lines = []
        with open(path, errors="surrogateescape") as f:
            for line in f:
                lines.append(line.removesuffix("\n"))
        logger.debug("Read %s lines from %s.", len(lines), path)
        return lines

    def write_all_text(self, path: Path, content: str) -> None:
        """
        Replace the content of a text file.

        Args:
            path: The file to write.
            content: The full new content.

        Raises:
            OSError: If the file cannot be opened or written. The file may be left truncated.
        """
        with open(path, "w", newline="", errors="surrogateescape") as f:
            f.write(content)
        logger.debug("Wrote %s characters to %s.", len(content), path)

"""Writes the rendered feed to disk."""

import os
import tempfile

from .logging_config import create_execution_logger


def write_feed(path: str, data: bytes, execution_id: str | None = None) -> None:
    """Atomically replace the file at path with data.

    Raises:
        OSError: If the file cannot be written
    """
    logger = create_execution_logger("output", execution_id)
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp = tempfile.mkstemp(dir=directory, prefix=".tagfeed-", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except OSError:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise

    logger.info(f"Wrote {len(data)} bytes to {path}", bytes_written=len(data))

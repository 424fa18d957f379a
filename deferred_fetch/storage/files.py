import asyncio
import logging
import os

from deferred_fetch.core.errors import DirectoryCreationError

logger = logging.getLogger(__name__)

def _make_dirs(path: str) -> None:
    os.makedirs(path, exist_ok=True)

def _write(path: str, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)

async def ensure_directory(path: str) -> None:
    """Create path and its ancestors; an existing directory is fine."""
    try:
        await asyncio.to_thread(_make_dirs, path)
    except OSError as e:
        raise DirectoryCreationError(f"Failed to create download directory: {e}") from e

async def write_text(path: str, content: str) -> None:
    """Create or overwrite path with UTF-8 content."""
    await asyncio.to_thread(_write, path, content)
    logger.debug("Wrote %d characters to %s", len(content), path)

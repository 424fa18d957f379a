import logging
import os
import sys
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_DIR_NAME = "fetch_downloads"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")

def _is_writable(path: str) -> bool:
    return os.access(path, os.W_OK)

def is_sandboxed_environment(cwd: Optional[str] = None) -> bool:
    """
    Guess whether we run inside a restricted host (agent sandbox, container).

    Signals: MCP_HOST is set, NODE_ENV=mcp, or the working directory is the
    filesystem root and cannot be written to.
    """
    cwd = cwd or os.getcwd()
    if os.getenv("MCP_HOST") or os.getenv("NODE_ENV") == "mcp":
        return True
    if cwd == "/":
        return not _is_writable("/")
    return False

def _safe_path(base: str, dir_name: str, home: str) -> str:
    """Join base/dir_name, falling back to home/dir_name when base is unusable."""
    full_path = os.path.join(base, dir_name)
    parent = os.path.dirname(full_path)

    if not os.path.isdir(parent):
        logger.debug("Parent directory %s doesn't exist, using home directory", parent)
        return os.path.join(home, dir_name)
    if not _is_writable(parent):
        logger.debug("Parent directory %s isn't writable, using home directory", parent)
        return os.path.join(home, dir_name)

    return full_path

def resolve_download_dir(
    source: Optional[str],
    *,
    sandboxed: bool,
    home: Optional[str] = None,
    cwd: Optional[str] = None,
) -> str:
    """
    Turn a user supplied download location into an absolute directory path.

    Relative locations are resolved against the working directory, except in
    a sandboxed environment or when running from "/", where they are moved
    under the home directory instead.
    """
    home = home or str(Path.home())
    cwd = cwd or os.getcwd()

    if not source:
        return _safe_path(home, DEFAULT_DIR_NAME, home)

    # Known bad location for sandboxed hosts
    if source == "/fetch_downloads":
        return _safe_path(home, DEFAULT_DIR_NAME, home)

    dir_name: Optional[str] = None
    if "/" not in source and "\\" not in source:
        dir_name = source
        source = f"./{source}"

    is_relative = source.startswith("./") or source.startswith("../")
    if sandboxed and is_relative:
        name = dir_name or os.path.basename(os.path.normpath(source))
        if name in (".", "..", ""):
            name = DEFAULT_DIR_NAME
        logger.debug("Sandboxed environment with relative path %s, using home directory", source)
        return _safe_path(home, name, home)

    if os.path.isabs(source):
        source = os.path.normpath(source)
        return _safe_path(os.path.dirname(source), os.path.basename(source), home)

    if cwd == "/":
        return _safe_path(home, dir_name or DEFAULT_DIR_NAME, home)

    resolved = os.path.normpath(os.path.join(cwd, source))
    return _safe_path(os.path.dirname(resolved), os.path.basename(resolved), home)

def _sandboxed_from_env() -> bool:
    mode = os.getenv("SANDBOXED", "auto").lower()
    if mode == "auto":
        return is_sandboxed_environment()
    return mode in ("1", "true", "yes")

def _download_dir_from_env() -> str:
    source = os.getenv("DOWNLOAD_DIR") or os.getenv("MCP_DOWNLOAD_DIR")
    return resolve_download_dir(source, sandboxed=_sandboxed_from_env())

@dataclass
class Settings:
    # Storage
    DOWNLOAD_DIR: str = field(default_factory=_download_dir_from_env)

    # HTTP
    REQUEST_TIMEOUT: float = field(default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "30")))
    USER_AGENT: str = field(default_factory=lambda: os.getenv("USER_AGENT", DEFAULT_USER_AGENT))

    # Resolve host names before fetching so DNS-based SSRF is caught too
    RESOLVE_HOSTS: bool = field(default_factory=lambda: _env_flag("RESOLVE_HOSTS", "1"))

    # Development
    DEBUG: bool = field(default_factory=lambda: _env_flag("DEBUG"))
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def __post_init__(self):
        self.DOWNLOAD_DIR = os.path.abspath(os.path.expanduser(self.DOWNLOAD_DIR))

@lru_cache
def get_settings() -> Settings:
    return Settings()

def gather_debug_info(settings: Settings) -> Dict[str, Any]:
    """Collect environment and filesystem facts about the download directory."""
    download_dir = settings.DOWNLOAD_DIR
    parent_dir = os.path.dirname(download_dir)

    info: Dict[str, Any] = {
        "environment": {
            "cwd": os.getcwd(),
            "home_dir": str(Path.home()),
            "platform": sys.platform,
            "uid": os.getuid() if hasattr(os, "getuid") else "not available",
            "gid": os.getgid() if hasattr(os, "getgid") else "not available",
            "is_sandboxed": is_sandboxed_environment(),
            "env": {
                "MCP_HOST": os.getenv("MCP_HOST"),
                "DOWNLOAD_DIR": os.getenv("DOWNLOAD_DIR"),
                "MCP_DOWNLOAD_DIR": os.getenv("MCP_DOWNLOAD_DIR"),
            },
        },
        "filesystem": {
            "download_dir": download_dir,
            "download_dir_exists": os.path.isdir(download_dir),
            "download_dir_writable": os.path.isdir(download_dir) and _is_writable(download_dir),
            "parent_dir": parent_dir,
            "parent_dir_exists": os.path.isdir(parent_dir),
            "parent_dir_writable": os.path.isdir(parent_dir) and _is_writable(parent_dir),
        },
    }
    return info

def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    logging.getLogger("httpx").setLevel(logging.WARNING)

"""
Global configuration constants
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigError

# Environment variable holding the local mirror root
ANTHOLOGY_ENV = "ANTHOLOGY"

# Remote anthology
DEFAULT_HOST = "www.aclweb.org"

# Conference manifest shipped with the package
DEFAULT_MANIFEST = Path(__file__).resolve().parent / "conferences.yaml"

# Concurrency caps per phase
VOLUME_WORKERS = 10     # index fetch + parse
CHECK_WORKERS = 10      # existence checks (disk only)
DOWNLOAD_WORKERS = 2    # PDF/bib transfers

# Cache file names inside each volume directory
INDEX_FILENAME = "index.html"
LISTING_FILENAME = "index.html.json"

# Streaming
CHUNK_SIZE = 8192

# User-Agent
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class Settings:
    """Run configuration, built once at startup and passed to the crawler"""
    root_dir: Path
    host: str = DEFAULT_HOST
    manifest_path: Path = DEFAULT_MANIFEST
    volume_workers: int = VOLUME_WORKERS
    check_workers: int = CHECK_WORKERS
    download_workers: int = DOWNLOAD_WORKERS
    timeout: Optional[float] = None

    def validate(self) -> "Settings":
        """
        Check the settings for values that would make a run meaningless

        Returns:
            The settings themselves

        Raises:
            ConfigError: if a value is missing or out of range
        """
        for name in ('volume_workers', 'check_workers', 'download_workers'):
            value = getattr(self, name)
            if value < 1:
                raise ConfigError(f"{name} must be at least 1 (got {value})")

        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError(f"timeout must be positive (got {self.timeout})")

        return self

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        root_dir: Optional[str] = None,
        **overrides,
    ) -> "Settings":
        """
        Build settings from the environment plus explicit overrides

        Args:
            environ: Environment mapping (defaults to os.environ)
            root_dir: Explicit root directory, takes precedence over the environment
            **overrides: Any other Settings field; None values are ignored

        Returns:
            Validated Settings

        Raises:
            ConfigError: if no root directory is configured
        """
        if environ is None:
            environ = os.environ

        root = root_dir or environ.get(ANTHOLOGY_ENV)
        if not root:
            raise ConfigError(f'You must set the "{ANTHOLOGY_ENV}" environment variable')

        fields = {k: v for k, v in overrides.items() if v is not None}
        if 'manifest_path' in fields:
            fields['manifest_path'] = Path(fields['manifest_path'])

        settings = cls(root_dir=Path(root).expanduser(), **fields)
        return settings.validate()

"""Process-level configuration for rep-tally."""

import os
from dataclasses import dataclass
from pathlib import Path

# Default data directory (next to the source checkout)
DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent / "data"


@dataclass(frozen=True)
class Config:
    data_dir: Path = DEFAULT_DATA_DIR
    log_format: str = "text"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, data_dir: Path | None = None) -> "Config":
        """Build a config from REP_TALLY_* environment variables.

        An explicit ``data_dir`` (e.g. from ``--data-dir``) wins over the
        environment.
        """
        if data_dir is None:
            env_dir = os.environ.get("REP_TALLY_DATA_DIR")
            data_dir = Path(env_dir) if env_dir else DEFAULT_DATA_DIR

        return cls(
            data_dir=Path(data_dir),
            log_format=os.environ.get("REP_TALLY_LOG_FORMAT", "text"),
            log_level=os.environ.get("REP_TALLY_LOG_LEVEL", "WARNING").upper(),
        )

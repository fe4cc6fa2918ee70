"""
Runtime configuration read from environment variables (and an optional .env file).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from dotenv import load_dotenv

DEFAULT_REGIONS = ("North", "South", "East", "West")


def load_env(dotenv_path: Optional[Union[str, Path]] = None) -> None:
    """Load variables from a .env file into the process environment."""
    path = Path(dotenv_path) if dotenv_path else None
    if path and path.exists():
        load_dotenv(path)
        return
    load_dotenv()


def _parse_regions(raw: Optional[str]) -> Tuple[str, ...]:
    if raw is None:
        return DEFAULT_REGIONS
    return tuple(r.strip() for r in raw.split(",") if r.strip())


@dataclass(frozen=True)
class Settings:
    regions: Tuple[str, ...] = DEFAULT_REGIONS
    limited_threshold: float = 70.0
    almost_full_threshold: float = 90.0
    seed_file: Optional[Path] = None
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from WFA_* environment variables."""
        seed = os.getenv("WFA_SEED_FILE", "").strip()
        limited = float(os.getenv("WFA_LIMITED_THRESHOLD", "70"))
        almost_full = float(os.getenv("WFA_ALMOST_FULL_THRESHOLD", "90"))
        if limited > almost_full:
            raise ValueError(
                f"WFA_LIMITED_THRESHOLD ({limited}) must not exceed "
                f"WFA_ALMOST_FULL_THRESHOLD ({almost_full})"
            )
        return cls(
            regions=_parse_regions(os.getenv("WFA_REGIONS")),
            limited_threshold=limited,
            almost_full_threshold=almost_full,
            seed_file=Path(seed).expanduser() if seed else None,
            api_host=os.getenv("WFA_API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("WFA_API_PORT", "8000")),
            log_level=os.getenv("WFA_LOG_LEVEL", "INFO").upper(),
        )

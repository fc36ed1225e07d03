from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_DB = 'data/tilepairs.db'
PLAY_DEPTH = 2

_TRUTHY = ('1', 'true', 'yes', 'on')


def _env_flag(name: str, default: str = '0') -> bool:
    return os.getenv(name, default).lower() in _TRUTHY


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f'{name} must be an integer, got {raw!r}') from None


@dataclass(frozen=True)
class Settings:
    db_path: str = DEFAULT_DB
    max_depth: Optional[int] = None
    workers: int = 1
    debug: bool = False


def load_settings() -> Settings:
    """Reads TILEPAIRS_* environment variables."""
    return Settings(
        db_path=os.getenv('TILEPAIRS_DB', DEFAULT_DB),
        max_depth=_env_int('TILEPAIRS_MAX_DEPTH'),
        workers=_env_int('TILEPAIRS_WORKERS') or 1,
        debug=_env_flag('TILEPAIRS_DEBUG'),
    )


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='[%(levelname)s] %(name)s: %(message)s',
    )

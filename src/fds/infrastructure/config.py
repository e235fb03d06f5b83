"""Runtime settings, read from the environment (and a ``.env`` file).

Every setting has a default that works from a source checkout, so the
CLI runs with no configuration at all.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    database_path: Path
    catalog_file: Path
    restaurants_file: Path
    store_timeout: float = 5.0
    log_level: str = "WARNING"


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Build Settings from ``env`` (defaults to ``os.environ`` after .env)."""
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    data_dir = Path(env.get("FDS_DATA_DIR") or _DEFAULT_DATA_DIR)

    raw_timeout = env.get("FDS_STORE_TIMEOUT", "5.0")
    try:
        store_timeout = float(raw_timeout)
    except ValueError as exc:
        raise ValueError(
            f"FDS_STORE_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
        ) from exc

    return Settings(
        data_dir=data_dir,
        database_path=Path(env.get("FDS_DATABASE") or data_dir / "orders.sqlite3"),
        catalog_file=Path(env.get("FDS_CATALOG_FILE") or data_dir / "catalog.json"),
        restaurants_file=Path(
            env.get("FDS_RESTAURANTS_FILE") or data_dir / "restaurants.json"
        ),
        store_timeout=store_timeout,
        log_level=env.get("FDS_LOG_LEVEL", "WARNING").upper(),
    )

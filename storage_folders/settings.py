from __future__ import annotations
"""Application settings persistence helpers."""

from dataclasses import asdict, dataclass
import json
import logging
from pathlib import Path

LOGGER = logging.getLogger(__name__)

STATS_STRATEGY_QUERIES = "queries"
STATS_STRATEGY_LISTING = "listing"
STATS_STRATEGIES = (STATS_STRATEGY_QUERIES, STATS_STRATEGY_LISTING)


@dataclass
class AppSettings:
    """Simple container for persistent engine settings."""

    max_concurrency: int = 8
    stats_strategy: str = STATS_STRATEGY_QUERIES
    strict_prefix: bool = False
    page_size: int = 1000
    last_connection: str = ""


def _positive_int(value: object, default: int) -> int:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


class SettingsStorage:
    """JSON-backed persistence for :class:`AppSettings`."""

    def __init__(self, storage_path: str | Path | None = None):
        if storage_path is None:
            storage_path = Path.home() / ".storage_folders_settings.json"
        self._path = Path(storage_path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AppSettings:
        if not self._path.exists():
            return AppSettings()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            LOGGER.warning("Ignoring unreadable settings file %s", self._path)
            return AppSettings()
        if not isinstance(data, dict):
            return AppSettings()

        strategy = data.get("stats_strategy", AppSettings.stats_strategy)
        if strategy not in STATS_STRATEGIES:
            strategy = AppSettings.stats_strategy
        strict_prefix = data.get("strict_prefix", AppSettings.strict_prefix)
        last_connection = data.get("last_connection", "")
        return AppSettings(
            max_concurrency=_positive_int(data.get("max_concurrency"), AppSettings.max_concurrency),
            stats_strategy=strategy,
            strict_prefix=strict_prefix if isinstance(strict_prefix, bool) else AppSettings.strict_prefix,
            page_size=min(_positive_int(data.get("page_size"), AppSettings.page_size), 1000),
            last_connection=last_connection if isinstance(last_connection, str) else "",
        )

    def save(self, settings: AppSettings) -> None:
        payload = asdict(settings)
        payload["max_concurrency"] = max(int(settings.max_concurrency), 1)
        payload["page_size"] = min(max(int(settings.page_size), 1), 1000)
        if settings.stats_strategy not in STATS_STRATEGIES:
            payload["stats_strategy"] = AppSettings.stats_strategy
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError:
            # Persist best-effort; ignore filesystem issues.
            LOGGER.warning("Could not write settings file %s", self._path)

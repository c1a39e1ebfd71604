"""Configuration management for fingrowth."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

FINGROWTH_HOME = Path(os.environ.get("FINGROWTH_HOME", Path.home() / "fingrowth"))
CONFIG_FILE = FINGROWTH_HOME / "config" / "fingrowth.conf"
DATA_DIR = FINGROWTH_HOME / "data"


@dataclass
class GcalAccount:
    """A Google Calendar account configuration."""

    config_folder: str
    label: str | None = None
    calendars: list[str] = field(default_factory=list)


@dataclass
class Config:
    """fingrowth configuration."""

    data_file: str = ""
    export_dir: str = ""
    timezone: str = "Europe/Bucharest"
    gcal_accounts: list[GcalAccount] = field(default_factory=list)
    google_client_secret_file: str = ""
    timeline_min_gap_seconds: int = 60


def _unquote(value: str) -> str:
    """Handle quoted values with inline comments: "value" # comment"""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def parse_gcal_accounts(value: str) -> list[GcalAccount]:
    """
    Parse the GCAL_ACCOUNTS value.

    JSON format: [{"config_folder": "...", "label": "...", "calendars": [...]}]
    Simple format: "path1:label1,path2:label2"
    """
    accounts = []
    if value.startswith("["):
        try:
            data = json.loads(value)
            for item in data:
                accounts.append(
                    GcalAccount(
                        config_folder=item["config_folder"],
                        label=item.get("label"),
                        calendars=item.get("calendars", []),
                    )
                )
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Failed to parse GCAL_ACCOUNTS JSON: {e}")
        return accounts

    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if ":" in entry:
            folder, label = entry.split(":", 1)
            accounts.append(GcalAccount(folder.strip(), label.strip()))
        else:
            accounts.append(GcalAccount(entry))
    return accounts


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from fingrowth.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "data_file":
                config.data_file = value
            case "export_dir":
                config.export_dir = value
            case "timezone":
                config.timezone = value
            case "gcal_accounts":
                config.gcal_accounts = parse_gcal_accounts(value)
            case "google_client_secret_file":
                config.google_client_secret_file = value
            case "timeline_min_gap_seconds":
                try:
                    config.timeline_min_gap_seconds = int(value)
                except ValueError:
                    logger.warning(f"Invalid TIMELINE_MIN_GAP_SECONDS: {value!r}")

    return config


def data_file_path(config: Config) -> Path:
    if config.data_file:
        return Path(config.data_file).expanduser()
    return DATA_DIR / "fingrowth.json"


def export_dir_path(config: Config) -> Path:
    if config.export_dir:
        return Path(config.export_dir).expanduser()
    return FINGROWTH_HOME / "exports"

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from worker_access.models.config_models import AccessConfig, ColumnLayout

"""Config loader.

Responsibilities:
- Load YAML config/access.yml
- Validate against the packaged JSON schema (unknown keys rejected)
- Apply defaults for everything except spreadsheet_id / file_ids
"""

__all__ = [
    "ConfigError",
    "SCHEMA_PATH",
    "load_config",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or if the
            config data fails validation (missing required keys, wrong types,
            unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> AccessConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    defaults = ColumnLayout()
    cols_raw = data.get("columns", {})
    columns = ColumnLayout(
        hire_date=cols_raw.get("hire_date", defaults.hire_date),
        last_paid=cols_raw.get("last_paid", defaults.last_paid),
        flag=cols_raw.get("flag", defaults.flag),
        column_span=cols_raw.get("column_span", defaults.column_span),
    )
    for name in ("hire_date", "last_paid", "flag"):
        if getattr(columns, name) >= columns.column_span:
            raise ConfigError(
                f"columns.{name}={getattr(columns, name)} is outside column_span={columns.column_span}"
            )

    base = AccessConfig(spreadsheet_id="", file_ids=())
    return AccessConfig(
        spreadsheet_id=data["spreadsheet_id"],
        file_ids=tuple(data["file_ids"]),
        dry_run=data.get("dry_run", base.dry_run),
        destination_start_row=data.get("destination_start_row", base.destination_start_row),
        columns=columns,
        lookback_days=data.get("lookback_days", base.lookback_days),
        date_format=data.get("date_format", base.date_format),
        sheet_index=data.get("sheet_index", base.sheet_index),
        timezone=data.get("timezone", base.timezone),  # "now" の基準タイムゾーン
        service_account_file=data.get("service_account_file", base.service_account_file),
    )

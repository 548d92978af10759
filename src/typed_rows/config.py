"""Configuration for filter compilation and default row construction."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path


@dataclass(frozen=True)
class Config:
    """Settings shared by the filter compiler and the default row builder."""

    param_prefix: str = "filter"  # root key of every emitted filter parameter
    ordering_operators: bool = True  # accept <, <=, >, >= in filters
    foreign_key_placeholder: str = "<{table}_ID>"  # {table} is the upper-cased referenced table
    null_placeholder: str = "NULL"

    def foreign_key_token(self, foreign_table: str) -> str:
        """Return the placeholder for a required foreign-key column."""
        return self.foreign_key_placeholder.format(table=foreign_table.upper())


DEFAULT_CONFIG = Config()

_FIELD_TYPES = {"str": str, "bool": bool}


def config_from_dict(data: dict) -> Config:
    """Build a Config from a mapping.

    Raises:
        ValueError: On unknown keys, values of the wrong type, or a
            foreign-key placeholder that does not format.
    """
    known = {f.name: _FIELD_TYPES[f.type] for f in fields(Config)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"Unknown config keys: {unknown}")

    for key, value in data.items():
        expected = known[key]
        if not isinstance(value, expected):
            raise ValueError(
                f"Config key '{key}' must be {expected.__name__}, got {type(value).__name__}"
            )

    config = Config(**data)
    try:
        config.foreign_key_token("table")
    except (KeyError, IndexError, ValueError) as e:
        raise ValueError(
            f"Invalid foreign_key_placeholder {config.foreign_key_placeholder!r}: {e}"
        ) from e
    return config


def load_config(path: Path | str) -> Config:
    """Load a Config from a JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")
    return config_from_dict(data)

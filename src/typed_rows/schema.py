"""Table and column metadata consumed by the row builders."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from typed_rows.values import COLUMN_TYPE_NAMES, ColumnType


@dataclass(frozen=True)
class ForeignKey:
    """Reference from a column to another table."""

    foreign_table: str
    referred_columns: tuple[str, ...] = ()


@dataclass(frozen=True)
class Column:
    """Metadata of a single table column."""

    name: str
    data_type: ColumnType
    not_null: bool = False
    primary_key: bool = False
    foreign_key: ForeignKey | None = None
    default: str | None = None  # literal or "(expression)" as declared

    @property
    def nullable(self) -> bool:
        """Whether the column accepts an explicit NULL."""
        return not self.not_null and not self.primary_key

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Column:
        type_name = data.get("data_type", "Any")
        if type_name not in COLUMN_TYPE_NAMES:
            raise ValueError(f"Unknown data type for column '{data.get('name')}': {type_name}")

        fk_data = data.get("foreign_key")
        foreign_key = None
        if fk_data is not None:
            foreign_key = ForeignKey(
                foreign_table=fk_data["foreign_table"],
                referred_columns=tuple(fk_data.get("referred_columns", ())),
            )

        return cls(
            name=data["name"],
            data_type=COLUMN_TYPE_NAMES[type_name],
            not_null=bool(data.get("not_null", False)),
            primary_key=bool(data.get("primary_key", False)),
            foreign_key=foreign_key,
            default=data.get("default"),
        )


@dataclass(frozen=True)
class Table:
    """A table's name and its columns in schema order."""

    name: str
    columns: tuple[Column, ...] = field(default_factory=tuple)

    def get_column(self, name: str) -> Column | None:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    @property
    def primary_key_columns(self) -> list[Column]:
        return [c for c in self.columns if c.primary_key]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Table:
        return cls(
            name=data["name"],
            columns=tuple(Column.from_dict(c) for c in data.get("columns", [])),
        )


def load_table(path: Path | str) -> Table:
    """Load table metadata from a JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    with open(path) as f:
        data = json.load(f)

    return Table.from_dict(data)

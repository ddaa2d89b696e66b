"""Record types for transactions and categories."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from typing import Any, Mapping, Optional

import pandas as pd


class TxKind(IntEnum):
    EXPENSE = 0
    INCOME = 1

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: Any) -> "TxKind":
        """Accept a TxKind, its stored integer, or its name/label."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
            if key.isdigit():
                return cls(int(key))
            raise ValueError(f"Unknown transaction kind: {value!r}")
        return cls(int(value))


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    icon: str = "tag"
    color_hex: str = "#6B7280"

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Category":
        return cls(
            id=row["id"],
            name=row["name"],
            icon=row["icon"] or "tag",
            color_hex=row["color_hex"] or "#6B7280",
        )


@dataclass(frozen=True)
class Transaction:
    id: str
    date: pd.Timestamp
    amount: Decimal
    kind: TxKind
    note: Optional[str] = None
    currency_code: str = "USD"
    category_id: Optional[str] = None

    @property
    def signed_amount(self) -> Decimal:
        """Amount with expenses negative, as used for net totals."""
        return self.amount if self.kind is TxKind.INCOME else -self.amount

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Transaction":
        return cls(
            id=row["id"],
            date=pd.Timestamp(row["date"]),
            amount=Decimal(row["amount"]),
            kind=TxKind(int(row["kind"])),
            note=row["note"],
            currency_code=row["currency_code"] or "USD",
            category_id=row["category_id"],
        )

"""Draw records, game layout and column extraction rules."""

import datetime as dt
import numbers
from typing import Iterable, List, Optional, Sequence

import pandas as pd
from pydantic import BaseModel, Field, field_validator

from config.settings import AnalysisSettings, settings as default_settings


class InvalidColumnError(ValueError):
    """Raised when a column identifier is outside the game's column range."""

    def __init__(self, column, column_count: int):
        self.column = column
        self.column_count = column_count
        super().__init__(f"Invalid column {column!r}: expected an integer between 1 and {column_count}")


class Draw(BaseModel):
    """A single historical draw."""
    date: dt.date = Field(..., description="Draw date")
    primary_numbers: List[int] = Field(..., min_length=1, description="Primary numbers in drawn position order")
    secondary_number: int = Field(..., description="Secondary (bonus) number")
    multiplier: Optional[str] = Field(None, description="Multiplier tag")

    model_config = {"frozen": True}


class GameConfig(BaseModel):
    """Layout of a game: primary positions plus one secondary column."""
    primary_count: int = Field(5, ge=1, description="Number of primary positions")
    primary_min: int = Field(1, description="Smallest legal primary number")
    primary_max: int = Field(69, description="Largest legal primary number")
    secondary_min: int = Field(1, description="Smallest legal secondary number")
    secondary_max: int = Field(26, description="Largest legal secondary number")

    model_config = {"frozen": True}

    @field_validator('primary_max')
    @classmethod
    def validate_primary_range(cls, v, info):
        """Validate that the primary range is not empty."""
        if v < info.data.get('primary_min', v):
            raise ValueError('primary_max must be >= primary_min')
        return v

    @field_validator('secondary_max')
    @classmethod
    def validate_secondary_range(cls, v, info):
        """Validate that the secondary range is not empty."""
        if v < info.data.get('secondary_min', v):
            raise ValueError('secondary_max must be >= secondary_min')
        return v

    @property
    def column_count(self) -> int:
        return self.primary_count + 1

    @property
    def secondary_column(self) -> int:
        return self.column_count

    @property
    def columns(self) -> List[int]:
        return list(range(1, self.column_count + 1))

    @property
    def primary_columns(self) -> List[int]:
        return list(range(1, self.primary_count + 1))

    def validate_column(self, column) -> int:
        """Return ``column`` as a plain int if legal, otherwise raise InvalidColumnError.

        Any integral type is accepted (numpy integers included); bools are not.
        """
        if isinstance(column, bool) or not isinstance(column, numbers.Integral):
            raise InvalidColumnError(column, self.column_count)
        if not 1 <= column <= self.column_count:
            raise InvalidColumnError(column, self.column_count)
        return int(column)

    def number_range(self, column: int) -> range:
        """Legal numbers for a column, inclusive of both ends."""
        self.validate_column(column)
        if column == self.secondary_column:
            return range(self.secondary_min, self.secondary_max + 1)
        return range(self.primary_min, self.primary_max + 1)

    def high_threshold(self, column: int) -> int:
        """Numbers strictly above this value are classed as high."""
        return self.number_range(column)[-1] // 2

    def extract(self, draw: Draw, column: int) -> int:
        """Pick the number a column selects out of a draw."""
        if column == self.secondary_column:
            return draw.secondary_number
        try:
            return draw.primary_numbers[column - 1]
        except IndexError:
            raise ValueError(
                f"Draw on {draw.date} has {len(draw.primary_numbers)} primary numbers, "
                f"column {column} needs {self.primary_count}"
            ) from None

    def other_numbers(self, draw: Draw, column: int) -> List[int]:
        """Every number of a draw except the one ``column`` selects."""
        if column == self.secondary_column:
            return list(draw.primary_numbers)
        others = list(draw.primary_numbers)
        del others[column - 1]
        return others + [draw.secondary_number]


def game_from_settings(settings: Optional[AnalysisSettings] = None) -> GameConfig:
    """Build the game layout configured in settings."""
    settings = settings or default_settings
    return GameConfig(
        primary_count=settings.primary_count,
        primary_min=settings.primary_min,
        primary_max=settings.primary_max,
        secondary_min=settings.secondary_min,
        secondary_max=settings.secondary_max
    )


def order_by_recency(draws: Iterable[Draw]) -> List[Draw]:
    """Most recent draw first; equal dates keep later input as more recent."""
    indexed = list(enumerate(draws))
    indexed.sort(key=lambda item: (item[1].date, item[0]), reverse=True)
    return [draw for _, draw in indexed]


def draws_from_dataframe(frame: pd.DataFrame) -> List[Draw]:
    """Convert a frame with date/primary_numbers/secondary_number/multiplier columns."""
    required = ['date', 'primary_numbers', 'secondary_number']
    missing = [name for name in required if name not in frame.columns]
    if missing:
        raise ValueError(f"Missing draw columns: {missing}")

    draws = []
    for row in frame.itertuples(index=False):
        multiplier = getattr(row, 'multiplier', None)
        if multiplier is not None and pd.isna(multiplier):
            multiplier = None
        draws.append(Draw(
            date=pd.Timestamp(row.date).date(),
            primary_numbers=[int(n) for n in row.primary_numbers],
            secondary_number=int(row.secondary_number),
            multiplier=str(multiplier) if multiplier is not None else None
        ))
    return draws


def draws_to_dataframe(draws: Sequence[Draw]) -> pd.DataFrame:
    """Convert draws into a frame, one row per draw in input order."""
    return pd.DataFrame(
        [draw.model_dump() for draw in draws],
        columns=['date', 'primary_numbers', 'secondary_number', 'multiplier']
    )

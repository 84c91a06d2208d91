"""Pydantic models for expense records and the entry form"""
from pydantic import BaseModel, Field, field_validator
from datetime import date as date_type, datetime
from typing import Any, Dict, Optional

# Choices offered by the entry form. The first one is the form default.
CATEGORIES = ("Food", "Transport", "Shopping", "Bills", "Entertainment", "Healthcare", "Other")


def _to_datetime(value: Any) -> Any:
    """Accepts plain dates (or YYYY-MM-DD strings) where a datetime is expected."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date_type):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str) and len(value) == 10:
        return datetime.combine(date_type.fromisoformat(value), datetime.min.time())
    return value


def _wall_clock(value: datetime) -> datetime:
    """Drops any UTC offset, keeping the time as entered. MongoDB hands datetimes back naive."""
    if value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


class Expense(BaseModel):
    """
    Represents a single recorded expense.

    `id` stays None until the store assigns one on insert.
    """
    id: Optional[str] = None
    amount: float
    category: str
    description: str = ""
    date: datetime

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value: Any) -> Any:
        return _to_datetime(value)

    @field_validator("date")
    @classmethod
    def drop_timezone(cls, value: datetime) -> datetime:
        return _wall_clock(value)

    class Config:
        populate_by_name = True
        from_attributes = True

    def to_document(self) -> Dict[str, Any]:
        """Fields as written to MongoDB. The id is left to the database."""
        return self.model_dump(exclude={"id"})

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Expense":
        data = dict(doc)
        if '_id' in data:
            data['id'] = str(data.pop('_id'))
        return cls(**data)


class EntryForm(BaseModel):
    """Raw values of the entry form; amount is kept as typed text."""
    amount: str = ""
    category: str = CATEGORIES[0]
    description: str = ""
    date: datetime = Field(default_factory=datetime.now)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value: Any) -> Any:
        # An untouched date picker means "now"
        if value is None or value == "":
            return datetime.now()
        return _to_datetime(value)

    @field_validator("date")
    @classmethod
    def drop_timezone(cls, value: datetime) -> datetime:
        return _wall_clock(value)

    @classmethod
    def defaults(cls) -> "EntryForm":
        return cls()

from datetime import date, datetime, timedelta, timezone

import pytest
from bson import ObjectId
from pydantic import ValidationError

from models.expense import CATEGORIES, EntryForm, Expense


class TestExpense:
    """Tests for the Expense model."""

    def test_plain_date_becomes_midnight_datetime(self):
        expense = Expense(amount=10.0, category="Food", date=date(2024, 3, 1))

        assert expense.date == datetime(2024, 3, 1)
        assert expense.id is None
        assert expense.description == ""

    def test_iso_date_string_is_accepted(self):
        expense = Expense(amount=10.0, category="Food", date="2024-03-01")

        assert expense.date == datetime(2024, 3, 1)

    def test_time_component_is_kept(self):
        expense = Expense(amount=10.0, category="Food", date=datetime(2024, 3, 1, 18, 45))

        assert expense.date.hour == 18

    def test_utc_offset_is_dropped_keeping_entered_time(self):
        expense = Expense(amount=10.0, category="Food", date="2024-05-04T23:30:00+05:30")

        assert expense.date == datetime(2024, 5, 4, 23, 30)
        assert expense.date.tzinfo is None

    def test_to_document_leaves_out_id(self):
        expense = Expense(id="abc", amount=12.5, category="Bills", description="Power", date=date(2024, 1, 1))

        document = expense.to_document()

        assert document == {
            "amount": 12.5,
            "category": "Bills",
            "description": "Power",
            "date": datetime(2024, 1, 1),
        }

    def test_from_document_maps_object_id(self):
        oid = ObjectId()
        doc = {"_id": oid, "amount": 3.0, "category": "Other", "description": "", "date": datetime(2024, 5, 5)}

        expense = Expense.from_document(doc)

        assert expense.id == str(oid)
        assert expense.amount == 3.0
        assert "_id" in doc

    def test_from_document_missing_field_raises(self):
        with pytest.raises(ValidationError):
            Expense.from_document({"_id": ObjectId(), "category": "Food", "date": datetime(2024, 1, 1)})


class TestEntryForm:
    """Tests for the EntryForm model."""

    def test_defaults(self):
        before = datetime.now()
        form = EntryForm.defaults()

        assert form.amount == ""
        assert form.description == ""
        assert form.category == CATEGORIES[0] == "Food"
        assert form.date >= before

    def test_empty_date_means_now(self):
        form = EntryForm(amount="5", date="")

        assert form.date.date() == date.today()

    def test_utc_offset_is_dropped(self):
        form = EntryForm(amount="5", date=datetime(2024, 5, 4, 1, 0, tzinfo=timezone(timedelta(hours=-8))))

        assert form.date == datetime(2024, 5, 4, 1, 0)

    def test_categories(self):
        assert CATEGORIES == ("Food", "Transport", "Shopping", "Bills", "Entertainment", "Healthcare", "Other")

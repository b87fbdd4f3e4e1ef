"""Tests for the SQL schema declared by the ORM models."""

import importlib

from sqlalchemy import UniqueConstraint

from dailycode.shared.database import MODEL_MODULES, Base


def load_schema():
    for module in MODEL_MODULES:
        importlib.import_module(module)
    return Base.metadata


def unique_columns(table) -> set[tuple[str, ...]]:
    return {
        tuple(column.name for column in constraint.columns)
        for constraint in table.constraints
        if isinstance(constraint, UniqueConstraint)
    }


class TestSchema:
    """Tests for table registration and uniqueness rules."""

    def test_all_tables_registered(self):
        metadata = load_schema()

        assert set(metadata.tables) == {
            "users",
            "problems",
            "user_progress",
            "topic_mastery",
            "daily_recommendations",
        }

    def test_one_row_per_key(self):
        tables = load_schema().tables

        assert ("user_id", "date") in unique_columns(tables["daily_recommendations"])
        assert ("user_id", "topic") in unique_columns(tables["topic_mastery"])
        assert ("user_id", "problem_id") in unique_columns(tables["user_progress"])

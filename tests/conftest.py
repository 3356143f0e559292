"""Shared pytest fixtures and test utilities for Recipe-Sections tests."""

import os
import tempfile
import uuid
from typing import Generator

import pytest

from recipe_sections.services.recipe_service import RecipeService
from recipe_sections.storage.database import Database, reset_db


@pytest.fixture(scope="function")
def temp_db() -> Generator[Database, None, None]:
    """
    Create a temporary SQLite database for testing.

    Yields:
        Database instance with tables created
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    reset_db()

    database = Database(f"sqlite:///{db_path}")
    database.create_tables()

    yield database

    database.drop_tables()
    database.engine.dispose()
    reset_db()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def recipe_service(temp_db):
    """Create a recipe service instance."""
    with temp_db.session() as session:
        yield RecipeService(session)


class TestDataGenerator:
    """Utility class for generating test data."""

    @staticmethod
    def generate_id() -> str:
        """Generate a unique item or section ID."""
        return str(uuid.uuid4())

    @staticmethod
    def ingredient(name: str = None, amount: float = 1, unit: str = "cup", position: int = 0) -> dict:
        """Create ingredient data dictionary."""
        return {
            "id": TestDataGenerator.generate_id(),
            "name": name or f"Ingredient {uuid.uuid4().hex[:8]}",
            "amount": amount,
            "unit": unit,
            "position": position,
        }

    @staticmethod
    def instruction(content: str = None, step: int = 1, position: int = 0) -> dict:
        """Create instruction data dictionary."""
        return {
            "id": TestDataGenerator.generate_id(),
            "step": step,
            "content": content or f"Step content {uuid.uuid4().hex[:8]}",
            "position": position,
        }

    @staticmethod
    def section(name: str = "Section", order: int = 0, items: list = None) -> dict:
        """Create section data dictionary."""
        return {
            "id": TestDataGenerator.generate_id(),
            "name": name,
            "order": order,
            "items": items if items is not None else [],
        }

    @staticmethod
    def flat_recipe(title: str = "Pancakes") -> dict:
        """Create a valid recipe document using flat lists."""
        gen = TestDataGenerator
        return {
            "title": title,
            "description": "Fluffy pancakes",
            "ingredients": [
                gen.ingredient("Flour", 2, "cup", position=0),
                gen.ingredient("Milk", 1.5, "cup", position=1),
                gen.ingredient("Egg", 1, "", position=2),
            ],
            "instructions": [
                gen.instruction("Mix dry ingredients", step=1, position=0),
                gen.instruction("Whisk in milk and egg", step=2, position=1),
            ],
            "ingredient_sections": [],
            "instruction_sections": [],
        }

    @staticmethod
    def sectioned_recipe(title: str = "Layer Cake") -> dict:
        """Create a valid recipe document using sections for both kinds."""
        gen = TestDataGenerator
        return {
            "title": title,
            "ingredients": [],
            "instructions": [],
            "ingredient_sections": [
                gen.section("Cake", 0, [
                    gen.ingredient("Flour", 3, "cup", position=0),
                    gen.ingredient("Sugar", 2, "cup", position=1),
                ]),
                gen.section("Frosting", 1, [
                    gen.ingredient("Butter", 1, "cup", position=0),
                ]),
            ],
            "instruction_sections": [
                gen.section("Bake", 0, [
                    gen.instruction("Mix batter", step=1, position=0),
                    gen.instruction("Bake 30 minutes", step=2, position=1),
                ]),
            ],
        }


def ids(items: list) -> list:
    """IDs of a list of items, in order."""
    return [item["id"] for item in items]


def positions(items: list, key: str = "position") -> list:
    """Rank values of a list of items, in order."""
    return [item[key] for item in items]


@pytest.fixture
def test_data_generator():
    """Provide TestDataGenerator class."""
    return TestDataGenerator


@pytest.fixture
def flat_recipe():
    """A valid flat recipe document."""
    return TestDataGenerator.flat_recipe()


@pytest.fixture
def sectioned_recipe():
    """A valid sectioned recipe document."""
    return TestDataGenerator.sectioned_recipe()

"""Recipe model for storing validated recipe documents."""

from typing import Any, Optional

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from recipe_sections.models.base import Base, TimestampMixin


class Recipe(Base, TimestampMixin):
    """Recipe model holding flat and sectioned ingredient/instruction lists as JSON."""

    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ingredients: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    instructions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    ingredient_sections: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    instruction_sections: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )

    def to_payload(self) -> dict[str, Any]:
        """Return the stored recipe as a plain document payload."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "ingredients": list(self.ingredients or []),
            "instructions": list(self.instructions or []),
            "ingredient_sections": list(self.ingredient_sections or []),
            "instruction_sections": list(self.instruction_sections or []),
        }

    def __repr__(self) -> str:
        return f"<Recipe(id={self.id!r}, title={self.title!r})>"

"""Recipe and RecipeIngredient models."""

from sqlalchemy import Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from backoffice.database import Base
from backoffice.models.mixins import SoftDeleteMixin, TimestampMixin


class Recipe(Base, TimestampMixin, SoftDeleteMixin):
    """Recipe model for storing dish definitions."""

    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    dish_type = Column(String(100), nullable=True)  # "Pizza", "Pasta", "Dessert", ...
    instructions = Column(Text, nullable=True)
    # Cached at save time from inventory prices; not re-derived automatically
    total_cost = Column(Float, nullable=False, default=0.0)

    # Relationships
    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.position",
    )


class RecipeIngredient(Base, TimestampMixin):
    """Ingredient within a recipe."""

    __tablename__ = "recipe_ingredients"

    id = Column(Integer, primary_key=True, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    # Weak reference: lookup only, no foreign key so stock can be removed freely
    stock_item_id = Column(Integer, nullable=True, index=True)
    name = Column(String(255), nullable=False)
    quantity = Column(Float, nullable=False, default=0.0)
    unit = Column(String(20), nullable=True)
    position = Column(Integer, nullable=False, default=0)

    # Relationships
    recipe = relationship("Recipe", back_populates="ingredients")

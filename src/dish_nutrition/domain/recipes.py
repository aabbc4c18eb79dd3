"""Models for recipes supplied by the recipe source."""

from pydantic import BaseModel, ConfigDict, Field


class RecipeIngredient(BaseModel):
    """Single ingredient line of a recipe."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    quantity: str = ""
    standard_quantity: str | None = Field(default=None, alias="standardQuantity")

    @property
    def quantity_phrase(self) -> str:
        """Return the quantity text to standardize, preferring the normalized one."""
        return self.standard_quantity or self.quantity


class Recipe(BaseModel):
    """Recipe payload with a non-empty ingredient list."""

    model_config = ConfigDict(populate_by_name=True)

    dish_name: str = Field(alias="name", min_length=1)
    ingredients: list[RecipeIngredient] = Field(min_length=1)
    dish_type: str | None = Field(default=None, alias="dishType")

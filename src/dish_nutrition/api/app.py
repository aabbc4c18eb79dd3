"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status

from dish_nutrition.app_logging import configure_logging
from dish_nutrition.containers import AppContainer
from dish_nutrition.domain.recipes import Recipe
from dish_nutrition.services.estimation import DishEstimate


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/estimate")
    async def estimate(
        recipe: Recipe, request: Request, serving_grams: float | None = None
    ) -> dict[str, Any]:
        """Estimate per-serving nutrition for a recipe."""
        state_container: AppContainer = request.app.state.container
        logger.info("Estimating nutrition for %s", recipe.dish_name)
        try:
            result = await state_container.estimation_service.estimate_recipe(recipe)
        except Exception as exc:
            logger.exception("Estimation failed for %s", recipe.dish_name)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error estimating nutrition: {exc}",
            ) from exc
        return _format_estimate(recipe.dish_name, result, serving_grams)

    return app


def _format_estimate(
    dish_name: str, result: DishEstimate, serving_grams: float | None
) -> dict[str, Any]:
    """Render an estimate as a JSON-friendly payload."""
    per_serving = result.per_serving(serving_grams)
    household_measure = (
        result.serving.household_measure
        if serving_grams is None
        else f"{per_serving.serving_size_grams:g} g"
    )
    return {
        "dish_name": dish_name,
        "dish_type": result.dish_type,
        "serving_size": {
            "household_measure": household_measure,
            "grams": per_serving.serving_size_grams,
        },
        "estimated_nutrition_per_serving": {
            "calories": per_serving.calories,
            "protein": per_serving.protein,
            "carbs": per_serving.carbs,
            "fat": per_serving.fat,
            "fiber": per_serving.fiber,
        },
        "totals": asdict(result.totals),
        "ingredients_used": [asdict(item) for item in result.processed],
    }

"""ASGI application for Mise."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from datetime import date, datetime
from time import perf_counter
from typing import Any, Optional, Union
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from mise import __version__, metrics
from mise.clock import utcnow
from mise.config import Settings, get_settings
from mise.deferred import DeferredRunner
from mise.errors import InvalidInputError, KitchenError, NotFoundError, SheetClosedError
from mise.logging_utils import configure_logging as configure_app_logging
from mise.models.inventory import InventoryItem
from mise.models.meal import MealAdjustmentReason, MealLog
from mise.models.prep import (
    AdjustmentReason,
    IngredientShortage,
    PrepSheet,
    PrepSheetSummary,
    RecipeTaskGroup,
)
from mise.models.recipe import Recipe
from mise.reconcile.deriver import summarize_task_groups
from mise.reconcile.tracker import summarize_prep_sheet
from mise.server import deps
from mise.store import prep_sheets

logger = logging.getLogger(__name__)


def _configure_logging(settings: Settings) -> None:
    configure_app_logging(settings.log_level, settings.log_format, [settings.api_token or ""])


def _error_status(exc: KitchenError) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, SheetClosedError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, InvalidInputError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_400_BAD_REQUEST


def _superseded(key: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"{key} was superseded by a newer request",
    )


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="Mise Kitchen Operations", version=__version__)
    application.state.deferred = DeferredRunner(delay=settings.simulated_latency_seconds)
    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("mise.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details and record request metrics."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            method = request.method
            path = request.url.path
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            metrics.REQUEST_COUNT.labels(
                method=method,
                path=path,
                status=str(response.status_code),
            ).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        log_kwargs: dict[str, Any] = {}
        if request_id := getattr(request.state, "request_id", None):
            log_kwargs["extra"] = {"request_id": request_id}
        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": [{key: str(value) if key == "ctx" else value for key, value in error.items()} for error in exc.errors()]},
        )

    @application.exception_handler(KitchenError)
    async def kitchen_error_handler(request: Request, exc: KitchenError):
        code = _error_status(exc)
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, code, exc)
        return JSONResponse(status_code=code, content={"detail": str(exc)})

    @application.get("/health", summary="Liveness probe")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    # Inventory

    @application.get(
        "/inventory",
        response_model=list[InventoryItem],
        summary="List inventory",
    )
    def inventory_list(
        q: Optional[str] = Query(default=None, description="Case-insensitive name filter."),
        low_stock: bool = Query(default=False, alias="lowStock"),
        provider: deps.InventoryProvider = Depends(deps.get_inventory_provider),
    ) -> list[InventoryItem]:
        return provider(q, low_stock)

    @application.get(
        "/inventory/expiring",
        response_model=list[InventoryItem],
        summary="List items expiring soon",
    )
    def inventory_expiring(
        days: Optional[int] = Query(default=None, ge=0),
        provider: deps.ExpiringInventoryProvider = Depends(deps.get_expiring_inventory_provider),
    ) -> list[InventoryItem]:
        return provider(None, days)

    @application.post(
        "/inventory",
        response_model=InventoryItem,
        status_code=status.HTTP_201_CREATED,
        summary="Create inventory item",
    )
    def inventory_create(
        payload: InventoryCreateRequest,
        auth: None = Depends(deps.require_api_token),
        creator: deps.InventoryCreator = Depends(deps.get_inventory_creator),
    ) -> InventoryItem:
        create_payload = payload.model_dump()
        logger.debug("Creating inventory item payload=%s", create_payload)
        return creator(create_payload)

    @application.put(
        "/inventory/{item_id}",
        response_model=InventoryItem,
        summary="Update inventory item",
    )
    def inventory_update(
        item_id: str,
        payload: InventoryUpdateRequest,
        auth: None = Depends(deps.require_api_token),
        updater: deps.InventoryUpdater = Depends(deps.get_inventory_updater),
    ) -> InventoryItem:
        update_payload = payload.model_dump(exclude_unset=True)
        logger.debug("Updating inventory item %s with payload=%s", item_id, update_payload)
        return updater(item_id, update_payload)

    @application.delete(
        "/inventory/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete inventory item",
    )
    def inventory_delete(
        item_id: str,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.InventoryDeleter = Depends(deps.get_inventory_deleter),
    ) -> None:
        deleter(item_id)

    # Recipes

    @application.get("/recipes", response_model=list[Recipe], summary="List recipes")
    def recipes_list(
        q: Optional[str] = Query(default=None, description="Match on name or category."),
        provider: deps.RecipeProvider = Depends(deps.get_recipe_provider),
    ) -> list[Recipe]:
        return provider(q)

    @application.post(
        "/recipes",
        response_model=Recipe,
        status_code=status.HTTP_201_CREATED,
        summary="Create recipe",
    )
    def recipes_create(
        payload: RecipeCreateRequest,
        auth: None = Depends(deps.require_api_token),
        creator: deps.RecipeCreator = Depends(deps.get_recipe_creator),
    ) -> Recipe:
        return creator(payload.model_dump())

    @application.put("/recipes/{recipe_id}", response_model=Recipe, summary="Replace recipe")
    def recipes_update(
        recipe_id: str,
        payload: RecipeUpdateRequest,
        auth: None = Depends(deps.require_api_token),
        updater: deps.RecipeUpdater = Depends(deps.get_recipe_updater),
    ) -> Recipe:
        return updater(recipe_id, payload.model_dump(exclude_unset=True))

    @application.delete(
        "/recipes/{recipe_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete recipe",
    )
    def recipes_delete(
        recipe_id: str,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.RecipeDeleter = Depends(deps.get_recipe_deleter),
    ) -> None:
        deleter(recipe_id)

    # Prep sheet

    def _current_sheet(provider: deps.PrepSheetProvider) -> PrepSheet:
        sheet = provider()
        if sheet is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No prep sheet")
        return sheet

    @application.get("/prep-sheet", response_model=PrepSheet, summary="Current prep sheet")
    def prep_sheet_get(
        provider: deps.PrepSheetProvider = Depends(deps.get_prep_sheet_provider),
    ) -> PrepSheet:
        return _current_sheet(provider)

    @application.get(
        "/prep-sheet/summary",
        response_model=PrepSheetSummary,
        summary="Prep sheet progress",
    )
    def prep_sheet_summary(
        provider: deps.PrepSheetProvider = Depends(deps.get_prep_sheet_provider),
    ) -> PrepSheetSummary:
        return summarize_prep_sheet(_current_sheet(provider))

    @application.get(
        "/prep-sheet/groups",
        response_model=list[RecipeTaskGroup],
        summary="Prep tasks grouped by recipe",
    )
    def prep_sheet_groups(
        provider: deps.PrepSheetProvider = Depends(deps.get_prep_sheet_provider),
    ) -> list[RecipeTaskGroup]:
        return summarize_task_groups(_current_sheet(provider).tasks)

    @application.get(
        "/prep-sheet/shortages",
        response_model=list[IngredientShortage],
        summary="Ingredients the open prep tasks need beyond current stock",
    )
    def prep_sheet_shortages() -> list[IngredientShortage]:
        return prep_sheets.prep_sheet_shortages()

    @application.post(
        "/prep-sheet",
        response_model=PrepSheet,
        status_code=status.HTTP_201_CREATED,
        summary="Generate prep sheet from recipes",
    )
    def prep_sheet_generate(
        payload: PrepSheetGenerateRequest,
        auth: None = Depends(deps.require_api_token),
    ) -> PrepSheet:
        overrides = {
            (entry.recipe_id, entry.ingredient_name): entry.minutes
            for entry in payload.estimated_times
        }
        return prep_sheets.generate_prep_sheet(
            payload.batches,
            sheet_date=payload.sheet_date,
            estimated_times=overrides,
            ingredient_minutes=payload.ingredient_minutes,
        )

    @application.put(
        "/prep-sheet/tasks/{task_id}/completion",
        response_model=PrepSheet,
        summary="Mark a prep task complete or incomplete",
    )
    def prep_task_completion(
        task_id: str,
        payload: TaskCompletionRequest,
        auth: None = Depends(deps.require_api_token),
    ) -> PrepSheet:
        return prep_sheets.set_prep_task_completion(
            task_id, payload.is_completed, payload.completed_quantity
        )

    @application.put(
        "/prep-sheet/tasks/{task_id}/time",
        response_model=PrepSheet,
        summary="Update a prep task's estimated time",
    )
    def prep_task_time(
        task_id: str,
        payload: TaskTimeRequest,
        auth: None = Depends(deps.require_api_token),
    ) -> PrepSheet:
        return prep_sheets.update_prep_task_time(task_id, payload.estimated_time)

    @application.post(
        "/prep-sheet/tasks/{task_id}/adjustments",
        response_model=PrepSheet,
        status_code=status.HTTP_201_CREATED,
        summary="Record a quantity adjustment on a prep task",
    )
    def prep_task_adjustment(
        task_id: str,
        payload: TaskAdjustmentRequest,
        auth: None = Depends(deps.require_api_token),
    ) -> PrepSheet:
        return prep_sheets.add_prep_task_adjustment(
            task_id,
            payload.actual_quantity,
            payload.reason,
            payload.notes,
            expected_quantity=payload.expected_quantity,
        )

    @application.post(
        "/prep-sheet/tasks/{task_id}/notes",
        response_model=PrepSheet,
        status_code=status.HTTP_201_CREATED,
        summary="Attach a note to a prep task",
    )
    def prep_task_note(
        task_id: str,
        payload: TaskNoteRequest,
        auth: None = Depends(deps.require_api_token),
    ) -> PrepSheet:
        return prep_sheets.add_prep_task_note(task_id, payload.content, payload.author, payload.is_urgent)

    @application.post(
        "/prep-sheet/save",
        response_model=PrepSheetSaveResponse,
        summary="Reconcile completed tasks into inventory",
    )
    async def prep_sheet_save(
        auth: None = Depends(deps.require_api_token),
        runner: DeferredRunner = Depends(deps.get_deferred_runner),
    ) -> PrepSheetSaveResponse:
        outcome = await runner.run("prep-sheet", prep_sheets.save_prep_sheet)
        if not outcome.completed:
            raise _superseded("prep sheet save")
        result = outcome.value
        return PrepSheetSaveResponse(
            saved_tasks=len(result.reconciled_tasks),
            reconciled_task_ids=[task.id for task in result.reconciled_tasks],
            sheet=result.sheet,
            inventory=result.inventory,
        )

    @application.post(
        "/prep-sheet/reset",
        response_model=Optional[PrepSheet],
        summary="Revert prep sheet and inventory to the loaded state",
    )
    async def prep_sheet_reset(
        auth: None = Depends(deps.require_api_token),
        runner: DeferredRunner = Depends(deps.get_deferred_runner),
    ) -> Optional[PrepSheet]:
        outcome = await runner.run("prep-sheet", prep_sheets.reset_prep_sheet)
        if not outcome.completed:
            raise _superseded("prep sheet reset")
        return outcome.value

    @application.post(
        "/prep-sheet/complete",
        response_model=PrepSheet,
        summary="Close the prep sheet",
    )
    def prep_sheet_complete(auth: None = Depends(deps.require_api_token)) -> PrepSheet:
        return prep_sheets.close_prep_sheet()

    # Meal logs

    @application.get("/meal-logs", response_model=list[MealLog], summary="List meal logs")
    def meal_logs_list(
        q: Optional[str] = Query(default=None, description="Match on recipe name or notes."),
        order: str = Query(default="newest", pattern="^(newest|oldest)$"),
        provider: deps.MealLogProvider = Depends(deps.get_meal_log_provider),
    ) -> list[MealLog]:
        return provider(q, order == "newest")

    @application.post(
        "/meal-logs",
        response_model=MealLog,
        status_code=status.HTTP_201_CREATED,
        summary="Log servings of a recipe",
    )
    async def meal_logs_create(
        payload: MealLogCreateRequest,
        auth: None = Depends(deps.require_api_token),
        creator: deps.MealLogCreator = Depends(deps.get_meal_log_creator),
        runner: DeferredRunner = Depends(deps.get_deferred_runner),
    ) -> MealLog:
        create_payload = payload.model_dump()
        if create_payload["logged_at"] is None:
            create_payload["logged_at"] = utcnow()
        outcome = await runner.run(f"meal-log:{uuid4().hex}", lambda: creator(create_payload))
        if not outcome.completed:
            raise _superseded("meal log")
        return outcome.value

    @application.post(
        "/meal-logs/{log_id}/adjustments",
        response_model=MealLog,
        status_code=status.HTTP_201_CREATED,
        summary="Record a served-count adjustment",
    )
    def meal_logs_adjust(
        log_id: str,
        payload: MealLogAdjustRequest,
        auth: None = Depends(deps.require_api_token),
        adjuster: deps.MealLogAdjuster = Depends(deps.get_meal_log_adjuster),
    ) -> MealLog:
        return adjuster(log_id, payload.model_dump())

    @application.delete(
        "/meal-logs/{log_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete a meal log",
    )
    def meal_logs_delete(
        log_id: str,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.MealLogDeleter = Depends(deps.get_meal_log_deleter),
    ) -> None:
        deleter(log_id)

    return application


class InventoryCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    quantity: float = Field(ge=0)
    unit: str = Field(min_length=1, max_length=64)
    alert_level: float = Field(default=0.0, ge=0, alias="alertLevel")
    expiry_date: Optional[date] = Field(default=None, alias="expiryDate")

    model_config = ConfigDict(populate_by_name=True)


class InventoryUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    quantity: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=64)
    alert_level: Optional[float] = Field(default=None, ge=0, alias="alertLevel")
    expiry_date: Optional[date] = Field(default=None, alias="expiryDate")

    model_config = ConfigDict(populate_by_name=True)


class RecipeIngredientPayload(BaseModel):
    id: Optional[str] = Field(default=None)
    name: str = Field(min_length=1, max_length=255)
    quantity: float = Field(ge=0)
    unit: str = Field(min_length=1, max_length=64)


class RecipeCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=2000)
    category: str = Field(default="", max_length=255)
    ingredients: list[RecipeIngredientPayload] = Field(min_length=1)


class RecipeUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    category: Optional[str] = Field(default=None, max_length=255)
    ingredients: Optional[list[RecipeIngredientPayload]] = Field(default=None, min_length=1)


class TaskTimeOverride(BaseModel):
    recipe_id: str = Field(alias="recipeId")
    ingredient_name: str = Field(alias="ingredientName")
    minutes: int = Field(gt=0)

    model_config = ConfigDict(populate_by_name=True)


class PrepSheetGenerateRequest(BaseModel):
    sheet_date: Optional[date] = Field(default=None, alias="date")
    batches: dict[str, float] = Field(min_length=1)
    estimated_times: list[TaskTimeOverride] = Field(default_factory=list, alias="estimatedTimes")
    ingredient_minutes: dict[str, PositiveInt] = Field(default_factory=dict, alias="ingredientMinutes")

    model_config = ConfigDict(populate_by_name=True)


class TaskCompletionRequest(BaseModel):
    is_completed: bool = Field(alias="isCompleted")
    completed_quantity: Optional[float] = Field(default=None, ge=0, alias="completedQuantity")

    model_config = ConfigDict(populate_by_name=True)


class TaskTimeRequest(BaseModel):
    estimated_time: Union[int, float, str] = Field(alias="estimatedTime")

    model_config = ConfigDict(populate_by_name=True)


class TaskAdjustmentRequest(BaseModel):
    actual_quantity: float = Field(ge=0, alias="actualQuantity")
    expected_quantity: Optional[float] = Field(default=None, ge=0, alias="expectedQuantity")
    reason: AdjustmentReason = Field(default="physical_count")
    notes: str = Field(default="", max_length=1000)

    model_config = ConfigDict(populate_by_name=True)


class TaskNoteRequest(BaseModel):
    content: str = Field(min_length=1, max_length=1000)
    author: str = Field(default="staff", min_length=1, max_length=255)
    is_urgent: bool = Field(default=False, alias="isUrgent")

    model_config = ConfigDict(populate_by_name=True)


class PrepSheetSaveResponse(BaseModel):
    saved_tasks: int = Field(alias="savedTasks")
    reconciled_task_ids: list[str] = Field(alias="reconciledTaskIds")
    sheet: PrepSheet
    inventory: list[InventoryItem]

    model_config = ConfigDict(populate_by_name=True)


class MealLogCreateRequest(BaseModel):
    recipe_id: str = Field(alias="recipeId")
    quantity: int = Field(default=1, ge=1)
    logged_at: Optional[datetime] = Field(default=None, alias="date")
    notes: Optional[str] = Field(default=None, max_length=1000)

    model_config = ConfigDict(populate_by_name=True)


class MealLogAdjustRequest(BaseModel):
    remaining_count: float = Field(ge=0, alias="remainingCount")
    reason: MealAdjustmentReason = Field(default="physical_count")
    notes: Optional[str] = Field(default=None, max_length=1000)

    model_config = ConfigDict(populate_by_name=True)


app = create_app()

__all__ = ["app", "create_app"]

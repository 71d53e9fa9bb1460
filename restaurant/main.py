"""
FastAPI Application Entry Point

Restaurant order tracking service. Waitstaff add meals to tables, look up
outstanding orders and remove the ones that were served.

Endpoints:
    - PUT /table/{table}/meal/{meal}: Add a meal to a table
    - GET /table/{table}/meal/{meal}: Orders of one meal at a table
    - GET /table/{table}/orders: All outstanding orders of a table
    - GET /order/{id}: Fetch one order
    - DELETE /order/{id}: Remove an order
    - GET /meals: Meal catalog
    - GET /health: System health check

Run with:
    uvicorn restaurant.main:app --port 9000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Path, Request
from fastapi.responses import JSONResponse, Response

from restaurant.catalog import MealCatalog, build_default_catalog
from restaurant.core.config import Settings, get_settings, setup_logging
from restaurant.core.exceptions import (
    InvalidInput,
    NotFound,
    RestaurantError,
    StorageFailure,
)
from restaurant.orders import new_order, utc_now
from restaurant.schemas import (
    ErrorResponse,
    GetOrderResponse,
    GetOrdersResponse,
    HealthResponse,
    MealResponse,
    MealsResponse,
    OrderResponse,
    PutOrderResponse,
)
from restaurant.services.storage import BaseOrderStore, create_order_store

logger = logging.getLogger(__name__)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_order_store(request: Request) -> BaseOrderStore:
    """Order store created for this application instance."""
    return request.app.state.store


def get_catalog(request: Request) -> MealCatalog:
    """Meal catalog created for this application instance."""
    return request.app.state.catalog


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[MealCatalog] = None,
    store: Optional[BaseOrderStore] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The catalog and the order store are constructed once here and shared
    by every request handler through app.state.

    Args:
        settings: Application settings (defaults to get_settings())
        catalog: Meal catalog (defaults to the standard menu)
        store: Order store (defaults to one built from settings)

    Returns:
        FastAPI: Configured application
    """
    settings = settings or get_settings()
    catalog = catalog or build_default_catalog()
    store = store or create_order_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application startup and shutdown events.
        """
        # Startup
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {settings.app_name}")
        logger.info(f"   Version: {settings.app_version}")
        logger.info(f"   Environment: {settings.env_mode.value}")
        logger.info(f"   Debug: {settings.debug}")
        logger.info("=" * 60)

        await store.initialize()
        logger.info(f"✅ Order store ready ({store.provider_name})")
        logger.info(f"✅ Meal catalog loaded ({len(catalog)} meals)")

        yield  # Application runs

        # Shutdown
        logger.info("Shutting down...")
        await store.close()
        logger.info("✅ Cleanup complete")

    app = FastAPI(
        title=settings.app_name,
        description="Track which meals each table ordered and when they will be ready.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.catalog = catalog
    app.state.store = store

    register_routes(app)
    register_exception_handlers(app)
    return app


# =============================================================================
# ROUTES
# =============================================================================

def register_routes(app: FastAPI) -> None:

    @app.get("/", tags=["Root"])
    async def root(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
        """API root with navigation links."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "environment": settings.env_mode.value,
            "documentation": "/docs",
            "health": "/health",
        }

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="System Health Check",
    )
    async def health_check(
        store: BaseOrderStore = Depends(get_order_store),
    ) -> HealthResponse:
        """Verify the order store is reachable."""
        healthy = await store.health_check()
        return HealthResponse(
            status="operational" if healthy else "degraded",
            database="healthy" if healthy else "unhealthy",
            timestamp=utc_now(),
        )

    @app.get(
        "/meals",
        response_model=MealsResponse,
        tags=["Meals"],
        summary="List Meal Catalog",
    )
    async def list_meals(catalog: MealCatalog = Depends(get_catalog)) -> MealsResponse:
        """Return every meal the kitchen can prepare."""
        return MealsResponse(
            meals=[MealResponse.model_validate(meal) for meal in catalog.list_all()]
        )

    @app.put(
        "/table/{table_id}/meal/{meal_id}",
        response_model=PutOrderResponse,
        responses=ERROR_RESPONSES,
        tags=["Orders"],
        summary="Add Meal To Table",
    )
    async def add_meal_to_table(
        table_id: int = Path(..., ge=0),
        meal_id: int = Path(..., ge=0),
        catalog: MealCatalog = Depends(get_catalog),
        store: BaseOrderStore = Depends(get_order_store),
    ) -> PutOrderResponse:
        """
        Record that a table ordered a meal.

        The meal is resolved against the catalog first; unknown meals are
        rejected without touching the store.
        """
        meal = catalog.lookup(meal_id)
        if meal is None:
            raise InvalidInput(f"Meal #{meal_id} is not on the menu")

        order = await store.add_order(new_order(table_id, meal))
        logger.info(f"Order #{order.id}: table {table_id} ordered {meal.name}")

        return PutOrderResponse(order=OrderResponse.model_validate(order))

    @app.get(
        "/table/{table_id}/meal/{meal_id}",
        response_model=GetOrdersResponse,
        responses=ERROR_RESPONSES,
        tags=["Orders"],
        summary="Get Meal Orders Of Table",
    )
    async def get_meal_orders_for_table(
        table_id: int = Path(..., ge=0),
        meal_id: int = Path(..., ge=0),
        store: BaseOrderStore = Depends(get_order_store),
    ) -> GetOrdersResponse:
        """Outstanding orders of one meal at a table, oldest first."""
        orders = await store.get_meal_orders_for_table(table_id, meal_id)
        return GetOrdersResponse(
            orders=[OrderResponse.model_validate(order) for order in orders]
        )

    @app.get(
        "/table/{table_id}/orders",
        response_model=GetOrdersResponse,
        responses=ERROR_RESPONSES,
        tags=["Orders"],
        summary="Get Orders Of Table",
    )
    async def get_orders_for_table(
        table_id: int = Path(..., ge=0),
        store: BaseOrderStore = Depends(get_order_store),
    ) -> GetOrdersResponse:
        """All outstanding orders of a table, oldest first."""
        orders = await store.get_orders_for_table(table_id)
        return GetOrdersResponse(
            orders=[OrderResponse.model_validate(order) for order in orders]
        )

    @app.get(
        "/order/{order_id}",
        response_model=GetOrderResponse,
        responses=ERROR_RESPONSES,
        tags=["Orders"],
    )
    async def get_order(
        order_id: int = Path(..., ge=0),
        store: BaseOrderStore = Depends(get_order_store),
    ) -> GetOrderResponse:
        """Get a specific order by ID."""
        order = await store.get_order(order_id)
        if order is None:
            raise NotFound(f"Order #{order_id} not found")

        return GetOrderResponse(order=OrderResponse.model_validate(order))

    @app.delete(
        "/order/{order_id}",
        status_code=204,
        response_class=Response,
        responses=ERROR_RESPONSES,
        tags=["Orders"],
    )
    async def delete_order(
        order_id: int = Path(..., ge=0),
        store: BaseOrderStore = Depends(get_order_store),
    ) -> Response:
        """Remove a served or cancelled order."""
        if not await store.delete_order(order_id):
            raise NotFound(f"Order #{order_id} not found")

        logger.info(f"Order #{order_id} removed")
        return Response(status_code=204)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(RestaurantError)
    async def restaurant_error_handler(request: Request, exc: RestaurantError) -> JSONResponse:
        """Render domain errors as ErrorResponse bodies."""
        if isinstance(exc, StorageFailure):
            debug = request.app.state.settings.debug
            logger.error(f"{request.method} {request.url.path}: {exc} ({exc.detail})")
            body = ErrorResponse(
                error=exc.error,
                detail=f"{exc.message}: {exc.detail}" if debug else exc.message,
            )
        else:
            logger.warning(f"{request.method} {request.url.path}: {exc}")
            body = ErrorResponse(error=exc.error, detail=exc.message)

        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all exception handler."""
        logger.exception(f"Unhandled exception: {exc}")

        debug = request.app.state.settings.debug
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal Server Error",
                "detail": str(exc) if debug else "An unexpected error occurred",
            },
        )


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

setup_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)

#!/usr/bin/env python3
"""
Main FastAPI application for the inventory backend.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Config
from .routers import (chatbot, inventory_alerts, products, purchase_orders, reports, returns, sales,
                      suppliers, users)
from ..data.database import create_tables
from ..utils.errors import InventoryError
from ..utils.logger import get_logger

logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    logger.info("Inventory API started")
    yield
    logger.info("Inventory API stopped")


# Initialize FastAPI app
app = FastAPI(
    title="Inventory Management API",
    description="Inventory, sales and purchasing backend with a chat assistant",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "UP", "timestamp": datetime.now(timezone.utc).isoformat()}


app.include_router(products.router, prefix="/products", tags=["products"])
app.include_router(products.categories_router, prefix="/product-categories", tags=["products"])
app.include_router(suppliers.router, prefix="/suppliers", tags=["suppliers"])
app.include_router(sales.router, prefix="/sales", tags=["sales"])
app.include_router(purchase_orders.router, prefix="/purchase-orders", tags=["purchase-orders"])
app.include_router(returns.router, prefix="/returns", tags=["returns"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(inventory_alerts.router, prefix="/inventory-alerts", tags=["inventory-alerts"])
app.include_router(reports.router, prefix="/reports", tags=["reports"])
app.include_router(reports.dashboard_router, prefix="/dashboard", tags=["dashboard"])
app.include_router(reports.billing_router, prefix="/billing", tags=["billing"])
app.include_router(chatbot.router, prefix="/chatbot", tags=["chatbot"])


if __name__ == "__main__":
    import uvicorn
    Config.debug_print()
    uvicorn.run(app, host="0.0.0.0", port=8000)

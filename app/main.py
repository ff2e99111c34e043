# app/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import uvicorn

from app.api.routers import health, auth, categories, products, cart, orders
from app.data.database import Base, init_db
from app.domain.errors import CatalogConsistencyError
from app.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Inicjalizacja bazy danych...")
    try:
        init_db()
    except Exception as e:
        logger.error(f"Nie udalo sie utworzyc tabel: {e}")
        raise
    logger.info(f"Tabele: {list(Base.metadata.tables.keys())}")
    yield


async def validation_error_handler(request: Request, exc: RequestValidationError):
    #frontend oczekuje 400 dla blednych danych, nie 422
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


async def consistency_error_handler(request: Request, exc: CatalogConsistencyError):
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Cart references a missing product"})


async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"{request.method} {request.url.path}: blad bazy: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Storage failure"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Marketplace Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(CatalogConsistencyError, consistency_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(categories.router)
    app.include_router(products.router)
    app.include_router(cart.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)

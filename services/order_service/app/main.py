from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from libs.orders_common.config import SEED_SAMPLE_DATA
from libs.orders_common.logging import bind_request_id, configure_logging, get_logger
from services.order_service.app.api.routes import router, get_order_service
from services.order_service.data_loader import load_sample_data
from services.order_service.init_services import order_cache, order_service, order_store
from services.order_service.order_cache import RedisOrderCache
from services.order_service.store_sql import SqlOrderStore

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    configure_logging()
    if isinstance(order_store, SqlOrderStore):
        order_store.create_schema()
    if isinstance(order_cache, RedisOrderCache) and not order_cache.ping():
        logger.warning("Redis cache is not reachable, reads will fall through to the store")
    if SEED_SAMPLE_DATA:
        load_sample_data(order_store)
    logger.info("Orders service started", cache=type(order_cache).__name__ if order_cache is not None else None)
    yield
    # Shutdown
    if isinstance(order_store, SqlOrderStore):
        order_store.engine.dispose()


app = FastAPI(title="Orders Microservice", lifespan=lifespan)
app.include_router(router)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = bind_request_id(request.headers.get("X-Request-ID"))
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Bad input is a client error (400), not FastAPI's default 422
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


app.dependency_overrides[get_order_service] = lambda: order_service

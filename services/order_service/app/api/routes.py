from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import PlainTextResponse

from libs.orders_common.logging import get_logger
from libs.orders_common.models import OrderView
from services.order_service.app.api.models import OrderRequest
from services.order_service.order_cache import CacheError
from services.order_service.order_service import NotFoundError, OrderService, ValidationError

router = APIRouter()
logger = get_logger(__name__)


def get_order_service() -> OrderService:
    """
    This should be overridden in app/main.py via app.dependency_overrides
    so every request shares the same store + cache.
    """
    raise RuntimeError("OrderService dependency is not configured")


@router.post("/orders", status_code=201, response_model=OrderView)
def create_order(request: OrderRequest, service: OrderService = Depends(get_order_service)):
    logger.info("Received request to create order", customer_name=request.customer_name)
    try:
        return service.create_order(request.customer_name, request.amount)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CacheError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/orders", response_model=List[OrderView])
def get_all_orders(service: OrderService = Depends(get_order_service)):
    return service.get_all_orders()


@router.get("/orders/health", response_class=PlainTextResponse)
def health_check():
    return "Orders Microservice is running!"


@router.get("/orders/search/customer", response_model=List[OrderView])
def search_by_customer(customer_name: str = Query(..., alias="customerName"),
                       service: OrderService = Depends(get_order_service)):
    return service.search_by_customer_name(customer_name)


@router.get("/orders/search/amount", response_model=List[OrderView])
def search_by_amount(min_amount: Optional[Decimal] = Query(None, alias="minAmount"),
                     max_amount: Optional[Decimal] = Query(None, alias="maxAmount"),
                     service: OrderService = Depends(get_order_service)):
    try:
        return service.search_by_amount_range(min_amount, max_amount)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/orders/{order_id}", response_model=OrderView)
def get_order(order_id: int, service: OrderService = Depends(get_order_service)):
    try:
        return service.get_order_by_id(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CacheError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.put("/orders/{order_id}", response_model=OrderView)
def update_order(order_id: int, request: OrderRequest, service: OrderService = Depends(get_order_service)):
    logger.info("Received request to update order", order_id=order_id)
    try:
        return service.update_order(order_id, request.customer_name, request.amount)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CacheError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("/orders/{order_id}", status_code=204)
def delete_order(order_id: int, service: OrderService = Depends(get_order_service)):
    logger.info("Received request to delete order", order_id=order_id)
    try:
        service.delete_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CacheError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return Response(status_code=204)


@router.post("/orders/cache/evict/all", response_class=PlainTextResponse)
def evict_all_orders(service: OrderService = Depends(get_order_service)):
    try:
        service.evict_all_orders()
    except CacheError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return "All orders evicted from cache"


@router.post("/orders/cache/evict/{order_id}", response_class=PlainTextResponse)
def evict_order(order_id: int, service: OrderService = Depends(get_order_service)):
    try:
        service.evict_order(order_id)
    except CacheError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return f"Order {order_id} evicted from cache"

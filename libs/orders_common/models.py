from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from decimal import Decimal


class Order(BaseModel):
    id: int
    customer_name: str
    amount: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderView(BaseModel):
    id: int
    customer_name: str = Field(..., alias="customerName")
    amount: Decimal
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_order(cls, order: Order) -> "OrderView":
        return cls(
            id=order.id,
            customer_name=order.customer_name,
            amount=order.amount,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

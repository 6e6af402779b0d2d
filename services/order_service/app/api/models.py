from decimal import Decimal

from pydantic import BaseModel, Field, ConfigDict, field_validator


class OrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(..., alias="customerName")
    amount: Decimal = Field(..., gt=0, max_digits=38, decimal_places=2)

    @field_validator("customer_name")
    @classmethod
    def validate_customer_name(cls, v: str):
        if not v.strip():
            raise ValueError("Customer name is required")
        return v

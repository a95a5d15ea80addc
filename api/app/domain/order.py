"""Order records exchanged between the HTTP surface and the store."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

COOKING_TIME_MIN = 5
COOKING_TIME_MAX = 15


class OrderInput(BaseModel):
    """Body supplied by a client when creating an order."""

    model_config = ConfigDict(strict=True)

    item_id: str = Field(..., examples=["301"])
    table_id: str = Field(..., examples=["3"])


class Order(BaseModel):
    """Stored order record.

    Instances are frozen; the store hands them out directly because nothing
    can mutate them after creation.
    """

    model_config = ConfigDict(frozen=True)

    order_id: str
    item_id: str
    table_id: str
    cooking_time: int = Field(..., ge=COOKING_TIME_MIN, le=COOKING_TIME_MAX)

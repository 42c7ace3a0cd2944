"""Order DTOs.

Pydantic v2 models shared by the store, the state repositories and the
CLI.  Field names are snake_case in Python and camelCase on the wire
(``productName``, ``customerName``, ``deliveryDate``); both spellings
are accepted on input.  All models are immutable (``frozen=True``).

- ``OrderRecord``: a stored order, the sole persisted entity.
- ``CreateOrderDTO``: input for ``OrderStore.add``.
- ``UpdateOrderDTO``: input for ``OrderStore.update``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from modules.orders.constants import MAIN_LIST

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
)


class _OrderFields(BaseModel):
    model_config = _MODEL_CONFIG

    product_name: str
    quantity: int
    status: str
    customer_name: Optional[str] = None
    delivery_date: Optional[str] = None

    @field_validator("product_name")
    @classmethod
    def product_name_must_not_be_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Product name must not be empty.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class OrderRecord(_OrderFields):
    """Immutable stored order.

    ``location`` is ``main-list`` or a machine lane id; empty values are
    coerced to ``main-list``.
    """

    id: int
    location: str = MAIN_LIST

    @field_validator("location", mode="before")
    @classmethod
    def empty_location_is_main_list(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return MAIN_LIST
        return v

    def to_wire(self) -> dict[str, Any]:
        """Flat camelCase dict as stored in the JSON array."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        return {"id": data.pop("id"), **data}


class CreateOrderDTO(_OrderFields):
    """Input for order creation.

    Has no ``id`` or ``location``: the store assigns both,
    and any such keys in the input are ignored.
    """


class UpdateOrderDTO(_OrderFields):
    """Input for order updates.

    ``location`` is accepted for convenience (edit forms often echo the
    whole record back) but is never applied by the store.
    """

    id: int
    location: Optional[str] = None

"""Order board constants.

Defines the lane sentinel, the status sets a board can be configured
with, and the sort keys understood by the main list.
"""

from django.db import models

MAIN_LIST = "main-list"


class TrafficLightStatus(models.TextChoices):
    RED = "red", "Rot"
    YELLOW = "yellow", "Gelb"
    GREEN = "green", "Grün"


class ShippingStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    SHIPPED = "Shipped", "Shipped"
    DELIVERED = "Delivered", "Delivered"


DEFAULT_STATUSES: tuple[str, ...] = tuple(TrafficLightStatus.values)

# Values written by older board revisions, mapped onto the current set.
STATUS_ALIASES: dict[str, str] = {
    "rot": TrafficLightStatus.RED.value,
    "gelb": TrafficLightStatus.YELLOW.value,
    "gruen": TrafficLightStatus.GREEN.value,
    "grün": TrafficLightStatus.GREEN.value,
}


class SortKey(models.TextChoices):
    MANUAL = "manual", "Manual"
    ID_ASC = "id-asc", "ID ascending"
    ID_DESC = "id-desc", "ID descending"
    PRODUCT_ASC = "product-asc", "Product A-Z"
    PRODUCT_DESC = "product-desc", "Product Z-A"


# Newest stored schema. Bare JSON arrays are version 1; envelopes
# ``{"schemaVersion": n, "orders": [...]}`` carry their own version.
SCHEMA_VERSION = 2

UNNAMED_PRODUCT = "Unnamed product"

SEED_ORDERS: tuple[dict, ...] = (
    {"productName": "Laptop", "quantity": 1},
    {"productName": "Mouse", "quantity": 2},
    {"productName": "Keyboard", "quantity": 1},
    {"productName": "Monitor", "quantity": 1},
)

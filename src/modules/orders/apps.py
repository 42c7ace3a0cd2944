from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import OrderEvent
        from modules.orders.handlers import order_audit_log_handler
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderEvent, order_audit_log_handler)

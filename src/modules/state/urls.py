"""State URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.state.views import OrderStateView

urlpatterns = [
    path("orders", OrderStateView.as_view(), name="order_state"),
]

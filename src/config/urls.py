from django.urls import include, path

urlpatterns = [
    path("", include("modules.core.urls")),
    # Key-value store backing the order board
    path("api/", include("modules.state.urls")),
]

from django.apps import AppConfig


class StateConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.state"
    label = "state"

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.notifications"

    def ready(self) -> None:
        from .handlers import register_handlers
        from shared.application.message_bus import message_bus

        register_handlers(message_bus)

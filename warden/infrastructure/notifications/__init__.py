from .password_reset_notifier import LoggingNotificationSink

__all__ = ["LoggingNotificationSink"]

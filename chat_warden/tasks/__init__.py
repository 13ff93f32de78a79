from .models import ScheduledTask

__all__ = ["ScheduledTask"]

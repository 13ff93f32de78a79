from .access_service import AccessService
from .command_router import CommandRouter, InboundEvent
from .dispatcher import TaskDispatcher, TickReport
from .moderation_service import ModerationService
from .task_service import TaskService

__all__ = [
    "AccessService",
    "CommandRouter",
    "InboundEvent",
    "ModerationService",
    "TaskDispatcher",
    "TaskService",
    "TickReport",
]

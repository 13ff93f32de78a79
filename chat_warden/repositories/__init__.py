from .moderation_repo import ChatStats, ModerationRepo, UserRecord
from .task_store import TaskStore

__all__ = [
    "ChatStats",
    "ModerationRepo",
    "TaskStore",
    "UserRecord",
]

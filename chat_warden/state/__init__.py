from .runtime_state import RuntimeState

__all__ = ["RuntimeState"]

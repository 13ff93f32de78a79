from .register import register_handlers

__all__ = ["register_handlers"]

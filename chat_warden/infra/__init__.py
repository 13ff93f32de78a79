from .vk_transport import VkTransport

__all__ = ["VkTransport"]

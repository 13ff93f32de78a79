"""chat-warden: VK chat moderation and scheduled announcements bot."""


def create_app(config=None):
    from .main import create_app as _create_app

    return _create_app(config)


def run():
    from .main import run as _run

    return _run()


__all__ = ["create_app", "run"]

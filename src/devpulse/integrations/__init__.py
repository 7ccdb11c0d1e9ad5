from devpulse.integrations.hooks import install_asyncio_handler, install_excepthooks

__all__ = ["install_asyncio_handler", "install_excepthooks"]

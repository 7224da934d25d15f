from dataclasses import dataclass

from .client import FlowClient
from .config.settings import Settings
from .infrastructure.logging import setup_logging


@dataclass(frozen=True)
class App:
    """Application wiring container.

    Holds the settings a process was booted with and hands them to every
    client it creates, so retry defaults, JSON mode and executor sizing are
    decided in one place.
    """

    settings: Settings

    def client(self, **kwargs) -> FlowClient:
        """Create a FlowClient configured with this app's settings."""
        return FlowClient(settings=self.settings, **kwargs)


def create_app(settings: Settings | None = None) -> App:
    """Create an `App` with provided settings or defaults and configure logging."""
    settings = settings or Settings()
    setup_logging(settings)
    return App(settings=settings)

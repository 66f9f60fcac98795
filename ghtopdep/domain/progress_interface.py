"""Progress sink interface (port) notified while pages are aggregated."""
from abc import ABC, abstractmethod


class IProgressSink(ABC):
    """Fire-and-forget progress reporting."""

    @abstractmethod
    def start(self, total: int) -> None:
        pass

    @abstractmethod
    def update(self, current: int) -> None:
        pass

    @abstractmethod
    def stop(self) -> None:
        pass

from abc import ABC, abstractmethod


class UsageCounterProvider(ABC):
    provider_name: str

    @abstractmethod
    def fetch_count(self) -> int | float:
        """Returns the current counter value; raises on any failure."""
        raise NotImplementedError

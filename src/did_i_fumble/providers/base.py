"""Base provider interface."""

from abc import ABC, abstractmethod

from did_i_fumble.imaging import ImagePayload


class BaseProvider(ABC):
    """Abstract base class for vision model providers."""

    name: str = "base"
    model: str = ""

    @abstractmethod
    def generate(self, image: ImagePayload) -> str:
        """Send the screenshot to the model and return its raw reply.

        Args:
            image: Encoded screenshot

        Returns:
            Reply text exactly as the model produced it, "" if empty
        """
        pass

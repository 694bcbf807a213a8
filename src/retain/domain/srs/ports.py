"""
Ports (interfaces) for card storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Card


class CardRepository(ABC):
    """
    Port for loading and saving cards together with their SRS state.

    Implementations:
        - FileDeckRepository: Reads and writes a JSON or YAML deck file.
    """

    @abstractmethod
    def load_cards(self) -> list[Card]:
        """
        Load every card in the deck.

        Returns:
            Cards in storage order. Cards never reviewed have srs_data=None.
        """
        pass

    @abstractmethod
    def save_cards(self, cards: list[Card]) -> None:
        """
        Persist the SRS state of the given cards.

        Args:
            cards: Cards whose srs_data should be written back.
        """
        pass

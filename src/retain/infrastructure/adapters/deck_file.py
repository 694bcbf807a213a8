"""
File Deck Repository: Infrastructure adapter for JSON/YAML deck files.

Implements CardRepository over a document of the form {"cards": [...]}.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as SchemaError

from retain.domain.srs.models import Card
from retain.domain.srs.ports import CardRepository
from retain.infrastructure.serialization import dump_srs_data, load_card

from ._document import DeckFileError, read_document, write_document

logger = logging.getLogger(__name__)

__all__ = ["DeckFileError", "FileDeckRepository"]


class FileDeckRepository(CardRepository):
    """
    Stores cards in a single JSON or YAML file, picked by file suffix.

    Saving merges SRS state back into the raw document by card id, so any
    other fields on a card record (question, answer, metadata) are preserved.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_cards(self) -> list[Card]:
        document = self._read_document()
        cards: list[Card] = []
        seen: set[str] = set()
        for index, raw in enumerate(document["cards"]):
            try:
                card = load_card(raw)
            except SchemaError as e:
                raise DeckFileError(f"{self.path}: invalid card at index {index}: {e}") from e
            # save_cards merges by id, so ids must be unique
            if card.id in seen:
                raise DeckFileError(f"{self.path}: duplicate card id {card.id!r}")
            seen.add(card.id)
            cards.append(card)
        logger.debug(f"Loaded {len(cards)} cards from {self.path}")
        return cards

    def save_cards(self, cards: list[Card]) -> None:
        document = self._read_document()
        records: list[dict[str, Any]] = document["cards"]
        by_id = {str(record.get("id")): record for record in records}

        for card in cards:
            record = by_id.get(card.id)
            if record is None:
                record = {"id": card.id}
                if card.profile_id:
                    record["profileId"] = card.profile_id
                if card.application_id:
                    record["applicationId"] = card.application_id
                records.append(record)
                by_id[card.id] = record
            record["srsData"] = dump_srs_data(card.srs_data)

        write_document(self.path, document)
        logger.info(f"Saved {len(cards)} cards to {self.path}")

    def _read_document(self) -> dict[str, Any]:
        document = read_document(self.path)
        cards = document.setdefault("cards", [])
        if not isinstance(cards, list):
            raise DeckFileError(f"{self.path}: 'cards' must be a list")
        return document

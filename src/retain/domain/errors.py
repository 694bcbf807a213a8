"""Exceptions raised by the scheduling core."""


class SchedulingError(ValueError):
    """Base class for errors raised by the scheduling core."""


class ValidationError(SchedulingError):
    """A rating (or other input value) is outside its accepted domain."""


class InvalidStateError(SchedulingError):
    """Input state violates a scheduling invariant (e.g. EF below its floor)."""


class CardNotFoundError(LookupError):
    """A rating event references a card that is not in the deck."""

    def __init__(self, card_id: str):
        super().__init__(f"Card not found: {card_id}")
        self.card_id = card_id

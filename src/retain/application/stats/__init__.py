# Application Stats Package
from .aggregator import aggregate
from .readiness import card_readiness, score

__all__ = ["aggregate", "card_readiness", "score"]

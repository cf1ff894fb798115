# uiauto_appium/extractor.py
"""
@file extractor.py
@brief Best-effort extraction of name and price from the top result cards.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Dict, List, Sequence

from .actionlogger import ACTION_LOGGER
from .element import Element
from .locator import Locator
from .repository import Repository
from .resolver import PollingLocator

UNAVAILABLE = "unavailable"
PRICE_ATTRIBUTE = "content-desc"


@dataclass(frozen=True)
class ExtractedProduct:
    name: str
    price: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class ProductExtractor:
    """
    Reads the first N result cards currently on screen.

    Every card yields a record. A field that cannot be read becomes the
    `unavailable` sentinel; a failing card never affects the others.
    """

    def __init__(
        self,
        locator: PollingLocator,
        card_locator: Locator,
        title_locator: Locator,
        price_locator: Locator,
        currency_marker: str = "Pesos",
        unavailable: str = UNAVAILABLE,
    ):
        self.locator = locator
        self.card_locator = card_locator
        self.title_locator = title_locator
        self.price_locator = price_locator
        self.currency_marker = currency_marker
        self.unavailable = unavailable

    @classmethod
    def from_repository(cls, locator: PollingLocator, repo: Repository) -> ProductExtractor:
        return cls(
            locator,
            card_locator=repo.get_locator("result_card"),
            title_locator=repo.get_locator("card_title"),
            price_locator=repo.get_locator("card_price"),
            currency_marker=repo.extraction.currency_marker,
            unavailable=repo.extraction.unavailable,
        )

    def extract(self, limit: int = 2) -> List[ExtractedProduct]:
        """Snapshot the rendered cards (no polling) and extract the first `limit`."""
        cards = self.locator.find_all(self.card_locator)
        if not cards:
            ACTION_LOGGER.log(
                event="extract",
                status="empty",
                metadata={"message": "nothing to extract", "cards": 0},
            )
            return []

        products = self.extract_cards(cards, limit)
        ACTION_LOGGER.log(
            event="extract",
            metadata={"cards": len(cards), "extracted": len(products)},
        )
        return products

    def extract_cards(self, cards: Sequence[Element], limit: int = 2) -> List[ExtractedProduct]:
        """Records for the first min(limit, len(cards)) cards, in the given order."""
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        return [self.extract_card(card) for card in list(cards)[:limit]]

    def extract_card(self, card: Element) -> ExtractedProduct:
        return ExtractedProduct(name=self._extract_name(card), price=self._extract_price(card))

    def _extract_name(self, card: Element) -> str:
        try:
            name = card.find(self.title_locator).get_text().strip()
        except Exception:
            return self.unavailable
        return name or self.unavailable

    def _extract_price(self, card: Element) -> str:
        try:
            for node in card.find_all(self.price_locator):
                desc = node.get_attribute(PRICE_ATTRIBUTE)
                if desc and self.currency_marker in desc:
                    return desc.strip()
        except Exception:
            pass
        return self.unavailable


def format_products(products: Sequence[ExtractedProduct]) -> str:
    lines = [f"===== RESULTS (first {len(products)}) ====="]
    for i, p in enumerate(products, start=1):
        lines.append(f"{i}) {p.name} | {p.price}")
    return "\n".join(lines)

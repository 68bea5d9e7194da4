import logging
from typing import Dict, Iterable, Optional, Tuple

from core.converters import as_int
from schemas.bundles import BundleTemplate
from schemas.inventory import InventoryItemRead
from schemas.ledger import BookedLine

logger = logging.getLogger(__name__)


def create_bundle(
    name: str,
    selected_items: Iterable[Tuple[InventoryItemRead, int]],
) -> Optional[BundleTemplate]:
    """Build a bundle from (item, quantity) picks.

    Returns None when the name or the selection is empty. Quantities below 1
    are raised to 1 and prices are copied from the item's current rent price.
    """
    name = (name or "").strip().upper()
    lines: Dict[str, BookedLine] = {}
    for item, quantity in selected_items or ():
        if not item.name:
            continue
        lines[item.name] = BookedLine(
            name=item.name,
            quantity=max(1, as_int(quantity)),
            price=item.rent_price,
        )
    if not name or not lines:
        logger.info("[bundles] refused bundle %r with %d items", name, len(lines))
        return None
    return BundleTemplate(name=name, items=list(lines.values()))

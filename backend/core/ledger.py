"""
Quantity ledger for one event draft.

A ledger is a list of BookedLine keyed by name. Every function here is pure:
it takes a ledger and returns a new one, leaving the input untouched.

- increment: +1 for an inventory item, refused silently once booked >= stock
- decrement: -1 by name, the line disappears when it reaches 0
- merge_bundle: add a bundle's template lines, summing onto matching names
- compute_total: sum of quantity x price, recomputed on every call
"""

import hashlib
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from core.converters import as_count, as_int, as_number
from schemas.bundles import BundleTemplate
from schemas.inventory import InventoryItemRead
from schemas.ledger import BookedLine

logger = logging.getLogger(__name__)

Ledger = List[BookedLine]


def find_line(ledger: Sequence[BookedLine], name: str) -> Optional[BookedLine]:
    for line in ledger:
        if line.name == name:
            return line
    return None


def booked_quantity(ledger: Sequence[BookedLine], name: str) -> int:
    line = find_line(ledger, name)
    if line is None:
        return 0
    return as_int(line.quantity)


def is_at_max(ledger: Sequence[BookedLine], item: InventoryItemRead) -> bool:
    return booked_quantity(ledger, item.name) >= as_count(item.stock)


def increment(
    ledger: Sequence[BookedLine],
    item: InventoryItemRead,
    unit_price: Optional[float] = None,
) -> Ledger:
    if is_at_max(ledger, item):
        logger.debug("[ledger] %s at max (%s), increment ignored", item.name, item.stock)
        return list(ledger)

    if find_line(ledger, item.name) is not None:
        return [
            line.model_copy(update={"quantity": as_int(line.quantity) + 1})
            if line.name == item.name else line
            for line in ledger
        ]

    price = item.rent_price if unit_price is None else unit_price
    return [*ledger, BookedLine(id=item.id, name=item.name, quantity=1, price=price)]


def decrement(ledger: Sequence[BookedLine], name: str) -> Ledger:
    out: Ledger = []
    for line in ledger:
        if line.name == name:
            line = line.model_copy(update={"quantity": as_int(line.quantity) - 1})
        if as_int(line.quantity) > 0:
            out.append(line)
    return out


def bundle_line_id(bundle_key: str, name: str) -> str:
    digest = hashlib.sha1(f"{bundle_key}:{name}".encode("utf-8")).hexdigest()
    return f"bundle-{digest[:8]}"


def merge_bundle(
    ledger: Sequence[BookedLine],
    bundle: BundleTemplate,
    stock_by_name: Optional[Mapping[str, int]] = None,
) -> Ledger:
    """Merge a bundle's lines into the ledger.

    Matching names have the template quantity added; new names are appended
    in bundle order with the template's snapshotted price. Stock is not
    checked unless ``stock_by_name`` is given, in which case each line is
    capped at its stock (names missing from the mapping count as 0).
    """
    out: Ledger = list(ledger)
    bundle_key = bundle.id or bundle.name
    for template in bundle.items:
        add = as_int(template.quantity)
        if add <= 0:
            continue
        idx = next((i for i, line in enumerate(out) if line.name == template.name), None)
        current = as_int(out[idx].quantity) if idx is not None else 0
        target = current + add
        if stock_by_name is not None:
            target = min(target, as_count(stock_by_name.get(template.name, 0)))
        if target <= current:
            logger.debug("[ledger] bundle %s: %s capped at stock", bundle.name, template.name)
            continue
        if idx is not None:
            out[idx] = out[idx].model_copy(update={"quantity": target})
        else:
            out.append(
                BookedLine(
                    id=bundle_line_id(bundle_key, template.name),
                    name=template.name,
                    quantity=target,
                    price=template.price,
                )
            )
    return out


def compute_total(ledger: Iterable[BookedLine]) -> float:
    return sum(
        as_number(getattr(line, "quantity", 0)) * as_number(getattr(line, "price", 0))
        for line in ledger
    )


def over_capacity(
    ledger: Sequence[BookedLine],
    inventory: Iterable[InventoryItemRead],
) -> List[str]:
    """Names whose booked quantity exceeds current stock (e.g. after a bundle merge)."""
    stock: Dict[str, int] = {item.name: as_count(item.stock) for item in inventory}
    return [
        line.name for line in ledger
        if as_int(line.quantity) > stock.get(line.name, 0)
    ]


def normalize(ledger: Iterable[BookedLine]) -> Ledger:
    """One line per name, positive quantities only.

    Non-positive and unnamed lines are dropped; repeated names are summed onto
    the first occurrence, which keeps its position, id and price.
    """
    out: Ledger = []
    index: Dict[str, int] = {}
    for line in ledger:
        qty = as_int(line.quantity)
        if qty <= 0 or not line.name:
            continue
        if line.name in index:
            i = index[line.name]
            out[i] = out[i].model_copy(update={"quantity": as_int(out[i].quantity) + qty})
        else:
            index[line.name] = len(out)
            out.append(line.model_copy(update={"quantity": qty}))
    return out

"""Domain service: Record Normalizer.

Stored bills come in more than one shape.  Older versions of the counter
kept only ``total`` and let readers infer the rest, used camelCase keys
(``billNumber``, ``itemCount``, ``date``) and called the unit price
``price``.  This module turns any such record into a canonical
Transaction.

The rules are a fallback chain, applied in a fixed order.  Values that
were explicitly stored always win over recomputation, so a rounding
difference between versions can never silently rewrite an old total.
Normalization never raises: every malformed field has a default.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from billing.domain.model.ledger import DailyRollup
from billing.domain.model.order import TAX_RATE
from billing.domain.model.transaction import Transaction, TransactionLine
from billing.domain.model.value_objects import Money, round2

logger = logging.getLogger(__name__)

_MISSING = object()

# Stored amounts at or above 10**16 are treated as corrupt.
_MAX_ADJUSTED_EXPONENT = 15


# ---------------------------------------------------------------------------
# Field coercion helpers
# ---------------------------------------------------------------------------


def _pick(record: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key present and not None."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return _MISSING


def as_decimal(value: Any) -> Decimal | None:
    """Coerce a stored numeric value, or return None if it is not one.

    Accepts int, float, Decimal and decimal strings.  Booleans, non-finite
    values and implausibly large magnitudes do not count as numbers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = Decimal(str(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not number.is_finite() or number.adjusted() > _MAX_ADJUSTED_EXPONENT:
        return None
    return number


def as_int(value: Any) -> int | None:
    number = as_decimal(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def _parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _normalize_line(raw: Mapping[str, Any]) -> TransactionLine:
    item_id = _pick(raw, "item_id", "id")
    item_id = str(item_id) if item_id is not _MISSING else ""
    name = raw.get("name")
    price = as_decimal(_pick(raw, "unit_price", "price"))
    quantity = as_int(raw.get("quantity"))
    return TransactionLine(
        item_id=item_id,
        name=name if isinstance(name, str) and name else item_id,
        unit_price=Money(price if price is not None else Decimal("0")),
        quantity=quantity if quantity is not None else 0,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize_transaction(
    record: Any,
    tax_rate: Decimal = TAX_RATE,
    now: datetime | None = None,
) -> Transaction:
    """Build a canonical Transaction from a stored record of any vintage."""
    if not isinstance(record, Mapping):
        logger.warning("Discarding non-mapping transaction record: %r", record)
        record = {}

    # 1. lines
    raw_items = record.get("items")
    if not isinstance(raw_items, list):
        raw_items = []
    lines = tuple(_normalize_line(raw) for raw in raw_items if isinstance(raw, Mapping))

    # 2. recomputed subtotal, only used as a fallback
    computed_subtotal = round2(
        sum((line.unit_price.amount * line.quantity for line in lines), Decimal("0"))
    )

    # 3. subtotal
    subtotal = as_decimal(record.get("subtotal"))
    if subtotal is None:
        subtotal = computed_subtotal

    # 4. total (None means "not stored", which is not the same as zero)
    total = as_decimal(_pick(record, "total", "grand_total"))

    # 5. tax
    tax = as_decimal(record.get("tax"))
    if tax is None:
        if total is not None:
            tax = round2(total - subtotal)
        else:
            tax = round2(subtotal * tax_rate)

    # 6. grand total
    grand_total = total if total is not None else round2(subtotal + tax)

    # 7. item count (sum of quantities)
    item_count = as_int(_pick(record, "item_count", "itemCount"))
    if item_count is None:
        item_count = sum(line.quantity for line in lines)

    # 8. note
    note = record.get("note")
    if not isinstance(note, str):
        note = ""

    # 9. timestamp
    finalized_at = _parse_timestamp(_pick(record, "finalized_at", "date"))
    if finalized_at is None:
        finalized_at = now or datetime.now(timezone.utc)

    sequence_number = as_int(_pick(record, "sequence_number", "billNumber"))

    return Transaction(
        sequence_number=sequence_number if sequence_number is not None else 0,
        lines=lines,
        subtotal=Money(subtotal),
        tax=Money(tax),
        grand_total=Money(grand_total),
        item_count=item_count,
        note=note,
        finalized_at=finalized_at,
    )


def normalize_rollup(record: Any, item_ids: Iterable[str]) -> DailyRollup:
    """Build a DailyRollup from a stored record, zero-filling menu items.

    Every id in *item_ids* ends up with a counter, so items added to the
    menu after the data was written still aggregate correctly.
    """
    if not isinstance(record, Mapping):
        record = {}

    revenue = as_decimal(_pick(record, "total_revenue", "totalRevenue"))

    raw_quantities = _pick(record, "item_quantities", "itemQuantities")
    if not isinstance(raw_quantities, Mapping):
        raw_quantities = {}

    quantities: dict[str, int] = {}
    for item_id, raw_count in raw_quantities.items():
        count = as_int(raw_count)
        quantities[str(item_id)] = count if count is not None and count > 0 else 0
    for item_id in item_ids:
        quantities.setdefault(item_id, 0)

    return DailyRollup(
        total_revenue=Money(revenue if revenue is not None else Decimal("0")),
        item_quantities=quantities,
    )


def normalize_sequence_number(value: Any) -> int:
    """Next bill number from storage; anything unusable restarts at 1."""
    number = as_int(value)
    if number is None or number < 1:
        return 1
    return number

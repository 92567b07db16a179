"""Defect ledger: immutable updates to an inspection's defect list."""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any, Iterable, List, Sequence

from .models.inspection import Defect, ReviewStatus
from .models.money import to_money
from .utils.errors import InvalidCostError, NotFoundError

logger = logging.getLogger(__name__)


def find_defect(defects: Iterable[Defect], defect_id: str) -> Defect:
    """
    Look up a defect by id.

    Raises:
        NotFoundError: If no defect has that id
    """
    for defect in defects:
        if defect.id == defect_id:
            return defect
    raise NotFoundError.defect(defect_id)


def _replace_one(defects: Sequence[Defect], defect_id: str, **changes: Any) -> List[Defect]:
    find_defect(defects, defect_id)
    return [replace(d, **changes) if d.id == defect_id else d for d in defects]


def set_review_status(defects: Sequence[Defect], defect_id: str, status: ReviewStatus) -> List[Defect]:
    """
    Return a new ledger with one defect's review status replaced.

    Args:
        defects: Current ledger
        defect_id: Defect to update
        status: New review status

    Returns:
        New list; every other defect is the same object as before

    Raises:
        NotFoundError: If the defect does not exist
    """
    status = ReviewStatus(status)
    updated = _replace_one(defects, defect_id, status=status)
    logger.debug(f"Defect {defect_id} status -> {status.value}")
    return updated


def parse_repair_cost(defect_id: str, amount: Any) -> Decimal:
    """
    Validate a repair cost entered by a reviewer.

    Raises:
        InvalidCostError: If the amount is not a non-negative finite number
    """
    if amount is None:
        raise InvalidCostError.for_amount(defect_id, amount, "amount is required")
    try:
        cost = to_money(amount)
    except (TypeError, ValueError) as e:
        raise InvalidCostError.for_amount(defect_id, amount, "not a finite number", e) from e

    if cost < 0:
        raise InvalidCostError.for_amount(defect_id, amount, "must not be negative")
    return cost


def set_repair_cost(defects: Sequence[Defect], defect_id: str, amount: Any) -> List[Defect]:
    """
    Return a new ledger with one defect's repair cost replaced.

    Args:
        defects: Current ledger
        defect_id: Defect to update
        amount: Non-negative finite number (int, float, Decimal or numeric string)

    Returns:
        New list with the cost quantized to two decimal places

    Raises:
        NotFoundError: If the defect does not exist
        InvalidCostError: If the amount is rejected
    """
    find_defect(defects, defect_id)
    cost = parse_repair_cost(defect_id, amount)
    updated = _replace_one(defects, defect_id, repair_cost=cost)
    logger.debug(f"Defect {defect_id} repair cost -> {cost}")
    return updated


def billable_defects(defects: Iterable[Defect]) -> List[Defect]:
    """Defects that are not rejected, in ledger order."""
    return [d for d in defects if d.is_billable]


def defects_for_image(defects: Iterable[Defect], image_id: str, billable_only: bool = True) -> List[Defect]:
    """Defects found on one image, in ledger order."""
    return [
        d for d in defects
        if d.image_id == image_id and (d.is_billable or not billable_only)
    ]

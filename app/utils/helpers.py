# backend/app/utils/helpers.py

import logging
import math
from typing import Optional, Any

from bson import ObjectId

logger = logging.getLogger(__name__)

# --- Identifiers ---

def to_object_id(id_str: str) -> Optional[ObjectId]:
    """
    Validates a string as a MongoDB ObjectId.

    Returns:
        The ObjectId, or None if the string is not a valid ObjectId.
    """
    if ObjectId.is_valid(id_str):
        return ObjectId(id_str)
    logger.warning(f"Invalid ObjectId format: {id_str}")
    return None

# --- Pagination Helpers ---

def parse_page_number(raw: Optional[str]) -> int:
    """
    Parses the `pageNumber` query value. Missing, non-numeric or non-positive
    values fall back to the first page.

    Args:
        raw: The raw query string value, or None.

    Returns:
        A 1-based page number.
    """
    if raw is None:
        return 1
    try:
        page = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        logger.debug(f"Non-numeric page number '{raw}', defaulting to 1.")
        return 1
    return page if page >= 1 else 1

def calculate_skip(page: int, limit: int) -> int:
    """
    Calculates the number of documents to skip for pagination.

    Args:
        page: The current page number (1-based).
        limit: The number of items per page.

    Returns:
        The number of documents to skip.

    Raises:
        ValueError: If page or limit are not positive integers.
    """
    if not isinstance(page, int) or page < 1:
        raise ValueError("Page number must be a positive integer.")
    if not isinstance(limit, int) or limit < 1:
        raise ValueError("Page limit must be a positive integer.")
    return (page - 1) * limit

def calculate_total_pages(total_items: int, limit: int) -> int:
    """
    Calculates the total number of pages required. An empty result has 0 pages.

    Raises:
        ValueError: If limit is not a positive integer or total_items is negative.
    """
    if not isinstance(limit, int) or limit < 1:
        raise ValueError("Page limit must be a positive integer.")
    if total_items < 0:
        raise ValueError("Total items cannot be negative.")
    return math.ceil(total_items / limit)

# --- Sparse merge ---

def is_supplied(value: Any) -> bool:
    """
    Whether an incoming update value should overwrite the stored one.

    Scalars must be truthy (so 0 and "" are ignored). Lists count as supplied
    whenever present, even when empty.
    """
    if isinstance(value, list):
        return True
    return bool(value)

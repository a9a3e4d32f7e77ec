# =============================================================================
# lib/catalog_filter.py - Catalog Filter Engine
# =============================================================================
# Derives the visible subset of the catalog from the current criteria.
#
# A listing is kept when ALL supplied criteria match:
# - search_text: case-insensitive substring of name, description OR
#   seller display name
# - category: exact equality
# - location: case-insensitive substring of the seller location; listings
#   whose seller has no location never match a location criterion
#
# The filter is pure and stable: it keeps input order (the catalog arrives
# newest first) and runs in one pass, so it is fine to call on every
# keystroke.
#
# Usage:
#   from lib.catalog_filter import filter_listings
#   visible = filter_listings(catalog, FilterCriteria(search_text="tom"))
# =============================================================================

from __future__ import annotations

from typing import Sequence

from core.models.listing import FilterCriteria, Listing


def _contains(haystack: str | None, needle: str) -> bool:
    """Case-insensitive substring test; a missing haystack never matches."""
    if not haystack:
        return False
    return needle in haystack.casefold()


def matches(listing: Listing, criteria: FilterCriteria) -> bool:
    """
    Check one listing against every supplied criterion.

    Args:
        listing: The listing to test
        criteria: Current filter criteria (absent axes are ignored)

    Returns:
        True if the listing satisfies all supplied criteria
    """
    seller = listing.seller

    if criteria.search_text is not None:
        needle = criteria.search_text.casefold()
        seller_name = seller.full_name if seller else None
        if not (
            _contains(listing.name, needle)
            or _contains(listing.description, needle)
            or _contains(seller_name, needle)
        ):
            return False

    if criteria.category is not None and listing.category != criteria.category:
        return False

    if criteria.location is not None:
        seller_location = seller.location if seller else None
        if not _contains(seller_location, criteria.location.casefold()):
            return False

    return True


def filter_listings(
    listings: Sequence[Listing],
    criteria: FilterCriteria,
) -> list[Listing]:
    """
    Return the listings that match the criteria, in input order.

    Args:
        listings: The catalog (may be empty)
        criteria: Current filter criteria

    Returns:
        A new list; equal to the input when criteria are empty

    Example:
        >>> filter_listings(catalog, FilterCriteria(category="Fruits"))
        [Listing(name='Apples', ...)]
    """
    if criteria.is_empty():
        return list(listings)
    return [listing for listing in listings if matches(listing, criteria)]


def unique_locations(listings: Sequence[Listing]) -> list[str]:
    """
    Distinct non-empty seller locations in first-seen order.

    Used to populate the location picker.
    """
    seen: dict[str, None] = {}
    for listing in listings:
        location = listing.seller.location if listing.seller else None
        if location and location not in seen:
            seen[location] = None
    return list(seen)

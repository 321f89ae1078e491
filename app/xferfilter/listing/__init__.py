"""Item listers feeding the filter engine."""

from xferfilter.listing.jsonl import ListingError, read_listing
from xferfilter.listing.local import LocalLister

__all__ = [
    "ListingError",
    "LocalLister",
    "read_listing",
]

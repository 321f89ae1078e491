"""Filter engine.

This module provides filter categories, the filter set decision
function, ancestor folder materialization, and the engine that drives
them over an enumeration pass.
"""

from xferfilter.filters.categories import FilterCategory, FilterKind, OperationKind
from xferfilter.filters.engine import CancellationToken, FilterEngine, TransferPlan
from xferfilter.filters.filter_set import FilterSet
from xferfilter.filters.materializer import AncestorMaterializer, MaterializerState

__all__ = [
    "AncestorMaterializer",
    "CancellationToken",
    "FilterCategory",
    "FilterEngine",
    "FilterKind",
    "FilterSet",
    "MaterializerState",
    "OperationKind",
    "TransferPlan",
]

"""
FormFlow Observable Package
===========================

Streams, cells and the operators that connect them.
"""

from .cell import OutputRegister, SourceCell
from .operators import (
    CombineLatestStream,
    DebounceStream,
    DistinctUntilChangedStream,
    DropFirstStream,
    MapStream,
    combine_latest,
)
from .stream import Observer, Stream

__all__ = [
    "Stream",
    "Observer",
    "SourceCell",
    "OutputRegister",
    "MapStream",
    "DebounceStream",
    "DistinctUntilChangedStream",
    "DropFirstStream",
    "CombineLatestStream",
    "combine_latest",
]

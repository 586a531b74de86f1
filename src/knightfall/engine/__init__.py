"""Chess engine package: negamax search and its shared models.

The Qt worker lives in :mod:`knightfall.engine.qt_bridge` and is imported
from there so the search stays usable without a Qt event loop.
"""

from knightfall.engine.negamax import MATE_SCORE, PIECE_VALUES, NegamaxEngine
from knightfall.engine.search import CancelCheck, IEngine, SearchLimits, SearchResult

__all__ = [
    "CancelCheck",
    "IEngine",
    "MATE_SCORE",
    "NegamaxEngine",
    "PIECE_VALUES",
    "SearchLimits",
    "SearchResult",
]

from .api import LineEngine, HistoryState, make_engine

__all__ = ["LineEngine", "HistoryState", "make_engine"]

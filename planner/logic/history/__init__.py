from planner.logic.history.manager import HistoryManager

__all__ = ["HistoryManager"]

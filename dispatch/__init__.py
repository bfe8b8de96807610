#Expose the high-level pipeline pieces:
#Candidate filtering (hard rules)
#Scoring / ranking
#Dispatcher orchestrator (the "one call" entry point)

from .candidate_filter import filter_eligible_drones
from .scoring import DroneScore, ScoreBreakdown, score_breakdown, score_drone
from .selection import rank_drones, select_best_drone
from .dispatcher import Dispatcher, DispatchOutcome #the main entry point to dispatch queued orders

__all__ = [
    "filter_eligible_drones",
    "DroneScore",
    "ScoreBreakdown",
    "score_breakdown",
    "score_drone",
    "rank_drones",
    "select_best_drone",
    "Dispatcher",
    "DispatchOutcome",
]

from .distance import edit_distance
from .normalize import normalize, word_match
from .scoring import (
    FuzzyBudget,
    NoteInput,
    ScoreBreakdown,
    ScoreParams,
    compute_score,
    explain_score,
    score_notes,
    title_score,
    token_score,
)
from .weights import DEFAULT_WEIGHTS, ScoreWeights

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_WEIGHTS",
    "FuzzyBudget",
    "NoteInput",
    "ScoreBreakdown",
    "ScoreParams",
    "ScoreWeights",
    "compute_score",
    "edit_distance",
    "explain_score",
    "normalize",
    "score_notes",
    "title_score",
    "token_score",
    "word_match",
]

"""
Score weight table.

Every tier bonus, field factor, cap and penalty used by the scorer lives
here so the ranking policy can be read and swapped in one place.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict


@dataclass(frozen=True)
class ScoreWeights:
    # Identifier
    note_id_exact_match: float = 1000.0

    # Title cascade
    title_exact_match: float = 2000.0
    title_prefix_match: float = 500.0
    title_word_match: float = 300.0
    title_fuzzy_match: float = 300.0
    title_fuzzy_damping: float = 0.7
    title_fuzzy_max_ratio: float = 0.3

    # Token tiers (multiplied by token length and field factor)
    token_exact_match: float = 4.0
    token_prefix_match: float = 2.0
    token_contains_match: float = 1.0
    token_fuzzy_match: float = 0.5

    # Field factors
    title_factor: float = 2.0
    path_factor: float = 0.3

    # Caps; the three fuzzy caps are tuned independently
    max_fuzzy_title_score: float = 60.0
    max_fuzzy_score_per_token: float = 3.0
    max_total_fuzzy_score: float = 200.0
    max_fuzzy_token_length: int = 3

    # Fuzzy eligibility
    max_edit_distance: int = 3
    min_fuzzy_token_length: int = 3

    # Visibility
    hidden_note_penalty: float = 3.0

    def with_overrides(self, **overrides: Any) -> "ScoreWeights":
        unknown = set(overrides) - set(field_names())
        if unknown:
            raise TypeError(f"Unknown weight(s): {', '.join(sorted(unknown))}")
        return replace(self, **overrides)

    def as_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in field_names()}


def field_names() -> list[str]:
    return [f.name for f in fields(ScoreWeights)]


DEFAULT_WEIGHTS = ScoreWeights()

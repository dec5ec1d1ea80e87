"""
Bounded Levenshtein distance.

Fuzzy tiers only care whether two strings are within a few edits of each
other, so the computation gives up as soon as every cell of the current
row is already past the bound.
"""


def edit_distance(a: str, b: str, max_distance: int) -> int:
    """
    Levenshtein distance between a and b with unit costs.

    Uses a single DP row over b. After each character of a, if the
    smallest value in the row exceeds max_distance the function returns
    max_distance + 1 without finishing the matrix.

    Args:
        a: Source string (rows)
        b: Target string (columns)
        max_distance: Bound past which the exact distance is irrelevant

    Returns:
        The distance, or any value > max_distance meaning "too far".
        Callers must not read a value above the bound as a real distance.
    """
    costs = list(range(len(b) + 1))

    for i, ca in enumerate(a):
        last = i
        costs[0] = i + 1

        for j, cb in enumerate(b):
            if ca == cb:
                new = last
            else:
                new = 1 + min(last, costs[j], costs[j + 1])
            last = costs[j + 1]
            costs[j + 1] = new

        if min(costs) > max_distance:
            return max_distance + 1

    return costs[len(b)]

from typing import Any, Dict, List, Optional

REQUIRED_STR_FIELDS = ["id", "title"]
# Snake-case name first; the camel-case alias is what JS-side callers send
PATH_TITLE_KEYS = ["path_title", "pathTitle"]
NORMALIZED_QUERY_KEYS = ["normalized_query", "normalizedQuery"]


class InvalidRecordError(ValueError):
    """Raised when a note or query record fails validation."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def first_present(data: Dict[str, Any], keys: List[str]) -> Optional[str]:
    for k in keys:
        if k in data:
            return k
    return None


def validate_note(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Empty strings are accepted everywhere; the scorer handles them.
    """
    if not isinstance(data, dict):
        return [f"Note must be an object, got {type(data).__name__}"]

    errors: List[str] = []

    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string")

    path_key = first_present(data, PATH_TITLE_KEYS)
    if path_key is not None and not isinstance(data[path_key], str):
        errors.append(f"Field '{path_key}' must be a string if provided")

    if "hidden" in data and not isinstance(data["hidden"], bool):
        errors.append("Field 'hidden' must be a boolean if provided")

    return errors


def validate_query(data: Any) -> List[str]:
    if not isinstance(data, dict):
        return [f"Query must be an object, got {type(data).__name__}"]

    errors: List[str] = []

    if "query" not in data:
        errors.append("Missing required field: query")
    elif not isinstance(data["query"], str):
        errors.append("Field 'query' must be a string")

    if "tokens" in data:
        tokens = data["tokens"]
        if not isinstance(tokens, list) or not all(isinstance(t, str) for t in tokens):
            errors.append("Field 'tokens' must be a list of strings if provided")

    nq_key = first_present(data, NORMALIZED_QUERY_KEYS)
    if nq_key is not None and not isinstance(data[nq_key], str):
        errors.append(f"Field '{nq_key}' must be a string if provided")

    if "enable_fuzzy_matching" in data and not isinstance(data["enable_fuzzy_matching"], bool):
        errors.append("Field 'enable_fuzzy_matching' must be a boolean if provided")

    return errors

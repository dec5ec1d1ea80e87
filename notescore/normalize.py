def normalize(s: str) -> str:
    """Lowercase and drop everything that is not alphanumeric or a plain space."""
    return "".join(c for c in s.lower() if c.isalnum() or c == " ")


def split_chunks(normalized: str) -> list[str]:
    # Single-space split: consecutive spaces yield empty chunks, which never match
    return normalized.split(" ")


def word_match(text: str, query: str) -> bool:
    return (
        f" {query} " in text
        or text.startswith(f"{query} ")
        or text.endswith(f" {query}")
    )

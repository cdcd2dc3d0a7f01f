from __future__ import annotations

from .normalize import norm_text

def resolve_choice(user_input: str, options: list[str] | tuple[str, ...]) -> int | None:
    """Map a typed quiz answer to an option index.

    Accepts a letter ("b"), a 1-based number ("2") or the option text itself.
    """
    if not options:
        return None
    raw = norm_text(user_input or "")
    if not raw:
        return None
    cleaned = raw.strip().rstrip(").")

    if len(cleaned) == 1 and cleaned.isalpha():
        idx = ord(cleaned.upper()) - ord("A")
        if 0 <= idx < len(options):
            return idx

    if cleaned.isdigit():
        idx = int(cleaned)
        if 1 <= idx <= len(options):
            return idx - 1

    normalized = {norm_text(opt).casefold(): i for i, opt in enumerate(options)}
    return normalized.get(norm_text(raw).casefold())

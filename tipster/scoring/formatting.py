"""Display strings for money, countdowns and tip outcomes."""

from tipster.scoring.settlement import (
    OUTCOME_PENDING,
    OUTCOME_PLACED,
    OUTCOME_WON,
    TipOutcome,
)


def format_gbp(value) -> str:
    try:
        n = float(value)
    except (TypeError, ValueError):
        n = 0.0
    return f"£{n:.2f}"


def format_countdown(ms) -> str:
    """Time left until lock as "2h 5m" or "5m"."""
    if ms is None:
        return "No lock time"
    if ms <= 0:
        return "Locked"

    total_minutes = int(ms // 60000)
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def outcome_text(outcome: TipOutcome) -> str:
    if outcome.status == OUTCOME_PENDING:
        return "Result: pending"
    if outcome.status == OUTCOME_WON:
        return f"Result: WIN (+{format_gbp(outcome.profit)})"
    if outcome.status == OUTCOME_PLACED:
        return f"Result: PLACED (+{format_gbp(outcome.profit)})"
    return f"Result: Lost (winner was {outcome.winner or 'unknown'})"

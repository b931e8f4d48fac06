def backoff_delay(base_delay_seconds: float, attempt: int) -> float:
    """Delay before retry number `attempt` (1-based): base, 2*base, 4*base, ..."""
    if attempt < 1:
        raise ValueError("attempt must be >= 1")
    return base_delay_seconds * (2 ** (attempt - 1))

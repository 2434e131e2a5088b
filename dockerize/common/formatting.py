"""Formatting helpers for sizes and durations shown to the user."""

_SIZE_UNITS = ("KB", "MB", "GB", "TB", "PB")


def format_bytes(size: int) -> str:
    """Format a byte count with binary units, e.g. ``1536`` -> ``"1.5KB"``."""
    if size < 1024:
        return f"{size}B"

    value = float(size)
    for unit in _SIZE_UNITS:
        value /= 1024
        if value < 1024:
            break
    return f"{value:.2f}".rstrip("0").rstrip(".") + unit


def format_duration(seconds: float) -> str:
    """Format elapsed seconds as ``"850ms"``, ``"12.3s"`` or ``"2m 5s"``."""
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, remainder = divmod(int(round(seconds)), 60)
    return f"{minutes}m {remainder}s"

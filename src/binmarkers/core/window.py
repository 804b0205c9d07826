"""Evidence window selection around a target marker."""

from typing import List

from ..exceptions import ConfigurationError


def surrounding_indices(last_index: int, index: int, half_width: int) -> List[int]:
    """
    Return the indices of the markers that vote on the marker at ``index``.

    When the scaffold holds at least ``2 * half_width + 1`` markers the window
    always has ``2 * half_width`` members: near either end it is clamped and
    extended into the far side instead of shrinking. Smaller scaffolds use
    every other marker.

    Args:
        last_index: Last valid 0-based index of the scaffold's markers
        index: Target index
        half_width: Markers taken on each side of the target

    Returns:
        Ascending list of evidence indices, never containing ``index``
    """
    n, i, w = last_index, index, half_width

    if n + 1 >= 2 * w + 1:
        if i < w:
            lower, upper = 0, 2 * w
        elif i > n - w:
            lower, upper = n - 2 * w, n
        else:
            lower, upper = i - w, i + w
    else:
        lower, upper = 0, n

    return list(range(lower, i)) + list(range(i + 1, upper + 1))


def is_edge(last_index: int, index: int, half_width: int) -> bool:
    """True for the first and last ``half_width`` markers of a scaffold."""
    return index < half_width or index > last_index - half_width


def check_window_settings(window: int, minimum: int = None) -> None:
    """
    Reject window and minimum-evidence settings no pass can work with.

    Raises:
        ConfigurationError: If ``window`` is not positive or ``minimum`` is below 2
    """
    if window is None or window <= 0:
        raise ConfigurationError(f"must be > 0, got {window}", parameter="window")
    if minimum is not None and minimum < 2:
        raise ConfigurationError(f"must be >= 2, got {minimum}", parameter="minimum")

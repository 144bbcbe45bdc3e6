"""Rounding and duplicate removal for fitness vectors and genomes.

LP solvers return objective values carrying floating-point noise, so two
genomes with the same phenotype rarely produce bit-identical fitness vectors.
Rounding to a fixed number of significant figures before comparison makes
duplicate detection robust. The precision is a tunable: too coarse merges
genuinely distinct solutions, too fine defeats deduplication.
"""

import numpy as np

# float64 carries 15 to 17 significant decimal digits
MAX_SIG_DIGITS = 15


def round_significant(values: np.ndarray, digits: int) -> np.ndarray:
    """Round values elementwise to a number of significant figures.

    Zeros and non-finite values pass through unchanged, and negative zero is
    normalized to zero so that it compares and reports like zero. Finite
    inputs, subnormals included, always round to finite outputs.

    Args:
        values: Array of any shape.
        digits: Number of significant figures to keep, 1 to MAX_SIG_DIGITS.

    Returns:
        New float64 array of the same shape.

    Raises:
        ValueError: If digits is out of range.

    Examples:
        >>> round_significant(np.array([0.123456, 2.0]), 3)
        array([0.123, 2.   ])
    """
    if digits <= 0:
        raise ValueError(f"digits must be positive, got {digits}")
    if digits > MAX_SIG_DIGITS:
        raise ValueError(f"digits must be at most {MAX_SIG_DIGITS}, got {digits}")

    values = np.asarray(values, dtype=np.float64)
    mask = np.isfinite(values) & (values != 0)

    magnitude = np.zeros_like(values)
    magnitude[mask] = np.floor(np.log10(np.abs(values[mask])))

    # Split the scale in two so neither factor leaves the finite range for
    # tiny or subnormal values; use the single factor wherever it is finite
    exponent = digits - 1 - magnitude
    first = np.floor(exponent / 2)
    low, high = 10.0**first, 10.0 ** (exponent - first)
    with np.errstate(over="ignore"):
        scale = low * high
    finite = np.isfinite(scale)
    safe = np.where(finite, scale, 1.0)

    direct = np.round(values * safe) / safe
    split = np.round(values * low * high) / high / low
    rounded = np.where(mask, np.where(finite, direct, split), values)
    return rounded + 0.0


def unique_rows(array: np.ndarray) -> np.ndarray:
    """Return the indices of the first occurrence of every distinct row.

    Args:
        array: 2D array of shape (n, m).

    Returns:
        Sorted integer array of row indices, so the relative order of the
        input is preserved and earlier rows win over later duplicates.

    Examples:
        >>> unique_rows(np.array([[1.0, 2.0], [0.5, 3.0], [1.0, 2.0]]))
        array([0, 1])
    """
    if array.ndim != 2:
        raise ValueError(f"array must be 2D, got shape {array.shape}")
    if array.shape[0] == 0:
        return np.array([], dtype=np.intp)

    _, first = np.unique(array, axis=0, return_index=True)
    return np.sort(first).astype(np.intp)

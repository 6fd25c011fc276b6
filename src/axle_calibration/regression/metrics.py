"""
Goodness-of-fit metrics shared by the channel and steer fitters.
"""

from typing import Optional, Sequence

import numpy as np


def r_squared(
    actual: Sequence[float],
    predicted: Sequence[float],
    min_total_variance: float = 1e-9,
) -> Optional[float]:
    """Coefficient of determination, None when the targets do not vary."""
    y = np.asarray(actual, dtype=float)
    y_hat = np.asarray(predicted, dtype=float)

    ss_tot = float(np.sum((y - y.mean()) ** 2))
    ss_res = float(np.sum((y - y_hat) ** 2))

    if ss_tot < min_total_variance:
        return None
    return 1.0 - ss_res / ss_tot


def rmse(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """Root mean squared error of the predictions."""
    y = np.asarray(actual, dtype=float)
    y_hat = np.asarray(predicted, dtype=float)
    if y.size == 0:
        return 0.0
    return float(np.sqrt(np.mean((y - y_hat) ** 2)))

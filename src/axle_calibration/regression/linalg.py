"""
Small dense linear algebra for the 3-parameter ridge fit.

The 3x3 inverse is computed in closed form from the adjugate so that a
near-singular system is detected explicitly instead of producing huge,
meaningless coefficients.
"""

import numpy as np

from axle_calibration.core.exceptions import SingularSystemError


def determinant_3x3(m: np.ndarray) -> float:
    """Cofactor expansion along the first row."""
    return float(
        m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
        - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
        + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
    )


def invert_3x3(m: np.ndarray, min_determinant: float = 1e-12) -> np.ndarray:
    """
    Invert a 3x3 matrix via its adjugate.

    The singularity threshold is relative to the Hadamard bound (product
    of row norms), floored at ``min_determinant`` for small matrices.
    Rounding leftovers of an exactly singular normal-equations matrix
    with large entries therefore still count as singular.

    Args:
        m: Matrix to invert.
        min_determinant: Smallest accepted ``|det|`` per unit of the
            Hadamard bound.

    Returns:
        The inverse matrix.

    Raises:
        SingularSystemError: If ``|det|`` falls below the threshold.
    """
    m = np.asarray(m, dtype=float)
    if m.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 matrix, got shape {m.shape}")

    det = determinant_3x3(m)
    hadamard = float(np.prod(np.linalg.norm(m, axis=1)))
    if abs(det) < min_determinant * max(1.0, hadamard):
        raise SingularSystemError(determinant=det)

    inv_det = 1.0 / det
    adjugate = np.array(
        [
            [
                m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1],
                m[0, 2] * m[2, 1] - m[0, 1] * m[2, 2],
                m[0, 1] * m[1, 2] - m[0, 2] * m[1, 1],
            ],
            [
                m[1, 2] * m[2, 0] - m[1, 0] * m[2, 2],
                m[0, 0] * m[2, 2] - m[0, 2] * m[2, 0],
                m[0, 2] * m[1, 0] - m[0, 0] * m[1, 2],
            ],
            [
                m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0],
                m[0, 1] * m[2, 0] - m[0, 0] * m[2, 1],
                m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0],
            ],
        ]
    )
    return adjugate * inv_det


def ridge_solve_3(
    design: np.ndarray,
    targets: np.ndarray,
    penalties: tuple[float, float, float],
    min_determinant: float = 1e-12,
) -> tuple[float, float, float]:
    """
    Solve ``(X^T X + diag(penalties))^-1 X^T y`` for three parameters.

    Args:
        design: N x 3 design matrix.
        targets: Length-N target vector.
        penalties: Ridge penalty per column (use 0 for the intercept).
        min_determinant: Singularity threshold passed to ``invert_3x3``.

    Returns:
        The three fitted coefficients.
    """
    X = np.asarray(design, dtype=float)
    y = np.asarray(targets, dtype=float)

    xtx = X.T @ X
    xty = X.T @ y
    xtx = xtx + np.diag(penalties)

    beta = invert_3x3(xtx, min_determinant) @ xty
    return float(beta[0]), float(beta[1]), float(beta[2])

"""Weight matrices mapping original periods to representative periods."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from tsrep.exceptions import WeightMatrixError

logger = logging.getLogger(__name__)

# tolerance of the row sums of a weight matrix
ROW_SUM_TOLERANCE = 1e-9

# max iterations of the projected gradient fit of convex weights
MAX_ITERATOR = 1000

# stop the projected gradient fit once no weight moves more than this
TOLERANCE = 1e-10


def build_weight_matrix(labels, n_rep_periods: int) -> np.ndarray:
    """One-hot weight matrix of a hard cluster assignment.

    :param labels: 0-based cluster index of every original period. required
    :type labels: np.ndarray

    :param n_rep_periods: Number of representative periods. required
    :type n_rep_periods: integer

    :returns: **weight_matrix** (np.ndarray) -- shape ``(len(labels), n_rep_periods)``
    """
    labels = np.asarray(labels, dtype=int)
    weight_matrix = np.zeros((len(labels), n_rep_periods))
    weight_matrix[np.arange(len(labels)), labels] = 1.0
    check_weight_matrix(weight_matrix)
    return weight_matrix


def project_onto_simplex(values: np.ndarray) -> np.ndarray:
    """Euclidean projection of every row onto the probability simplex."""
    n_rows, n_cols = values.shape
    sorted_desc = -np.sort(-values, axis=1)
    cumulative = np.cumsum(sorted_desc, axis=1) - 1.0
    positions = np.arange(1, n_cols + 1)
    support = sorted_desc - cumulative / positions > 0
    # last position where the condition holds
    rho = n_cols - 1 - np.argmax(support[:, ::-1], axis=1)
    theta = cumulative[np.arange(n_rows), rho] / (rho + 1)
    return np.maximum(values - theta[:, None], 0.0)


def fit_convex_weights(
    candidates: np.ndarray,
    cluster_centers: np.ndarray,
    initial_weights: np.ndarray | None = None,
    max_iter: int = MAX_ITERATOR,
) -> np.ndarray:
    """Fit every candidate by a convex combination of the cluster centers.

    Minimizes ``||candidate - weights @ cluster_centers||`` for every row with
    projected gradient descent, so all weights are non-negative and every row
    sums to one.

    Parameters
    ----------
    candidates : np.ndarray
        Period vectors, shape (n_periods, n_features).
    cluster_centers : np.ndarray
        Representative vectors, shape (n_rep_periods, n_features).
    initial_weights : np.ndarray, optional
        Starting point, typically the hard assignment. Defaults to uniform
        weights.
    max_iter : int, default 1000
        Upper bound on gradient steps.

    Returns
    -------
    np.ndarray
        Weight matrix of shape (n_periods, n_rep_periods).
    """
    candidates = np.asarray(candidates, dtype=float)
    cluster_centers = np.asarray(cluster_centers, dtype=float)
    n_periods, n_rep = len(candidates), len(cluster_centers)

    if initial_weights is None:
        weights = np.full((n_periods, n_rep), 1.0 / n_rep)
    else:
        weights = np.array(initial_weights, dtype=float)

    # Lipschitz constant of the gradient
    lipschitz = 2.0 * np.linalg.norm(cluster_centers, ord=2) ** 2
    if lipschitz <= 0.0:
        logger.debug("All representatives are zero, keeping the initial weights")
        return weights
    step = 1.0 / lipschitz

    gram = cluster_centers @ cluster_centers.T
    target = candidates @ cluster_centers.T
    for n_iter in range(max_iter):
        gradient = 2.0 * (weights @ gram - target)
        new_weights = project_onto_simplex(weights - step * gradient)
        change = np.abs(new_weights - weights).max()
        weights = new_weights
        if change < TOLERANCE:
            break
    logger.debug("Convex weight fit stopped after %d iterations", n_iter + 1)

    check_weight_matrix(weights)
    return weights


def check_weight_matrix(weight_matrix: np.ndarray) -> None:
    """Raise a WeightMatrixError unless all entries are non-negative and rows sum to 1."""
    weight_matrix = np.asarray(weight_matrix)
    if weight_matrix.ndim != 2:
        raise WeightMatrixError(
            f"weight matrix must be two-dimensional, got shape {weight_matrix.shape}"
        )
    if (weight_matrix < 0).any():
        row = int(np.argwhere(weight_matrix < 0)[0][0])
        raise WeightMatrixError(f"weight matrix has a negative entry in period {row + 1}")
    deviation = np.abs(weight_matrix.sum(axis=1) - 1.0)
    if (deviation > ROW_SUM_TOLERANCE).any():
        row = int(np.argmax(deviation))
        raise WeightMatrixError(
            f"weights of period {row + 1} sum to {weight_matrix[row].sum()!r} instead of 1"
        )


def summarize_weights(weight_matrix: np.ndarray) -> pd.Series:
    """Number of original periods represented by each representative period.

    For a hard assignment these are integer counts, for convex weights the
    fractional column sums. The index is the 1-based ``rep_period``.
    """
    weight_matrix = np.asarray(weight_matrix, dtype=float)
    return pd.Series(
        weight_matrix.sum(axis=0),
        index=pd.RangeIndex(1, weight_matrix.shape[1] + 1, name="rep_period"),
        name="num_periods",
    )

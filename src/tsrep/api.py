"""Functional API for finding representative periods."""

from __future__ import annotations

import logging
import time

import numpy as np
import pandas as pd
from sklearn import preprocessing

from tsrep.clustering import KMedoids
from tsrep.config import ClusterConfig
from tsrep.exceptions import ConfigurationError, DataError
from tsrep.periods import build_period_vectors, check_split_table, split_into_periods
from tsrep.result import ClusteringResult
from tsrep.weights import build_weight_matrix, fit_convex_weights

logger = logging.getLogger(__name__)


def find_representative_periods(
    profiles: pd.DataFrame,
    n_rep_periods: int,
    *,
    cluster: ClusterConfig | None = None,
) -> ClusteringResult:
    """Cluster the periods of all profiles into representative periods.

    All profiles are clustered jointly: one candidate is the concatenation of
    the values of every profile within the same period, so a representative
    period always holds consistent values for all profiles.

    Parameters
    ----------
    profiles : pd.DataFrame
        Either the output of :func:`tsrep.split_into_periods` (columns
        ``profile_name, period, time_step, value``), in which case the period
        duration is taken from the table, or a long profiles table
        (``profile_name`` or ``asset``, ``time_step``, ``value``) that is
        split with ``cluster.period_duration`` first.

    n_rep_periods : int
        Number of representative periods (clusters) to create. Must be
        between 1 and the number of periods.

    cluster : ClusterConfig, optional
        Clustering configuration. If not provided, uses defaults:
        - representation: "medoid"
        - distance_metric: "euclidean"
        - weight_type: "hard"

    Returns
    -------
    ClusteringResult
        Representative profiles, weight matrix and diagnostics.

    Raises
    ------
    ConfigurationError
        If ``n_rep_periods`` is out of range or a horizon does not divide
        into periods.
    DataError
        If the input table is malformed or contains non-finite values.

    Examples
    --------
    >>> split = tsrep.split_into_periods(profiles, period_duration=24)
    >>> result = tsrep.find_representative_periods(split, n_rep_periods=35)
    >>> result.weight_matrix.shape
    (365, 35)
    """
    if not isinstance(profiles, pd.DataFrame):
        raise DataError(
            f"profiles must be a pandas DataFrame, got {type(profiles).__name__}"
        )

    if cluster is None:
        cluster = ClusterConfig()

    if "period" in profiles.columns:
        split = profiles
        period_duration = check_split_table(split)
    else:
        period_duration = cluster.period_duration
        split = split_into_periods(profiles, period_duration=period_duration)

    period_vectors = build_period_vectors(split)
    n_periods = len(period_vectors)

    if (
        isinstance(n_rep_periods, bool)
        or not isinstance(n_rep_periods, (int, np.integer))
        or not 1 <= n_rep_periods <= n_periods
    ):
        raise ConfigurationError(
            f"n_rep_periods must be an integer between 1 and the number of "
            f"periods ({n_periods}), got {n_rep_periods!r}"
        )
    n_rep_periods = int(n_rep_periods)

    candidates = _prepare_candidates(split, period_vectors, period_duration, cluster)

    cluster_duration = time.time()
    k_medoids = KMedoids(
        n_clusters=n_rep_periods,
        distance_metric=cluster.distance_metric,
        method=cluster.representation,
        max_iter=cluster.max_iterations,
        random_state=cluster.random_seed,
    )
    labels = k_medoids.fit_predict(candidates)
    clustering_duration = time.time() - cluster_duration

    values = period_vectors.to_numpy(dtype=float)
    if cluster.representation == "medoid":
        medoid_indices = np.asarray(k_medoids.medoid_indices_)
        representatives = values[medoid_indices]
    else:
        medoid_indices = None
        representatives = np.array(
            [values[labels == label].mean(axis=0) for label in range(n_rep_periods)]
        )

    weight_matrix = build_weight_matrix(labels, n_rep_periods)
    if cluster.weight_type == "convex":
        weight_matrix = fit_convex_weights(
            candidates, k_medoids.cluster_centers_, initial_weights=weight_matrix
        )

    logger.info(
        "Found %d representative periods for %d periods of %d profiles in %.3f s",
        n_rep_periods,
        n_periods,
        period_vectors.columns.get_level_values(0).nunique(),
        clustering_duration,
    )

    return ClusteringResult(
        profiles=_representatives_to_long(
            representatives, period_vectors.columns, period_duration
        ),
        weight_matrix=weight_matrix,
        n_rep_periods=n_rep_periods,
        period_duration=period_duration,
        cluster_assignments=np.asarray(labels) + 1,
        medoid_indices=medoid_indices + 1 if medoid_indices is not None else None,
        inertia=k_medoids.inertia_,
        n_iterations=k_medoids.n_iter_,
        converged=k_medoids.converged_,
        clustering_duration=clustering_duration,
        period_vectors=period_vectors,
        resolution=float(cluster.resolution),
    )


def _prepare_candidates(
    split: pd.DataFrame,
    period_vectors: pd.DataFrame,
    period_duration: int,
    cluster: ClusterConfig,
) -> np.ndarray:
    """Scale and weight the period vectors as configured."""
    candidates = period_vectors.to_numpy(dtype=float)
    names = period_vectors.columns.get_level_values(0)

    if cluster.scale_profiles:
        # one column per profile over the whole horizon
        wide = split.assign(
            hour=(split["period"] - 1) * period_duration + split["time_step"]
        ).pivot(index="hour", columns="profile_name", values="value")
        min_max_scaler = preprocessing.MinMaxScaler()
        min_max_scaler.fit(wide.to_numpy(dtype=float))
        scale = pd.Series(min_max_scaler.scale_, index=wide.columns)
        offset = pd.Series(min_max_scaler.min_, index=wide.columns)
        candidates = candidates * scale[names].to_numpy() + offset[names].to_numpy()

    if cluster.profile_weights:
        missing = set(cluster.profile_weights) - set(names)
        if missing:
            raise ConfigurationError(f"Weighted profiles not found in data: {missing}")
        factors = np.array([cluster.profile_weights.get(name, 1.0) for name in names])
        candidates = candidates * factors

    return candidates


def _representatives_to_long(
    representatives: np.ndarray,
    columns: pd.MultiIndex,
    period_duration: int,
) -> pd.DataFrame:
    names = list(columns.get_level_values(0).unique())
    n_rep = len(representatives)
    per_profile = representatives.reshape(n_rep, len(names), period_duration).transpose(
        1, 0, 2
    )
    return pd.DataFrame(
        {
            "profile_name": np.repeat(names, n_rep * period_duration),
            "rep_period": np.tile(
                np.repeat(np.arange(1, n_rep + 1), period_duration), len(names)
            ),
            "time_step": np.tile(np.arange(1, period_duration + 1), n_rep * len(names)),
            "value": per_profile.ravel(),
        }
    )

"""Choosing the number of representative periods.

This module provides functions that cluster for several candidate numbers of
representative periods and compare the reconstruction error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd
import tqdm

from tsrep.api import find_representative_periods
from tsrep.config import ClusterConfig
from tsrep.exceptions import ConfigurationError
from tsrep.periods import check_split_table, split_into_periods

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tsrep.result import ClusteringResult

logger = logging.getLogger(__name__)


@dataclass
class TuningResult:
    """Result of a sweep over the number of representative periods.

    Attributes
    ----------
    optimal_n_rep_periods : int
        Selected number of representative periods.
    optimal_rmse : float
        Mean RMSE over all profiles of the selected configuration.
    history : list[dict]
        All tested configurations with their mean RMSE.
    best_result : ClusteringResult
        The ClusteringResult for the selected configuration.
    all_results : list[ClusteringResult]
        All ClusteringResults (only populated if save_all_results=True).
    """

    optimal_n_rep_periods: int
    optimal_rmse: float
    history: list[dict]
    best_result: ClusteringResult
    all_results: list[ClusteringResult] = field(default_factory=list)

    @property
    def summary(self) -> pd.DataFrame:
        """History as a DataFrame indexed by the number of representative periods."""
        return pd.DataFrame(self.history).set_index("n_rep_periods")


def _split_once(profiles: pd.DataFrame, cluster: ClusterConfig) -> pd.DataFrame:
    if "period" in profiles.columns:
        check_split_table(profiles)
        return profiles
    return split_into_periods(profiles, period_duration=cluster.period_duration)


def _test_candidates(
    candidates: Sequence[int],
    split: pd.DataFrame,
    cluster: ClusterConfig,
    show_progress: bool = False,
    progress_desc: str = "Testing representative periods",
) -> list[tuple[int, float, ClusteringResult | None]]:
    """Cluster for every candidate and return (n_rep_periods, rmse, result) tuples."""
    iterator: Sequence[int] | tqdm.tqdm = candidates
    if show_progress:
        iterator = tqdm.tqdm(candidates, desc=progress_desc)

    results: list[tuple[int, float, ClusteringResult | None]] = []
    for n_rep in iterator:
        try:
            result = find_representative_periods(split, int(n_rep), cluster=cluster)
            rmse = float(result.accuracy.rmse.mean())
            results.append((int(n_rep), rmse, result))
        except ConfigurationError as e:
            logger.debug("n_rep_periods=%d failed: %s", n_rep, e)
            results.append((int(n_rep), float("inf"), None))
    return results


def sweep_rep_periods(
    profiles: pd.DataFrame,
    candidates: Sequence[int],
    *,
    cluster: ClusterConfig | None = None,
    show_progress: bool = False,
    save_all_results: bool = False,
) -> TuningResult:
    """Cluster for every candidate number of representative periods.

    Parameters
    ----------
    profiles : pd.DataFrame
        Profiles table or the output of :func:`tsrep.split_into_periods`.
    candidates : sequence of int
        Numbers of representative periods to test. Candidates larger than
        the number of periods are skipped.
    cluster : ClusterConfig, optional
        Clustering configuration used for every candidate.
    show_progress : bool, default False
        Show a progress bar.
    save_all_results : bool, default False
        If True, keep all ClusteringResults in ``all_results``.

    Returns
    -------
    TuningResult
        The candidate with the lowest mean RMSE and the full history.

    Examples
    --------
    >>> tuning = sweep_rep_periods(profiles, candidates=[5, 10, 20, 40])
    >>> tuning.summary
                   rmse
    n_rep_periods
    5              0.21
    ...
    """
    if cluster is None:
        cluster = ClusterConfig()
    if len(candidates) == 0:
        raise ConfigurationError("candidates must not be empty")

    split = _split_once(profiles, cluster)
    results = _test_candidates(
        candidates, split, cluster, show_progress=show_progress
    )

    history: list[dict] = []
    all_results: list[ClusteringResult] = []
    best: tuple[int, float, ClusteringResult] | None = None
    for n_rep, rmse, result in results:
        if result is None:
            continue
        history.append({"n_rep_periods": n_rep, "rmse": rmse})
        if save_all_results:
            all_results.append(result)
        if best is None or rmse < best[1]:
            best = (n_rep, rmse, result)

    if best is None:
        raise ConfigurationError(
            f"None of the candidates {list(candidates)} could be clustered"
        )

    return TuningResult(
        optimal_n_rep_periods=best[0],
        optimal_rmse=best[1],
        history=history,
        best_result=best[2],
        all_results=all_results,
    )


def find_rep_periods_for_error(
    profiles: pd.DataFrame,
    max_rmse: float,
    *,
    cluster: ClusterConfig | None = None,
    max_n_rep_periods: int | None = None,
    show_progress: bool = False,
) -> TuningResult:
    """Smallest number of representative periods with a mean RMSE of at most ``max_rmse``.

    Candidates are tested in ascending order starting at 1 until the error
    bound is met. With ``k`` equal to the number of periods every period
    represents itself, so the bound is always met eventually for hard
    assignments.

    Parameters
    ----------
    profiles : pd.DataFrame
        Profiles table or the output of :func:`tsrep.split_into_periods`.
    max_rmse : float
        Upper bound on the mean RMSE over all profiles.
    cluster : ClusterConfig, optional
        Clustering configuration.
    max_n_rep_periods : int, optional
        Stop searching after this many representative periods.
        Defaults to the number of periods.
    show_progress : bool, default False
        Show a progress bar.

    Returns
    -------
    TuningResult
        Result for the first candidate that meets the bound.

    Raises
    ------
    ConfigurationError
        If ``max_rmse`` is negative or no candidate up to
        ``max_n_rep_periods`` meets the bound.
    """
    if cluster is None:
        cluster = ClusterConfig()
    if not max_rmse >= 0:
        raise ConfigurationError(f"max_rmse must be non-negative, got {max_rmse!r}")

    split = _split_once(profiles, cluster)
    n_periods = int(split["period"].max())
    upper = n_periods if max_n_rep_periods is None else min(max_n_rep_periods, n_periods)

    history: list[dict] = []
    iterator: range | tqdm.tqdm = range(1, upper + 1)
    if show_progress:
        iterator = tqdm.tqdm(iterator, desc="Searching representative periods")

    for n_rep in iterator:
        result = find_representative_periods(split, n_rep, cluster=cluster)
        rmse = float(result.accuracy.rmse.mean())
        history.append({"n_rep_periods": n_rep, "rmse": rmse})
        # tolerate floating point noise of a perfect reconstruction
        if rmse <= max_rmse or np.isclose(rmse, max_rmse):
            return TuningResult(
                optimal_n_rep_periods=n_rep,
                optimal_rmse=rmse,
                history=history,
                best_result=result,
            )

    raise ConfigurationError(
        f"No number of representative periods up to {upper} reaches "
        f"a mean RMSE of {max_rmse}"
    )

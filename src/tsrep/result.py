"""Result classes for tsrep clustering."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error

from tsrep.weights import summarize_weights


@dataclass
class AccuracyMetrics:
    """Accuracy metrics comparing reconstructed to original profiles.

    Attributes
    ----------
    rmse : pd.Series
        Root Mean Square Error per profile.
    mae : pd.Series
        Mean Absolute Error per profile.
    rmse_duration : pd.Series
        RMSE on duration curves (sorted values) per profile.
    """

    rmse: pd.Series
    mae: pd.Series
    rmse_duration: pd.Series

    def __repr__(self) -> str:
        return (
            f"AccuracyMetrics(\n"
            f"  rmse={self.rmse.mean():.4f} (mean),\n"
            f"  mae={self.mae.mean():.4f} (mean),\n"
            f"  rmse_duration={self.rmse_duration.mean():.4f} (mean)\n"
            f")"
        )


@dataclass(frozen=True)
class ClusteringResult:
    """Representative periods and weights of one clustering run.

    The result is immutable: it is created once by
    :func:`tsrep.find_representative_periods` and only read afterwards.

    Attributes
    ----------
    profiles : pd.DataFrame
        Representative values with the columns
        ``profile_name, rep_period, time_step, value``, sorted by profile
        name, representative period and time step. ``rep_period`` and
        ``time_step`` are 1-based.

    weight_matrix : np.ndarray
        Shape (n_periods, n_rep_periods). Row ``p - 1`` holds the weights of
        original period ``p``; every row sums to 1.

    n_rep_periods : int
        Number of representative periods.

    period_duration : int
        Number of time steps per period.

    cluster_assignments : np.ndarray
        1-based representative period of every original period.

    medoid_indices : np.ndarray | None
        1-based original period chosen as representative for each
        representative period, None for the mean representation.

    inertia : float
        Sum of distances of all periods to their cluster centers.

    n_iterations : int
        Number of assign/update iterations that were run.

    converged : bool
        Whether the assignment became stable before ``max_iterations``.

    clustering_duration : float
        Time taken for clustering in seconds.

    period_vectors : pd.DataFrame
        The original period vectors, one row per period, columns
        ``(profile_name, time_step)``.

    resolution : float
        Duration of one time step in hours.

    Examples
    --------
    >>> result = tsrep.find_representative_periods(split, n_rep_periods=10)
    >>> result.cluster_weights
    rep_period
    1     41.0
    2     37.0
    ...
    >>> result.accuracy.rmse.mean()
    0.081
    """

    profiles: pd.DataFrame
    weight_matrix: np.ndarray
    n_rep_periods: int
    period_duration: int
    cluster_assignments: np.ndarray
    medoid_indices: np.ndarray | None
    inertia: float
    n_iterations: int
    converged: bool
    clustering_duration: float
    period_vectors: pd.DataFrame = field(repr=False)
    resolution: float = 1.0

    def __post_init__(self) -> None:
        self.weight_matrix.setflags(write=False)
        self.cluster_assignments.setflags(write=False)
        if self.medoid_indices is not None:
            self.medoid_indices.setflags(write=False)

    def __repr__(self) -> str:
        return (
            f"ClusteringResult(\n"
            f"  n_rep_periods={self.n_rep_periods},\n"
            f"  n_periods={self.n_periods},\n"
            f"  period_duration={self.period_duration},\n"
            f"  converged={self.converged}\n"
            f")"
        )

    @property
    def n_periods(self) -> int:
        """Number of original periods."""
        return int(self.weight_matrix.shape[0])

    @property
    def profile_names(self) -> list[str]:
        """Names of all clustered profiles in period vector order."""
        return list(self.period_vectors.columns.get_level_values(0).unique())

    @property
    def cluster_weights(self) -> pd.Series:
        """How many original periods each representative period stands for."""
        return summarize_weights(self.weight_matrix)

    @property
    def representative_vectors(self) -> pd.DataFrame:
        """Representative periods in period vector form, indexed by ``rep_period``."""
        vectors = self.profiles.pivot(
            index="rep_period", columns=["profile_name", "time_step"], values="value"
        )
        return vectors.reindex(columns=self.period_vectors.columns)

    def reconstruct(self) -> pd.DataFrame:
        """Approximate the original profiles from the representative periods.

        Every original period is replaced by the weighted combination of the
        representative periods given by its row of the weight matrix.

        Returns
        -------
        pd.DataFrame
            Long table ``profile_name, time_step, value`` with the same
            profiles and horizon as the input.
        """
        approximation = self.weight_matrix @ self.representative_vectors.to_numpy()
        return self._to_long(approximation)

    def original(self) -> pd.DataFrame:
        """The clustered profiles as long table ``profile_name, time_step, value``."""
        return self._to_long(self.period_vectors.to_numpy(dtype=float))

    def _to_long(self, matrix: np.ndarray) -> pd.DataFrame:
        names = self.profile_names
        n_periods = matrix.shape[0]
        horizon = n_periods * self.period_duration
        per_profile = (
            matrix.reshape(n_periods, len(names), self.period_duration)
            .transpose(1, 0, 2)
            .reshape(len(names), horizon)
        )
        return pd.DataFrame(
            {
                "profile_name": np.repeat(names, horizon),
                "time_step": np.tile(np.arange(1, horizon + 1), len(names)),
                "value": per_profile.ravel(),
            }
        )

    @property
    def accuracy(self) -> AccuracyMetrics:
        """RMSE, MAE and duration curve RMSE of :meth:`reconstruct` per profile."""
        original = self.original()
        predicted = self.reconstruct()

        indicatorRaw: dict[str, dict[str, float]] = {
            "RMSE": {},
            "RMSE_duration": {},
            "MAE": {},
        }
        for name in self.profile_names:
            origTS = original.loc[original.profile_name == name, "value"].to_numpy()
            predTS = predicted.loc[predicted.profile_name == name, "value"].to_numpy()
            indicatorRaw["RMSE"][name] = float(np.sqrt(mean_squared_error(origTS, predTS)))
            indicatorRaw["RMSE_duration"][name] = float(
                np.sqrt(mean_squared_error(np.sort(origTS)[::-1], np.sort(predTS)[::-1]))
            )
            indicatorRaw["MAE"][name] = float(mean_absolute_error(origTS, predTS))

        return AccuracyMetrics(
            rmse=pd.Series(indicatorRaw["RMSE"], name="rmse"),
            mae=pd.Series(indicatorRaw["MAE"], name="mae"),
            rmse_duration=pd.Series(indicatorRaw["RMSE_duration"], name="rmse_duration"),
        )

    def to_dict(self) -> dict:
        """Export results as a dictionary for serialization.

        Returns
        -------
        dict
            Dictionary containing all result data in serializable format.
        """
        return {
            "profiles": self.profiles.to_dict(orient="list"),
            "weight_matrix": self.weight_matrix.tolist(),
            "n_rep_periods": self.n_rep_periods,
            "period_duration": self.period_duration,
            "cluster_assignments": self.cluster_assignments.tolist(),
            "medoid_indices": self.medoid_indices.tolist()
            if self.medoid_indices is not None
            else None,
            "inertia": self.inertia,
            "n_iterations": self.n_iterations,
            "converged": self.converged,
            "clustering_duration": self.clustering_duration,
            "resolution": self.resolution,
        }

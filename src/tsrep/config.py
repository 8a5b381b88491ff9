"""Configuration classes for tsrep clustering."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Literal

import numpy as np

from tsrep.exceptions import ConfigurationError
from tsrep.periods import check_period_duration

# Type aliases for clarity
RepresentationMethod = Literal[
    "medoid",
    "mean",
]

DistanceMetric = Literal[
    "euclidean",
    "sqeuclidean",
    "cityblock",
    "chebyshev",
    "cosine",
]

WeightType = Literal[
    "hard",
    "convex",
]

DISTANCE_METRICS: tuple[str, ...] = (
    "euclidean",
    "sqeuclidean",
    "cityblock",
    "chebyshev",
    "cosine",
)

REPRESENTATION_METHODS: tuple[str, ...] = ("medoid", "mean")

WEIGHT_TYPES: tuple[str, ...] = ("hard", "convex")


@dataclass(frozen=True)
class ClusterConfig:
    """Configuration for finding representative periods.

    Parameters
    ----------
    period_duration : int, default 24
        Number of time steps per period. The horizon of every profile must be
        an integer multiple of it.

    representation : str, default "medoid"
        How a cluster is represented:
        - "medoid": The member period with the smallest summed distance to
          all other members (an actual period of the input)
        - "mean": Elementwise average of the member periods

    distance_metric : str, default "euclidean"
        Distance between two period vectors. One of "euclidean",
        "sqeuclidean", "cityblock", "chebyshev" or "cosine".

    random_seed : int, default 0
        Seed for choosing the initial centers. Identical input and seed
        always give identical results.

    max_iterations : int, default 300
        Upper bound on assign/update iterations. Reaching it emits a
        ConvergenceWarning and returns the last assignment.

    weight_type : str, default "hard"
        How original periods are mapped to representatives:
        - "hard": Each period gets weight 1 on its own cluster
        - "convex": Each period is fitted as a convex combination of all
          representatives (non-negative weights summing to 1)

    scale_profiles : bool, default False
        Min-max scale every profile before computing distances.
        Useful when profiles have very different magnitudes.
        Representatives are always reported in original units.

    profile_weights : dict[str, float], optional
        Per-profile factors applied to the (scaled) values before computing
        distances. Higher weight = more influence on clustering.
        Example: {"demand-Midgard_E_demand": 2.0}

    resolution : float, default 1.0
        Duration of one time step in hours, reported in rep_periods_data.
    """

    period_duration: int = 24
    representation: RepresentationMethod = "medoid"
    distance_metric: DistanceMetric = "euclidean"
    random_seed: int = 0
    max_iterations: int = 300
    weight_type: WeightType = "hard"
    scale_profiles: bool = False
    profile_weights: Mapping[str, float] | None = None
    resolution: float = 1.0

    def __post_init__(self) -> None:
        check_period_duration(self.period_duration)
        # numpy integers are stored as plain ints
        for name in ["period_duration", "random_seed", "max_iterations"]:
            value = getattr(self, name)
            if isinstance(value, np.integer):
                object.__setattr__(self, name, int(value))
        if self.representation not in REPRESENTATION_METHODS:
            raise ConfigurationError(
                f"representation needs to be one of {list(REPRESENTATION_METHODS)}, "
                f"got {self.representation!r}"
            )
        if self.distance_metric not in DISTANCE_METRICS:
            raise ConfigurationError(
                f"distance_metric needs to be one of {list(DISTANCE_METRICS)}, "
                f"got {self.distance_metric!r}"
            )
        if self.weight_type not in WEIGHT_TYPES:
            raise ConfigurationError(
                f"weight_type needs to be one of {list(WEIGHT_TYPES)}, "
                f"got {self.weight_type!r}"
            )
        if (
            not isinstance(self.random_seed, (int, np.integer))
            or isinstance(self.random_seed, bool)
        ):
            raise ConfigurationError(
                f"random_seed must be an integer, got {self.random_seed!r}"
            )
        if (
            not isinstance(self.max_iterations, (int, np.integer))
            or isinstance(self.max_iterations, bool)
            or self.max_iterations < 1
        ):
            raise ConfigurationError(
                f"max_iterations must be a positive integer, got {self.max_iterations!r}"
            )
        if not isinstance(self.scale_profiles, bool):
            raise ConfigurationError("scale_profiles has to be boolean")
        if self.profile_weights is not None:
            for name, weight in self.profile_weights.items():
                if not weight > 0:
                    raise ConfigurationError(
                        f"weight of profile {name!r} must be positive, got {weight!r}"
                    )
            # read-only copy of the weights
            object.__setattr__(
                self, "profile_weights", MappingProxyType(dict(self.profile_weights))
            )
        if not isinstance(self.resolution, (int, float)) or not self.resolution > 0:
            raise ConfigurationError(
                f"resolution must be a positive number, got {self.resolution!r}"
            )

    def __hash__(self) -> int:
        values = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Mapping):
                value = frozenset(value.items())
            values.append(value)
        return hash(tuple(values))

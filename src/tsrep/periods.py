"""Splitting profiles into fixed-length periods."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from tsrep.exceptions import ConfigurationError, DataError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

# name of the series column in the external profiles table
EXTERNAL_NAME_COLUMN = "asset"

PROFILE_COLUMNS = ["profile_name", "time_step", "value"]

SPLIT_COLUMNS = ["profile_name", "period", "time_step", "value"]


def check_period_duration(period_duration) -> None:
    """Raise a ConfigurationError unless ``period_duration`` is a positive integer."""
    if (
        not isinstance(period_duration, (int, np.integer))
        or isinstance(period_duration, bool)
        or period_duration < 1
    ):
        raise ConfigurationError(
            f"period_duration must be a positive integer, got {period_duration!r}"
        )


@dataclass(frozen=True)
class Period:
    """One period of a profile.

    Attributes
    ----------
    series_name : str
        Name of the profile the period was cut from.
    index : int
        1-based position of the period within the profile.
    values : np.ndarray
        The ``period_duration`` values of the period.
    """

    series_name: str
    index: int
    values: np.ndarray

    def __len__(self) -> int:
        return len(self.values)


class PeriodSequence:
    """Lazy sequence of the periods of one profile.

    Periods are sliced on demand. The sequence can be iterated any number of
    times and always yields the same periods.

    Parameters
    ----------
    series_name : str
        Name of the profile.
    values : array-like
        All values of the profile, ordered by time step.
    period_duration : int
        Number of time steps per period.

    Raises
    ------
    ConfigurationError
        If ``period_duration`` is not a positive integer or the length of
        ``values`` is not an integer multiple of it.

    Examples
    --------
    >>> seq = PeriodSequence("demand-Midgard", np.arange(48.0), 24)
    >>> len(seq)
    2
    >>> [period.index for period in seq]
    [1, 2]
    """

    def __init__(self, series_name: str, values, period_duration: int) -> None:
        check_period_duration(period_duration)
        self.series_name = series_name
        self.values = np.asarray(values, dtype=float)
        self.period_duration = int(period_duration)

        horizon = len(self.values)
        if horizon % self.period_duration != 0:
            raise ConfigurationError(
                f"The horizon of series {series_name!r} has {horizon} time steps, "
                f"which is not a multiple of period_duration={self.period_duration}"
            )

    def __len__(self) -> int:
        return len(self.values) // self.period_duration

    def __iter__(self) -> Iterator[Period]:
        for ii in range(len(self)):
            start = ii * self.period_duration
            yield Period(
                self.series_name,
                ii + 1,
                self.values[start : start + self.period_duration],
            )

    def __repr__(self) -> str:
        return (
            f"PeriodSequence({self.series_name!r}, num_periods={len(self)}, "
            f"period_duration={self.period_duration})"
        )

    def to_frame(self) -> pd.DataFrame:
        """Long table ``(profile_name, period, time_step, value)`` of all periods."""
        n_periods = len(self)
        return pd.DataFrame(
            {
                "profile_name": self.series_name,
                "period": np.repeat(np.arange(1, n_periods + 1), self.period_duration),
                "time_step": np.tile(
                    np.arange(1, self.period_duration + 1), n_periods
                ),
                "value": self.values,
            },
            columns=SPLIT_COLUMNS,
        )


def validate_series(name: str, time_steps) -> None:
    """Check that ``time_steps`` are exactly ``1..H`` in ascending order.

    :param name: Name of the series, used in error messages. required
    :type name: string

    :param time_steps: Time steps of the series in table order. required
    :type time_steps: np.ndarray
    """
    time_steps = np.asarray(time_steps)
    expected = np.arange(1, len(time_steps) + 1)
    if len(np.unique(time_steps)) != len(time_steps):
        raise DataError(f"series {name!r} contains duplicate time steps")
    if not np.array_equal(time_steps, expected):
        raise DataError(
            f"time steps of series {name!r} must be the contiguous integers "
            f"1..{len(time_steps)}"
        )


def as_profiles_table(profiles: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``profiles`` with the columns ``profile_name, time_step, value``.

    The external column name ``asset`` is accepted for ``profile_name``.
    """
    if not isinstance(profiles, pd.DataFrame):
        raise DataError(
            f"profiles must be a pandas DataFrame, got {type(profiles).__name__}"
        )
    table = profiles.rename(columns={EXTERNAL_NAME_COLUMN: "profile_name"})
    missing = [col for col in PROFILE_COLUMNS if col not in table.columns]
    if missing:
        raise DataError(f"profiles table is missing the columns {missing}")
    if table.empty:
        raise DataError("profiles table is empty")

    table = table[PROFILE_COLUMNS].copy()
    try:
        table["value"] = pd.to_numeric(table["value"]).astype(float)
    except (TypeError, ValueError) as e:
        raise DataError(f"profile values must be numeric: {e}") from e
    if not pd.api.types.is_integer_dtype(table["time_step"]):
        raise DataError("time_step must be an integer column")
    return table


def split_into_periods(
    profiles: pd.DataFrame,
    period_duration: int = 24,
) -> pd.DataFrame:
    """Split every profile into consecutive periods of equal length.

    Parameters
    ----------
    profiles : pd.DataFrame
        Long table with one row per profile and time step and the columns
        ``profile_name`` (or ``asset``), ``time_step`` and ``value``.
        The time steps of each profile must be ``1..H``.

    period_duration : int, default 24
        Number of time steps per period.

    Returns
    -------
    pd.DataFrame
        New table with the columns ``profile_name, period, time_step, value``
        sorted by profile name, period and time step. ``period`` is 1-based
        and ``time_step`` counts from 1 within each period.

    Raises
    ------
    ConfigurationError
        If ``period_duration`` is invalid or a horizon is not a multiple of it.
    DataError
        If the table is malformed or profiles have different horizons.

    Examples
    --------
    >>> split = split_into_periods(profiles, period_duration=24)
    >>> split[split.profile_name == "availability-Asgard_Solar"].period.max()
    365
    """
    check_period_duration(period_duration)
    table = as_profiles_table(profiles)

    frames = []
    horizons = {}
    for name, group in table.groupby("profile_name", sort=True):
        group = group.sort_values("time_step", kind="stable")
        validate_series(name, group["time_step"].to_numpy())
        sequence = PeriodSequence(name, group["value"].to_numpy(), period_duration)
        horizons[name] = len(group)
        frames.append(sequence.to_frame())

    if len(set(horizons.values())) > 1:
        raise DataError(f"all profiles need the same horizon, got {horizons}")

    split = pd.concat(frames, ignore_index=True)
    logger.debug(
        "Split %d profiles into %d periods of %d time steps",
        len(horizons),
        split["period"].max(),
        period_duration,
    )
    return split


def check_split_table(split_profiles: pd.DataFrame) -> int:
    """Validate a table in the layout of :func:`split_into_periods`.

    Every profile needs the periods ``1..n`` and every period the time steps
    ``1..period_duration``, each exactly once.

    :param split_profiles: Split profiles table. required
    :type split_profiles: pandas DataFrame

    :returns: **period_duration** (integer) -- number of time steps per period
    """
    missing = [col for col in SPLIT_COLUMNS if col not in split_profiles.columns]
    if missing:
        raise DataError(f"split profiles table is missing the columns {missing}")
    if split_profiles.empty:
        raise DataError("split profiles table is empty")
    for col in ["period", "time_step"]:
        if not pd.api.types.is_integer_dtype(split_profiles[col]):
            raise DataError(f"{col} must be an integer column")
    if split_profiles.duplicated(["profile_name", "period", "time_step"]).any():
        raise DataError("split profiles table contains duplicate rows")

    periods = np.sort(split_profiles["period"].unique())
    if not np.array_equal(periods, np.arange(1, len(periods) + 1)):
        raise DataError(
            f"periods must be the contiguous integers 1..n, got {periods.tolist()}"
        )
    period_duration = int(split_profiles["time_step"].max())
    if split_profiles["time_step"].min() < 1:
        raise DataError("time steps within a period must start at 1")

    n_profiles = split_profiles["profile_name"].nunique()
    expected = n_profiles * len(periods) * period_duration
    if len(split_profiles) != expected:
        counts = split_profiles.groupby(["profile_name", "period"]).size()
        incomplete = counts[counts != period_duration]
        if len(incomplete):
            name, period = incomplete.index[0]
        else:
            # some profile lacks a whole period
            present = split_profiles.groupby("profile_name")["period"].nunique()
            name, period = present.idxmin(), None
        raise DataError(
            f"split profiles table is incomplete: series {name!r}"
            + (f", period {period}" if period is not None else "")
            + f" does not have {period_duration} time steps in each of "
            f"{len(periods)} periods"
        )
    return period_duration


def build_period_vectors(split_profiles: pd.DataFrame) -> pd.DataFrame:
    """Concatenate the values of all profiles for each period.

    :param split_profiles: Output of :func:`split_into_periods`. required
    :type split_profiles: pandas DataFrame

    :returns: **period_vectors** (pandas DataFrame) -- one row per period
        (index ``period``), columns are a ``(profile_name, time_step)``
        MultiIndex sorted by profile name and time step.
    """
    missing = [col for col in SPLIT_COLUMNS if col not in split_profiles.columns]
    if missing:
        raise DataError(f"split profiles table is missing the columns {missing}")
    if split_profiles.duplicated(["profile_name", "period", "time_step"]).any():
        raise DataError("split profiles table contains duplicate rows")

    vectors = split_profiles.pivot(
        index="period", columns=["profile_name", "time_step"], values="value"
    ).sort_index(axis=0).sort_index(axis=1)

    values = vectors.to_numpy(dtype=float)
    bad = ~np.isfinite(values)
    if bad.any():
        row, col = np.argwhere(bad)[0]
        raise DataError(
            f"non-finite value in series {vectors.columns[col][0]!r}, "
            f"period {vectors.index[row]}"
        )
    return vectors

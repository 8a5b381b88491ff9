"""Reshaping clustering results into the tables of an energy system model.

The model expects three tables:

* ``rep_periods_data`` -- ``rep_period, num_timesteps, resolution``
* ``rep_periods_mapping`` -- ``period, rep_period, weight`` (nonzero weights only)
* ``profiles_rep_periods`` -- ``profile_name, rep_period, timestep, value``

None of the functions modify the :class:`~tsrep.result.ClusteringResult`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from tsrep.exceptions import DataError
from tsrep.naming import parse_profile_names

if TYPE_CHECKING:
    from collections.abc import Mapping

    from tsrep.naming import ProfileName
    from tsrep.result import ClusteringResult


def rep_periods_data(
    result: ClusteringResult, resolution: float | None = None
) -> pd.DataFrame:
    """One row per representative period with its length and time step duration.

    :param resolution: Hours per time step. optional (default: ``result.resolution``)
    :type resolution: float
    """
    if resolution is None:
        resolution = result.resolution
    return pd.DataFrame(
        {
            "rep_period": np.arange(1, result.n_rep_periods + 1),
            "num_timesteps": result.period_duration,
            "resolution": float(resolution),
        }
    )


def rep_periods_mapping(result: ClusteringResult) -> pd.DataFrame:
    """Nonzero entries of the weight matrix, sorted by period and representative period."""
    weight_matrix = result.weight_matrix
    # np.nonzero walks the matrix row by row
    periods, rep_periods = np.nonzero(weight_matrix)
    return pd.DataFrame(
        {
            "period": periods + 1,
            "rep_period": rep_periods + 1,
            "weight": weight_matrix[periods, rep_periods].astype(float),
        }
    )


def profiles_rep_periods(
    result: ClusteringResult,
    names: Mapping[str, ProfileName] | None = None,
) -> pd.DataFrame:
    """Representative values with the serialized ``<type>-<name>`` profile name.

    :param names: Parsed profile names keyed by the names used in ``result``. If not
        given, the names are parsed here. optional
    :type names: dict

    :returns: **table** (pandas DataFrame) -- columns ``profile_name, rep_period,
        timestep, value`` sorted by ``profile_name``, ``rep_period`` and ``timestep``
    """
    table = _named_profiles(result, names)
    table["profile_name"] = [str(name) for name in table["name"]]
    table = table.sort_values(
        ["profile_name", "rep_period", "timestep"], kind="mergesort"
    )
    return table[["profile_name", "rep_period", "timestep", "value"]].reset_index(
        drop=True
    )


def profiles_rep_periods_by_type(
    result: ClusteringResult,
    names: Mapping[str, ProfileName] | None = None,
) -> dict[str, pd.DataFrame]:
    """Split :func:`profiles_rep_periods` into one table per profile type.

    Within each table ``profile_name`` holds only the entity name, e.g. the
    table for ``"availability"`` contains ``"Asgard_Solar"`` rather than
    ``"availability-Asgard_Solar"``.
    """
    table = _named_profiles(result, names)
    table["profile_type"] = [name.profile_type for name in table["name"]]
    table["profile_name"] = [name.entity_name for name in table["name"]]

    tables = {}
    for profile_type, group in table.groupby("profile_type", sort=True):
        group = group.sort_values(
            ["profile_name", "rep_period", "timestep"], kind="mergesort"
        )
        tables[profile_type] = group[
            ["profile_name", "rep_period", "timestep", "value"]
        ].reset_index(drop=True)
    return tables


def export_tables(
    result: ClusteringResult,
    names: Mapping[str, ProfileName] | None = None,
    resolution: float | None = None,
) -> dict[str, pd.DataFrame]:
    """All three model tables keyed by their table name."""
    return {
        "rep_periods_data": rep_periods_data(result, resolution=resolution),
        "rep_periods_mapping": rep_periods_mapping(result),
        "profiles_rep_periods": profiles_rep_periods(result, names=names),
    }


def _named_profiles(
    result: ClusteringResult, names: Mapping[str, ProfileName] | None
) -> pd.DataFrame:
    if names is None:
        names = parse_profile_names(result.profile_names)
    table = result.profiles.rename(columns={"time_step": "timestep"})
    unknown = sorted(set(table["profile_name"]) - set(names))
    if unknown:
        raise DataError(f"No parsed profile name for {unknown}")
    table["name"] = [names[name] for name in table["profile_name"]]
    return table

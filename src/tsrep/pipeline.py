"""Pipeline composing segmentation, clustering, weights and export."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field

import pandas as pd

from tsrep.api import find_representative_periods
from tsrep.config import ClusterConfig
from tsrep.export import export_tables, profiles_rep_periods_by_type
from tsrep.io import TableStore
from tsrep.naming import ProfileName, parse_profile_names
from tsrep.periods import as_profiles_table, split_into_periods
from tsrep.result import ClusteringResult
from tsrep.weights import check_weight_matrix, summarize_weights

logger = logging.getLogger(__name__)


@dataclass
class PipelineContext:
    """Everything one pipeline run reads from and writes to.

    Created by the caller and passed into :meth:`RepresentativePeriodPipeline.run`.
    The pipeline keeps no reference to it after the call returns.

    Attributes
    ----------
    store : TableStore
        Input tables and, after the run, the exported tables.
    run_id : str
        Identifier used in log messages.
    profile_names : dict[str, ProfileName]
        Parsed profile names, filled during the run.
    result : ClusteringResult | None
        The clustering result of the run, filled during the run.
    """

    store: TableStore = field(default_factory=TableStore)
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    profile_names: dict[str, ProfileName] = field(default_factory=dict)
    result: ClusteringResult | None = None


class RepresentativePeriodPipeline:
    """
    Finds representative periods for a profiles table and exports them.

    The stages can be called on their own:

    1. :meth:`segment` -- validate profile names and split into periods
    2. :meth:`cluster` -- cluster the periods and build the weight matrix
    3. :meth:`weights` -- check the weight matrix and count periods per representative
    4. :meth:`export` -- reshape into the model tables

    :param n_rep_periods: Number of representative periods. required
    :type n_rep_periods: integer

    :param cluster: Clustering configuration. optional (default: ClusterConfig())
    :type cluster: ClusterConfig
    """

    OUTPUT_TABLES = ["rep_periods_data", "rep_periods_mapping", "profiles_rep_periods"]

    def __init__(self, n_rep_periods: int, cluster: ClusterConfig | None = None) -> None:
        self.n_rep_periods = n_rep_periods
        self.cluster_config = cluster if cluster is not None else ClusterConfig()

    def segment(
        self, profiles: pd.DataFrame
    ) -> tuple[pd.DataFrame, dict[str, ProfileName]]:
        """Parse the profile names and split the profiles into periods."""
        table = as_profiles_table(profiles)
        names = parse_profile_names(table["profile_name"])
        split = split_into_periods(table, period_duration=self.cluster_config.period_duration)
        return split, names

    def cluster(self, split: pd.DataFrame) -> ClusteringResult:
        """Cluster the split profiles."""
        return find_representative_periods(
            split, self.n_rep_periods, cluster=self.cluster_config
        )

    def weights(self, result: ClusteringResult) -> pd.Series:
        """Check the weight matrix of ``result`` and count periods per representative."""
        check_weight_matrix(result.weight_matrix)
        return summarize_weights(result.weight_matrix)

    def export(
        self, result: ClusteringResult, names: dict[str, ProfileName]
    ) -> dict[str, pd.DataFrame]:
        """Model tables, including one ``profiles_rep_periods_<type>`` table per profile type."""
        tables = export_tables(result, names=names)
        for profile_type, table in profiles_rep_periods_by_type(result, names=names).items():
            tables[f"profiles_rep_periods_{profile_type}"] = table
        return tables

    def run(
        self, context: PipelineContext, profiles_table: str = "profiles"
    ) -> ClusteringResult:
        """Run all stages on ``context.store[profiles_table]``.

        The exported tables are registered in ``context.store`` and the
        result is stored in ``context.result``.
        """
        logger.info("[%s] Segmenting table %r", context.run_id, profiles_table)
        split, names = self.segment(context.store[profiles_table])
        context.profile_names = names

        logger.info(
            "[%s] Clustering %d profiles into %d representative periods",
            context.run_id,
            len(names),
            self.n_rep_periods,
        )
        result = self.cluster(split)

        cluster_weights = self.weights(result)
        logger.debug("[%s] Periods per representative: %s", context.run_id, cluster_weights.to_dict())

        tables = self.export(result, names)
        for name, table in tables.items():
            context.store.register(name, table)
        logger.info("[%s] Registered tables %s", context.run_id, sorted(tables))

        context.result = result
        return result

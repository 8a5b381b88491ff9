"""tsrep - representative periods for energy system models.

Clusters the periods (e.g. days) of many hourly profiles jointly into a small
set of representative periods and a weight matrix that maps every original
period onto them. The results are exported in the table layout expected by
energy system optimization models.

Quick Start
-----------
>>> import pandas as pd
>>> import tsrep
>>>
>>> # Long table with the columns asset, time_step, value
>>> profiles = pd.read_csv("all-profiles.csv", header=1)
>>>
>>> # Split the year into days and find 35 representative days
>>> split = tsrep.split_into_periods(profiles, period_duration=24)
>>> result = tsrep.find_representative_periods(split, n_rep_periods=35)
>>>
>>> # Access results
>>> result.weight_matrix.shape
(365, 35)
>>> tables = tsrep.export_tables(result)

For more control, use configuration objects:

>>> from tsrep import ClusterConfig, find_representative_periods
>>>
>>> result = find_representative_periods(
...     split,
...     n_rep_periods=35,
...     cluster=ClusterConfig(representation="mean", weight_type="convex"),
... )

Pipeline
--------
The full run from an input table to registered output tables:

>>> store = tsrep.TableStore.from_csv_folder("data")
>>> context = tsrep.PipelineContext(store)
>>> tsrep.RepresentativePeriodPipeline(n_rep_periods=35).run(
...     context, profiles_table="all_profiles"
... )
>>> store["rep_periods_mapping"]
"""

from tsrep.api import find_representative_periods
from tsrep.clustering import KMedoids
from tsrep.config import ClusterConfig
from tsrep.exceptions import (
    ConfigurationError,
    ConvergenceWarning,
    DataError,
    WeightMatrixError,
)
from tsrep.export import (
    export_tables,
    profiles_rep_periods,
    profiles_rep_periods_by_type,
    rep_periods_data,
    rep_periods_mapping,
)
from tsrep.io import TableStore
from tsrep.naming import ProfileName
from tsrep.periods import (
    PeriodSequence,
    build_period_vectors,
    check_split_table,
    split_into_periods,
)
from tsrep.pipeline import PipelineContext, RepresentativePeriodPipeline
from tsrep.result import AccuracyMetrics, ClusteringResult
from tsrep.tuning import TuningResult, find_rep_periods_for_error, sweep_rep_periods
from tsrep.weights import build_weight_matrix, fit_convex_weights

__version__ = "0.3.0"

__all__ = [
    "AccuracyMetrics",
    "ClusterConfig",
    "ClusteringResult",
    "ConfigurationError",
    "ConvergenceWarning",
    "DataError",
    "KMedoids",
    "PeriodSequence",
    "PipelineContext",
    "ProfileName",
    "RepresentativePeriodPipeline",
    "TableStore",
    "TuningResult",
    "WeightMatrixError",
    "build_period_vectors",
    "build_weight_matrix",
    "check_split_table",
    "export_tables",
    "find_rep_periods_for_error",
    "find_representative_periods",
    "fit_convex_weights",
    "profiles_rep_periods",
    "profiles_rep_periods_by_type",
    "rep_periods_data",
    "rep_periods_mapping",
    "split_into_periods",
    "sweep_rep_periods",
]

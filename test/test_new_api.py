"""Tests for the find_representative_periods() function."""

import numpy as np
import pandas as pd
import pytest

import tsrep
from tsrep import ClusterConfig, find_representative_periods, split_into_periods
from tsrep.exceptions import ConfigurationError, DataError


class TestFindRepresentativePeriods:
    """Tests for the find_representative_periods() function."""

    def test_basic(self, profiles):
        """Test clustering with minimal parameters."""
        split = split_into_periods(profiles, period_duration=24)
        result = find_representative_periods(split, 5)

        assert result.n_rep_periods == 5
        assert result.n_periods == 30
        assert result.period_duration == 24
        assert len(result.profiles) == 3 * 5 * 24
        assert list(result.profiles.columns) == [
            "profile_name",
            "rep_period",
            "time_step",
            "value",
        ]
        assert result.converged

    def test_unsplit_profiles(self, profiles):
        """Test that a profiles table is split with the configured duration."""
        result = find_representative_periods(
            profiles, 4, cluster=ClusterConfig(period_duration=48)
        )

        assert result.n_periods == 15
        assert result.period_duration == 48

    def test_split_table_defines_period_duration(self, profiles):
        split = split_into_periods(profiles, period_duration=12)
        result = find_representative_periods(split, 4)

        assert result.period_duration == 12
        assert result.n_periods == 60

    def test_split_table_with_missing_period(self, profiles):
        split = split_into_periods(profiles, period_duration=24)
        split = split[split.period != 2]

        with pytest.raises(DataError, match="contiguous integers"):
            find_representative_periods(split, 3)

    def test_empty_split_table(self):
        empty = pd.DataFrame(
            {
                "profile_name": pd.Series(dtype=object),
                "period": pd.Series(dtype=int),
                "time_step": pd.Series(dtype=int),
                "value": pd.Series(dtype=float),
            }
        )

        with pytest.raises(DataError, match="empty"):
            find_representative_periods(empty, 1)

    def test_profiles_sorted(self, profiles):
        result = find_representative_periods(profiles, 3)

        expected = result.profiles.sort_values(["profile_name", "rep_period", "time_step"])
        pd.testing.assert_frame_equal(result.profiles, expected)

    def test_with_mean_representation(self, profiles):
        result = find_representative_periods(
            profiles, 4, cluster=ClusterConfig(representation="mean")
        )

        assert result.medoid_indices is None
        vectors = result.period_vectors.to_numpy()
        for rep in range(1, 5):
            members = vectors[result.cluster_assignments == rep]
            np.testing.assert_array_almost_equal(
                result.representative_vectors.loc[rep].to_numpy(), members.mean(axis=0)
            )

    def test_different_seeds(self, profiles):
        """Different seeds still give valid results."""
        for seed in range(5):
            result = find_representative_periods(
                profiles, 6, cluster=ClusterConfig(random_seed=seed)
            )
            assert sorted(np.unique(result.cluster_assignments)) == list(range(1, 7))

    def test_with_profile_weights(self, profiles):
        result = find_representative_periods(
            profiles,
            4,
            cluster=ClusterConfig(profile_weights={"demand-Midgard_E_demand": 5.0}),
        )

        assert result.n_rep_periods == 4

    def test_unknown_weighted_profile(self, profiles):
        with pytest.raises(ConfigurationError, match="not found in data"):
            find_representative_periods(
                profiles, 4, cluster=ClusterConfig(profile_weights={"demand-Utgard": 2.0})
            )

    @pytest.mark.parametrize("n_rep_periods", [0, 31, -1, 2.5, True])
    def test_invalid_number_of_rep_periods(self, profiles, n_rep_periods):
        with pytest.raises(ConfigurationError, match="n_rep_periods"):
            find_representative_periods(profiles, n_rep_periods)

    def test_non_divisible_horizon(self, profiles):
        with pytest.raises(ConfigurationError, match="not a multiple"):
            find_representative_periods(
                profiles, 4, cluster=ClusterConfig(period_duration=25)
            )

    def test_non_finite_value(self, profiles):
        profiles = profiles.copy()
        profiles.loc[100, "value"] = np.nan

        with pytest.raises(DataError, match="non-finite value in series"):
            find_representative_periods(profiles, 4)

    def test_wrong_input_type(self):
        with pytest.raises(DataError, match="pandas DataFrame"):
            find_representative_periods("all-profiles.csv", 4)


class TestClusteringResult:
    def test_cluster_weights(self, profiles):
        result = find_representative_periods(profiles, 5)

        weights = result.cluster_weights
        assert list(weights.index) == [1, 2, 3, 4, 5]
        assert weights.sum() == 30
        np.testing.assert_array_equal(
            weights.to_numpy(), np.bincount(result.cluster_assignments)[1:]
        )

    def test_reconstruct(self, profiles):
        result = find_representative_periods(profiles, 5)
        reconstructed = result.reconstruct()

        assert reconstructed.shape == (len(profiles), 3)
        assert list(reconstructed.columns) == ["profile_name", "time_step", "value"]

        # every hour of period p holds the value of its representative
        name = "availability-Asgard_Solar"
        series = reconstructed[reconstructed.profile_name == name]["value"].to_numpy()
        reps = result.profiles[result.profiles.profile_name == name]
        for period, rep in enumerate(result.cluster_assignments, start=1):
            np.testing.assert_array_almost_equal(
                series[(period - 1) * 24 : period * 24],
                reps[reps.rep_period == rep]["value"].to_numpy(),
            )

    def test_original_matches_input(self, profiles):
        result = find_representative_periods(profiles, 5)
        original = result.original()

        expected = (
            profiles.rename(columns={"asset": "profile_name"})
            .sort_values(["profile_name", "time_step"])
            .reset_index(drop=True)
        )
        pd.testing.assert_frame_equal(original, expected, check_dtype=False)

    def test_to_dict(self, profiles):
        result = find_representative_periods(profiles, 5)
        exported = result.to_dict()

        assert exported["n_rep_periods"] == 5
        assert len(exported["weight_matrix"]) == 30
        assert len(exported["medoid_indices"]) == 5
        assert exported["converged"] is True

    def test_repr(self, profiles):
        result = find_representative_periods(profiles, 5)

        assert "n_rep_periods=5" in repr(result)

    def test_top_level_exports(self):
        assert tsrep.__version__
        for name in tsrep.__all__:
            assert hasattr(tsrep, name)


class TestClusterConfig:
    def test_numpy_integers(self):
        cluster = ClusterConfig(
            period_duration=np.int64(24), random_seed=np.int32(3), max_iterations=np.int64(50)
        )

        assert cluster.period_duration == 24
        assert type(cluster.period_duration) is int
        assert type(cluster.random_seed) is int

    def test_hashable_with_profile_weights(self):
        weights = {"demand-Midgard_E_demand": 2.0}
        first = ClusterConfig(profile_weights=weights)
        second = ClusterConfig(profile_weights={"demand-Midgard_E_demand": 2.0})

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second, ClusterConfig()}) == 2

    def test_profile_weights_are_copied(self):
        weights = {"demand-Midgard_E_demand": 2.0}
        cluster = ClusterConfig(profile_weights=weights)
        weights["demand-Midgard_E_demand"] = 3.0

        assert cluster.profile_weights["demand-Midgard_E_demand"] == 2.0
        with pytest.raises(TypeError):
            cluster.profile_weights["demand-Midgard_E_demand"] = 4.0

import numpy as np

from tsrep import ClusterConfig, ProfileName, find_representative_periods
from tsrep.exceptions import ConfigurationError, DataError

from conftest import make_profiles


def test_assert_raises():
    # important: special signs such as brackets must be marked with '\' when matching error message

    raw = make_profiles(n_periods=4)

    # check erroneous period_duration argument
    np.testing.assert_raises_regex(ConfigurationError,
                                   'period_duration must be a positive integer, got 0',
                                   ClusterConfig, period_duration=0)
    np.testing.assert_raises_regex(ConfigurationError,
                                   'period_duration must be a positive integer, got 12.0',
                                   ClusterConfig, period_duration=12.0)

    # check erroneous representation argument
    np.testing.assert_raises_regex(ConfigurationError,
                                   r'representation needs to be one of \[\'medoid\', \'mean\'\]',
                                   ClusterConfig, representation='erroneousRepresentation')

    # check erroneous distance_metric argument
    np.testing.assert_raises_regex(ConfigurationError,
                                   'distance_metric needs to be one of',
                                   ClusterConfig, distance_metric='erroneousMetric')

    # check erroneous weight_type argument
    np.testing.assert_raises_regex(ConfigurationError,
                                   r'weight_type needs to be one of \[\'hard\', \'convex\'\]',
                                   ClusterConfig, weight_type='conical')

    # check erroneous random_seed argument
    np.testing.assert_raises_regex(ConfigurationError,
                                   'random_seed must be an integer',
                                   ClusterConfig, random_seed='erroneousSeed')

    # check erroneous max_iterations argument
    np.testing.assert_raises_regex(ConfigurationError,
                                   'max_iterations must be a positive integer',
                                   ClusterConfig, max_iterations=0)

    # check erroneous scale_profiles argument
    np.testing.assert_raises_regex(ConfigurationError,
                                   'scale_profiles has to be boolean',
                                   ClusterConfig, scale_profiles='erroneousScaleProfiles')

    # check erroneous profile weights
    np.testing.assert_raises_regex(ConfigurationError,
                                   r'weight of profile \'demand-Midgard\' must be positive',
                                   ClusterConfig, profile_weights={'demand-Midgard': 0.0})

    # check erroneous resolution argument
    np.testing.assert_raises_regex(ConfigurationError,
                                   'resolution must be a positive number',
                                   ClusterConfig, resolution=-1.0)

    # check number of representative periods larger than the number of periods
    np.testing.assert_raises_regex(ConfigurationError,
                                   r'n_rep_periods must be an integer between 1 and the number of periods \(4\)',
                                   find_representative_periods, raw, 5)

    # check profile names without separator
    np.testing.assert_raises_regex(DataError,
                                   r'profile name \'Asgard_Solar\' does not follow',
                                   ProfileName.parse, 'Asgard_Solar')


def test_errors_are_value_errors():
    assert issubclass(ConfigurationError, ValueError)
    assert issubclass(DataError, ValueError)


if __name__ == "__main__":
    test_assert_raises()

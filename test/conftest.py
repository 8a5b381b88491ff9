"""Pytest configuration and shared fixtures for tsrep tests."""

import numpy as np
import pandas as pd
import pytest

PROFILE_NAMES = [
    "availability-Asgard_Solar",
    "availability-Midgard_Wind",
    "demand-Midgard_E_demand",
]

RANDOM_SEED = 42


def make_profiles(names=PROFILE_NAMES, n_periods=30, period_duration=24, seed=RANDOM_SEED):
    """Long profiles table with random hourly values in the external column layout."""
    rnd = np.random.RandomState(seed)
    horizon = n_periods * period_duration
    frames = []
    for name in names:
        frames.append(
            pd.DataFrame(
                {
                    "asset": name,
                    "time_step": np.arange(1, horizon + 1),
                    "value": rnd.rand(horizon),
                }
            )
        )
    return pd.concat(frames, ignore_index=True)


@pytest.fixture
def profiles():
    """Three profiles over 30 days of hourly values."""
    return make_profiles()


@pytest.fixture
def two_day_profiles():
    """Two profiles over 48 hours."""
    return make_profiles(
        names=["availability-Asgard_Solar", "demand-Midgard_E_demand"], n_periods=2
    )

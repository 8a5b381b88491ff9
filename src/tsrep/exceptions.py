"""Custom exceptions and warnings for tsrep."""


class ConfigurationError(ValueError):
    """Invalid clustering parameters.

    Raised for a number of representative periods outside ``1..num_periods``,
    a non-positive ``period_duration`` or a horizon that is not an integer
    multiple of the period duration.
    """

    pass


class DataError(ValueError):
    """Malformed input data.

    The message always names the offending series, period or profile so the
    input can be fixed at its source.
    """

    pass


class ConvergenceWarning(UserWarning):
    """Warning for a clustering run that hit ``max_iterations``.

    The run still returns the last assignment. Users can turn it into an error
    during parameter studies with:

        import warnings
        from tsrep.exceptions import ConvergenceWarning
        warnings.filterwarnings("error", category=ConvergenceWarning)
    """

    pass


class WeightMatrixError(AssertionError):
    """A weight matrix violated its row-sum or sign invariant.

    This is a defect in the engine and not a user error.
    """

    pass

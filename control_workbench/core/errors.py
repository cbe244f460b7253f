"""
Error taxonomy for the simulation engine.

Calculators raise these exceptions; the calculation boundary converts them
into the ``error`` string of a response.
"""


class ComputationError(Exception):
    """Base class for all calculation errors."""
    pass


class InvalidParameter(ComputationError, ValueError):
    """A parameter was rejected before any computation took place."""
    pass


class NumericDegenerate(ComputationError, ArithmeticError):
    """The computation hit a numerically degenerate condition."""
    pass


class ComputationFailure(ComputationError):
    """An unexpected internal fault during a calculation."""
    pass

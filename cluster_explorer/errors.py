"""Exception types raised by the clustering workflow.

All three are fatal to the current invocation: nothing is retried and nothing is
downgraded to a partial result. They subclass the builtin exception a plain
``raise ValueError(...)`` would have used, so ``except ValueError`` keeps working.
"""


class ClusterExplorerError(Exception):
    """Base class for every error raised by cluster_explorer."""


class ValidationError(ClusterExplorerError, ValueError):
    """Malformed or infeasible input (NAs, k/limit out of range, no numeric columns)."""


class ConvergenceError(ClusterExplorerError, RuntimeError):
    """The partitioning algorithm could not form the requested number of clusters."""


class ConfigurationError(ClusterExplorerError, ValueError):
    """Contradictory options, e.g. excluding a column that does not exist."""

class DomainError(ValueError):
    """Invalid problem in a modeling sense (bad names, undeclared variables, etc.)."""


class MalformedProblemError(DomainError):
    """Raised before solving when a problem cannot be handed to the solver."""


class SolverFailureError(RuntimeError):
    """The solver stopped without a verdict (not solved, abnormal, invalid model)."""

"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Input records are malformed: non-finite amounts, negative balances, unknown enums"""

    pass


class SimulationError(DomainException):
    """Payoff simulation failed unexpectedly; the caller should offer a retry"""

    pass

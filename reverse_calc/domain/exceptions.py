"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidConfigurationError(DomainException):
    """Deal settings cannot produce a finite schedule (e.g. fee_percent >= 1)"""

    pass


class NonTerminatingScheduleError(DomainException):
    """Simulation hit the day cap before the RTR balance reached zero"""

    def __init__(self, days_simulated: int, rtr_balance: float, schedule: list):
        super().__init__(
            f"Schedule did not pay off within {days_simulated} business days "
            f"(remaining RTR balance {rtr_balance:.2f})"
        )
        self.days_simulated = days_simulated
        self.rtr_balance = rtr_balance
        self.schedule = schedule

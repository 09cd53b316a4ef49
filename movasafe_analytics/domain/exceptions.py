"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidDateRangeError(DomainException):
    """Reporting window ends before it starts"""

    pass


class InvalidFilterError(DomainException):
    """Analytics filter holds a value the engine does not recognise"""

    pass


class UnknownForecastMethodError(DomainException):
    """Forecast method is not one of linear, exponential, moving_average"""

    pass


class UnknownThresholdTypeError(DomainException):
    """Anomaly threshold type is not one of above, below, percentage_change"""

    pass


class InvalidTransactionDataError(DomainException):
    """Transaction record is malformed or invalid"""

    pass


class TransactionAPIError(DomainException):
    """Transaction provider returned an error or is unavailable"""

    pass

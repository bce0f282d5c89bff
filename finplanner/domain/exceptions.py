"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRecurringObligationError(DomainException):
    """Recurring obligation has no usable days of month"""

    pass


class InvalidInstallmentPlanError(DomainException):
    """Purchase cannot be split into installments"""

    pass


class ProtectedCategoryError(DomainException):
    """Built-in categories cannot be removed"""

    pass


class NotificationError(DomainException):
    """Notification webhook rejected the event or is unreachable"""

    pass

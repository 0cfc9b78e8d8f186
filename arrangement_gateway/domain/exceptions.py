"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTermError(DomainException):
    """Requested term is not one of the offered terms"""

    pass


class InvalidScheduleError(DomainException):
    """Schedule preview requested with impossible parameters"""

    pass


class InvalidArrangementOptionError(DomainException):
    """Arrangement option violates balance or payment range constraints"""

    pass


class ArrangementOptionNotFoundError(DomainException):
    """Arrangement option does not exist for the tenant or is inactive"""

    pass


class PaymentsWebhookError(DomainException):
    """Payments service rejected the arrangement event after all retries"""

    pass


class ArrangementNotAcceptableError(DomainException):
    """Arrangement cannot be accepted for this balance without agency involvement"""

    pass


class ActiveArrangementExistsError(DomainException):
    """Account already has an active, pending or paused arrangement"""

    pass

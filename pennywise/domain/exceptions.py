"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPaymentMethodConfigError(DomainException):
    """Payment method configuration is malformed or inconsistent"""

    pass


class PaymentMethodConfigNotFoundError(DomainException):
    """No payment method configuration with the requested id"""

    pass


class InvalidTransactionDataError(DomainException):
    """Transaction data is malformed or invalid"""

    pass

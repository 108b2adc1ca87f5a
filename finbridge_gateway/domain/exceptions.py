"""Domain-specific exceptions"""

from typing import Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class MissingCredentialError(DomainException):
    """No API key configured for the remote language model"""

    pass


class CandidateFailure(DomainException):
    """One model candidate errored or returned unusable output"""

    pass


class CascadeExhaustedError(DomainException):
    """Every model candidate failed"""

    def __init__(self, message: str, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.last_error = last_error


class AmbiguousAmountError(DomainException):
    """A mutating command arrived without an amount"""

    pass


class InvalidLoanTermsError(DomainException):
    """Principal or tenure is not positive"""

    pass


class SessionBusyError(DomainException):
    """A listening session is already active"""

    pass


class NegativeAmountError(DomainException):
    """SET_VALUE asked for a negative absolute total"""

    pass

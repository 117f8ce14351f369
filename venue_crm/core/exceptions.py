class VenueCRMError(Exception):
    """Base class for all Venue CRM domain exceptions.

    Every custom exception in this module inherits from here so that a
    single ``except VenueCRMError`` clause can catch any domain error.
    """

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(detail)


class ValidationError(VenueCRMError):
    """Raised when input is rejected at the service boundary."""

    def __init__(self, detail: str = "Validation failed"):
        super().__init__(detail)


class InvalidInteractionError(ValidationError):
    """Raised when an interaction payload is malformed."""

    def __init__(self, detail: str = "Invalid interaction"):
        super().__init__(detail)


class InvalidRuleError(ValidationError):
    """Raised when a progression rule is missing fields or inconsistent."""

    def __init__(self, detail: str = "Invalid progression rule"):
        super().__init__(detail)


class NotFoundError(VenueCRMError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, detail: str = "Not found"):
        super().__init__(detail)


class ContactNotFoundError(NotFoundError):
    """Raised when a requested contact does not exist."""

    def __init__(self, detail: str = "Contact not found"):
        super().__init__(detail)


class InteractionNotFoundError(NotFoundError):
    """Raised when a requested interaction does not exist."""

    def __init__(self, detail: str = "Interaction not found"):
        super().__init__(detail)


class RuleNotFoundError(NotFoundError):
    """Raised when a requested progression rule does not exist."""

    def __init__(self, detail: str = "Progression rule not found"):
        super().__init__(detail)


class ConditionEvaluationError(VenueCRMError):
    """Raised when a rule's trigger condition does not fit its trigger type.

    The progression engine catches this and treats the rule as not
    matching; it never reaches API callers.
    """

    def __init__(self, detail: str = "Trigger condition could not be evaluated"):
        super().__init__(detail)


class AuthorizationError(VenueCRMError):
    """Raised when the calling actor's role is below the required minimum."""

    def __init__(self, detail: str = "Insufficient role"):
        super().__init__(detail)

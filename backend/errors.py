class ValidationError(Exception):
    """Rejected order input. Reported to the caller as a 400."""


class OrderProcessingError(Exception):
    """Failure that aborts an order before anything is persisted."""


class UpstreamError(OrderProcessingError):
    def __init__(self, provider: str, message: str) -> None:
        super().__init__(message)
        self.provider = provider
        self.message = message

    def __str__(self) -> str:
        return f"{self.provider}: {self.message}"


class PersistenceError(OrderProcessingError):
    pass


class SignatureVerificationError(Exception):
    """Inbound webhook whose signature or body could not be verified."""

"""
Helios Intel - Exception Types

Every failure the core surfaces to a caller is one of these. Extraction
failures are never raised; they degrade to "unstructured body only".
"""


class HeliosError(Exception):
    """Base class for Helios Intel errors."""
    pass


class AITransportError(HeliosError):
    """Raised when an AI generation request fails for any reason."""
    pass


class BudgetExceededError(AITransportError):
    """Raised when the daily AI budget is exceeded."""
    pass


class ModelUnavailableError(AITransportError):
    """Raised when a model or its provider SDK is unavailable."""
    pass


class StorageError(HeliosError):
    """Raised when the persistence backend rejects a write."""
    pass


class StorageQuotaExceeded(StorageError):
    """Raised when a write would exceed the storage quota."""
    pass

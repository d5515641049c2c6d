"""
Custom exceptions for order fulfillment.
"""

class SyncDropError(Exception):
    """Base exception for all order fulfillment errors."""
    pass

class PaymentError(SyncDropError):
    """Exception raised for errors talking to the payment provider."""
    pass

class WebhookVerificationError(SyncDropError):
    """Exception raised when a webhook payload or its signature is invalid."""
    pass

class StorageError(SyncDropError):
    """Exception raised when the audio file cannot be stored."""
    pass

class ProcessingError(SyncDropError):
    """Exception raised when the sync workflow fails or returns no outputs."""
    pass

class NotificationError(SyncDropError):
    """Exception raised when the delivery email cannot be sent."""
    pass

class InvalidTransition(SyncDropError):
    """Exception raised when an order status change would move backwards."""

    def __init__(self, current, target):
        super().__init__(f"Cannot move order from '{current}' to '{target}'")
        self.current = current
        self.target = target

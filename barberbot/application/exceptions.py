class BookingStoreError(RuntimeError):
    """Raised when the booking store cannot be read or written."""
    pass


class MessagingError(RuntimeError):
    """Raised when an outbound message could not be delivered."""
    pass

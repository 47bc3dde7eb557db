class ChatError(Exception):
    """Raised when a follow-up question cannot be answered."""

"""
This file contains custom, application-specific exceptions.
"""

class MediaHostError(Exception):
    """Raised when the media host refuses an upload or a deletion."""
    pass

class ParentEmailNotFoundError(Exception):
    """Raised when a sign-up e-mail does not belong to any registered parent."""
    pass

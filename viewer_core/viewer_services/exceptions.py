# viewer_services/exceptions.py

class FetchFailure(Exception):
    """Raised when the schema source fails to enumerate namespaces or deliver a schema."""

    def __init__(self, message: str, namespace: str = None):
        super().__init__(message)
        self.namespace = namespace

class RefreshInProgressError(Exception):
    """Raised when a fetch is requested while another one is still pending."""
    pass

class NamespaceFilterError(Exception):
    """Raised when the namespace selection is not a collection of names."""
    pass

class SearchQueryError(Exception):
    """Raised when the search term is not a string."""
    pass

class CommandParseError(Exception):
    """Raised when a text command is empty or malformed."""
    pass

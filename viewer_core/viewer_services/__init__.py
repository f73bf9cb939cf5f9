"""
Viewer services — snapshot building, filtering, search and base abstractions.

Note: LayoutService, ViewService and the serializers are intentionally NOT
imported eagerly to avoid circular imports with ``viewer_platform``.
Import them directly, e.g.
``from viewer_services.layout_service import LayoutService``.
"""
from .base_service import EntityQueryService
from .filter_service import NamespaceFilterService
from .search_service import SearchService
from .snapshot_service import SnapshotBuilder
from .exceptions import (
    FetchFailure,
    RefreshInProgressError,
    NamespaceFilterError,
    SearchQueryError,
    CommandParseError,
)

__all__ = [
    'EntityQueryService',
    'NamespaceFilterService',
    'SearchService',
    'SnapshotBuilder',
    'FetchFailure',
    'RefreshInProgressError',
    'NamespaceFilterError',
    'SearchQueryError',
    'CommandParseError',
]

"""
    Abstract base classes for plugins.
    Defines the "Contract" between the viewer core and its collaborators.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.namespace import NamespaceInfo, NamespaceSchema
from ..models.view import GraphView


class SchemaSource(ABC):
    """
        The host collaborator that supplies raw schema data on demand.
        Calls may block or fail; the viewer wraps failures as fetch failures.
    """

    @abstractmethod
    def list_namespaces(self) -> List[NamespaceInfo]:
        """
            Enumerate all namespaces of the project, in host order.
            The ``is_system`` flag is assigned by the viewer, not the host.
        """
        pass

    @abstractmethod
    def get_schema_for(self, namespace: str) -> Optional[NamespaceSchema]:
        """
        Retrieve the schema of one namespace.

        Args:
            namespace: Namespace name as returned by ``list_namespaces``.

        Returns:
            NamespaceSchema, or None when the namespace has no schema.
        """
        pass


class SchemaSourcePlugin(ABC):
    """
        Abstract base class for Schema Source plugins.
        Pattern: Strategy (for schema loading).
    """

    @abstractmethod
    def get_plugin_name(self) -> str:
        """
            Returns the unique name of the plugin.
            Example: "JSON Schema Export"
        """
        pass

    @abstractmethod
    def open(self, location: str) -> SchemaSource:
        """
        Main method: Opens a schema source at the given location.

        Args:
            location: Path / URI of the exported project.

        Returns:
            SchemaSource: collaborator answering namespace and schema queries.
        """
        pass


class RenderAdapterPlugin(ABC):
    """
        Abstract base class for Render Adapter plugins.
        Pattern: Strategy (for drawing).
    """

    @abstractmethod
    def get_plugin_name(self) -> str:
        pass

    @abstractmethod
    def render(self, view: GraphView) -> str:
        """
        Draw one frame of the derived view (e.g. SVG or HTML markup).

        Args:
            view: Derived view with positions, highlights and viewport.

        Returns:
            str: Rendered markup.
        """
        pass

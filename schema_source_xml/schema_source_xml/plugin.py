from typing import Dict, List, Optional

from lxml import etree

from schema_api.models.entity import Attribute, Entity
from schema_api.models.namespace import NamespaceInfo, NamespaceSchema
from schema_api.models.relationship import Relationship
from schema_api.plugins.base import SchemaSource, SchemaSourcePlugin


_TRUE = ("true", "1", "yes")


class XmlSchemaSource(SchemaSource):
    """
    Schema source backed by an XML project export.

    Expected layout::

        <project>
          <module name="Sales" marketplace="false">
            <domainModel>
              <entity id="1" name="Customer" generalization="Administration.Account">
                <attribute name="Name" type="DomainModels$StringAttributeType"/>
              </entity>
              <association id="a1" name="Order_Customer" parent="2" child="1"
                           type="Reference" owner="Default"/>
              <crossAssociation id="a2" name="Order_Product" parent="2"
                                child="Catalog.Product" type="ReferenceSet"/>
            </domainModel>
          </module>
        </project>

    A module without a ``domainModel`` element has no schema. The file is
    re-parsed on every ``list_namespaces`` call.
    """

    def __init__(self, file_path: str):
        self._file_path = file_path
        self._modules: Dict[str, etree._Element] = {}

    @property
    def file_path(self) -> str:
        return self._file_path

    def list_namespaces(self) -> List[NamespaceInfo]:
        root = self._parse()
        self._modules = {}
        namespaces = []
        for module in root.iter("module"):
            name = module.get("name")
            if not name:
                raise ValueError(f"Module without a name at line {module.sourceline}.")
            if name in self._modules:
                continue
            self._modules[name] = module
            namespaces.append(NamespaceInfo(
                name=name,
                from_marketplace=module.get("marketplace", "false").lower() in _TRUE,
            ))
        return namespaces

    def get_schema_for(self, namespace: str) -> Optional[NamespaceSchema]:
        if not self._modules:
            self.list_namespaces()
        module = self._modules.get(namespace)
        if module is None:
            raise KeyError(f"Unknown module '{namespace}'.")

        domain_model = module.find("domainModel")
        if domain_model is None:
            return None

        return NamespaceSchema(
            entities=[self._entity(el, namespace) for el in domain_model.iter("entity")],
            relationships=[self._relationship(el) for el in domain_model.iter("association")],
            cross_namespace_relationships=[
                self._relationship(el, cross=True) for el in domain_model.iter("crossAssociation")
            ],
        )

    def _parse(self) -> etree._Element:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
        tree = etree.parse(self._file_path, parser)
        return tree.getroot()

    @staticmethod
    def _entity(element: etree._Element, namespace: str) -> Entity:
        entity_id = element.get("id")
        name = element.get("name")
        if entity_id is None or name is None:
            raise ValueError(
                f"Entity at line {element.sourceline} needs both 'id' and 'name'."
            )
        return Entity(
            entity_id=entity_id,
            name=name,
            namespace=namespace,
            attributes=tuple(
                Attribute.from_raw(attr.get("name", ""), attr.get("type"))
                for attr in element.iter("attribute")
            ),
            generalization=element.get("generalization") or None,
            qualified_name=element.get("qualifiedName") or "",
        )

    @staticmethod
    def _relationship(element: etree._Element, cross: bool = False) -> Relationship:
        rel_id = element.get("id")
        parent = element.get("parent")
        child = element.get("child")
        if rel_id is None or parent is None or child is None:
            raise ValueError(
                f"Association at line {element.sourceline} needs 'id', 'parent' and 'child'."
            )
        return Relationship(
            relationship_id=rel_id,
            name=element.get("name", ""),
            source=parent,
            target=child,
            kind=element.get("type", "Reference"),
            owner=element.get("owner", "Default"),
            is_cross_namespace=cross,
        )


class XmlSchemaSourcePlugin(SchemaSourcePlugin):
    """
    SchemaSourcePlugin for XML project exports.
    """

    def get_plugin_name(self) -> str:
        return "XML Schema Export"

    def open(self, location: str) -> XmlSchemaSource:
        source = XmlSchemaSource(location)
        # Fail early on unreadable or malformed files
        source.list_namespaces()
        return source

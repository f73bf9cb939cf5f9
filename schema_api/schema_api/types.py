"""
    Type tags for entity attributes and relationship kinds, with resolution
    of the raw tags delivered by the modeling-tool host.
"""
from enum import Enum
from typing import Any


class AttributeType(Enum):
    STRING = "String"
    INTEGER = "Integer"
    LONG = "Long"
    DECIMAL = "Decimal"
    BOOLEAN = "Boolean"
    DATETIME = "DateTime"
    AUTONUMBER = "AutoNumber"
    BINARY = "Binary"
    HASHED_STRING = "HashedString"
    ENUMERATION = "Enumeration"
    UNKNOWN = "Unknown"


class RelationshipKind(Enum):
    """Association kind. REFERENCE_SET is the many-to-many association."""
    REFERENCE = "Reference"
    REFERENCE_SET = "ReferenceSet"


# Host's qualified attribute type names look like "DomainModels$StringAttributeType"
_HOST_TYPE_PREFIX = "DomainModels$"
_HOST_TYPE_SUFFIX = "AttributeType"


class TypeResolver:
    """Resolution of raw type tags into the closed enumerations"""

    @staticmethod
    def resolve_attribute_type(raw: Any) -> AttributeType:
        """
        Map a raw attribute type tag to ``AttributeType``.

        Accepts an ``AttributeType`` instance, the short tag (``"String"``,
        case-insensitive) or the host's qualified tag
        (``"DomainModels$StringAttributeType"``). Anything else is UNKNOWN.
        """
        if isinstance(raw, AttributeType):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            return AttributeType.UNKNOWN

        tag = raw.strip()
        if tag.startswith(_HOST_TYPE_PREFIX):
            tag = tag[len(_HOST_TYPE_PREFIX):]
            if tag.endswith(_HOST_TYPE_SUFFIX):
                tag = tag[:-len(_HOST_TYPE_SUFFIX)]

        tag_lower = tag.lower()
        for member in AttributeType:
            if member.value.lower() == tag_lower:
                return member
        return AttributeType.UNKNOWN

    @staticmethod
    def resolve_relationship_kind(raw: Any) -> RelationshipKind:
        """Map a raw association type to ``RelationshipKind`` (default REFERENCE)."""
        if isinstance(raw, RelationshipKind):
            return raw
        if isinstance(raw, str) and raw.strip().lower() == "referenceset":
            return RelationshipKind.REFERENCE_SET
        return RelationshipKind.REFERENCE

    @staticmethod
    def multiplicity(kind: RelationshipKind) -> str:
        """Multiplicity label shown next to an association."""
        if kind == RelationshipKind.REFERENCE_SET:
            return "N:M"
        return "1:N"

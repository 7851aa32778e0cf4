"""Render-side data model: display trees and the contexts handed to templates."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union


class EntityKind(str, Enum):
    CLASS = "class"
    OBJECT_PROPERTY = "object-property"
    ANNOTATION_PROPERTY = "annotation-property"
    DATA_PROPERTY = "data-property"
    NAMED_INDIVIDUAL = "named-individual"
    UNDEFINED = "undefined"


@dataclass(frozen=True)
class EntityDisplay:
    iri: str
    identifier: str
    display: str

    def to_context(self) -> dict:
        return {"iri": self.iri, "identifier": self.identifier, "display": self.display}


def _wrap(node: "DisplayNode") -> str:
    if isinstance(node, Simple):
        return node.text()
    return f"({node.text()})"

# -------------------- display tree --------------------

@dataclass(frozen=True)
class Simple:
    entity: EntityDisplay

    def to_context(self) -> dict:
        return {"kind": "simple", **self.entity.to_context()}

    def text(self) -> str:
        return self.entity.display


@dataclass(frozen=True)
class And:
    children: Tuple["DisplayNode", ...]

    def to_context(self) -> dict:
        return {"kind": "and", "children": [c.to_context() for c in self.children]}

    def text(self) -> str:
        return " and ".join(_wrap(c) for c in self.children)


@dataclass(frozen=True)
class Or:
    children: Tuple["DisplayNode", ...]

    def to_context(self) -> dict:
        return {"kind": "or", "children": [c.to_context() for c in self.children]}

    def text(self) -> str:
        return " or ".join(_wrap(c) for c in self.children)


@dataclass(frozen=True)
class Not:
    child: "DisplayNode"

    def to_context(self) -> dict:
        return {"kind": "not", "child": self.child.to_context()}

    def text(self) -> str:
        return f"not {_wrap(self.child)}"


@dataclass(frozen=True)
class SomeValuesFrom:
    relation: "DisplayNode"
    filler: "DisplayNode"

    def to_context(self) -> dict:
        return {"kind": "some", "relation": self.relation.to_context(), "filler": self.filler.to_context()}

    def text(self) -> str:
        return f"{_wrap(self.relation)} some {_wrap(self.filler)}"


@dataclass(frozen=True)
class AllValuesFrom:
    relation: "DisplayNode"
    filler: "DisplayNode"

    def to_context(self) -> dict:
        return {"kind": "all", "relation": self.relation.to_context(), "filler": self.filler.to_context()}

    def text(self) -> str:
        return f"{_wrap(self.relation)} only {_wrap(self.filler)}"


@dataclass(frozen=True)
class HasValue:
    relation: "DisplayNode"
    filler: "DisplayNode"

    def to_context(self) -> dict:
        return {"kind": "value", "relation": self.relation.to_context(), "filler": self.filler.to_context()}

    def text(self) -> str:
        return f"{_wrap(self.relation)} value {_wrap(self.filler)}"


@dataclass(frozen=True)
class DataHasValue:
    property: "DisplayNode"
    literal: str

    def to_context(self) -> dict:
        return {"kind": "data", "property": self.property.to_context(), "literal": self.literal}

    def text(self) -> str:
        return f'{_wrap(self.property)} value "{self.literal}"'


DisplayNode = Union[Simple, And, Or, Not, SomeValuesFrom, AllValuesFrom, HasValue, DataHasValue]

# -------------------- page contexts --------------------

@dataclass(frozen=True)
class AnnotationEntry:
    property_iri: str
    property_display: str
    value: str

    def to_context(self) -> dict:
        return {"iri": self.property_iri, "display": self.property_display, "value": self.value}


@dataclass
class EntityAnnotations:
    label: Optional[str] = None
    definition: Optional[str] = None
    example: Optional[str] = None
    generic: List[AnnotationEntry] = field(default_factory=list)


@dataclass
class RelationshipSet:
    superclasses: List[DisplayNode] = field(default_factory=list)
    subclasses: List[DisplayNode] = field(default_factory=list)
    equivalent_classes: List[DisplayNode] = field(default_factory=list)
    inverse_properties: List[DisplayNode] = field(default_factory=list)
    property_domain: Optional[DisplayNode] = None
    property_range: Optional[DisplayNode] = None
    class_assertions: List[DisplayNode] = field(default_factory=list)


def _node_context(node: Optional[DisplayNode]) -> Optional[dict]:
    return node.to_context() if node is not None else None


@dataclass
class EntityPageModel:
    kind: EntityKind
    iri: str
    annotations: EntityAnnotations
    relationships: RelationshipSet

    def to_context(self) -> dict:
        rel = self.relationships
        return {
            "kind": self.kind.value,
            "iri": self.iri,
            "label": self.annotations.label,
            "definition": self.annotations.definition,
            "example": self.annotations.example,
            "annotations": [a.to_context() for a in self.annotations.generic],
            "superClasses": [n.to_context() for n in rel.superclasses],
            "subClasses": [n.to_context() for n in rel.subclasses],
            "equivalentClasses": [n.to_context() for n in rel.equivalent_classes],
            "inverseOps": [n.to_context() for n in rel.inverse_properties],
            "opRange": _node_context(rel.property_range),
            "opDomain": _node_context(rel.property_domain),
            "classAssertions": [n.to_context() for n in rel.class_assertions],
        }


@dataclass
class SidebarCatalog:
    classes: List[EntityDisplay] = field(default_factory=list)
    named_individuals: List[EntityDisplay] = field(default_factory=list)
    object_properties: List[EntityDisplay] = field(default_factory=list)
    annotation_properties: List[EntityDisplay] = field(default_factory=list)
    data_properties: List[EntityDisplay] = field(default_factory=list)

    def to_context(self) -> dict:
        return {
            "classes": [e.to_context() for e in self.classes],
            "namedIndividuals": [e.to_context() for e in self.named_individuals],
            "objectProperties": [e.to_context() for e in self.object_properties],
            "annotationProperties": [e.to_context() for e in self.annotation_properties],
            "dataProperties": [e.to_context() for e in self.data_properties],
        }


@dataclass
class OntologyMetadataModel:
    sidebar: SidebarCatalog
    iri: Optional[str] = None
    version_iri: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    license: Optional[str] = None
    contributors: List[AnnotationEntry] = field(default_factory=list)
    generic_annotations: List[AnnotationEntry] = field(default_factory=list)

    def to_context(self) -> dict:
        return {
            "iri": self.iri,
            "version": self.version_iri,
            "title": self.title,
            "description": self.description,
            "license": self.license,
            "contributors": [a.to_context() for a in self.contributors],
            "annotations": [a.to_context() for a in self.generic_annotations],
            "sidebar": self.sidebar.to_context(),
        }

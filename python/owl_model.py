"""In-memory OWL component model.

Every entity, expression and axiom kind is a frozen dataclass, so a loaded
ontology is an immutable list of components. IRIs are plain strings.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

# -------------------- entities --------------------

@dataclass(frozen=True)
class Class:
    iri: str


@dataclass(frozen=True)
class ObjectProperty:
    iri: str


@dataclass(frozen=True)
class DataProperty:
    iri: str


@dataclass(frozen=True)
class AnnotationProperty:
    iri: str


@dataclass(frozen=True)
class NamedIndividual:
    iri: str


@dataclass(frozen=True)
class AnonymousIndividual:
    node_id: str


@dataclass(frozen=True)
class Literal:
    value: str
    datatype: Optional[str] = None
    language: Optional[str] = None


Entity = Union[Class, ObjectProperty, DataProperty, AnnotationProperty, NamedIndividual]
Individual = Union[NamedIndividual, AnonymousIndividual]
# An annotation value is a literal, an IRI or an anonymous individual
AnnotationValue = Union[Literal, str, AnonymousIndividual]

# -------------------- property expressions --------------------

@dataclass(frozen=True)
class ObjectInverseOf:
    property: ObjectProperty


ObjectPropertyExpression = Union[ObjectProperty, ObjectInverseOf]

# -------------------- class expressions --------------------

@dataclass(frozen=True)
class ObjectIntersectionOf:
    operands: Tuple["ClassExpression", ...]


@dataclass(frozen=True)
class ObjectUnionOf:
    operands: Tuple["ClassExpression", ...]


@dataclass(frozen=True)
class ObjectComplementOf:
    operand: "ClassExpression"


@dataclass(frozen=True)
class ObjectOneOf:
    individuals: Tuple[Individual, ...]


@dataclass(frozen=True)
class ObjectSomeValuesFrom:
    property: ObjectPropertyExpression
    filler: "ClassExpression"


@dataclass(frozen=True)
class ObjectAllValuesFrom:
    property: ObjectPropertyExpression
    filler: "ClassExpression"


@dataclass(frozen=True)
class ObjectHasValue:
    property: ObjectPropertyExpression
    individual: Individual


@dataclass(frozen=True)
class ObjectHasSelf:
    property: ObjectPropertyExpression


@dataclass(frozen=True)
class ObjectMinCardinality:
    n: int
    property: ObjectPropertyExpression
    filler: Optional["ClassExpression"] = None


@dataclass(frozen=True)
class ObjectMaxCardinality:
    n: int
    property: ObjectPropertyExpression
    filler: Optional["ClassExpression"] = None


@dataclass(frozen=True)
class ObjectExactCardinality:
    n: int
    property: ObjectPropertyExpression
    filler: Optional["ClassExpression"] = None


@dataclass(frozen=True)
class DataSomeValuesFrom:
    property: DataProperty
    data_range: str


@dataclass(frozen=True)
class DataAllValuesFrom:
    property: DataProperty
    data_range: str


@dataclass(frozen=True)
class DataHasValue:
    property: DataProperty
    literal: Literal


@dataclass(frozen=True)
class DataMinCardinality:
    n: int
    property: DataProperty
    data_range: Optional[str] = None


@dataclass(frozen=True)
class DataMaxCardinality:
    n: int
    property: DataProperty
    data_range: Optional[str] = None


@dataclass(frozen=True)
class DataExactCardinality:
    n: int
    property: DataProperty
    data_range: Optional[str] = None


ClassExpression = Union[
    Class,
    ObjectIntersectionOf,
    ObjectUnionOf,
    ObjectComplementOf,
    ObjectOneOf,
    ObjectSomeValuesFrom,
    ObjectAllValuesFrom,
    ObjectHasValue,
    ObjectHasSelf,
    ObjectMinCardinality,
    ObjectMaxCardinality,
    ObjectExactCardinality,
    DataSomeValuesFrom,
    DataAllValuesFrom,
    DataHasValue,
    DataMinCardinality,
    DataMaxCardinality,
    DataExactCardinality,
]

# -------------------- components --------------------

@dataclass(frozen=True)
class OntologyID:
    iri: Optional[str] = None
    version_iri: Optional[str] = None


@dataclass(frozen=True)
class OntologyAnnotation:
    property: str
    value: AnnotationValue


@dataclass(frozen=True)
class Declaration:
    entity: Entity


@dataclass(frozen=True)
class SubClassOf:
    sub: ClassExpression
    sup: ClassExpression


@dataclass(frozen=True)
class EquivalentClasses:
    operands: Tuple[ClassExpression, ...]


@dataclass(frozen=True)
class SubObjectPropertyOf:
    sub: ObjectPropertyExpression
    sup: ObjectPropertyExpression


@dataclass(frozen=True)
class SubDataPropertyOf:
    sub: DataProperty
    sup: DataProperty


@dataclass(frozen=True)
class InverseObjectProperties:
    first: ObjectPropertyExpression
    second: ObjectPropertyExpression


@dataclass(frozen=True)
class ObjectPropertyDomain:
    property: ObjectPropertyExpression
    domain: ClassExpression


@dataclass(frozen=True)
class ObjectPropertyRange:
    property: ObjectPropertyExpression
    range: ClassExpression


@dataclass(frozen=True)
class ClassAssertion:
    class_expression: ClassExpression
    individual: Individual


@dataclass(frozen=True)
class AnnotationAssertion:
    property: str
    subject: Union[str, AnonymousIndividual]
    value: AnnotationValue


Component = Union[
    OntologyID,
    OntologyAnnotation,
    Declaration,
    SubClassOf,
    EquivalentClasses,
    SubObjectPropertyOf,
    SubDataPropertyOf,
    InverseObjectProperties,
    ObjectPropertyDomain,
    ObjectPropertyRange,
    ClassAssertion,
    AnnotationAssertion,
]


@dataclass
class Ontology:
    components: List[Component] = field(default_factory=list)
    # prefix -> namespace IRI
    prefixes: Dict[str, str] = field(default_factory=dict)

    @property
    def iri(self) -> Optional[str]:
        found = None
        for c in self.components:
            if isinstance(c, OntologyID) and c.iri:
                found = c.iri
        return found

import logging

import owl_model as owl
from errors import UnsupportedConstruct
from models import (
    AllValuesFrom,
    And,
    DataHasValue,
    DisplayNode,
    HasValue,
    Not,
    Or,
    Simple,
    SomeValuesFrom,
)
from utils import Resolver, literal_text

log = logging.getLogger("owl2site")

# Constructs that are recognised but intentionally not displayed
UNSUPPORTED_EXPRESSIONS = (
    owl.ObjectOneOf,
    owl.ObjectHasSelf,
    owl.ObjectMinCardinality,
    owl.ObjectMaxCardinality,
    owl.ObjectExactCardinality,
    owl.DataSomeValuesFrom,
    owl.DataAllValuesFrom,
    owl.DataMinCardinality,
    owl.DataMaxCardinality,
    owl.DataExactCardinality,
)


def unpack_object_property_expression(ope, resolver: Resolver) -> DisplayNode:
    """Display node for a named property or an inverse-of expression.

    The inverse marker is not displayed: ObjectInverseOf(p) renders as p.
    """
    if isinstance(ope, owl.ObjectProperty):
        return Simple(resolver.entity_display(ope.iri))
    if isinstance(ope, owl.ObjectInverseOf):
        return Simple(resolver.entity_display(ope.property.iri))
    raise UnsupportedConstruct(type(ope).__name__)


def unpack_class_expression(ce, resolver: Resolver) -> DisplayNode:
    """Recursively turn a class expression into a display tree."""
    if isinstance(ce, owl.Class):
        return Simple(resolver.entity_display(ce.iri))
    if isinstance(ce, owl.ObjectIntersectionOf):
        return And(tuple(unpack_class_expression(c, resolver) for c in ce.operands))
    if isinstance(ce, owl.ObjectUnionOf):
        return Or(tuple(unpack_class_expression(c, resolver) for c in ce.operands))
    if isinstance(ce, owl.ObjectComplementOf):
        return Not(unpack_class_expression(ce.operand, resolver))
    if isinstance(ce, owl.ObjectSomeValuesFrom):
        return SomeValuesFrom(
            relation=unpack_object_property_expression(ce.property, resolver),
            filler=unpack_class_expression(ce.filler, resolver),
        )
    if isinstance(ce, owl.ObjectAllValuesFrom):
        return AllValuesFrom(
            relation=unpack_object_property_expression(ce.property, resolver),
            filler=unpack_class_expression(ce.filler, resolver),
        )
    if isinstance(ce, owl.ObjectHasValue):
        if isinstance(ce.individual, owl.AnonymousIndividual):
            raise UnsupportedConstruct("ObjectHasValue", "anonymous individual filler")
        return HasValue(
            relation=unpack_object_property_expression(ce.property, resolver),
            filler=Simple(resolver.entity_display(ce.individual.iri)),
        )
    if isinstance(ce, owl.DataHasValue):
        return DataHasValue(
            property=Simple(resolver.entity_display(ce.property.iri)),
            literal=literal_text(ce.literal),
        )
    if isinstance(ce, UNSUPPORTED_EXPRESSIONS):
        raise UnsupportedConstruct(type(ce).__name__)
    raise UnsupportedConstruct(type(ce).__name__, "unknown class expression type")

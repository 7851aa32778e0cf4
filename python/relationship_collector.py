"""Relationship and annotation data for one entity page.

A property with several domain (or range) axioms gets their intersection, an `And`
of every asserted class in axiom order, rather than only the last axiom.
"""
import logging
from typing import Iterable

import owl_model as owl
from expression_unpacker import unpack_class_expression, unpack_object_property_expression
from models import And, AnnotationEntry, EntityAnnotations, RelationshipSet, Simple
from utils import ENTITY_ANNOTATION_SLOTS, LABEL, Resolver, annotation_value_text, prefer

log = logging.getLogger("owl2site")


def _is_atomic(ce, iri: str) -> bool:
    return isinstance(ce, owl.Class) and ce.iri == iri


def _merge(current, node):
    """Fold one more domain/range node into the accumulated one.

    The result is `And(first, second, ...)`; no axiom replaces an earlier one.
    """
    if current is None:
        return node
    if isinstance(current, And):
        return And(current.children + (node,))
    return And((current, node))


def _subclass_of(axiom: owl.SubClassOf, iri: str, rels: RelationshipSet, resolver: Resolver):
    sub, sup = axiom.sub, axiom.sup
    if isinstance(sub, owl.Class) and isinstance(sup, owl.Class):
        if sup.iri == iri:
            rels.subclasses.append(Simple(resolver.entity_display(sub.iri)))
        elif sub.iri == iri:
            rels.superclasses.append(Simple(resolver.entity_display(sup.iri)))
    elif _is_atomic(sub, iri):
        rels.superclasses.append(unpack_class_expression(sup, resolver))
    elif _is_atomic(sup, iri):
        rels.subclasses.append(unpack_class_expression(sub, resolver))


def _sub_property_of(axiom, iri: str, rels: RelationshipSet, resolver: Resolver):
    sub, sup = axiom.sub, axiom.sup
    if not (isinstance(sub, (owl.ObjectProperty, owl.DataProperty)) and isinstance(sup, (owl.ObjectProperty, owl.DataProperty))):
        return
    if sup.iri == iri:
        rels.subclasses.append(Simple(resolver.entity_display(sub.iri)))
    elif sub.iri == iri:
        rels.superclasses.append(Simple(resolver.entity_display(sup.iri)))


def _equivalent_classes(axiom: owl.EquivalentClasses, iri: str, rels: RelationshipSet, resolver: Resolver):
    if not any(_is_atomic(ce, iri) for ce in axiom.operands):
        return
    for ce in axiom.operands:
        if not _is_atomic(ce, iri):
            rels.equivalent_classes.append(unpack_class_expression(ce, resolver))


def _inverse_object_properties(axiom: owl.InverseObjectProperties, iri: str, rels: RelationshipSet, resolver: Resolver):
    first, second = axiom.first, axiom.second
    if isinstance(first, owl.ObjectProperty) and first.iri == iri:
        rels.inverse_properties.append(unpack_object_property_expression(second, resolver))
    elif isinstance(second, owl.ObjectProperty) and second.iri == iri:
        rels.inverse_properties.append(unpack_object_property_expression(first, resolver))


def collect_relationships(iri: str, components: Iterable, resolver: Resolver) -> RelationshipSet:
    """Derive the super/sub/equivalent/inverse/domain/range/assertion entries for one IRI.

    Components that do not mention the IRI, or kinds with no relationship meaning,
    are ignored. Unsupported expressions raise UnsupportedConstruct.
    """
    rels = RelationshipSet()
    for c in components:
        if isinstance(c, owl.SubClassOf):
            _subclass_of(c, iri, rels, resolver)
        elif isinstance(c, (owl.SubObjectPropertyOf, owl.SubDataPropertyOf)):
            _sub_property_of(c, iri, rels, resolver)
        elif isinstance(c, owl.EquivalentClasses):
            _equivalent_classes(c, iri, rels, resolver)
        elif isinstance(c, owl.InverseObjectProperties):
            _inverse_object_properties(c, iri, rels, resolver)
        elif isinstance(c, owl.ObjectPropertyDomain):
            if isinstance(c.property, owl.ObjectProperty) and c.property.iri == iri:
                rels.property_domain = _merge(rels.property_domain, unpack_class_expression(c.domain, resolver))
        elif isinstance(c, owl.ObjectPropertyRange):
            if isinstance(c.property, owl.ObjectProperty) and c.property.iri == iri:
                rels.property_range = _merge(rels.property_range, unpack_class_expression(c.range, resolver))
        elif isinstance(c, owl.ClassAssertion):
            if isinstance(c.individual, owl.NamedIndividual) and c.individual.iri == iri:
                rels.class_assertions.append(unpack_class_expression(c.class_expression, resolver))
    return rels


def collect_annotations(iri: str, components: Iterable, resolver: Resolver) -> EntityAnnotations:
    """Route the annotation assertions on an IRI into label/definition/example and the rest.

    The label is the one every other page shows for this IRI (`Resolver.label_index`).
    """
    anns = EntityAnnotations(label=resolver.label_index.get(iri))
    for c in components:
        if not isinstance(c, owl.AnnotationAssertion) or c.subject != iri:
            continue
        if c.property == LABEL:
            continue
        value = annotation_value_text(c.value)
        slot = ENTITY_ANNOTATION_SLOTS.get(c.property)
        if slot:
            text = value if value is not None else iri
            setattr(anns, slot, prefer(getattr(anns, slot), text))
        elif value is not None:
            anns.generic.append(AnnotationEntry(c.property, resolver.shrink(c.property), value))
        else:
            log.debug("Skipping anonymous annotation value %s on %s", c.property, iri)
    return anns

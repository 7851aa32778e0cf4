import pytest
from rdflib import RDFS
from rdflib.namespace import SKOS

import owl_model as owl
from errors import UnsupportedConstruct
from models import And, Simple
from relationship_collector import collect_annotations, collect_relationships
from utils import Resolver

from conftest import EX


def C(name):
    return owl.Class(EX + name)


def P(name):
    return owl.ObjectProperty(EX + name)


def iris(nodes):
    return [n.entity.iri for n in nodes]


def ann(prop, subject, value):
    return owl.AnnotationAssertion(str(prop), EX + subject, value)


# -------------------- hierarchy --------------------

class TestSubClassOf:
    axioms = [owl.SubClassOf(sub=C("Dog"), sup=C("Animal"))]

    def test_superclass_side(self, resolver):
        rels = collect_relationships(EX + "Animal", self.axioms, resolver)
        assert iris(rels.subclasses) == [EX + "Dog"]
        assert rels.superclasses == []

    def test_subclass_side(self, resolver):
        rels = collect_relationships(EX + "Dog", self.axioms, resolver)
        assert iris(rels.superclasses) == [EX + "Animal"]
        assert rels.subclasses == []

    def test_unrelated_iri(self, resolver):
        rels = collect_relationships(EX + "Cat", self.axioms, resolver)
        assert rels.superclasses == rels.subclasses == []

    def test_anonymous_superclass(self, resolver):
        axioms = [owl.SubClassOf(sub=C("Dog"), sup=owl.ObjectSomeValuesFrom(P("hasPart"), C("Tail")))]
        rels = collect_relationships(EX + "Dog", axioms, resolver)
        assert [n.text() for n in rels.superclasses] == ["has part some Tail"]

    def test_unsupported_superclass_raises(self, resolver):
        axioms = [owl.SubClassOf(sub=C("Dog"), sup=owl.ObjectExactCardinality(4, P("hasLeg")))]
        with pytest.raises(UnsupportedConstruct):
            collect_relationships(EX + "Dog", axioms, resolver)

    def test_sub_object_property(self, resolver):
        axioms = [owl.SubObjectPropertyOf(sub=P("hasTail"), sup=P("hasPart"))]
        assert iris(collect_relationships(EX + "hasPart", axioms, resolver).subclasses) == [EX + "hasTail"]
        assert iris(collect_relationships(EX + "hasTail", axioms, resolver).superclasses) == [EX + "hasPart"]

    def test_sub_data_property(self, resolver):
        axioms = [owl.SubDataPropertyOf(owl.DataProperty(EX + "birthYear"), owl.DataProperty(EX + "year"))]
        assert iris(collect_relationships(EX + "year", axioms, resolver).subclasses) == [EX + "birthYear"]
        assert iris(collect_relationships(EX + "birthYear", axioms, resolver).superclasses) == [EX + "year"]


class TestEquivalentClasses:
    def test_other_operands_in_order(self, resolver):
        axioms = [owl.EquivalentClasses((C("X"), C("Y"), C("Z")))]
        rels = collect_relationships(EX + "Y", axioms, resolver)
        assert iris(rels.equivalent_classes) == [EX + "X", EX + "Z"]

    def test_not_an_operand(self, resolver):
        axioms = [owl.EquivalentClasses((C("X"), C("Y")))]
        assert collect_relationships(EX + "Q", axioms, resolver).equivalent_classes == []


# -------------------- properties --------------------

class TestProperties:
    def test_inverse_both_directions(self, resolver):
        axioms = [owl.InverseObjectProperties(P("hasPart"), P("isPartOf"))]
        assert iris(collect_relationships(EX + "hasPart", axioms, resolver).inverse_properties) == [EX + "isPartOf"]
        assert iris(collect_relationships(EX + "isPartOf", axioms, resolver).inverse_properties) == [EX + "hasPart"]

    def test_domain_and_range(self, resolver):
        axioms = [
            owl.ObjectPropertyDomain(P("hasPart"), C("Animal")),
            owl.ObjectPropertyRange(P("hasPart"), C("BodyPart")),
        ]
        rels = collect_relationships(EX + "hasPart", axioms, resolver)
        assert rels.property_domain == Simple(resolver.entity_display(EX + "Animal"))
        assert rels.property_range == Simple(resolver.entity_display(EX + "BodyPart"))

    def test_multiple_domains_intersect(self, resolver):
        axioms = [
            owl.ObjectPropertyDomain(P("hasPart"), C("Animal")),
            owl.ObjectPropertyDomain(P("hasPart"), C("Thing")),
            owl.ObjectPropertyDomain(P("hasPart"), C("Whole")),
        ]
        rels = collect_relationships(EX + "hasPart", axioms, resolver)
        assert isinstance(rels.property_domain, And)
        assert iris(rels.property_domain.children) == [EX + "Animal", EX + "Thing", EX + "Whole"]

    def test_class_assertions(self, resolver):
        axioms = [owl.ClassAssertion(C("Dog"), owl.NamedIndividual(EX + "rex"))]
        rels = collect_relationships(EX + "rex", axioms, resolver)
        assert iris(rels.class_assertions) == [EX + "Dog"]
        assert collect_relationships(EX + "Dog", axioms, resolver).class_assertions == []


# -------------------- annotations --------------------

class TestAnnotations:
    def test_routing(self, resolver):
        components = [
            ann(RDFS.label, "Dog", owl.Literal("Dog", language="en")),
            ann(SKOS.definition, "Dog", owl.Literal("A domesticated canine.")),
            ann(SKOS.example, "Dog", owl.Literal("Rex")),
            ann(RDFS.comment, "Dog", owl.Literal("Good boy")),
            ann(RDFS.label, "Cat", owl.Literal("Cat")),
        ]
        anns = collect_annotations(EX + "Dog", components, resolver)
        assert anns.label == "Dog"
        assert anns.definition == "A domesticated canine."
        assert anns.example == "Rex"
        assert [(a.property_iri, a.value) for a in anns.generic] == [(str(RDFS.comment), "Good boy")]
        assert anns.generic[0].property_display == "http://www.w3.org/2000/01/rdf-schema#comment"

    def test_iri_value_kept_as_text(self, resolver):
        components = [ann(RDFS.seeAlso, "Dog", "http://example.org/dogs")]
        anns = collect_annotations(EX + "Dog", components, resolver)
        assert anns.generic[0].value == "http://example.org/dogs"

    def test_anonymous_value_skipped(self, resolver):
        components = [ann(RDFS.seeAlso, "Dog", owl.AnonymousIndividual("b0"))]
        assert collect_annotations(EX + "Dog", components, resolver).generic == []

    def test_duplicate_definition_deterministic(self, resolver):
        components = [
            ann(SKOS.definition, "Dog", owl.Literal("b")),
            ann(SKOS.definition, "Dog", owl.Literal("a")),
        ]
        assert collect_annotations(EX + "Dog", components, resolver).definition == "a"

    def test_label_matches_display_elsewhere(self, prefix_map):
        components = [
            ann(RDFS.label, "Dog", "http://example.org/labels/dog"),
            ann(RDFS.label, "Dog", owl.AnonymousIndividual("b0")),
        ]
        resolver = Resolver.for_components(components, prefix_map)
        anns = collect_annotations(EX + "Dog", components, resolver)
        assert anns.label == resolver.entity_display(EX + "Dog").display == "http://example.org/labels/dog"

    def test_no_label(self, resolver):
        components = [ann(RDFS.label, "Cat", owl.AnonymousIndividual("b0"))]
        assert collect_annotations(EX + "Cat", components, resolver).label is None

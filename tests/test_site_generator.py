import pytest
from rdflib import RDFS
from rdflib.namespace import DC, DCTERMS

import owl_model as owl
from axiom_index import AxiomIndex
from errors import TemplateRenderFailure, UnknownEntityKind, UnsupportedConstruct
from html_renderer import HtmlRenderer
from jinja2 import DictLoader
from metadata_builder import build_ontology_metadata
from models import EntityKind, Simple
from page_builder import build_entity_page, entity_kind
from sidebar import build_sidebar
from site_generator import build_site, declared_iris, render_site
from utils import Resolver

from conftest import EX

ONTOLOGY = "http://example.org/zoo"


def declare(kind, name):
    return owl.Declaration(kind(EX + name))


def zoo():
    return owl.Ontology(components=[
        owl.OntologyID(ONTOLOGY, ONTOLOGY + "/1.0"),
        owl.OntologyAnnotation(str(DCTERMS.title), owl.Literal("Zoo Ontology")),
        owl.OntologyAnnotation(str(DCTERMS.license), "https://creativecommons.org/licenses/by/4.0/"),
        owl.OntologyAnnotation(str(DC.contributor), owl.Literal("A. Keeper")),
        owl.OntologyAnnotation(str(RDFS.comment), owl.Literal("Animals and their parts")),
        declare(owl.Class, "Cat"),
        declare(owl.Class, "Animal"),
        declare(owl.ObjectProperty, "hasPart"),
        declare(owl.NamedIndividual, "tom"),
        owl.AnnotationAssertion(str(RDFS.label), EX + "Cat", owl.Literal("Cat")),
        owl.SubClassOf(sub=owl.Class(EX + "Cat"), sup=owl.Class(EX + "Animal")),
        owl.ClassAssertion(owl.Class(EX + "Cat"), owl.NamedIndividual(EX + "tom")),
    ])


# -------------------- page builder --------------------

class TestEntityKind:
    def test_declared(self):
        assert entity_kind(EX + "Cat", [declare(owl.Class, "Cat")]) is EntityKind.CLASS

    def test_undeclared_raises(self):
        with pytest.raises(UnknownEntityKind) as e:
            entity_kind(EX + "Ghost", [declare(owl.Class, "Cat")])
        assert e.value.iri == EX + "Ghost"

    def test_last_declaration_wins(self):
        components = [declare(owl.Class, "x"), declare(owl.NamedIndividual, "x")]
        assert entity_kind(EX + "x", components) is EntityKind.NAMED_INDIVIDUAL

    def test_build_page_for_undeclared(self, resolver):
        index = AxiomIndex([owl.SubClassOf(sub=owl.Class(EX + "Ghost"), sup=owl.Class(EX + "Animal"))])
        with pytest.raises(UnknownEntityKind):
            build_entity_page(EX + "Ghost", index, resolver)


# -------------------- orchestrator --------------------

class TestBuildSite:
    def test_end_to_end(self, prefix_map):
        build = build_site(zoo(), prefix_map)
        assert build.failures == []
        cat = build.pages[EX + "Cat"]
        assert cat.kind is EntityKind.CLASS
        assert cat.annotations.label == "Cat"
        assert len(cat.relationships.superclasses) == 1
        assert isinstance(cat.relationships.superclasses[0], Simple)
        assert cat.relationships.superclasses[0].entity.iri == EX + "Animal"
        assert build.metadata.title == "Zoo Ontology"

    def test_one_page_per_declared_iri(self, prefix_map):
        build = build_site(zoo(), prefix_map)
        assert set(build.pages) == {EX + "Cat", EX + "Animal", EX + "hasPart", EX + "tom"}

    def test_page_order(self, prefix_map):
        kinds = declared_iris(AxiomIndex(zoo().components))
        assert list(kinds) == [EX + "Cat", EX + "Animal", EX + "tom", EX + "hasPart"]

    def test_failure_does_not_stop_other_pages(self, prefix_map):
        ontology = zoo()
        ontology.components.append(declare(owl.Class, "Spider"))
        ontology.components.append(owl.SubClassOf(
            sub=owl.Class(EX + "Spider"),
            sup=owl.ObjectExactCardinality(8, owl.ObjectProperty(EX + "hasLeg")),
        ))
        errors = []
        build = build_site(ontology, prefix_map, errors=errors)
        assert [f.iri for f in build.failures] == [EX + "Spider"]
        assert isinstance(build.failures[0].error, UnsupportedConstruct)
        assert EX + "Cat" in build.pages
        assert len(errors) == 1

    def test_dual_kind_conflict(self, prefix_map):
        ontology = zoo()
        ontology.components.append(declare(owl.NamedIndividual, "Cat"))
        build = build_site(ontology, prefix_map)
        assert build.conflicts == {EX + "Cat": ["class", "named-individual"]}
        assert len([iri for iri in build.pages if iri == EX + "Cat"]) == 1
        assert build.pages[EX + "Cat"].kind is EntityKind.NAMED_INDIVIDUAL

    def test_base_keeps_foreign_entities_out_of_sidebar(self, prefix_map):
        ontology = zoo()
        ontology.components.append(owl.Declaration(owl.Class("http://xmlns.com/foaf/0.1/Person")))
        build = build_site(ontology, prefix_map, base=EX)
        assert [e.iri for e in build.metadata.sidebar.classes] == [EX + "Animal", EX + "Cat"]
        assert "http://xmlns.com/foaf/0.1/Person" in build.pages


# -------------------- sidebar & metadata --------------------

class TestSidebar:
    def test_grouped_and_sorted(self, prefix_map):
        components = zoo().components
        sidebar = build_sidebar(AxiomIndex(components), Resolver.for_components(components, prefix_map))
        assert [e.display for e in sidebar.classes] == ["Animal", "Cat"]
        assert [e.identifier for e in sidebar.object_properties] == ["hasPart"]
        assert [e.identifier for e in sidebar.named_individuals] == ["tom"]
        assert sidebar.data_properties == [] and sidebar.annotation_properties == []

    def test_base_filter(self, prefix_map):
        components = zoo().components + [owl.Declaration(owl.Class("http://other.org/Thing"))]
        resolver = Resolver.for_components(components, prefix_map)
        sidebar = build_sidebar(AxiomIndex(components), resolver, base="http://other.org/")
        assert [e.iri for e in sidebar.classes] == ["http://other.org/Thing"]


class TestMetadata:
    def test_routed_annotations(self, prefix_map):
        components = zoo().components
        meta = build_ontology_metadata(AxiomIndex(components), Resolver.for_components(components, prefix_map))
        assert meta.iri == ONTOLOGY
        assert meta.version_iri == ONTOLOGY + "/1.0"
        assert meta.title == "Zoo Ontology"
        assert meta.license == "https://creativecommons.org/licenses/by/4.0/"
        assert [c.value for c in meta.contributors] == ["A. Keeper"]
        assert [a.value for a in meta.generic_annotations] == ["Animals and their parts"]
        context = meta.to_context()
        assert context["version"] == ONTOLOGY + "/1.0"
        assert [e["display"] for e in context["sidebar"]["classes"]] == ["Animal", "Cat"]

    def test_missing_title(self, prefix_map):
        components = [owl.OntologyID(ONTOLOGY)]
        meta = build_ontology_metadata(AxiomIndex(components), Resolver.for_components(components, prefix_map))
        assert meta.title is None


# -------------------- rendering --------------------

class TestRenderSite:
    def test_render_failure_collected(self, prefix_map):
        build = build_site(zoo(), prefix_map)
        loader = DictLoader({
            "entity.html": "{{ label or iri }}{% if iri.endswith('tom') %}{{ missing.attr.deeper }}{% endif %}",
            "ontology.html": "{{ title }}",
        })
        site = render_site(build, HtmlRenderer(loader=loader))
        assert site.index == "Zoo Ontology"
        assert site.pages[EX + "Cat"] == "Cat"
        assert [f.iri for f in site.failures] == [EX + "tom"]
        assert isinstance(site.failures[0].error, TemplateRenderFailure)

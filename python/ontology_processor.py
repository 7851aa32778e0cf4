import os
import logging
import traceback
from typing import Dict, List, Optional, Tuple
from rdflib import BNode, Graph, OWL, RDF, RDFS, URIRef
from rdflib import Literal as RDFLiteral
from rdflib.collection import Collection
from rdflib.namespace import DC, DCTERMS, SKOS
from rdflib.util import guess_format

import owl_model as owl
from utils import PrefixMap

log = logging.getLogger("owl2site")

# -------------------- vocabulary --------------------
FORMATS = {
    ".ttl": "turtle",
    ".owl": "xml",
    ".rdf": "xml",
    ".xml": "xml",
    ".nt": "nt",
    ".n3": "n3",
    ".jsonld": "json-ld",
}

# Declarations of one IRI are emitted in this order, so with several kinds
# the last one listed is the kind its page gets
ENTITY_TYPES = (
    (OWL.Class, owl.Class),
    (OWL.NamedIndividual, owl.NamedIndividual),
    (OWL.DatatypeProperty, owl.DataProperty),
    (OWL.ObjectProperty, owl.ObjectProperty),
    (OWL.AnnotationProperty, owl.AnnotationProperty),
)

BUILTIN_ANNOTATION_PROPS = {
    RDFS.label, RDFS.comment, RDFS.seeAlso, RDFS.isDefinedBy,
    OWL.deprecated, OWL.versionInfo, OWL.priorVersion,
    OWL.backwardCompatibleWith, OWL.incompatibleWith,
}
ANNOTATION_NAMESPACES = (str(SKOS), str(DC), str(DCTERMS))
BUILTIN_NAMESPACES = (str(OWL), str(RDF), str(RDFS))
ONTOLOGY_HEADER_PROPS = {RDF.type, OWL.versionIRI, OWL.imports}

# (cardinality predicate, object restriction, data restriction)
CARDINALITIES = (
    (OWL.cardinality, owl.ObjectExactCardinality, owl.DataExactCardinality),
    (OWL.qualifiedCardinality, owl.ObjectExactCardinality, owl.DataExactCardinality),
    (OWL.minCardinality, owl.ObjectMinCardinality, owl.DataMinCardinality),
    (OWL.minQualifiedCardinality, owl.ObjectMinCardinality, owl.DataMinCardinality),
    (OWL.maxCardinality, owl.ObjectMaxCardinality, owl.DataMaxCardinality),
    (OWL.maxQualifiedCardinality, owl.ObjectMaxCardinality, owl.DataMaxCardinality),
)


class GraphMapper:
    """Maps the OWL-in-RDF vocabulary of an rdflib Graph onto owl_model components."""

    def __init__(self, g: Graph):
        self.g = g
        self.declared: Dict[URIRef, List[type]] = {}
        for rdf_type, entity_type in ENTITY_TYPES:
            for s in g.subjects(RDF.type, rdf_type):
                if isinstance(s, URIRef):
                    self.declared.setdefault(s, []).append(entity_type)
        self.ontology_iris = [s for s in g.subjects(RDF.type, OWL.Ontology) if isinstance(s, URIRef)]

    def _is(self, node, entity_type: type) -> bool:
        return entity_type in self.declared.get(node, ())

    def is_annotation_property(self, p) -> bool:
        if self._is(p, owl.ObjectProperty) or self._is(p, owl.DataProperty):
            return False
        return self._is(p, owl.AnnotationProperty) or p in BUILTIN_ANNOTATION_PROPS or str(p).startswith(ANNOTATION_NAMESPACES)

    # -------------------- terms --------------------
    def literal(self, lit: RDFLiteral) -> owl.Literal:
        return owl.Literal(
            str(lit),
            str(lit.datatype) if lit.datatype else None,
            lit.language,
        )

    def annotation_value(self, o):
        if isinstance(o, RDFLiteral):
            return self.literal(o)
        if isinstance(o, BNode):
            return owl.AnonymousIndividual(str(o))
        return str(o)

    def individual(self, node):
        if isinstance(node, URIRef):
            return owl.NamedIndividual(str(node))
        if isinstance(node, BNode):
            return owl.AnonymousIndividual(str(node))
        raise ValueError(f"Literal {node!r} used as an individual")

    def object_property_expression(self, node):
        if isinstance(node, URIRef):
            return owl.ObjectProperty(str(node))
        inverse = self.g.value(node, OWL.inverseOf)
        if isinstance(node, BNode) and isinstance(inverse, URIRef):
            return owl.ObjectInverseOf(owl.ObjectProperty(str(inverse)))
        raise ValueError(f"Unrecognised object property expression {node!r}")

    def class_expression(self, node):
        g = self.g
        if isinstance(node, URIRef):
            return owl.Class(str(node))
        if not isinstance(node, BNode):
            raise ValueError(f"Literal {node!r} used as a class expression")
        members = g.value(node, OWL.intersectionOf)
        if members is not None:
            return owl.ObjectIntersectionOf(tuple(self.class_expression(m) for m in Collection(g, members)))
        members = g.value(node, OWL.unionOf)
        if members is not None:
            return owl.ObjectUnionOf(tuple(self.class_expression(m) for m in Collection(g, members)))
        complement = g.value(node, OWL.complementOf)
        if complement is not None:
            return owl.ObjectComplementOf(self.class_expression(complement))
        members = g.value(node, OWL.oneOf)
        if members is not None:
            return owl.ObjectOneOf(tuple(self.individual(m) for m in Collection(g, members)))
        on_prop = g.value(node, OWL.onProperty)
        if on_prop is not None:
            return self.restriction(node, on_prop)
        raise ValueError(f"Unrecognised class expression {node!r}")

    def restriction(self, node, on_prop):
        g = self.g
        data = self._is(on_prop, owl.DataProperty)
        some = g.value(node, OWL.someValuesFrom)
        if some is not None:
            if data:
                return owl.DataSomeValuesFrom(owl.DataProperty(str(on_prop)), str(some))
            return owl.ObjectSomeValuesFrom(self.object_property_expression(on_prop), self.class_expression(some))
        only = g.value(node, OWL.allValuesFrom)
        if only is not None:
            if data:
                return owl.DataAllValuesFrom(owl.DataProperty(str(on_prop)), str(only))
            return owl.ObjectAllValuesFrom(self.object_property_expression(on_prop), self.class_expression(only))
        value = g.value(node, OWL.hasValue)
        if value is not None:
            if isinstance(value, RDFLiteral):
                return owl.DataHasValue(owl.DataProperty(str(on_prop)), self.literal(value))
            return owl.ObjectHasValue(self.object_property_expression(on_prop), self.individual(value))
        if g.value(node, OWL.hasSelf) is not None:
            return owl.ObjectHasSelf(self.object_property_expression(on_prop))
        on_class = g.value(node, OWL.onClass)
        on_range = g.value(node, OWL.onDataRange)
        for pred, object_cls, data_cls in CARDINALITIES:
            n = g.value(node, pred)
            if n is None:
                continue
            if data or on_range is not None:
                return data_cls(int(n), owl.DataProperty(str(on_prop)), str(on_range) if on_range is not None else None)
            filler = self.class_expression(on_class) if on_class is not None else None
            return object_cls(int(n), self.object_property_expression(on_prop), filler)
        raise ValueError(f"Unrecognised restriction {node!r} on {on_prop}")

    # -------------------- components --------------------
    def triple_components(self, s, p, o):
        """Components contributed by one triple (usually zero or one)."""
        if p == RDFS.subClassOf:
            return [owl.SubClassOf(sub=self.class_expression(s), sup=self.class_expression(o))]
        if p == OWL.equivalentClass:
            return [owl.EquivalentClasses((self.class_expression(s), self.class_expression(o)))]
        if p == RDFS.subPropertyOf:
            if self._is(s, owl.DataProperty) and self._is(o, owl.DataProperty):
                return [owl.SubDataPropertyOf(owl.DataProperty(str(s)), owl.DataProperty(str(o)))]
            if self.is_annotation_property(s) or self._is(s, owl.DataProperty):
                return []
            return [owl.SubObjectPropertyOf(sub=self.object_property_expression(s), sup=self.object_property_expression(o))]
        if p == OWL.inverseOf:
            if not isinstance(s, URIRef):
                return []
            return [owl.InverseObjectProperties(owl.ObjectProperty(str(s)), self.object_property_expression(o))]
        if p in (RDFS.domain, RDFS.range):
            if not (isinstance(s, URIRef) and self._is(s, owl.ObjectProperty)):
                log.debug("Skipping %s of %s: not a declared object property", p, s)
                return []
            ce = self.class_expression(o)
            if p == RDFS.domain:
                return [owl.ObjectPropertyDomain(owl.ObjectProperty(str(s)), ce)]
            return [owl.ObjectPropertyRange(owl.ObjectProperty(str(s)), ce)]
        if p == RDF.type:
            if isinstance(s, URIRef) and not str(o).startswith(BUILTIN_NAMESPACES):
                return [owl.ClassAssertion(self.class_expression(o), owl.NamedIndividual(str(s)))]
            return []
        if isinstance(s, URIRef) and s not in self.ontology_iris and self.is_annotation_property(p):
            return [owl.AnnotationAssertion(str(p), str(s), self.annotation_value(o))]
        return []

    def to_ontology(self, errors: Optional[list] = None) -> owl.Ontology:
        components = []
        for s in self.ontology_iris:
            version = self.g.value(s, OWL.versionIRI)
            components.append(owl.OntologyID(str(s), str(version) if version is not None else None))
            for p, o in self.g.predicate_objects(s):
                if p not in ONTOLOGY_HEADER_PROPS:
                    components.append(owl.OntologyAnnotation(str(p), self.annotation_value(o)))
        for iri, entity_types in self.declared.items():
            for entity_type in entity_types:
                components.append(owl.Declaration(entity_type(str(iri))))
        for s, p, o in self.g:
            try:
                components.extend(self.triple_components(s, p, o))
            except ValueError as e:
                error_msg = f"Skipping triple ({s}, {p}, {o}): {e}"
                if errors is not None:
                    errors.append(error_msg)
                log.warning(error_msg)
        prefixes = {prefix: str(ns) for prefix, ns in self.g.namespaces()}
        return owl.Ontology(components=components, prefixes=prefixes)


def graph_to_ontology(g: Graph, errors: Optional[list] = None) -> owl.Ontology:
    return GraphMapper(g).to_ontology(errors)


def prefix_map_for(ontology: owl.Ontology) -> PrefixMap:
    pm = PrefixMap()
    for prefix, namespace in ontology.prefixes.items():
        try:
            pm.add_prefix(prefix, namespace)
        except ValueError as e:
            log.warning("Ignoring prefix %r: %s", prefix, e)
    return pm


def process_ontology(path: str, errors: list) -> Tuple[Optional[owl.Ontology], Optional[PrefixMap]]:
    """Load an RDF serialisation of an ontology and return its component model and prefix map."""
    if "://" not in path and not os.path.exists(path):
        error_msg = f"Ontology file not found: {path}"
        errors.append(error_msg)
        log.error(error_msg)
        return None, None

    fmt = FORMATS.get(os.path.splitext(path)[1].lower()) or guess_format(path)
    try:
        g = Graph(bind_namespaces="core")
        g.parse(path, format=fmt)
        log.info("Loaded ontology %s (%s), %d triples", path, fmt, len(g))
    except Exception as e:
        error_msg = f"Failed to load or parse ontology from {path}: {str(e)}\n{traceback.format_exc()}"
        errors.append(error_msg)
        log.error(error_msg)
        return None, None
    if len(g) == 0:
        error_msg = f"RDF graph is empty after loading ontology {path}"
        errors.append(error_msg)
        log.error(error_msg)
        return None, None

    ontology = graph_to_ontology(g, errors)
    log.info("Mapped %d components from %s", len(ontology.components), path)
    return ontology, prefix_map_for(ontology)

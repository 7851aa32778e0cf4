import logging

import owl_model as owl
from axiom_index import AxiomIndex
from errors import UnknownEntityKind
from models import EntityKind, EntityPageModel
from relationship_collector import collect_annotations, collect_relationships
from utils import Resolver

log = logging.getLogger("owl2site")

DECLARATION_KINDS = {
    owl.Class: EntityKind.CLASS,
    owl.ObjectProperty: EntityKind.OBJECT_PROPERTY,
    owl.AnnotationProperty: EntityKind.ANNOTATION_PROPERTY,
    owl.DataProperty: EntityKind.DATA_PROPERTY,
    owl.NamedIndividual: EntityKind.NAMED_INDIVIDUAL,
}


def entity_kind(iri: str, components) -> EntityKind:
    """Kind from the declaration(s) of the IRI; the last one scanned wins."""
    kind = EntityKind.UNDEFINED
    for c in components:
        if isinstance(c, owl.Declaration) and c.entity.iri == iri:
            declared = DECLARATION_KINDS[type(c.entity)]
            if kind is not EntityKind.UNDEFINED and declared is not kind:
                log.warning("Conflicting declarations for %s: %s and %s", iri, kind.value, declared.value)
            kind = declared
    if kind is EntityKind.UNDEFINED:
        raise UnknownEntityKind(iri)
    return kind


def build_entity_page(iri: str, index: AxiomIndex, resolver: Resolver) -> EntityPageModel:
    components = index.for_iri(iri)
    kind = entity_kind(iri, components)
    log.debug("Building %s page for %s from %d components", kind.value, iri, len(components))
    return EntityPageModel(
        kind=kind,
        iri=iri,
        annotations=collect_annotations(iri, components, resolver),
        relationships=collect_relationships(iri, components, resolver),
    )

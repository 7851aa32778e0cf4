import logging
from typing import Optional

import owl_model as owl
from axiom_index import AxiomIndex
from models import AnnotationEntry, OntologyMetadataModel
from sidebar import build_sidebar
from utils import ONTOLOGY_ANNOTATION_SLOTS, Resolver, annotation_value_text, prefer

log = logging.getLogger("owl2site")


def build_ontology_metadata(index: AxiomIndex, resolver: Resolver, base: Optional[str] = None) -> OntologyMetadataModel:
    """Index-page model: ontology id, routed ontology annotations and the sidebar."""
    meta = OntologyMetadataModel(sidebar=build_sidebar(index, resolver, base))
    for oid in index.of_kind(owl.OntologyID):
        if oid.iri:
            meta.iri = oid.iri
        if oid.version_iri:
            meta.version_iri = oid.version_iri

    for oa in index.of_kind(owl.OntologyAnnotation):
        value = annotation_value_text(oa.value)
        if value is None:
            continue
        entry = AnnotationEntry(oa.property, resolver.shrink(oa.property), value)
        slot = ONTOLOGY_ANNOTATION_SLOTS.get(oa.property)
        if slot == "contributors":
            meta.contributors.append(entry)
        elif slot:
            setattr(meta, slot, prefer(getattr(meta, slot), value))
        else:
            meta.generic_annotations.append(entry)

    if not meta.title:
        log.warning("The ontology %s is missing a dcterms:title annotation.", meta.iri or "(anonymous)")
    return meta

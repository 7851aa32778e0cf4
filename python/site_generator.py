"""Drive every declared entity through the page builder and assemble the site.

A failure while building or rendering one entity is recorded and logged; the
remaining entities are still built.
"""
import logging
import traceback
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import owl_model as owl
from axiom_index import AxiomIndex
from errors import RenderError
from html_renderer import HtmlRenderer
from metadata_builder import build_ontology_metadata
from models import EntityPageModel, OntologyMetadataModel
from page_builder import build_entity_page
from utils import PrefixMap, Resolver

log = logging.getLogger("owl2site")

# Page enumeration order
KIND_ORDER = (
    ("class", owl.Class),
    ("named-individual", owl.NamedIndividual),
    ("data-property", owl.DataProperty),
    ("object-property", owl.ObjectProperty),
    ("annotation-property", owl.AnnotationProperty),
)


@dataclass
class BuildFailure:
    iri: str
    error: RenderError

    def __str__(self) -> str:
        return f"{self.iri}: {self.error}"


@dataclass
class SiteBuild:
    pages: Dict[str, EntityPageModel]
    metadata: OntologyMetadataModel
    failures: List[BuildFailure] = field(default_factory=list)
    conflicts: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class RenderedSite:
    pages: Dict[str, str]
    index: Optional[str]
    failures: List[BuildFailure] = field(default_factory=list)


def declared_iris(index: AxiomIndex) -> Dict[str, List[str]]:
    """Unique declared IRIs in page order, each with the kinds it is declared as."""
    kinds: Dict[str, List[str]] = {}
    for kind_name, entity_type in KIND_ORDER:
        for d in index.declarations(entity_type):
            declared = kinds.setdefault(d.entity.iri, [])
            if kind_name not in declared:
                declared.append(kind_name)
    return kinds


def _record(failures: List[BuildFailure], errors: Optional[list], iri: str, e: RenderError):
    failures.append(BuildFailure(iri, e))
    error_msg = f"Error building page for {iri}: {e}"
    if errors is not None:
        errors.append(error_msg)
    log.error(error_msg)
    log.debug(traceback.format_exc())


def build_site(ontology: owl.Ontology, prefix_map: PrefixMap, base: Optional[str] = None, errors: Optional[list] = None) -> SiteBuild:
    """Build one page model per declared IRI plus the ontology metadata model."""
    index = AxiomIndex(ontology.components)
    resolver = Resolver.for_components(ontology.components, prefix_map)

    pages: Dict[str, EntityPageModel] = {}
    failures: List[BuildFailure] = []
    conflicts: Dict[str, List[str]] = {}
    for iri, kinds in declared_iris(index).items():
        if len(kinds) > 1:
            conflicts[iri] = kinds
            log.warning("%s is declared as more than one kind: %s", iri, ", ".join(kinds))
        try:
            pages[iri] = build_entity_page(iri, index, resolver)
        except RenderError as e:
            _record(failures, errors, iri, e)

    metadata = build_ontology_metadata(index, resolver, base)
    log.info("Built %d entity pages, %d failures", len(pages), len(failures))
    return SiteBuild(pages=pages, metadata=metadata, failures=failures, conflicts=conflicts)


def render_site(build: SiteBuild, renderer: HtmlRenderer, errors: Optional[list] = None) -> RenderedSite:
    """Render the IRI -> content map and the index page."""
    failures = list(build.failures)
    rendered: Dict[str, str] = {}
    for iri, model in build.pages.items():
        try:
            rendered[iri] = renderer.render_entity(model)
        except RenderError as e:
            _record(failures, errors, iri, e)
    index = None
    try:
        index = renderer.render_metadata(build.metadata)
    except RenderError as e:
        _record(failures, errors, build.metadata.iri or "index", e)
    return RenderedSite(pages=rendered, index=index, failures=failures)


def log_summary(failures: List[BuildFailure]):
    if not failures:
        log.info("All pages built without errors")
        return
    log.error("%d page(s) failed:", len(failures))
    for f in failures:
        log.error("  %s", f)

import logging
from typing import List, Optional

import owl_model as owl
from axiom_index import AxiomIndex
from models import EntityDisplay, SidebarCatalog
from utils import Resolver

log = logging.getLogger("owl2site")


def _displays(index: AxiomIndex, entity_type: type, resolver: Resolver, base: Optional[str]) -> List[EntityDisplay]:
    out = []
    for d in index.declarations(entity_type):
        iri = d.entity.iri
        if base and base not in iri:
            continue
        out.append(resolver.entity_display(iri))
    return sorted(out, key=lambda e: (e.display.lower(), e.iri))


def build_sidebar(index: AxiomIndex, resolver: Resolver, base: Optional[str] = None) -> SidebarCatalog:
    """Every declared entity grouped by kind, optionally limited to IRIs within `base`."""
    sidebar = SidebarCatalog(
        classes=_displays(index, owl.Class, resolver, base),
        named_individuals=_displays(index, owl.NamedIndividual, resolver, base),
        object_properties=_displays(index, owl.ObjectProperty, resolver, base),
        annotation_properties=_displays(index, owl.AnnotationProperty, resolver, base),
        data_properties=_displays(index, owl.DataProperty, resolver, base),
    )
    log.info(
        "Sidebar: %d classes, %d individuals, %d object properties, %d annotation properties, %d data properties",
        len(sidebar.classes), len(sidebar.named_individuals), len(sidebar.object_properties),
        len(sidebar.annotation_properties), len(sidebar.data_properties),
    )
    return sidebar

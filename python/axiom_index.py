import logging
from collections import defaultdict
from typing import Dict, List, Set

import owl_model as owl

log = logging.getLogger("owl2site")


def _named(expr) -> Set[str]:
    if isinstance(expr, (owl.Class, owl.ObjectProperty, owl.DataProperty, owl.NamedIndividual)):
        return {expr.iri}
    return set()


def referenced_iris(component) -> Set[str]:
    """IRIs a component can contribute to when building that IRI's page."""
    if isinstance(component, owl.Declaration):
        return {component.entity.iri}
    if isinstance(component, (owl.SubClassOf, owl.SubObjectPropertyOf, owl.SubDataPropertyOf)):
        return _named(component.sub) | _named(component.sup)
    if isinstance(component, owl.EquivalentClasses):
        refs = set()
        for operand in component.operands:
            refs |= _named(operand)
        return refs
    if isinstance(component, owl.InverseObjectProperties):
        return _named(component.first) | _named(component.second)
    if isinstance(component, (owl.ObjectPropertyDomain, owl.ObjectPropertyRange)):
        return _named(component.property)
    if isinstance(component, owl.ClassAssertion):
        return _named(component.individual)
    if isinstance(component, owl.AnnotationAssertion):
        if isinstance(component.subject, str):
            return {component.subject}
    return set()


class AxiomIndex:
    """Components grouped by referenced IRI and by component type, built once per build."""

    def __init__(self, components):
        self.components: List = list(components)
        self._by_iri: Dict[str, List] = defaultdict(list)
        self._by_kind: Dict[type, List] = defaultdict(list)
        for c in self.components:
            self._by_kind[type(c)].append(c)
            for iri in referenced_iris(c):
                self._by_iri[iri].append(c)
        log.info("Indexed %d components referencing %d IRIs", len(self.components), len(self._by_iri))

    def for_iri(self, iri: str) -> List:
        return self._by_iri.get(iri, [])

    def of_kind(self, kind: type) -> List:
        return self._by_kind.get(kind, [])

    def declarations(self, entity_type: type) -> List[owl.Declaration]:
        return [d for d in self.of_kind(owl.Declaration) if isinstance(d.entity, entity_type)]

import re
import logging
from typing import Dict, Iterable, Mapping, Optional
from rdflib import RDFS
from rdflib.namespace import DC, DCTERMS, SKOS

from errors import PrefixShrinkFailure
from models import EntityDisplay
from owl_model import AnnotationAssertion, AnonymousIndividual, Literal

log = logging.getLogger("owl2site")

# -------------------- well-known annotation properties --------------------
LABEL = str(RDFS.label)

# Entity annotations routed out of the generic bucket
ENTITY_ANNOTATION_SLOTS = {
    LABEL: "label",
    str(SKOS.definition): "definition",
    str(SKOS.example): "example",
}

# Ontology annotations routed out of the generic bucket
ONTOLOGY_ANNOTATION_SLOTS = {
    str(DCTERMS.title): "title",
    str(DC.title): "title",
    str(DCTERMS.license): "license",
    str(DCTERMS.description): "description",
    str(DC.description): "description",
    str(DC.contributor): "contributors",
    str(DCTERMS.contributor): "contributors",
}

_PREFIX_RE = re.compile(r"^[A-Za-z_][\w.\-]*$")


def literal_text(lit: Literal) -> str:
    """Text of a literal with its datatype and language tag stripped."""
    return lit.value


def annotation_value_text(value) -> Optional[str]:
    if isinstance(value, Literal):
        return literal_text(value)
    if isinstance(value, AnonymousIndividual):
        return None
    return str(value)


def prefer(current: Optional[str], candidate: str) -> str:
    """Deterministic pick between two values asserted for the same single-valued slot."""
    if current is None or candidate < current:
        return candidate
    return current


class PrefixMap:
    """Registered prefix <-> namespace pairs with an optional default namespace."""

    def __init__(self, prefixes: Optional[Mapping[str, str]] = None, default: Optional[str] = None):
        self.default = None
        self._prefixes: Dict[str, str] = {}
        for prefix, namespace in (prefixes or {}).items():
            self.add_prefix(prefix, namespace)
        if default:
            self.set_default(default)

    def add_prefix(self, prefix: str, namespace: str):
        prefix = prefix.rstrip(":")
        if not prefix:
            self.set_default(namespace)
            return
        if not _PREFIX_RE.match(prefix):
            raise ValueError(f"Invalid prefix name: {prefix!r}")
        if not namespace:
            raise ValueError(f"Empty namespace for prefix {prefix!r}")
        self._prefixes[prefix] = str(namespace)
        log.debug("Registered prefix %s: → %s", prefix, namespace)

    def set_default(self, namespace: str):
        self.default = str(namespace)
        log.debug("Registered default namespace %s", namespace)

    def shrink_strict(self, iri: str) -> str:
        s = str(iri)
        if self.default and s.startswith(self.default) and len(s) > len(self.default):
            return s[len(self.default):]
        # longest namespace first; insertion order breaks ties
        for prefix, namespace in sorted(self._prefixes.items(), key=lambda kv: len(kv[1]), reverse=True):
            if s.startswith(namespace) and len(s) > len(namespace):
                return f"{prefix}:{s[len(namespace):]}"
        raise PrefixShrinkFailure(s)

    def shrink(self, iri: str) -> str:
        try:
            return self.shrink_strict(iri)
        except PrefixShrinkFailure:
            return str(iri)


def page_location(identifier: str, suffixes: Iterable[str] = ()) -> Optional[str]:
    """Site-relative path of an entity page, or None when the identifier gets no page.

    Default-namespace identifiers live at the site root, `prefix:local` identifiers
    under `prefix/` when that prefix is a rendered import suffix.
    """
    if ":" not in identifier:
        prefix, local = None, identifier
    else:
        prefix, local = identifier.split(":", 1)
        if prefix not in suffixes:
            return None
    if not local or "/" in local or "#" in local:
        return None
    if prefix is None:
        return f"{local}.html"
    return f"{prefix}/{local}.html"


def build_label_index(components) -> Dict[str, str]:
    """Map each named subject to its rdfs:label text, scanning annotation assertions once.

    Literal and IRI label values both count; anonymous values are skipped. Entity pages
    take their label from this index too, so an entity reads the same everywhere.
    """
    labels: Dict[str, str] = {}
    for c in components:
        if not isinstance(c, AnnotationAssertion) or c.property != LABEL:
            continue
        if isinstance(c.subject, AnonymousIndividual):
            continue
        text = annotation_value_text(c.value)
        if not text:
            continue
        if c.subject in labels and labels[c.subject] != text:
            log.debug("Multiple labels for %s: %r, %r", c.subject, labels[c.subject], text)
        labels[c.subject] = prefer(labels.get(c.subject), text)
    log.info("Built label index with %d entries", len(labels))
    return labels


class Resolver:
    def __init__(self, prefix_map: PrefixMap, label_index: Optional[Dict[str, str]] = None):
        self.prefix_map = prefix_map
        self.label_index = label_index or {}

    @classmethod
    def for_components(cls, components, prefix_map: PrefixMap) -> "Resolver":
        return cls(prefix_map, build_label_index(components))

    def shrink(self, iri: str) -> str:
        return self.prefix_map.shrink(iri)

    def label(self, iri: str) -> str:
        return self.label_index.get(iri) or self.shrink(iri)

    def entity_display(self, iri: str) -> EntityDisplay:
        identifier = self.shrink(iri) or iri
        display = self.label_index.get(iri) or identifier or iri
        return EntityDisplay(iri=iri, identifier=identifier, display=display)

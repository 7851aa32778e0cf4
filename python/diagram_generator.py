import html
import hashlib
import logging
from typing import Optional
from graphviz import Digraph

from models import EntityPageModel, Simple

log = logging.getLogger("owl2site")

BOX = '<<TABLE BORDER="1" CELLBORDER="0" CELLSPACING="0" CELLPADDING="1"><TR><TD{bg} ALIGN="CENTER">{label}</TD></TR></TABLE>>'


def get_id(label: str) -> str:
    """Stable graphviz node id for a label."""
    return "n" + hashlib.sha1(label.encode("utf-8")).hexdigest()[:12]


def add_node(dot: Digraph, node, created: set) -> str:
    """Add a display node once; named entities are boxed, compound expressions plain text."""
    label = node.text()
    node_id = get_id(label)
    if node_id in created:
        return node_id
    created.add(node_id)
    if isinstance(node, Simple):
        dot.node(node_id, label=BOX.format(bg="", label=html.escape(label)))
    else:
        dot.node(node_id, label=label, shape="plaintext")
    log.debug("Added node %s: %s", node_id, label)
    return node_id


def generate_diagram(model: EntityPageModel, title: Optional[str] = None) -> Digraph:
    """Neighbourhood diagram of one entity: hierarchy, equivalents, inverses, domain, range and types."""
    name = title or model.annotations.label or model.iri
    dot = Digraph(
        comment=f"Diagram for {name}",
        format="svg",
        graph_attr={"overlap": "false", "splines": "true", "rankdir": "BT"},
        node_attr={"shape": "none", "fontsize": "12", "fontname": "Arial", "margin": "0"},
        edge_attr={"fontsize": "11", "fontname": "Arial"},
    )
    main_id = get_id(name)
    created = {main_id}
    dot.node(main_id, label=BOX.format(bg=' BGCOLOR="lightgray"', label=html.escape(name)))

    rel = model.relationships
    for sup in rel.superclasses:
        dot.edge(main_id, add_node(dot, sup, created), label="subClassOf", arrowhead="onormal")
    for sub in rel.subclasses:
        dot.edge(add_node(dot, sub, created), main_id, label="subClassOf", arrowhead="onormal")
    for eq in rel.equivalent_classes:
        dot.edge(main_id, add_node(dot, eq, created), label="equivalentTo", style="dashed", dir="both")
    for inv in rel.inverse_properties:
        dot.edge(main_id, add_node(dot, inv, created), label="inverseOf", style="dotted", dir="both")
    if rel.property_domain is not None:
        dot.edge(main_id, add_node(dot, rel.property_domain, created), label="domain")
    if rel.property_range is not None:
        dot.edge(main_id, add_node(dot, rel.property_range, created), label="range")
    for cls in rel.class_assertions:
        dot.edge(main_id, add_node(dot, cls, created), label="type", style="dashed")

    log.debug("Generated DOT source for %s:\n%s", name, dot.source)
    return dot

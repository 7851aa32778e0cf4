import logging
from typing import Iterable, Optional

from jinja2 import BaseLoader, Environment, FileSystemLoader, TemplateError, select_autoescape

from errors import TemplateRenderFailure
from models import EntityPageModel, OntologyMetadataModel
from utils import page_location

log = logging.getLogger("owl2site")

ENTITY_TEMPLATE = "entity.html"
ONTOLOGY_TEMPLATE = "ontology.html"


def manchester(node) -> str:
    """Jinja filter: Manchester-style text for a display node or its context dict."""
    if node is None:
        return ""
    if hasattr(node, "text"):
        return node.text()
    kind = node.get("kind")
    if kind == "simple":
        return node["display"]
    if kind in ("and", "or"):
        return f" {kind} ".join(_wrap_ctx(c) for c in node["children"])
    if kind == "not":
        return f"not {_wrap_ctx(node['child'])}"
    if kind in ("some", "all", "value"):
        word = {"some": "some", "all": "only", "value": "value"}[kind]
        return f"{_wrap_ctx(node['relation'])} {word} {_wrap_ctx(node['filler'])}"
    if kind == "data":
        return f'{_wrap_ctx(node["property"])} value "{node["literal"]}"'
    return str(node)


def _wrap_ctx(node: dict) -> str:
    text = manchester(node)
    return text if node.get("kind") == "simple" else f"({text})"


class HtmlRenderer:
    """Owns one Jinja2 environment for the lifetime of a build."""

    def __init__(self, templates_dir: Optional[str] = None, loader: Optional[BaseLoader] = None, site: Optional[dict] = None, suffixes: Iterable[str] = ()):
        if loader is None:
            if not templates_dir:
                raise ValueError("Templates not defined, set templates directory")
            loader = FileSystemLoader(templates_dir)
        self.env = Environment(loader=loader, autoescape=select_autoescape(["html", "xml"]))
        self.env.filters["manchester"] = manchester
        self.suffixes = set(suffixes)
        # placement shared with owl2site.page_path
        self.env.filters["page_href"] = lambda identifier: page_location(identifier, self.suffixes)
        self.site = site or {}

    def _render(self, template: str, context: dict) -> str:
        try:
            return self.env.get_template(template).render(site=self.site, **context)
        except TemplateError as e:
            raise TemplateRenderFailure(template, e) from e

    def render_entity(self, model: EntityPageModel) -> str:
        return self._render(ENTITY_TEMPLATE, model.to_context())

    def render_metadata(self, model: OntologyMetadataModel) -> str:
        return self._render(ONTOLOGY_TEMPLATE, model.to_context())

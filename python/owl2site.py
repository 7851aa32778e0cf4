import os
import sys
import shutil
import logging
import argparse
import traceback
from typing import Dict, Iterable, List, Optional

from axiom_index import AxiomIndex
from config import Settings, load_settings
from diagram_generator import generate_diagram
from errors import ConfigError, RenderError
from html_renderer import HtmlRenderer
from metadata_builder import build_ontology_metadata
from ontology_processor import process_ontology
from site_generator import BuildFailure, RenderedSite, SiteBuild, build_site, log_summary, render_site
from utils import PrefixMap, Resolver, page_location

log = logging.getLogger("owl2site")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="owl2site", description="Render an OWL ontology as a static HTML site.")
    parser.add_argument("iri", nargs="?", help="IRI of the ontology; also the default namespace")
    parser.add_argument("--source", help="File or URL to load the ontology from (defaults to the IRI)")
    parser.add_argument("--suffix", help="Output sub-directory and prefix for the ontology")
    parser.add_argument("-u", "--url", dest="baseurl", help="Base URL the site is served from")
    parser.add_argument("-l", "--title", help="Site title")
    parser.add_argument("-t", "--templates", help="Templates directory (default ./templates)")
    parser.add_argument("-s", "--assets", help="Static assets directory (default ./static)")
    parser.add_argument("-c", "--config", help="YAML settings file")
    parser.add_argument("-p", "--import", dest="imports", action="append", metavar="PREFIX:IRI", help="Imported ontology, repeatable")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")
    build = sub.add_parser("build", help="Build the site")
    build.add_argument("-r", "--render-imports", dest="render_imports", action="store_const", const=True, help="Also render pages for imported ontologies")
    build.add_argument("-o", "--output", help="Output directory (default ./public)")
    build.add_argument("--diagrams", action="store_const", const=True, help="Write a graphviz diagram per entity")
    return parser


def cli_layer(args: argparse.Namespace) -> dict:
    """Settings given on the command line; unset flags are None and do not override."""
    return {
        "ontology": {"iri": args.iri, "source": args.source, "suffix": args.suffix},
        "baseurl": args.baseurl,
        "title": args.title,
        "templates": args.templates,
        "assets": args.assets,
        "imports": args.imports or [],
        "build": {
            "render_imports": getattr(args, "render_imports", None),
            "output": getattr(args, "output", None),
            "diagrams": getattr(args, "diagrams", None),
        },
    }


# -------------------- site writer --------------------

def page_path(identifier: str, output: str, suffixes: Iterable[str] = ()) -> Optional[str]:
    """Output file for a page, or None when the identifier has no place in the site."""
    location = page_location(identifier, suffixes)
    if location is None:
        return None
    return os.path.join(output, *location.split("/"))


def write_text(path: str, content: str):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    log.debug("Wrote %s", path)


def write_site(site: RenderedSite, output: str, prefix_map: PrefixMap, suffixes: Iterable[str] = (), assets: Optional[str] = None) -> int:
    """Write index.html, every placeable page and the static assets; returns the page count."""
    suffixes = set(suffixes)
    os.makedirs(output, exist_ok=True)
    written = 0
    for iri, content in site.pages.items():
        identifier = prefix_map.shrink(iri)
        path = page_path(identifier, output, suffixes)
        if path is None:
            log.debug("Skipping %s: %s is not a page of this site", iri, identifier)
            continue
        write_text(path, content)
        written += 1
    if site.index is not None:
        write_text(os.path.join(output, "index.html"), site.index)
    if assets:
        if os.path.isdir(assets):
            shutil.copytree(assets, os.path.join(output, "static"), dirs_exist_ok=True)
        else:
            log.warning("Assets directory %s not found, no static files copied", assets)
    log.info("Wrote %d pages to %s", written, output)
    return written


def write_diagrams(build: SiteBuild, output: str, prefix_map: PrefixMap, errors: Optional[list] = None) -> List[BuildFailure]:
    failures = []
    diagrams_dir = os.path.join(output, "diagrams")
    os.makedirs(diagrams_dir, exist_ok=True)
    for iri, model in build.pages.items():
        identifier = prefix_map.shrink(iri)
        name = identifier.replace(":", "_").replace("/", "_").replace("#", "_")
        try:
            dot = generate_diagram(model, title=model.annotations.label or identifier)
            dot.save(filename=f"{name}.gv", directory=diagrams_dir)
        except OSError as e:
            error_msg = f"Error writing diagram for {iri}: {str(e)}\n{traceback.format_exc()}"
            if errors is not None:
                errors.append(error_msg)
            log.error(error_msg)
            failures.append(BuildFailure(iri, RenderError(str(e))))
    return failures


def render_import_indexes(settings: Settings, components, loaded: Dict[str, list], resolver: Resolver, renderer: HtmlRenderer, output: str, errors: list) -> List[BuildFailure]:
    """One index page per import with a suffix, its sidebar restricted to the import IRI."""
    failures = []
    for imp in settings.imports:
        if not imp.suffix:
            continue
        index = AxiomIndex(loaded.get(imp.suffix, components))
        meta = build_ontology_metadata(index, resolver, base=imp.iri)
        meta.iri = meta.iri or imp.iri
        try:
            write_text(os.path.join(output, imp.suffix, "index.html"), renderer.render_metadata(meta))
        except RenderError as e:
            error_msg = f"Error building index for import {imp.iri}: {e}"
            errors.append(error_msg)
            log.error(error_msg)
            failures.append(BuildFailure(imp.iri, e))
    return failures


# -------------------- build --------------------

def run_build(settings: Settings) -> int:
    errors = []
    source = settings.ontology.source or settings.ontology.iri
    ontology, prefix_map = process_ontology(source, errors)
    if ontology is None:
        log.error("No ontology loaded from %s", source)
        return 1
    if ontology.iri and ontology.iri.rstrip("#/") != settings.ontology.iri.rstrip("#/"):
        log.warning("%s declares ontology IRI %s, building for %s", source, ontology.iri, settings.ontology.iri)
    prefix_map.set_default(settings.ontology.iri)

    loaded: Dict[str, list] = {}
    for imp in settings.imports:
        if imp.suffix:
            try:
                prefix_map.add_prefix(imp.suffix, imp.iri)
            except ValueError as e:
                log.warning("Ignoring import %s: %s", imp.iri, e)
                continue
        if settings.build.render_imports and imp.source:
            imported, _ = process_ontology(imp.source, errors)
            if imported is None:
                continue
            ontology.components.extend(imported.components)
            if imp.suffix:
                loaded[imp.suffix] = imported.components
            log.info("Merged %d components from import %s", len(imported.components), imp.iri)

    if not os.path.isdir(settings.templates):
        log.error("Templates directory %s not found", settings.templates)
        return 1

    suffixes = [imp.suffix for imp in settings.imports if imp.suffix] if settings.build.render_imports else []
    build = build_site(ontology, prefix_map, base=settings.ontology.iri, errors=errors)
    site = {"title": settings.title or build.metadata.title, "baseurl": (settings.baseurl or "").rstrip("/")}
    renderer = HtmlRenderer(settings.templates, site=site, suffixes=suffixes)
    rendered = render_site(build, renderer, errors)

    output = settings.build.output
    write_site(rendered, output, prefix_map, suffixes, settings.assets)

    failures = list(rendered.failures)
    if settings.build.render_imports:
        resolver = Resolver.for_components(ontology.components, prefix_map)
        failures.extend(render_import_indexes(settings, ontology.components, loaded, resolver, renderer, output, errors))
    if settings.build.diagrams:
        failures.extend(write_diagrams(build, output, prefix_map, errors))

    log_summary(failures)
    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    if args.command is None:
        parser.print_help()
        return 0
    try:
        settings = load_settings(args.config, cli_layer(args))
    except ConfigError as e:
        log.error("Invalid settings: %s", e)
        return 2
    log.info("Building site for %s into %s", settings.ontology.iri, settings.build.output)
    return run_build(settings)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

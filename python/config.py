"""Site settings merged from a YAML file, the environment and the command line.

Later layers win: YAML file, then ``.env`` and ``OWL2SITE_*`` environment variables,
then command-line flags. Imports given on the command line are appended to the
configured ones.
"""
import os
import logging
from dataclasses import dataclass, field, fields
from typing import Dict, List, Mapping, Optional
import yaml
from dotenv import find_dotenv, load_dotenv

from errors import ConfigError

log = logging.getLogger("owl2site")

ENV_PREFIX = "OWL2SITE_"
SECTIONS = ("ontology", "build")
TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class OntologyConfig:
    iri: Optional[str] = None
    source: Optional[str] = None
    suffix: Optional[str] = None


@dataclass
class BuildConfig:
    render_imports: bool = False
    output: str = "./public"
    diagrams: bool = False


@dataclass
class Settings:
    ontology: OntologyConfig = field(default_factory=OntologyConfig)
    title: Optional[str] = None
    baseurl: Optional[str] = None
    imports: List[OntologyConfig] = field(default_factory=list)
    templates: str = "./templates"
    assets: str = "./static"
    build: BuildConfig = field(default_factory=BuildConfig)


def parse_import(value: str) -> Optional[OntologyConfig]:
    """`prefix:iri`, split on the first colon only."""
    prefix, sep, iri = value.partition(":")
    if not sep or not prefix or not iri:
        log.warning("Ignoring malformed import %r, expected prefix:iri", value)
        return None
    return OntologyConfig(iri=iri, suffix=prefix)


def _to_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def _merge(base: dict, layer: Mapping) -> dict:
    for key, value in layer.items():
        if value is None:
            continue
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        elif isinstance(value, Mapping):
            base[key] = _merge({}, value)
        else:
            base[key] = value
    return base


def read_config_file(path: str) -> dict:
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    log.info("Loaded settings from %s", path)
    return data


def environment_layer(environ: Mapping[str, str]) -> dict:
    """`OWL2SITE_ONTOLOGY_IRI` -> ontology.iri, `OWL2SITE_TITLE` -> title, ..."""
    data: Dict[str, object] = {}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX):].lower()
        section, _, sub = name.partition("_")
        if section in SECTIONS and sub:
            data.setdefault(section, {})[sub] = value
        elif name == "imports":
            data["imports"] = [s.strip() for s in value.split(",") if s.strip()]
        else:
            data[name] = value
        log.debug("Setting %s from environment", name)
    return data


def _known(data, cls) -> dict:
    if not isinstance(data, Mapping):
        raise ConfigError(f"Expected a mapping for {cls.__name__}, got {data!r}")
    names = {f.name for f in fields(cls)}
    for key in data:
        if key not in names:
            log.warning("Ignoring unknown setting %r", key)
    return {k: v for k, v in data.items() if k in names}


def _import_config(item) -> Optional[OntologyConfig]:
    if isinstance(item, str):
        return parse_import(item)
    return OntologyConfig(**_known(item, OntologyConfig))


def settings_from_dict(data: Mapping) -> Settings:
    values = _known(data, Settings)
    settings = Settings(
        ontology=OntologyConfig(**_known(values.pop("ontology", None) or {}, OntologyConfig)),
        build=BuildConfig(**_known(values.pop("build", None) or {}, BuildConfig)),
        imports=[c for c in (_import_config(i) for i in values.pop("imports", None) or []) if c is not None],
    )
    for key, value in values.items():
        setattr(settings, key, value)
    settings.build.render_imports = _to_bool(settings.build.render_imports)
    settings.build.diagrams = _to_bool(settings.build.diagrams)
    if not settings.ontology.iri:
        raise ConfigError("The ontology IRI is not set (ontology.iri, OWL2SITE_ONTOLOGY_IRI or the IRI argument)")
    return settings


def load_settings(config_path: Optional[str] = None, cli: Optional[Mapping] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Merge every settings layer; `environ` defaults to the process environment after loading `.env`."""
    data: dict = {}
    if config_path:
        _merge(data, read_config_file(config_path))
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ
    _merge(data, environment_layer(environ))

    cli = dict(cli or {})
    cli_imports = cli.pop("imports", None) or []
    _merge(data, cli)
    if cli_imports:
        data["imports"] = list(data.get("imports") or []) + list(cli_imports)
    return settings_from_dict(data)

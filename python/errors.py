class RenderError(Exception):
    """Base class for failures raised while building or rendering a site."""


class UnsupportedConstruct(RenderError):
    """An expression shape the unpacker deliberately does not display."""

    def __init__(self, construct: str, detail: str = ""):
        self.construct = construct
        msg = f"Unsupported construct: {construct}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class UnknownEntityKind(RenderError):
    """No declaration exists for the IRI, so no page kind can be chosen."""

    def __init__(self, iri: str):
        self.iri = iri
        super().__init__(f"Unknown entity kind: no declaration found for {iri}")


class PrefixShrinkFailure(RenderError):
    def __init__(self, iri: str):
        self.iri = iri
        super().__init__(f"No registered prefix matches {iri}")


class TemplateRenderFailure(RenderError):
    def __init__(self, template: str, cause: Exception):
        self.template = template
        self.cause = cause
        super().__init__(f"Could not render {template}: {cause}")


class ConfigError(ValueError):
    pass

"""Errors raised while generating bindings. All of them abort the run."""


class GeneratorError(RuntimeError):
    """Base class for every fatal generation error."""


class SourceError(GeneratorError):
    """Raised when the schema document cannot be read or fetched."""


class SchemaDecodeError(GeneratorError):
    """Raised when the schema document is malformed."""


class UnresolvedSymbol(GeneratorError):
    """Raised when an argument references an interface that was never registered."""

    def __init__(self, name: str, where: str = "") -> None:
        self.name = name
        self.where = where
        message = f"Unresolved interface {name!r}"
        if where:
            message += f" referenced by {where}"
        super().__init__(message)


class UnknownWireType(GeneratorError):
    """Raised when an argument's type tag is outside the known set."""

    def __init__(self, tag: str, where: str = "") -> None:
        self.tag = tag
        self.where = where
        message = f"Unknown wire type {tag!r}"
        if where:
            message += f" for {where}"
        super().__init__(message)


class TemplateRenderError(GeneratorError):
    """Raised when an output fragment fails to render."""

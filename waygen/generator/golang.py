"""Go code generator for wayland protocols."""

import logging
import shutil
import subprocess

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from .bindings import InterfaceBinding, build_protocol
from .config import GeneratorConfig
from .errors import GeneratorError, TemplateRenderError
from .types import Protocol

logger = logging.getLogger(__name__)

env = Environment(
    loader=PackageLoader("waygen.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
    undefined=StrictUndefined,
)

template = env.get_template("golang.go.j2")


def _imports(bindings: list[InterfaceBinding], config: GeneratorConfig) -> list[str]:
    imports: list[str] = []
    if any(b.has_dispatch for b in bindings):
        imports.append("sync")
    if config.qualify_base:
        imports.append(config.base_import)
    return imports


def render_bindings(
    protocol: Protocol, bindings: list[InterfaceBinding], config: GeneratorConfig
) -> str:
    """Serialize already built bindings to Go source code."""
    try:
        return template.render(
            protocol=protocol,
            bindings=bindings,
            package=config.package,
            role=config.role,
            source=config.source,
            imports=_imports(bindings, config),
        )
    except TemplateError as e:
        raise TemplateRenderError(f"Cannot render {protocol.name}: {e}") from e


def render(protocol: Protocol, config: GeneratorConfig) -> str:
    """Render a protocol definition to Go source code.

    Every interface is resolved and built before anything is rendered, so
    either the whole file is returned or an error is raised.
    """
    bindings = build_protocol(protocol, config)
    logger.debug("Rendering %d interfaces for the %s role", len(bindings), config.role)
    return render_bindings(protocol, bindings, config)


def gofmt(path: str) -> bool:
    """Format a generated file in place. Returns False when no Go toolchain is found."""
    if exe := shutil.which("gofmt"):
        cmd = [exe, "-w", path]
    elif exe := shutil.which("go"):
        cmd = [exe, "fmt", path]
    else:
        logger.warning('No Go toolchain found, run "gofmt -w %s" yourself', path)
        return False

    result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    if result.returncode != 0:
        raise GeneratorError(f"Cannot format {path}: {result.stderr.strip()}")
    return True

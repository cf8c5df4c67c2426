"""Identifier case conversion helpers."""

GO_KEYWORDS = frozenset(
    [
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    ]
)

# Names used by generated method bodies and dispatch routines
_RESERVED_LOCALS = frozenset(["p", "ret", "ev", "event", "h"])


def strip_prefix(name: str, prefix: str) -> str:
    if prefix and name.startswith(prefix):
        return name[len(prefix) :]
    return name


def strip_suffix(name: str, suffix: str) -> str:
    if suffix and name.endswith(suffix):
        return name[: -len(suffix)]
    return name


def to_camel_case(name: str, prefix: str = "") -> str:
    """Convert a snake_case wire name to CamelCase, dropping `prefix` first.

    >>> to_camel_case("wl_shm_pool", "wl_")
    'ShmPool'
    """
    name = strip_prefix(name, prefix)
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def to_lower_camel_case(name: str, prefix: str = "") -> str:
    """Like `to_camel_case`, but keeps the first segment lower case."""
    camel = to_camel_case(name, prefix)
    return camel[:1].lower() + camel[1:]


def go_param_name(name: str) -> str:
    """Return a Go-safe parameter name for a wire argument name."""
    if name == "interface":
        return "iface"
    if name in GO_KEYWORDS or name in _RESERVED_LOCALS:
        return f"{name}_"
    return name

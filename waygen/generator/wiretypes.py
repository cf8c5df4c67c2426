"""Mapping from wire argument types to Go types and buffer decode operations."""

from dataclasses import dataclass

from .config import Role
from .errors import UnknownWireType
from .symbols import split_qualified
from .types import SCALAR_TYPES, WireType

# Map wire tags to Go types
GO_TYPE_MAP: dict[str, str] = {
    WireType.INT: "int32",
    WireType.UINT: "uint32",
    WireType.STRING: "string",
    WireType.FD: "uintptr",
    WireType.FIXED: "float32",
    WireType.ARRAY: "[]int32",
}

# Go types to Event buffer readers, kept in sync with the runtime's event.go
BUFFER_READERS: dict[str, str] = {
    "int32": "event.Int32()",
    "uint32": "event.Uint32()",
    "string": "event.String()",
    "float32": "event.Float32()",
    "[]int32": "event.Array()",
    # File descriptors arrive out of band
    "uintptr": "p.Context().NextFD()",
}


@dataclass(frozen=True)
class WireTypeInfo:
    """Go type and decode expression for an argument."""

    go_type: str
    decode: str
    # The decoded value must be checked for nil before conversion to go_type
    nullable: bool = False


def _check_tables() -> None:
    missing = [str(t) for t in SCALAR_TYPES if GO_TYPE_MAP.get(t) not in BUFFER_READERS]
    if missing:
        raise RuntimeError(f"Wire type mapping is incomplete for: {', '.join(sorted(missing))}")


_check_tables()


def map_type(tag: str, *, where: str = "") -> WireTypeInfo:
    """Map a scalar or aggregate wire tag to its Go type and reader."""
    go_type = GO_TYPE_MAP.get(tag)
    if go_type is None:
        raise UnknownWireType(tag, where)
    return WireTypeInfo(go_type=go_type, decode=BUFFER_READERS[go_type])


def proxy_type(qualifier: str) -> str:
    """The opaque object type used when no interface is declared."""
    return f"{qualifier}Proxy"


def proxy_decode() -> str:
    return "event.Proxy(p.Context())"


def object_decode(ident: str, *, allow_null: bool) -> WireTypeInfo:
    """Decode an object reference to the interface bound as `ident`."""
    go_type = f"*{ident}"
    if allow_null:
        return WireTypeInfo(go_type=go_type, decode=proxy_decode(), nullable=True)
    return WireTypeInfo(go_type=go_type, decode=f"{proxy_decode()}.({go_type})")


def new_id_decode(ident: str, role: Role) -> WireTypeInfo:
    """Decode a new object id for the interface bound as `ident`.

    A server instantiates the object from the id on the wire; a client
    looks up the proxy the runtime already created for it.
    """
    go_type = f"*{ident}"
    if role is Role.SERVER:
        prefix, name = split_qualified(ident)
        return WireTypeInfo(
            go_type=go_type, decode=f"{prefix}New{name}(p.Context(), int(event.Uint32()))"
        )
    return WireTypeInfo(go_type=go_type, decode=f"{proxy_decode()}.({go_type})")

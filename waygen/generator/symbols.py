"""Symbol registry mapping wire interface names to Go identifiers."""

import logging

from .config import GeneratorConfig
from .errors import UnresolvedSymbol
from .types import Protocol
from .util import strip_suffix, to_camel_case

logger = logging.getLogger(__name__)

# Core protocol interfaces that extension protocols may reference
BASE_INTERFACES = (
    "wl_display",
    "wl_registry",
    "wl_callback",
    "wl_compositor",
    "wl_shm_pool",
    "wl_shm",
    "wl_buffer",
    "wl_data_offer",
    "wl_data_source",
    "wl_data_device",
    "wl_data_device_manager",
    "wl_shell",
    "wl_shell_surface",
    "wl_surface",
    "wl_seat",
    "wl_pointer",
    "wl_keyboard",
    "wl_touch",
    "wl_output",
    "wl_region",
    "wl_subcompositor",
    "wl_subsurface",
)


class SymbolTable:
    """Wire interface name to target identifier mapping.

    Every interface must be registered before any argument is resolved,
    since arguments may reference interfaces declared later in the document.
    """

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config
        self._names: dict[str, str] = {}

    def __contains__(self, wire_name: str) -> bool:
        return self.canonical(wire_name) in self._names

    def __len__(self) -> int:
        return len(self._names)

    def canonical(self, wire_name: str) -> str:
        """Return the wire name with the unstable suffix removed."""
        return strip_suffix(wire_name, self.config.unstable_suffix)

    def derive(self, wire_name: str) -> str:
        """Derive the local identifier for a wire name without registering it."""
        return to_camel_case(self.canonical(wire_name), self.config.trim_prefix)

    def register(self, wire_name: str) -> str:
        """Assign and cache the identifier for a locally declared interface."""
        key = self.canonical(wire_name)
        ident = self.derive(wire_name)
        self._names[key] = ident
        logger.debug("Registered %s as %s", wire_name, ident)
        return ident

    def register_base(self, wire_name: str) -> str:
        """Register a base protocol interface under the base package namespace."""
        base = self.config.base_package
        ident = f"{base}.{to_camel_case(wire_name, f'{base}_')}"
        self._names[self.canonical(wire_name)] = ident
        return ident

    def resolve(self, wire_name: str, *, where: str = "") -> str:
        """Return the identifier registered for `wire_name`."""
        try:
            return self._names[self.canonical(wire_name)]
        except KeyError:
            raise UnresolvedSymbol(wire_name, where) from None

    @classmethod
    def for_protocol(cls, protocol: Protocol, config: GeneratorConfig) -> "SymbolTable":
        """Build a fully populated table for every interface in `protocol`."""
        table = cls(config)
        if config.qualify_base:
            for name in BASE_INTERFACES:
                table.register_base(name)
        # Declared interfaces win over inherited base names
        for iface in protocol.interfaces:
            table.register(iface.name)
        return table


def split_qualified(ident: str) -> tuple[str, str]:
    """Split `pkg.Name` into (`pkg.`, `Name`); unqualified names get an empty prefix."""
    prefix, _, name = ident.rpartition(".")
    return (f"{prefix}." if prefix else "", name)

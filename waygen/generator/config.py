"""Resolved generator configuration."""

from dataclasses import dataclass
from enum import StrEnum

from dataclasses_json import DataClassJsonMixin

BASE_PACKAGE = "wl"
BASE_IMPORT = "github.com/malcolmstill/wl"


class Role(StrEnum):
    """Which side of the protocol the generated bindings implement.

    The client sends requests and dispatches events; the server sends
    events and dispatches requests.
    """

    CLIENT = "client"
    SERVER = "server"


@dataclass(frozen=True)
class GeneratorConfig(DataClassJsonMixin):
    """Settings consumed by the generator core."""

    role: Role = Role.CLIENT
    package: str = BASE_PACKAGE
    unstable: str = ""
    base_package: str = BASE_PACKAGE
    base_import: str = BASE_IMPORT
    source: str = ""

    @property
    def qualify_base(self) -> bool:
        """Base protocol names live in another package and need qualifying."""
        return self.package != self.base_package

    @property
    def base_qualifier(self) -> str:
        """Prefix for runtime names (Context, Proxy, ...) defined by the base package."""
        return f"{self.base_package}." if self.qualify_base else ""

    @property
    def trim_prefix(self) -> str:
        return f"{self.package}_"

    @property
    def unstable_suffix(self) -> str:
        return f"_{self.unstable}" if self.unstable else ""

"""Type definitions for protocol schema documents."""

from dataclasses import dataclass, field
from enum import StrEnum

from dataclasses_json import DataClassJsonMixin


class WireType(StrEnum):
    """Argument type tags accepted on the wire."""

    INT = "int"
    UINT = "uint"
    STRING = "string"
    FD = "fd"
    FIXED = "fixed"
    ARRAY = "array"
    OBJECT = "object"
    NEW_ID = "new_id"


@dataclass
class Description(DataClassJsonMixin):
    """Free-form documentation attached to an element."""

    summary: str = ""
    text: str = ""


@dataclass
class Arg(DataClassJsonMixin):
    """Represents a single request or event argument.

    `type` holds the raw tag from the document so that tags outside the
    known set survive decoding and are reported by the wire-type mapper.
    """

    name: str
    type: str
    interface: str = ""
    enum: str = ""
    allow_null: bool = False
    summary: str = ""

    @property
    def is_reference(self) -> bool:
        return self.type in (WireType.OBJECT, WireType.NEW_ID)


@dataclass
class Request(DataClassJsonMixin):
    """Represents a request. Its index in the interface is its opcode."""

    name: str
    args: list[Arg] = field(default_factory=list)
    type: str = ""
    since: int = 1
    description: Description = field(default_factory=Description)

    @property
    def is_destructor(self) -> bool:
        return self.type == "destructor"


@dataclass
class Event(DataClassJsonMixin):
    """Represents an event. Its index in the interface is its opcode."""

    name: str
    args: list[Arg] = field(default_factory=list)
    type: str = ""
    since: int = 1
    description: Description = field(default_factory=Description)

    @property
    def is_destructor(self) -> bool:
        return self.type == "destructor"


@dataclass
class Entry(DataClassJsonMixin):
    """Represents a single enum entry."""

    name: str
    value: str
    summary: str = ""


@dataclass
class Enum(DataClassJsonMixin):
    """Represents an enum declared by an interface."""

    name: str
    entries: list[Entry] = field(default_factory=list)
    bitfield: bool = False
    description: Description = field(default_factory=Description)


@dataclass
class Interface(DataClassJsonMixin):
    """Represents an interface definition."""

    name: str
    version: int = 1
    requests: list[Request] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    enums: list[Enum] = field(default_factory=list)
    description: Description = field(default_factory=Description)


@dataclass
class Protocol(DataClassJsonMixin):
    """Represents a complete protocol document."""

    name: str
    interfaces: list[Interface] = field(default_factory=list)
    copyright: str = ""


SCALAR_TYPES = frozenset(
    [
        WireType.INT,
        WireType.UINT,
        WireType.STRING,
        WireType.FD,
        WireType.FIXED,
        WireType.ARRAY,
    ]
)

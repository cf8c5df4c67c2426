"""Role-specific bindings built from the schema model.

A binding holds every name, type and expression the emitter needs for one
interface, so templates only serialize it. The active role decides which of
the interface's message lists is outbound (compiled to methods) and which is
inbound (compiled to dispatch cases); opcodes are always declaration indices.
"""

import logging
from dataclasses import dataclass, field
from typing import Sequence

from dataclasses_json import DataClassJsonMixin

from .config import GeneratorConfig, Role
from .errors import SchemaDecodeError
from .symbols import SymbolTable, split_qualified
from .types import Arg, Enum, Event, Interface, Protocol, Request, WireType
from .util import go_param_name, to_camel_case, to_lower_camel_case
from .wiretypes import (
    WireTypeInfo,
    map_type,
    new_id_decode,
    object_decode,
    proxy_decode,
    proxy_type,
)

logger = logging.getLogger(__name__)

Message = Request | Event


@dataclass
class ParamBinding(DataClassJsonMixin):
    """A parameter of an outbound method."""

    name: str
    type: str
    enum: str = ""

    @property
    def decl(self) -> str:
        return f"{self.name} {self.type}"


@dataclass
class RequestBinding(DataClassJsonMixin):
    """An outbound message compiled to a method."""

    wire_name: str
    name: str
    opcode: int
    params: list[ParamBinding]
    send_args: list[str]
    returns: str
    # Go statements that create and register `ret`, if the method allocates
    allocation: list[str] = field(default_factory=list)
    summary: str = ""
    doc: list[str] = field(default_factory=list)
    destructor: bool = False
    since: int = 1

    @property
    def allocates(self) -> bool:
        return bool(self.allocation)


@dataclass
class FieldBinding(DataClassJsonMixin):
    """A decoded field of an inbound payload."""

    wire_name: str
    name: str
    type: str
    decode: str
    wire_type: str
    nullable: bool = False
    local: str = ""
    enum: str = ""


@dataclass
class EventBinding(DataClassJsonMixin):
    """An inbound message compiled to a payload type and a dispatch case."""

    wire_name: str
    name: str
    opcode: int
    type_name: str
    handler_name: str
    handler_method: str
    handler_field: str
    fields: list[FieldBinding]
    summary: str = ""
    since: int = 1


@dataclass
class EntryBinding(DataClassJsonMixin):
    wire_name: str
    name: str
    value: str
    summary: str = ""


@dataclass
class EnumBinding(DataClassJsonMixin):
    wire_name: str
    name: str
    bitfield: bool
    entries: list[EntryBinding]


@dataclass
class ConstructorBinding(DataClassJsonMixin):
    """Constructor shape; a server registers ids taken off the wire."""

    name: str
    takes_id: bool


@dataclass
class InterfaceBinding(DataClassJsonMixin):
    """Everything generated for a single interface under one role."""

    wire_name: str
    name: str
    version: int
    role: Role
    qualifier: str
    constructor: ConstructorBinding
    requests: list[RequestBinding]
    events: list[EventBinding]
    enums: list[EnumBinding]
    summary: str = ""

    @property
    def has_dispatch(self) -> bool:
        return len(self.events) > 0


class BindingBuilder:
    """Builds `InterfaceBinding`s against a populated symbol table."""

    def __init__(self, symbols: SymbolTable, config: GeneratorConfig) -> None:
        self.symbols = symbols
        self.config = config

    @property
    def role(self) -> Role:
        return self.config.role

    def split(self, iface: Interface) -> tuple[Sequence[Message], Sequence[Message]]:
        """Return the (outbound, inbound) message lists for the active role."""
        if self.role is Role.CLIENT:
            return iface.requests, iface.events
        return iface.events, iface.requests

    def camel(self, name: str) -> str:
        return to_camel_case(name, self.config.trim_prefix)

    def build(self, iface: Interface) -> InterfaceBinding:
        name = self.symbols.resolve(iface.name, where=f"interface {iface.name}")
        outbound, inbound = self.split(iface)
        logger.debug(
            "Building %s as %s: %d outbound, %d inbound",
            iface.name,
            name,
            len(outbound),
            len(inbound),
        )

        return InterfaceBinding(
            wire_name=iface.name,
            name=name,
            version=iface.version,
            role=self.role,
            qualifier=self.config.base_qualifier,
            constructor=ConstructorBinding(name=f"New{name}", takes_id=self.role is Role.SERVER),
            requests=[self.build_request(iface, i, msg) for i, msg in enumerate(outbound)],
            events=[self.build_event(iface, name, i, msg) for i, msg in enumerate(inbound)],
            enums=[self.build_enum(name, e) for e in iface.enums],
            summary=iface.description.summary,
        )

    def build_request(self, iface: Interface, opcode: int, msg: Message) -> RequestBinding:
        qualifier = self.config.base_qualifier
        params: list[ParamBinding] = []
        send_args: list[str] = []
        new_type = ""
        allocation: list[str] = []

        for arg in msg.args:
            where = _where(iface, msg, arg)
            name = go_param_name(arg.name)

            if arg.type == WireType.NEW_ID and arg.interface:
                if new_type:
                    raise SchemaDecodeError(f"{where} is a second typed new_id")
                new_type = self.symbols.resolve(arg.interface, where=where)
                send_args.append(f"{qualifier}Proxy(ret)")
            elif arg.type == WireType.NEW_ID:
                # Bind by interface name and version; the caller downcasts
                params.append(ParamBinding("iface", "string"))
                params.append(ParamBinding("version", "uint32"))
                params.append(ParamBinding(name, proxy_type(qualifier)))
                send_args.extend(["iface", "version", name])
            elif arg.type == WireType.OBJECT:
                if arg.interface:
                    arg_type = f"*{self.symbols.resolve(arg.interface, where=where)}"
                else:
                    arg_type = proxy_type(qualifier)
                params.append(ParamBinding(name, arg_type))
                send_args.append(name)
            else:
                info = map_type(arg.type, where=where)
                params.append(ParamBinding(name, info.go_type, enum=arg.enum))
                send_args.append(name)

        if new_type:
            # The caller supplies the id the new object is registered under
            id_param = _free_name("id", params)
            params.append(ParamBinding(id_param, "int"))
            if self.role is Role.SERVER:
                prefix, short = split_qualified(new_type)
                allocation = [f"ret := {prefix}New{short}(p.Context(), {id_param})"]
            else:
                allocation = [
                    f"ret := new({new_type})",
                    f"p.Context().RegisterId(ret, {id_param})",
                ]
            returns = f"(*{new_type}, error)"
        else:
            returns = "error"

        return RequestBinding(
            wire_name=msg.name,
            name=self.camel(msg.name),
            opcode=opcode,
            params=params,
            send_args=send_args,
            returns=returns,
            allocation=allocation,
            summary=msg.description.summary,
            doc=reflow(msg.description.text),
            destructor=msg.is_destructor,
            since=msg.since,
        )

    def build_event(
        self, iface: Interface, iface_name: str, opcode: int, msg: Message
    ) -> EventBinding:
        name = self.camel(msg.name)
        event_name = f"{iface_name}{name}"
        fields: list[FieldBinding] = []
        for arg in msg.args:
            fields.extend(self.build_fields(iface, msg, arg))

        return EventBinding(
            wire_name=msg.name,
            name=name,
            opcode=opcode,
            type_name=f"{event_name}Event",
            handler_name=f"{event_name}Handler",
            handler_method=f"Handle{event_name}",
            handler_field=f"{to_lower_camel_case(msg.name)}Handlers",
            fields=fields,
            summary=msg.description.summary,
            since=msg.since,
        )

    def build_fields(self, iface: Interface, msg: Message, arg: Arg) -> list[FieldBinding]:
        where = _where(iface, msg, arg)
        qualifier = self.config.base_qualifier
        name = to_camel_case(arg.name)

        if not arg.is_reference:
            info = map_type(arg.type, where=where)
        elif arg.type == WireType.NEW_ID and arg.interface:
            info = new_id_decode(self.symbols.resolve(arg.interface, where=where), self.role)
        elif arg.type == WireType.NEW_ID:
            string_info = map_type(WireType.STRING)
            uint_info = map_type(WireType.UINT)
            return [
                FieldBinding(arg.name, f"{name}Interface", "string", string_info.decode, arg.type),
                FieldBinding(arg.name, f"{name}Version", "uint32", uint_info.decode, arg.type),
                FieldBinding(arg.name, name, proxy_type(qualifier), proxy_decode(), arg.type),
            ]
        elif arg.type == WireType.OBJECT and arg.interface:
            ident = self.symbols.resolve(arg.interface, where=where)
            info = object_decode(ident, allow_null=arg.allow_null)
        else:
            info = WireTypeInfo(go_type=proxy_type(qualifier), decode=proxy_decode())

        return [
            FieldBinding(
                wire_name=arg.name,
                name=name,
                type=info.go_type,
                decode=info.decode,
                wire_type=arg.type,
                nullable=info.nullable,
                local=go_param_name(to_lower_camel_case(arg.name)) if info.nullable else "",
                enum=arg.enum,
            )
        ]

    def build_enum(self, iface_name: str, enum: Enum) -> EnumBinding:
        name = f"{iface_name}{self.camel(enum.name)}"
        return EnumBinding(
            wire_name=enum.name,
            name=name,
            bitfield=enum.bitfield,
            entries=[
                EntryBinding(
                    wire_name=entry.name,
                    name=f"{name}{self.camel(entry.name)}",
                    value=entry.value,
                    summary=entry.summary,
                )
                for entry in enum.entries
            ],
        )


def _where(iface: Interface, msg: Message, arg: Arg) -> str:
    kind = "request" if isinstance(msg, Request) else "event"
    return f"argument {arg.name!r} of {kind} {iface.name}.{msg.name}"


def _free_name(name: str, params: list[ParamBinding]) -> str:
    taken = {p.name for p in params}
    if name not in taken:
        return name
    base = f"new{name.capitalize()}"
    candidate, n = base, 2
    while candidate in taken:
        candidate = f"{base}{n}"
        n += 1
    return candidate


def reflow(text: str) -> list[str]:
    """Split a description into stripped lines, dropping outer blank lines."""
    return [line.strip() for line in text.strip().splitlines()]


def build_protocol(protocol: Protocol, config: GeneratorConfig) -> list[InterfaceBinding]:
    """Build bindings for every interface, resolving all names first."""
    symbols = SymbolTable.for_protocol(protocol, config)
    builder = BindingBuilder(symbols, config)
    return [builder.build(iface) for iface in protocol.interfaces]

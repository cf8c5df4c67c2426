"""Tests for role-specific binding construction."""

import pytest

from waygen.generator.bindings import BindingBuilder, build_protocol
from waygen.generator.config import GeneratorConfig, Role
from waygen.generator.errors import SchemaDecodeError, UnknownWireType, UnresolvedSymbol
from waygen.generator.symbols import SymbolTable
from waygen.generator.types import Arg, Event, Interface, Protocol, Request

CLIENT = GeneratorConfig(role=Role.CLIENT)
SERVER = GeneratorConfig(role=Role.SERVER)
XDG = GeneratorConfig(package="xdg", unstable="v6")


def _by_name(bindings):
    return {b.wire_name: b for b in bindings}


def describe_demo_thing():
    def builds_client_binding(expect, load_protocol):
        (binding,) = build_protocol(load_protocol("demo.xml"), CLIENT)
        expect(binding.name) == "DemoThing"
        expect(binding.constructor.name) == "NewDemoThing"
        expect(binding.constructor.takes_id) == False

        (req,) = binding.requests
        expect(req.name) == "DoStuff"
        expect(req.opcode) == 0
        expect([p.decl for p in req.params]) == ["x uint32"]
        expect(req.returns) == "error"
        expect(req.allocates) == False

        (ev,) = binding.events
        expect(ev.type_name) == "DemoThingDoneEvent"
        expect(ev.opcode) == 0
        expect([(f.name, f.type, f.decode) for f in ev.fields]) == [
            ("Result", "uint32", "event.Uint32()")
        ]

    def swaps_lists_for_server(expect, load_protocol):
        (binding,) = build_protocol(load_protocol("demo.xml"), SERVER)
        expect(binding.constructor.takes_id) == True
        expect([r.name for r in binding.requests]) == ["Done"]
        expect([e.type_name for e in binding.events]) == ["DemoThingDoStuffEvent"]
        expect(binding.requests[0].opcode) == 0
        expect(binding.events[0].opcode) == 0


def describe_opcodes():
    def follow_declaration_order(expect, load_protocol):
        proto = load_protocol("wayland.xml")
        for config in (CLIENT, SERVER):
            for binding, iface in zip(build_protocol(proto, config), proto.interfaces):
                outbound = iface.requests if config.role is Role.CLIENT else iface.events
                inbound = iface.events if config.role is Role.CLIENT else iface.requests
                expect([r.opcode for r in binding.requests]) == list(range(len(outbound)))
                expect([r.wire_name for r in binding.requests]) == [m.name for m in outbound]
                expect([e.opcode for e in binding.events]) == list(range(len(inbound)))
                expect([e.wire_name for e in binding.events]) == [m.name for m in inbound]

    def are_never_sorted(expect, load_protocol):
        registry = _by_name(build_protocol(load_protocol("wayland.xml"), CLIENT))["wl_registry"]
        expect([(e.wire_name, e.opcode) for e in registry.events]) == [
            ("global", 0),
            ("global_remove", 1),
        ]


def describe_role_symmetry():
    def swaps_message_lists(expect, load_protocol):
        proto = load_protocol("wayland.xml")
        clients = build_protocol(proto, CLIENT)
        servers = build_protocol(proto, SERVER)
        for client, server in zip(clients, servers):
            expect([(r.wire_name, r.opcode) for r in client.requests]) == [
                (e.wire_name, e.opcode) for e in server.events
            ]
            expect([(e.wire_name, e.opcode) for e in client.events]) == [
                (r.wire_name, r.opcode) for r in server.requests
            ]

    def keeps_argument_sets(expect, load_protocol):
        proto = load_protocol("wayland.xml")
        client = _by_name(build_protocol(proto, CLIENT))["wl_surface"]
        server = _by_name(build_protocol(proto, SERVER))["wl_surface"]
        attach_out = client.requests[1]
        attach_in = server.events[1]
        expect([p.name for p in attach_out.params]) == ["buffer", "x", "y"]
        expect([f.wire_name for f in attach_in.fields]) == ["buffer", "x", "y"]


def describe_new_id():
    def client_registers_caller_supplied_id(expect, load_protocol):
        compositor = _by_name(build_protocol(load_protocol("wayland.xml"), CLIENT))[
            "wl_compositor"
        ]
        create = compositor.requests[0]
        expect([p.decl for p in create.params]) == ["id int"]
        expect(create.returns) == "(*Surface, error)"
        expect(create.allocation) == [
            "ret := new(Surface)",
            "p.Context().RegisterId(ret, id)",
        ]
        expect(create.send_args) == ["Proxy(ret)"]
        expect(create.allocates) == True

    def server_takes_caller_supplied_id(expect, load_protocol):
        device = _by_name(build_protocol(load_protocol("wayland.xml"), SERVER))["wl_data_device"]
        data_offer = device.requests[0]
        expect(data_offer.name) == "DataOffer"
        expect([p.decl for p in data_offer.params]) == ["id int"]
        expect(data_offer.allocation) == ["ret := NewDataOffer(p.Context(), id)"]
        expect(data_offer.returns) == "(*DataOffer, error)"

    def server_instantiates_inbound_ids(expect, load_protocol):
        compositor = _by_name(build_protocol(load_protocol("wayland.xml"), SERVER))[
            "wl_compositor"
        ]
        (field,) = compositor.events[0].fields
        expect(field.type) == "*Surface"
        expect(field.decode) == "NewSurface(p.Context(), int(event.Uint32()))"

    def keeps_new_id_position_in_send_args(expect, load_protocol):
        pool = _by_name(build_protocol(load_protocol("wayland.xml"), CLIENT))["wl_shm_pool"]
        create_buffer = pool.requests[0]
        expect(create_buffer.send_args) == [
            "Proxy(ret)",
            "offset",
            "width",
            "height",
            "stride",
            "format",
        ]

    def avoids_id_parameter_clash(expect):
        proto = Protocol(
            name="demo",
            interfaces=[
                Interface(
                    name="demo_factory",
                    events=[
                        Event(
                            name="spawn",
                            args=[
                                Arg(name="id", type="uint"),
                                Arg(name="child", type="new_id", interface="demo_factory"),
                            ],
                        )
                    ],
                )
            ],
        )
        (binding,) = build_protocol(proto, SERVER)
        expect([p.decl for p in binding.requests[0].params]) == ["id uint32", "newId int"]

    def keeps_id_parameters_unique(expect):
        proto = Protocol(
            name="demo",
            interfaces=[
                Interface(
                    name="demo_factory",
                    requests=[
                        Request(
                            name="spawn",
                            args=[
                                Arg(name="id", type="uint"),
                                Arg(name="newId", type="uint"),
                                Arg(name="child", type="new_id", interface="demo_factory"),
                            ],
                        )
                    ],
                )
            ],
        )
        for config in (CLIENT, SERVER):
            builder = BindingBuilder(SymbolTable.for_protocol(proto, config), config)
            iface = proto.interfaces[0]
            req = builder.build_request(iface, 0, iface.requests[0])
            names = [p.name for p in req.params]
            expect(names) == ["id", "newId", "newId2"]
            expect(req.allocation[-1].endswith("newId2)")) == True

    def rejects_two_typed_new_ids(expect):
        proto = Protocol(
            name="demo",
            interfaces=[
                Interface(
                    name="demo_pair",
                    requests=[
                        Request(
                            name="split",
                            args=[
                                Arg(name="left", type="new_id", interface="demo_pair"),
                                Arg(name="right", type="new_id", interface="demo_pair"),
                            ],
                        )
                    ],
                )
            ],
        )
        with pytest.raises(SchemaDecodeError):
            build_protocol(proto, CLIENT)


def describe_untyped_new_id():
    def expands_bind_parameters(expect, load_protocol):
        registry = _by_name(build_protocol(load_protocol("wayland.xml"), CLIENT))["wl_registry"]
        bind = registry.requests[0]
        expect([p.decl for p in bind.params]) == [
            "name uint32",
            "iface string",
            "version uint32",
            "id Proxy",
        ]
        expect(bind.send_args) == ["name", "iface", "version", "id"]
        expect(bind.returns) == "error"
        expect(bind.allocates) == False

    def decodes_name_version_and_proxy(expect, load_protocol):
        registry = _by_name(build_protocol(load_protocol("wayland.xml"), SERVER))["wl_registry"]
        bind = registry.events[0]
        expect([(f.name, f.type) for f in bind.fields]) == [
            ("Name", "uint32"),
            ("IdInterface", "string"),
            ("IdVersion", "uint32"),
            ("Id", "Proxy"),
        ]

    def qualifies_proxy_outside_base_package(expect):
        proto = Protocol(
            name="ext",
            interfaces=[
                Interface(
                    name="ext_registry",
                    requests=[Request(name="bind", args=[Arg(name="id", type="new_id")])],
                )
            ],
        )
        (binding,) = build_protocol(proto, GeneratorConfig(package="ext"))
        expect(binding.requests[0].params[-1].decl) == "id wl.Proxy"


def describe_objects():
    def types_object_parameters(expect, load_protocol):
        device = _by_name(build_protocol(load_protocol("wayland.xml"), CLIENT))["wl_data_device"]
        start_drag = device.requests[0]
        expect([p.decl for p in start_drag.params]) == [
            "source *DataSource",
            "origin *Surface",
            "icon *Surface",
            "serial uint32",
        ]

    def marks_nullable_fields(expect, load_protocol):
        device = _by_name(build_protocol(load_protocol("wayland.xml"), CLIENT))["wl_data_device"]
        enter = device.events[1]
        surface, offer = enter.fields[1], enter.fields[4]
        expect(surface.nullable) == False
        expect(surface.decode) == "event.Proxy(p.Context()).(*Surface)"
        expect(offer.nullable) == True
        expect(offer.local) == "id"
        expect(offer.decode) == "event.Proxy(p.Context())"

    def uses_proxy_for_untyped_objects(expect, load_protocol):
        display = _by_name(build_protocol(load_protocol("wayland.xml"), CLIENT))["wl_display"]
        error = display.events[0]
        expect((error.fields[0].name, error.fields[0].type)) == ("ObjectId", "Proxy")

    def qualifies_base_protocol_objects(expect, load_protocol):
        shell = _by_name(build_protocol(load_protocol("xdg_shell_v6.xml"), XDG))["xdg_shell_v6"]
        get_surface = shell.requests[1]
        expect(shell.name) == "Shell"
        expect([p.decl for p in get_surface.params]) == ["surface *wl.Surface", "id int"]
        expect(get_surface.returns) == "(*Surface, error)"
        expect(get_surface.send_args) == ["wl.Proxy(ret)", "surface"]
        expect(get_surface.allocation) == [
            "ret := new(Surface)",
            "p.Context().RegisterId(ret, id)",
        ]


def describe_scalars():
    def keeps_enum_tagged_uints_untyped(expect, load_protocol):
        proto = load_protocol("wayland.xml")
        pool = _by_name(build_protocol(proto, CLIENT))["wl_shm_pool"]
        fmt = pool.requests[0].params[-1]
        expect(fmt.type) == "uint32"
        expect(fmt.enum) == "wl_shm.format"

        output = _by_name(build_protocol(proto, CLIENT))["wl_output"]
        flags = output.events[0].fields[0]
        expect(flags.type) == "uint32"
        expect(flags.enum) == "mode"

    def decodes_fds_and_arrays(expect, load_protocol):
        proto = load_protocol("wayland.xml")
        keyboard = _by_name(build_protocol(proto, CLIENT))["wl_keyboard"]
        expect(keyboard.events[0].fields[2].decode) == "event.Array()"
        offer = _by_name(build_protocol(proto, SERVER))["wl_data_offer"]
        expect(offer.events[0].fields[1].decode) == "p.Context().NextFD()"

    def renames_keyword_parameters(expect, load_protocol):
        registry = _by_name(build_protocol(load_protocol("wayland.xml"), SERVER))["wl_registry"]
        global_ = registry.requests[0]
        expect([p.decl for p in global_.params]) == [
            "name uint32",
            "iface string",
            "version uint32",
        ]


def describe_enums():
    def prefixes_constants(expect, load_protocol):
        output = _by_name(build_protocol(load_protocol("wayland.xml"), CLIENT))["wl_output"]
        transform, mode = output.enums
        expect(transform.name) == "OutputTransform"
        expect([(e.name, e.value) for e in transform.entries]) == [
            ("OutputTransformNormal", "0"),
            ("OutputTransform90", "1"),
            ("OutputTransformFlipped270", "7"),
        ]
        expect(mode.bitfield) == True

    def are_role_independent(expect, load_protocol):
        proto = load_protocol("wayland.xml")
        client = _by_name(build_protocol(proto, CLIENT))["wl_display"]
        server = _by_name(build_protocol(proto, SERVER))["wl_display"]
        expect(client.enums) == server.enums


def describe_failures():
    def raises_unresolved_symbol(expect, load_protocol):
        with pytest.raises(UnresolvedSymbol) as exc:
            build_protocol(load_protocol("unresolved.xml"), CLIENT)
        expect(exc.value.name) == "wl_missing"
        expect("wl_thing.attach" in str(exc.value)) == True
        expect("'buffer'" in str(exc.value)) == True

    def raises_unknown_wire_type(expect, load_protocol):
        with pytest.raises(UnknownWireType) as exc:
            build_protocol(load_protocol("badtype.xml"), CLIENT)
        expect(exc.value.tag) == "double"
        expect("wl_thing.scale" in str(exc.value)) == True

    def raises_for_outbound_unknown_types(expect, load_protocol):
        # badtype.xml declares the argument on an event, outbound for servers
        with pytest.raises(UnknownWireType):
            build_protocol(load_protocol("badtype.xml"), SERVER)

    def requires_registration_before_building(expect, load_protocol):
        proto = load_protocol("demo.xml")
        builder = BindingBuilder(SymbolTable(CLIENT), CLIENT)
        with pytest.raises(UnresolvedSymbol):
            builder.build(proto.interfaces[0])

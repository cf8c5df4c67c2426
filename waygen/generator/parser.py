"""Protocol schema parser for Wayland-style XML documents."""

import logging
import xml.etree.ElementTree as ET

from .errors import SchemaDecodeError
from .types import Arg, Description, Entry, Enum, Event, Interface, Protocol, Request

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset(["true", "1", "yes"])


def _attr(elem: ET.Element, name: str) -> str:
    value = elem.get(name)
    if value is None or value == "":
        raise SchemaDecodeError(f"{name} attribute of <{elem.tag}> tag must be specified")
    return value


def _int_attr(elem: ET.Element, name: str, default: int) -> int:
    value = elem.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value, 0)
    except ValueError as e:
        raise SchemaDecodeError(
            f"{name} attribute of <{elem.tag} name={elem.get('name')!r}> must be an integer, "
            f"got {value!r}"
        ) from e


def _bool_attr(elem: ET.Element, name: str) -> bool:
    return (elem.get(name) or "").strip().lower() in _TRUE_VALUES


def _description(elem: ET.Element) -> Description:
    desc = elem.find("description")
    if desc is None:
        return Description(summary=elem.get("summary", ""))
    return Description(summary=desc.get("summary", ""), text=(desc.text or "").strip())


def _arg(elem: ET.Element) -> Arg:
    return Arg(
        name=_attr(elem, "name"),
        type=_attr(elem, "type"),
        interface=elem.get("interface", ""),
        enum=elem.get("enum", ""),
        allow_null=_bool_attr(elem, "allow-null"),
        summary=elem.get("summary", ""),
    )


def _request(elem: ET.Element) -> Request:
    return Request(
        name=_attr(elem, "name"),
        args=[_arg(a) for a in elem.findall("arg")],
        type=elem.get("type", ""),
        since=_int_attr(elem, "since", 1),
        description=_description(elem),
    )


def _event(elem: ET.Element) -> Event:
    return Event(
        name=_attr(elem, "name"),
        args=[_arg(a) for a in elem.findall("arg")],
        type=elem.get("type", ""),
        since=_int_attr(elem, "since", 1),
        description=_description(elem),
    )


def _enum(elem: ET.Element) -> Enum:
    entries = [
        Entry(
            name=_attr(e, "name"),
            value=_attr(e, "value"),
            summary=e.get("summary", ""),
        )
        for e in elem.findall("entry")
    ]
    return Enum(
        name=_attr(elem, "name"),
        entries=entries,
        bitfield=_bool_attr(elem, "bitfield"),
        description=_description(elem),
    )


def _interface(elem: ET.Element) -> Interface:
    return Interface(
        name=_attr(elem, "name"),
        version=_int_attr(elem, "version", 1),
        requests=[_request(r) for r in elem.findall("request")],
        events=[_event(e) for e in elem.findall("event")],
        enums=[_enum(e) for e in elem.findall("enum")],
        description=_description(elem),
    )


def parse(text: str) -> Protocol:
    """Parse a protocol document."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise SchemaDecodeError(f"Cannot decode protocol document: {e}") from e

    if root.tag != "protocol":
        raise SchemaDecodeError(f"Expected <protocol> root element, found <{root.tag}>")

    copyright_elem = root.find("copyright")
    protocol = Protocol(
        name=_attr(root, "name"),
        interfaces=[_interface(i) for i in root.findall("interface")],
        copyright=(copyright_elem.text or "").strip() if copyright_elem is not None else "",
    )
    logger.debug(
        "Decoded protocol %s with %d interfaces", protocol.name, len(protocol.interfaces)
    )
    return protocol

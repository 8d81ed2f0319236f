"""Renderers for binary and structured text formats: MessagePack, Protocol Buffers, TOML, XML and YAML."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import msgpack
import tomli_w
import yaml

from tonic.render.core import Render, write_content_type

MSGPACK_CONTENT_TYPE = "application/msgpack; charset=utf-8"
PROTOBUF_CONTENT_TYPE = "application/x-protobuf"
TOML_CONTENT_TYPE = "application/toml; charset=utf-8"
XML_CONTENT_TYPE = "application/xml; charset=utf-8"
YAML_CONTENT_TYPE = "application/yaml; charset=utf-8"


def write_msgpack(writer: Any, obj: Any) -> None:
    """Set the MessagePack content type and write ``obj`` encoded as MessagePack."""
    write_content_type(writer, MSGPACK_CONTENT_TYPE)
    writer.write(msgpack.packb(obj, use_bin_type=True))


@dataclass
class MsgPack(Render):
    """Data encoded as MessagePack."""

    data: Any

    def render(self, writer: Any) -> None:
        write_msgpack(writer, self.data)

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, MSGPACK_CONTENT_TYPE)


@dataclass
class ProtoBuf(Render):
    """A protocol buffer message, serialized with its ``SerializeToString`` method."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        serialize = getattr(self.data, "SerializeToString", None)
        if not callable(serialize):
            raise TypeError(
                f"protobuf: {type(self.data).__name__} is not a protocol buffer message"
            )
        writer.write(bytes(serialize()))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, PROTOBUF_CONTENT_TYPE)


@dataclass
class TOML(Render):
    """A mapping encoded as a TOML document."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        if not isinstance(self.data, Mapping):
            raise TypeError(
                f"toml: cannot encode a value of type {type(self.data).__name__} as a document"
            )
        writer.write(tomli_w.dumps(self.data).encode("utf-8"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, TOML_CONTENT_TYPE)


def _scalar_element(value: Any) -> ET.Element | None:
    if isinstance(value, bool):
        element = ET.Element("bool")
        element.text = "true" if value else "false"
    elif isinstance(value, int):
        element = ET.Element("int")
        element.text = str(value)
    elif isinstance(value, float):
        element = ET.Element("float64")
        element.text = str(int(value)) if value.is_integer() else repr(value)
    elif isinstance(value, str):
        element = ET.Element("string")
        element.text = value
    else:
        return None
    return element


def _to_element(data: Any) -> ET.Element:
    to_xml = getattr(data, "to_xml", None)
    if callable(to_xml):
        return to_xml()
    if isinstance(data, ET.Element):
        return data
    element = _scalar_element(data)
    if element is None:
        raise TypeError(f"xml: unsupported type: {type(data).__name__}")
    return element


@dataclass
class XML(Render):
    """Data encoded as XML.

    Accepts an ``xml.etree.ElementTree.Element``, an object with a ``to_xml()``
    method returning one, or a plain str, int, float or bool.
    """

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        element = _to_element(self.data)
        text = ET.tostring(element, encoding="unicode", short_empty_elements=False)
        writer.write(text.encode("utf-8"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, XML_CONTENT_TYPE)


@dataclass
class YAML(Render):
    """Data encoded as a YAML document."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        text = yaml.safe_dump(
            self.data, allow_unicode=True, sort_keys=True, default_flow_style=False
        )
        writer.write(text.encode("utf-8"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, YAML_CONTENT_TYPE)
"""Minimal XMP packet container.

Supports the operations the sidecar sync needs: parse a packet, test whether a
top-level property exists, read and write simple properties and struct fields,
and serialize back to a packet. Everything else in the packet (arrays,
unknown schemas, extra rdf:Description blocks) is carried through untouched.

Struct properties are accepted in all three RDF forms:

    <xmpDM:duration rdf:parseType="Resource"><xmpDM:value>10</xmpDM:value>...
    <xmpDM:duration><rdf:Description xmpDM:value="10" .../></xmpDM:duration>
    <xmpDM:duration xmpDM:value="10" .../>

New struct fields are always written in the parseType="Resource" form.
"""

from __future__ import annotations

import io
from xml.etree import ElementTree as ET

from hdvsync.errors import XMPParseError

from .namespaces import NS_RDF, NS_X, qname, register_prefix

PACKET_HEADER = '<?xpacket begin="\ufeff" id="W5M0MpCehiHzreSzNTczkc9d"?>\n'
PACKET_TRAILER = '\n<?xpacket end="w"?>'

_RDF = qname(NS_RDF, "RDF")
_DESCRIPTION = qname(NS_RDF, "Description")
_ABOUT = qname(NS_RDF, "about")
_PARSE_TYPE = qname(NS_RDF, "parseType")
_XMPMETA = qname(NS_X, "xmpmeta")
_XAPMETA = qname(NS_X, "xapmeta")


class XMPMeta:
    """An XMP metadata tree backed by ElementTree."""

    def __init__(self, root: ET.Element | None = None) -> None:
        if root is None:
            root = ET.Element(_XMPMETA)
            rdf = ET.SubElement(root, _RDF)
            ET.SubElement(rdf, _DESCRIPTION, {_ABOUT: ""})
        self._root = root

    # ------------------------------------------------------------------
    # Parse / serialize
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, data: bytes | str) -> XMPMeta:
        """Parse an XMP packet (with or without xpacket wrapper).

        Raises:
            XMPParseError: If the data is not well-formed XMP
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not data.strip():
            return cls()

        try:
            parser = ET.iterparse(io.BytesIO(data), events=("start-ns",))
            for _event, (prefix, uri) in parser:
                register_prefix(prefix, uri)
            root = parser.root
        except ET.ParseError as e:
            raise XMPParseError(f"Malformed XMP packet: {e}") from e

        if root.tag == _RDF:
            wrapper = ET.Element(_XMPMETA)
            wrapper.append(root)
            root = wrapper
        elif root.tag not in (_XMPMETA, _XAPMETA):
            raise XMPParseError(f"Unexpected XMP root element: {root.tag}")
        if root.find(_RDF) is None:
            ET.SubElement(root, _RDF)
        return cls(root)

    def serialize(self) -> bytes:
        """Serialize to a UTF-8 XMP packet."""
        ET.indent(self._root, space=" ")
        body = ET.tostring(self._root, encoding="unicode")
        return (PACKET_HEADER + body + PACKET_TRAILER).encode("utf-8")

    # ------------------------------------------------------------------
    # Simple properties
    # ------------------------------------------------------------------

    def does_property_exist(self, ns: str, name: str) -> bool:
        return self._locate(ns, name) is not None

    def get_property(self, ns: str, name: str) -> str | None:
        """Return a simple property value, or None if absent or not simple."""
        found = self._locate(ns, name)
        if found is None:
            return None
        desc, element = found
        if element is None:
            return desc.get(qname(ns, name))
        if len(element) or element.get(_PARSE_TYPE) is not None:
            return None
        return element.text or ""

    def set_property(self, ns: str, name: str, value: str, delete_existing: bool = False) -> None:
        """Set a simple property.

        With delete_existing, any prior value (including a struct or array
        under the same name) is removed first.
        """
        tag = qname(ns, name)
        found = self._locate(ns, name)
        if found is not None:
            desc, element = found
            if element is None:
                desc.set(tag, value)
                return
            if not delete_existing and not len(element) and element.get(_PARSE_TYPE) is None:
                element.text = value
                return
            index = list(desc).index(element)
            desc.remove(element)
            new = ET.Element(tag)
            new.text = value
            desc.insert(index, new)
            return

        new = ET.SubElement(self._first_description(), tag)
        new.text = value

    def delete_property(self, ns: str, name: str) -> None:
        found = self._locate(ns, name)
        if found is None:
            return
        desc, element = found
        if element is None:
            del desc.attrib[qname(ns, name)]
        else:
            desc.remove(element)

    # ------------------------------------------------------------------
    # Struct fields
    # ------------------------------------------------------------------

    def get_struct_field(
        self, schema_ns: str, struct_name: str, field_ns: str, field_name: str
    ) -> str | None:
        """Return a struct field's value, or None if the struct or field is absent."""
        struct = self._struct_element(schema_ns, struct_name)
        if struct is None:
            return None
        holder = _field_holder(struct)
        tag = qname(field_ns, field_name)
        if tag in holder.attrib:
            return holder.get(tag)
        field = holder.find(tag)
        if field is None or len(field):
            return None
        return field.text or ""

    def does_struct_field_exist(
        self, schema_ns: str, struct_name: str, field_ns: str, field_name: str
    ) -> bool:
        return self.get_struct_field(schema_ns, struct_name, field_ns, field_name) is not None

    def set_struct_field(
        self,
        schema_ns: str,
        struct_name: str,
        field_ns: str,
        field_name: str,
        value: str,
        delete_existing: bool = False,
    ) -> None:
        """Set one field of a struct property, creating the struct if needed.

        With delete_existing, the whole struct is replaced by one holding only
        this field.
        """
        struct = self._struct_element(schema_ns, struct_name)
        if struct is not None and not len(struct) and (struct.text or "").strip():
            # A simple value under the struct's name is replaced, not extended
            delete_existing = True
        if struct is None or delete_existing:
            if self.does_property_exist(schema_ns, struct_name):
                self.delete_property(schema_ns, struct_name)
            struct = ET.SubElement(
                self._first_description(),
                qname(schema_ns, struct_name),
                {_PARSE_TYPE: "Resource"},
            )

        holder = _field_holder(struct)
        if holder is struct:
            _normalize_resource(struct)

        tag = qname(field_ns, field_name)
        if tag in holder.attrib:
            holder.set(tag, value)
            return
        field = holder.find(tag)
        if field is None:
            field = ET.SubElement(holder, tag)
        else:
            for child in list(field):
                field.remove(child)
        field.text = value

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @property
    def _rdf(self) -> ET.Element:
        rdf = self._root.find(_RDF)
        if rdf is None:
            rdf = ET.SubElement(self._root, _RDF)
        return rdf

    def _descriptions(self) -> list[ET.Element]:
        return self._rdf.findall(_DESCRIPTION)

    def _first_description(self) -> ET.Element:
        descriptions = self._descriptions()
        if descriptions:
            return descriptions[0]
        return ET.SubElement(self._rdf, _DESCRIPTION, {_ABOUT: ""})

    def _locate(self, ns: str, name: str) -> tuple[ET.Element, ET.Element | None] | None:
        """Find a top-level property as (description, element-or-None-if-attribute)."""
        tag = qname(ns, name)
        for desc in self._descriptions():
            if tag in desc.attrib:
                return desc, None
            element = desc.find(tag)
            if element is not None:
                return desc, element
        return None

    def _struct_element(self, ns: str, name: str) -> ET.Element | None:
        found = self._locate(ns, name)
        if found is None:
            return None
        _desc, element = found
        return element


def _field_holder(struct: ET.Element) -> ET.Element:
    """Return the element whose attributes/children are the struct's fields."""
    nested = struct.find(_DESCRIPTION)
    return nested if nested is not None else struct


def _normalize_resource(struct: ET.Element) -> None:
    """Rewrite attribute-form fields as children under rdf:parseType="Resource"."""
    keys = [k for k in struct.attrib if not k.startswith(f"{{{NS_RDF}}}")]
    for index, key in enumerate(keys):
        field = ET.Element(key)
        field.text = struct.attrib.pop(key)
        struct.insert(index, field)
    struct.set(_PARSE_TYPE, "Resource")

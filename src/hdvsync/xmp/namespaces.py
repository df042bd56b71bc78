"""XMP namespace URIs and their preferred prefixes."""

from xml.etree import ElementTree as ET

NS_X = "adobe:ns:meta/"
NS_RDF = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
NS_XMP = "http://ns.adobe.com/xap/1.0/"
NS_DM = "http://ns.adobe.com/xmp/1.0/DynamicMedia/"
NS_DIM = "http://ns.adobe.com/xap/1.0/sType/Dimensions#"
NS_DC = "http://purl.org/dc/elements/1.1/"

PREFERRED_PREFIXES = {
    "x": NS_X,
    "rdf": NS_RDF,
    "xmp": NS_XMP,
    "xmpDM": NS_DM,
    "stDim": NS_DIM,
    "dc": NS_DC,
}
_PREFERRED_URIS = {uri: prefix for prefix, uri in PREFERRED_PREFIXES.items()}


def qname(ns: str, name: str) -> str:
    """Return the ElementTree "{ns}name" form."""
    return f"{{{ns}}}{name}"


def register_prefix(prefix: str, uri: str) -> None:
    """Register a prefix for serialization, ignoring ones ElementTree reserves.

    The registry is process-wide, so a packet cannot rebind a preferred prefix
    or give a preferred namespace another prefix.
    """
    if not prefix:
        return
    if PREFERRED_PREFIXES.get(prefix, uri) != uri or _PREFERRED_URIS.get(uri, prefix) != prefix:
        return
    try:
        ET.register_namespace(prefix, uri)
    except ValueError:
        # ns0, ns1, ... are reserved for generated prefixes
        pass


for _prefix, _uri in PREFERRED_PREFIXES.items():
    register_prefix(_prefix, _uri)

"""XMP sidecar container."""

from .meta import XMPMeta
from .namespaces import NS_DC, NS_DIM, NS_DM, NS_RDF, NS_X, NS_XMP, qname

__all__ = [
    "XMPMeta",
    "NS_X",
    "NS_RDF",
    "NS_XMP",
    "NS_DM",
    "NS_DIM",
    "NS_DC",
    "qname",
]

from .cursor import (
    Checkpoint,
    Classifier,
    Cursor,
)
from .defs import (
    Options,
    Opts,
    Span,
)
from .exc import (
    CapacityExceeded,
    ConfigurationError,
    DuplicateKey,
    KeySetError,
    UnknownField,
    URIPathFinderError,
)
from .keyset import KeySet
from .render import (
    render_telephone,
    render_uri,
)
from .rfc3966 import (
    Params,
    Telephone,
    TelephoneParser,
    parse_telephone,
)
from .rfc3986 import (
    URI,
    URIParser,
    parse_uri,
)

__all__ = (
    "CapacityExceeded",
    "Checkpoint",
    "Classifier",
    "ConfigurationError",
    "Cursor",
    "DuplicateKey",
    "KeySet",
    "KeySetError",
    "Options",
    "Opts",
    "Params",
    "Span",
    "Telephone",
    "TelephoneParser",
    "URI",
    "URIParser",
    "URIPathFinderError",
    "UnknownField",
    "parse_telephone",
    "parse_uri",
    "render_telephone",
    "render_uri",
)

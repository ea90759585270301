"""
RFC 3986 generic URI syntax.

The grammar follows Appendix A of the RFC.  Parsing never copies: the resulting
`URI` records the byte offset at which every component and separator starts.
"""

import logging
from typing import Final, NamedTuple, final

from .cursor import Cursor
from .defs import GrammarParser, Opts, Span
from .exc import UnknownField
from .expr import (
    ALPHA,
    DIGIT,
    EMPTY,
    HEXDIG,
    Parser,
    alternate,
    at_least,
    between,
    char,
    exactly,
    literal,
    optional,
    sequence,
)

logger = logging.getLogger(__name__)

# markers in the order in which they occur in a URI
MARKERS: Final[tuple[str, ...]] = (
    "scheme",
    "scheme_sep",
    "slashes",
    "userinfo",
    "at",
    "host",
    "port_sep",
    "port",
    "path",
    "question",
    "query",
    "pound",
    "fragment",
    "end",
)

FIELDS: Final[tuple[str, ...]] = ("scheme", "userinfo", "host", "port", "path", "query", "fragment")


@final
class URI(NamedTuple):
    source: bytes = b""
    scheme: int | None = None
    scheme_sep: int | None = None
    slashes: int | None = None
    userinfo: int | None = None
    at: int | None = None
    host: int | None = None
    port_sep: int | None = None
    port: int | None = None
    path: int | None = None
    question: int | None = None
    query: int | None = None
    pound: int | None = None
    fragment: int | None = None
    end: int | None = None

    @property
    def valid(self) -> bool:
        return self.end is not None

    def span(self, field: str) -> Span | None:
        """
        The byte range of `field`, which runs up to the next populated marker.
        """
        if field not in FIELDS:
            raise UnknownField("URI", field)
        start = getattr(self, field)
        if start is None:
            return None
        for name in MARKERS[MARKERS.index(field) + 1 :]:
            if (stop := getattr(self, name)) is not None:
                return Span(start, stop)
        return Span(start, len(self.source))

    def get(self, field: str) -> bytes | None:
        if (span := self.span(field)) is None:
            return None
        return span.of(self.source)

    def length(self, field: str) -> int:
        if (span := self.span(field)) is None:
            return 0
        return span.size


### Grammar ############################################################################################################

_COLON: Final = char(":")
_AT: Final = char("@")
_SLASH: Final = char("/")
_DOT: Final = char(".")
_QUESTION: Final = char("?")
_POUND: Final = char("#")
_DOUBLE_SLASH: Final = literal("//")

# pct-encoded = "%" HEXDIG HEXDIG
PCT_ENCODED: Final = sequence("%", HEXDIG, HEXDIG)

# unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~"
UNRESERVED: Final = alternate(ALPHA, DIGIT, char("-._~"))

# sub-delims = "!" / "$" / "&" / "'" / "(" / ")" / "*" / "+" / "," / ";" / "="
SUB_DELIMS: Final = char("!$&'()*+,;=")

# pchar = unreserved / pct-encoded / sub-delims / ":" / "@"
PCHAR: Final = alternate(UNRESERVED, PCT_ENCODED, SUB_DELIMS, char(":@"))

# scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
SCHEME: Final = sequence(ALPHA, at_least(0, alternate(ALPHA, DIGIT, char("+-."))))

# userinfo = *( unreserved / pct-encoded / sub-delims / ":" )
_USERINFO_CHAR: Final = alternate(UNRESERVED, PCT_ENCODED, SUB_DELIMS, ":")

# reg-name = *( unreserved / pct-encoded / sub-delims )
REG_NAME: Final = at_least(0, alternate(UNRESERVED, PCT_ENCODED, SUB_DELIMS))

# IPvFuture = "v" 1*HEXDIG "." 1*( unreserved / sub-delims / ":" )
IPV_FUTURE: Final = sequence(
    char("vV"),
    at_least(1, HEXDIG),
    ".",
    at_least(1, alternate(UNRESERVED, SUB_DELIMS, ":")),
)


# dec-octet = DIGIT                 ; 0-9
#           / %x31-39 DIGIT         ; 10-99
#           / "1" 2DIGIT            ; 100-199
#           / "2" %x30-34 DIGIT     ; 200-249
#           / "25" %x30-35          ; 250-255
def dec_octet(cur: Cursor) -> int | None:
    if (d1 := DIGIT(cur)) is None:
        return None
    src = cur.src
    if src[d1] == ord("0"):
        return d1
    if (d2 := DIGIT(cur)) is None:
        return d1
    checkpoint = cur.save()
    if (d3 := DIGIT(cur)) is None:
        return d1
    if not (
        src[d1] == ord("1")
        or (src[d1] == ord("2") and src[d2] <= ord("4"))
        or (src[d1] == ord("2") and src[d2] == ord("5") and src[d3] <= ord("5"))
    ):
        # three digits out of range, settle for two
        cur.restore(checkpoint)
    return d1


# IPv4address = dec-octet "." dec-octet "." dec-octet "." dec-octet
IPV4_ADDRESS: Final = sequence(dec_octet, _DOT, dec_octet, _DOT, dec_octet, _DOT, dec_octet)

# h16 = 1*4HEXDIG
H16: Final = between(1, 4, HEXDIG)
_H16_COLON: Final = sequence(H16, _COLON)

# ls32 = ( h16 ":" h16 ) / IPv4address
LS32: Final = alternate(sequence(H16, _COLON, H16), IPV4_ADDRESS)


def _elided(k: int) -> Parser:
    # [ *k( h16 ":" ) h16 ] "::"
    return sequence(optional(sequence(H16, between(0, k, sequence(_COLON, H16)))), "::")


# IPv6address =                            6( h16 ":" ) ls32
#             /                       "::" 5( h16 ":" ) ls32
#             / [               h16 ] "::" 4( h16 ":" ) ls32
#             / [ *1( h16 ":" ) h16 ] "::" 3( h16 ":" ) ls32
#             / [ *2( h16 ":" ) h16 ] "::" 2( h16 ":" ) ls32
#             / [ *3( h16 ":" ) h16 ] "::"    h16 ":"   ls32
#             / [ *4( h16 ":" ) h16 ] "::"              ls32
#             / [ *5( h16 ":" ) h16 ] "::"              h16
#             / [ *6( h16 ":" ) h16 ] "::"
IPV6_ADDRESS: Final = alternate(
    sequence(exactly(6, _H16_COLON), LS32),
    sequence("::", exactly(5, _H16_COLON), LS32),
    sequence(_elided(0), exactly(4, _H16_COLON), LS32),
    sequence(_elided(1), exactly(3, _H16_COLON), LS32),
    sequence(_elided(2), exactly(2, _H16_COLON), LS32),
    sequence(_elided(3), _H16_COLON, LS32),
    sequence(_elided(4), LS32),
    sequence(_elided(5), H16),
    _elided(6),
)

# IP-literal = "[" ( IPv6address / IPvFuture  ) "]"
IP_LITERAL: Final = sequence("[", alternate(IPV6_ADDRESS, IPV_FUTURE), "]")

# host = IP-literal / IPv4address / reg-name
# reg-name already covers every IPv4address
HOST: Final = alternate(IP_LITERAL, REG_NAME)

# port = *DIGIT
PORT: Final = at_least(0, DIGIT)

# segment = *pchar
# segment-nz = 1*pchar
SEGMENT: Final = at_least(0, PCHAR)
SEGMENT_NZ: Final = at_least(1, PCHAR)

# path-abempty = *( "/" segment )
PATH_ABEMPTY: Final = at_least(0, sequence(_SLASH, SEGMENT))

# path-rootless = segment-nz *( "/" segment )
PATH_ROOTLESS: Final = sequence(SEGMENT_NZ, PATH_ABEMPTY)

# path-absolute = "/" [ segment-nz *( "/" segment ) ]
PATH_ABSOLUTE: Final = sequence(_SLASH, optional(PATH_ROOTLESS))

# path-absolute / path-rootless / path-empty
_PATH: Final = alternate(PATH_ABSOLUTE, PATH_ROOTLESS, EMPTY)

# query = *( pchar / "/" / "?" )
# fragment = *( pchar / "/" / "?" )
QUERY: Final = at_least(0, alternate(PCHAR, char("/?")))
FRAGMENT: Final = QUERY


def _authority(cur: Cursor, marks: dict[str, int]) -> None:
    """
    authority = [ userinfo "@" ] host [ ":" port ]

    userinfo and reg-name share every character except ":", so one scan over
    userinfo characters decides between the two.  The first ":" of the scan is
    remembered: without a following "@" the scanned text is the host and the
    cursor goes back to that ":" to read the port.
    """
    start = cur.save()
    colon = None
    while True:
        if colon is None and cur.peek() == ord(":"):
            colon = cur.save()
        if _USERINFO_CHAR(cur) is None:
            break
    if (at := _AT(cur)) is not None:
        marks["userinfo"] = start
        marks["at"] = at
        marks["host"] = HOST(cur)  # type: ignore[assignment]
    elif cur.pos == start:
        # nothing scanned, may still be an IP-literal
        marks["host"] = HOST(cur)  # type: ignore[assignment]
    else:
        marks["host"] = start
        if colon is not None:
            cur.restore(colon)
    if (sep := _COLON(cur)) is not None:
        marks["port_sep"] = sep
        marks["port"] = PORT(cur)  # type: ignore[assignment]


def _hier_part(cur: Cursor, marks: dict[str, int]) -> None:
    """
    hier-part = "//" authority path-abempty
              / path-absolute
              / path-rootless
              / path-empty
    """
    if (slashes := _DOUBLE_SLASH(cur)) is not None:
        marks["slashes"] = slashes
        _authority(cur, marks)
        marks["path"] = PATH_ABEMPTY(cur)  # type: ignore[assignment]
    else:
        marks["path"] = _PATH(cur)  # type: ignore[assignment]


def _uri(cur: Cursor) -> dict[str, int] | None:
    """URI = scheme ":" hier-part [ "?" query ] [ "#" fragment ]"""
    marks: dict[str, int] = dict()
    if (scheme := SCHEME(cur)) is None:
        return None
    marks["scheme"] = scheme
    if (sep := _COLON(cur)) is None:
        return None
    marks["scheme_sep"] = sep
    _hier_part(cur, marks)
    if (question := _QUESTION(cur)) is not None:
        marks["question"] = question
        if (query := QUERY(cur)) is None:
            return None
        marks["query"] = query
    if (pound := _POUND(cur)) is not None:
        marks["pound"] = pound
        if (fragment := FRAGMENT(cur)) is None:
            return None
        marks["fragment"] = fragment
    if not cur.at_end:
        return None
    marks["end"] = cur.pos
    return marks


@final
class URIParser(GrammarParser):
    __slots__ = ()

    def parse(self, text: str | bytes, /, *, opts: Opts | None = None) -> URI:
        """
        Parses the complete input as a URI.

        If the input does not match the grammar in full, every marker of the
        returned URI is None.
        """
        cur = self._resolve(opts).cursor(text)
        if (marks := _uri(cur)) is None:
            logger.debug("not a URI: %r; stopped at pos=%d", cur.src, cur.pos)
            return URI(cur.src)
        return URI(cur.src, **marks)


def parse_uri(text: str | bytes, /, *, opts: Opts | None = None) -> URI:
    return URIParser().parse(text, opts=opts)

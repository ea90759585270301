"""
RFC 3966 telephone-subscriber syntax ("tel:" URIs).
"""

import logging
from enum import Enum
from typing import Final, NamedTuple, final

from .cursor import Cursor
from .defs import GrammarParser, Options, Opts, Span
from .exc import KeySetError, UnknownField
from .expr import (
    ALPHA,
    DIGIT,
    HEXDIG,
    alternate,
    at_least,
    char,
    literal,
    optional,
    sequence,
)
from .keyset import KeySet
from .rfc3986 import PCT_ENCODED

logger = logging.getLogger(__name__)

# generic parameters are packed into at most this many runs
MAX_RUNS: Final[int] = 4

FIELDS: Final[tuple[str, ...]] = (
    "global_number",
    "local_number",
    "ext",
    "isdn",
    "context",
    *(f"pars_{i}" for i in range(1, MAX_RUNS + 1)),
)


@final
class Params(NamedTuple):
    ext: Span | None = None
    isdn: Span | None = None
    context: Span | None = None
    runs: tuple[Span, ...] = ()


@final
class Telephone(NamedTuple):
    source: bytes = b""
    global_number: Span | None = None
    local_number: Span | None = None
    params: Params = Params()

    @property
    def valid(self) -> bool:
        return self.global_number is not None or self.local_number is not None

    def span(self, field: str) -> Span | None:
        match field:
            case "global_number" | "local_number":
                return getattr(self, field)
            case "ext" | "isdn" | "context":
                return getattr(self.params, field)
            case _ if field in FIELDS:
                ix = int(field.removeprefix("pars_")) - 1
                return self.params.runs[ix] if ix < len(self.params.runs) else None
        raise UnknownField("Telephone", field)

    def get(self, field: str) -> bytes | None:
        if (span := self.span(field)) is None:
            return None
        return span.of(self.source)

    def length(self, field: str) -> int:
        if (span := self.span(field)) is None:
            return 0
        return span.size


@final
class ParamKind(Enum):
    EXT = "ext"
    ISUB = "isub"
    CONTEXT = "phone-context"
    GENERIC = ""


@final
class _Param(NamedTuple):
    kind: ParamKind
    start: int  # at the ";"
    name_stop: int
    stop: int

    @property
    def name(self) -> Span:
        return Span(self.start + 1, self.name_stop)


### Grammar ############################################################################################################

_SEMICOLON: Final = char(";")
_DASH: Final = char("-")
_DOT: Final = char(".")
_TEL: Final = literal("tel:")

# alphanum = ALPHA / DIGIT
ALPHANUM: Final = alternate(ALPHA, DIGIT)

# reserved = ";" / "/" / "?" / ":" / "@" / "&" / "=" / "+" / "$" / ","
# ";" is left out: it always starts the next parameter
RESERVED: Final = char("/?:@&=+$,")

# mark = "-" / "_" / "." / "!" / "~" / "*" / "'" / "(" / ")"
MARK: Final = char("-_.!~*'()")

# unreserved = alphanum / mark
UNRESERVED: Final = alternate(ALPHANUM, MARK)

# uric = reserved / unreserved / pct-encoded
URIC: Final = alternate(RESERVED, UNRESERVED, PCT_ENCODED)

# visual-separator = "-" / "." / "(" / ")"
VISUAL_SEPARATOR: Final = char("-.()")

# phonedigit = DIGIT / [ visual-separator ]
PHONEDIGIT: Final = alternate(DIGIT, VISUAL_SEPARATOR)

# phonedigit-hex = HEXDIG / "*" / "#" / [ visual-separator ]
PHONEDIGIT_HEX: Final = alternate(HEXDIG, char("*#"), VISUAL_SEPARATOR)

# param-unreserved = "[" / "]" / "/" / ":" / "&" / "+" / "$"
PARAM_UNRESERVED: Final = char("[]/:&+$")

# paramchar = param-unreserved / unreserved / pct-encoded
PARAMCHAR: Final = alternate(PARAM_UNRESERVED, UNRESERVED, PCT_ENCODED)

# pvalue = 1*paramchar
PVALUE: Final = at_least(1, PARAMCHAR)

# pname = 1*( alphanum / "-" )
PNAME: Final = at_least(1, alternate(ALPHANUM, _DASH))

# global-number-digits = "+" *phonedigit DIGIT *phonedigit
# separators are taken first so the mandatory DIGIT is the next character
GLOBAL_NUMBER_DIGITS: Final = sequence("+", at_least(0, VISUAL_SEPARATOR), DIGIT, at_least(0, PHONEDIGIT))

# local-number-digits = *phonedigit-hex (HEXDIG / "*" / "#") *phonedigit-hex
LOCAL_NUMBER_DIGITS: Final = sequence(
    at_least(0, VISUAL_SEPARATOR),
    alternate(HEXDIG, char("*#")),
    at_least(0, PHONEDIGIT_HEX),
)


def domainlabel(cur: Cursor) -> int | None:
    """
    domainlabel = alphanum / alphanum *( alphanum / "-" ) alphanum

    Dashes are scanned greedily and given back if no alphanum follows them.
    """
    if (start := ALPHANUM(cur)) is None:
        return None
    last = cur.save()
    while True:
        if ALPHANUM(cur) is not None:
            last = cur.save()
        elif _DASH(cur) is None:
            break
    cur.restore(last)
    return start


def _starts_with_digit(cur: Cursor, pos: int) -> bool:
    probe = cur.fork()
    probe.pos = pos
    return DIGIT(probe) is not None


def domainname(cur: Cursor) -> int | None:
    """
    domainname = *( domainlabel "." ) toplabel [ "." ]
    toplabel = ALPHA / ALPHA *( alphanum / "-" ) alphanum

    Which label is the toplabel is only known once the labels run out, so the
    scan remembers where the last label that may be a toplabel (including its
    trailing ".") ends and rewinds there.
    """
    start = cur.save()
    label = domainlabel(cur)
    top_stop = None
    while label is not None:
        dot = _DOT(cur)
        if not _starts_with_digit(cur, label):
            top_stop = cur.save()
        if dot is None:
            break
        label = domainlabel(cur)
    if top_stop is None:
        cur.restore(start)
        return None
    cur.restore(top_stop)
    return start


# descriptor = domainname / global-number-digits
DESCRIPTOR: Final = alternate(domainname, GLOBAL_NUMBER_DIGITS)

# extension = ";ext=" 1*phonedigit
# isdn-subaddress = ";isub=" 1*uric
# context = ";phone-context=" descriptor
_SPECIALS: Final = (
    (ParamKind.EXT, sequence(literal("ext"), "=", at_least(1, PHONEDIGIT))),
    (ParamKind.ISUB, sequence(literal("isub"), "=", at_least(1, URIC))),
    (ParamKind.CONTEXT, sequence(literal("phone-context"), "=", DESCRIPTOR)),
)

_GENERIC_VALUE: Final = optional(sequence("=", PVALUE))


def _par(cur: Cursor) -> _Param | None:
    """
    par = parameter / extension / isdn-subaddress

    The special parameters are tried first: a generic parameter would accept
    their names as well.  phone-context is handled here too.
    """
    start = cur.save()
    if _SEMICOLON(cur) is None:
        return None
    for kind, parser in _SPECIALS:
        if parser(cur) is not None:
            return _Param(kind, start, start + 1 + len(kind.value), cur.pos)
    # parameter = ";" pname ["=" pvalue ]
    if PNAME(cur) is None:
        cur.restore(start)
        return None
    name_stop = cur.pos
    _GENERIC_VALUE(cur)
    return _Param(ParamKind.GENERIC, start, name_stop, cur.pos)


def _rank(kind: ParamKind) -> int:
    match kind:
        case ParamKind.EXT | ParamKind.ISUB:
            return 0
        case ParamKind.CONTEXT:
            return 1
    return 2


def _params(cur: Cursor, options: Options) -> Params | None:
    """
    *par

    Parameter names must be unique, which is checked with a KeySet.  With
    `strict_order` the parameters must also come in the recommended order:
    extension or isdn-subaddress, then phone-context, then all other
    parameters sorted by name.
    """
    keys = KeySet(cur.src, options.max_params)
    specials: dict[ParamKind, Span] = dict()
    runs: list[Span] = list()
    previous: _Param | None = None
    last_generic: bytes | None = None
    while (par := _par(cur)) is not None:
        try:
            keys.insert(*par.name)
        except KeySetError as err:
            logger.debug("rejecting parameter list: %s", err)
            return None
        if options.strict_order:
            if previous is not None and _rank(par.kind) < _rank(previous.kind):
                logger.debug("parameter at pos=%d out of order", par.start)
                return None
            if par.kind == ParamKind.GENERIC:
                name = par.name.of(cur.src)
                if last_generic is not None and name <= last_generic:
                    logger.debug("parameter %r not in lexicographical order", name)
                    return None
                last_generic = name
        span = Span(par.start, par.stop)
        if par.kind != ParamKind.GENERIC:
            if par.kind in specials:
                return None
            specials[par.kind] = span
        elif previous is not None and previous.kind == ParamKind.GENERIC:
            runs[-1] = Span(runs[-1].start, par.stop)
        elif len(runs) == MAX_RUNS:
            # only three special parameters can separate runs, so a fifth run
            # needs a repeated special name, which the key set rejects first
            logger.debug("rejecting parameter list: more than %d runs of parameters", MAX_RUNS)
            return None
        else:
            runs.append(span)
        previous = par
    return Params(
        ext=specials.get(ParamKind.EXT),
        isdn=specials.get(ParamKind.ISUB),
        context=specials.get(ParamKind.CONTEXT),
        runs=tuple(runs),
    )


def _global_number(cur: Cursor, options: Options) -> Telephone | None:
    """global-number = global-number-digits *par"""
    start = cur.save()
    if GLOBAL_NUMBER_DIGITS(cur) is None:
        return None
    number = Span(start, cur.pos)
    if (params := _params(cur, options)) is None or params.context is not None:
        cur.restore(start)
        return None
    return Telephone(cur.src, global_number=number, params=params)


def _local_number(cur: Cursor, options: Options) -> Telephone | None:
    """local-number = local-number-digits *par context *par"""
    start = cur.save()
    if LOCAL_NUMBER_DIGITS(cur) is None:
        return None
    number = Span(start, cur.pos)
    if (params := _params(cur, options)) is None or params.context is None:
        cur.restore(start)
        return None
    return Telephone(cur.src, local_number=number, params=params)


def _telephone(cur: Cursor, options: Options) -> Telephone | None:
    """
    telephone-uri = "tel:" telephone-subscriber
    telephone-subscriber = global-number / local-number
    """
    if _TEL(cur) is None:
        return None
    if (tel := _global_number(cur, options)) is None:
        tel = _local_number(cur, options)
    if tel is None or not cur.at_end:
        return None
    return tel


@final
class TelephoneParser(GrammarParser):
    __slots__ = ()

    def parse(self, text: str | bytes, /, *, opts: Opts | None = None) -> Telephone:
        """
        Parses the complete input as a "tel:" URI.

        If the input does not match the grammar in full, every field of the
        returned Telephone is None and it has no parameters.
        """
        options = self._resolve(opts)
        cur = options.cursor(text)
        if (tel := _telephone(cur, options)) is None:
            logger.debug("not a telephone URI: %r; stopped at pos=%d", cur.src, cur.pos)
            return Telephone(cur.src)
        return tel


def parse_telephone(text: str | bytes, /, *, opts: Opts | None = None) -> Telephone:
    return TelephoneParser().parse(text, opts=opts)

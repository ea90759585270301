import sys
from typing import Final, TextIO

from colorama import Back, Fore, Style

from .defs import Span
from .rfc3966 import FIELDS as TEL_FIELDS
from .rfc3966 import Telephone
from .rfc3986 import FIELDS as URI_FIELDS
from .rfc3986 import URI

_STYLES: Final[dict[str, tuple[str, ...]]] = {
    "scheme": (Back.BLACK, Style.BRIGHT, Fore.LIGHTWHITE_EX),
    "userinfo": (Back.BLACK, Fore.MAGENTA),
    "host": (Back.BLACK, Fore.YELLOW),
    "port": (Back.BLACK, Fore.CYAN),
    "path": (Back.BLACK, Fore.GREEN),
    "query": (Back.BLACK, Fore.BLUE),
    "fragment": (Back.BLACK, Fore.LIGHTRED_EX),
    "global_number": (Back.BLACK, Style.BRIGHT, Fore.LIGHTWHITE_EX),
    "local_number": (Back.BLACK, Style.BRIGHT, Fore.LIGHTWHITE_EX),
    "ext": (Back.BLACK, Fore.CYAN),
    "isdn": (Back.BLACK, Fore.MAGENTA),
    "context": (Back.BLACK, Fore.YELLOW),
    "pars_1": (Back.BLACK, Fore.GREEN),
    "pars_2": (Back.BLACK, Fore.BLUE),
    "pars_3": (Back.BLACK, Fore.GREEN),
    "pars_4": (Back.BLACK, Fore.BLUE),
}

_INVALID: Final[tuple[str, ...]] = (Style.BRIGHT, Back.RED, Fore.BLACK)


def _decode(data: bytes) -> str:
    return data.decode("utf-8", "backslashreplace")


def _render(source: bytes, spans: dict[str, Span], fp: TextIO) -> None:
    pos = 0
    for name, span in sorted(spans.items(), key=lambda item: item[1]):
        print(_decode(source[pos : span.start]), end="", file=fp)
        print(*_STYLES[name], _decode(span.of(source)), end=Style.RESET_ALL, sep="", file=fp)
        pos = span.stop
    print(_decode(source[pos:]), file=fp)
    for name, span in spans.items():
        print(f"  {name}: ", *_STYLES[name], _decode(span.of(source)), Style.RESET_ALL, sep="", file=fp)


def render_uri(uri: URI, fp: TextIO = sys.stdout) -> None:
    """
    Prints the source of `uri` with every present field highlighted, followed
    by one line per field.  An invalid URI is printed highlighted as a whole.
    """
    if not uri.valid:
        print(*_INVALID, _decode(uri.source), Style.RESET_ALL, sep="", file=fp)
        return
    spans = {name: span for name in URI_FIELDS if (span := uri.span(name)) is not None}
    _render(uri.source, spans, fp)


def render_telephone(tel: Telephone, fp: TextIO = sys.stdout) -> None:
    if not tel.valid:
        print(*_INVALID, _decode(tel.source), Style.RESET_ALL, sep="", file=fp)
        return
    spans = {name: span for name in TEL_FIELDS if (span := tel.span(name)) is not None}
    _render(tel.source, spans, fp)

"""
Length and copy accessors for parsed views.

`len_FIELD(view)` is constant time.  `get_FIELD(view, buf)` copies the field into
`buf` followed by a NUL byte and returns `(buf, length)`.  If the field is absent
it returns `(None, 0)`.  If `buf` is too small it returns `(None, length)`, so the
caller can allocate `bytearray(length + 1)` and try again.
"""

from collections.abc import Callable

from .rfc3966 import Telephone
from .rfc3986 import URI


def _copy_out(data: bytes | None, buf: bytearray) -> tuple[bytearray | None, int]:
    if data is None:
        return None, 0
    n = len(data)
    if n >= len(buf):
        return None, n
    buf[:n] = data
    buf[n] = 0
    return buf, n


def _make_len(field: str) -> Callable[[URI | Telephone], int]:
    def len_(view: URI | Telephone) -> int:
        return view.length(field)

    return len_


def _make_getter(field: str) -> Callable[[URI | Telephone, bytearray], tuple[bytearray | None, int]]:
    def get_(view: URI | Telephone, buf: bytearray) -> tuple[bytearray | None, int]:
        return _copy_out(view.get(field), buf)

    return get_


len_scheme = _make_len("scheme")
len_userinfo = _make_len("userinfo")
len_host = _make_len("host")
len_port = _make_len("port")
len_path = _make_len("path")
len_query = _make_len("query")
len_fragment = _make_len("fragment")

get_scheme = _make_getter("scheme")
get_userinfo = _make_getter("userinfo")
get_host = _make_getter("host")
get_port = _make_getter("port")
get_path = _make_getter("path")
get_query = _make_getter("query")
get_fragment = _make_getter("fragment")

len_global_number = _make_len("global_number")
len_local_number = _make_len("local_number")
len_par_ext = _make_len("ext")
len_par_isdn = _make_len("isdn")
len_par_context = _make_len("context")
len_par_pars_1 = _make_len("pars_1")
len_par_pars_2 = _make_len("pars_2")
len_par_pars_3 = _make_len("pars_3")
len_par_pars_4 = _make_len("pars_4")

get_global_number = _make_getter("global_number")
get_local_number = _make_getter("local_number")
get_par_ext = _make_getter("ext")
get_par_isdn = _make_getter("isdn")
get_par_context = _make_getter("context")
get_par_pars_1 = _make_getter("pars_1")
get_par_pars_2 = _make_getter("pars_2")
get_par_pars_3 = _make_getter("pars_3")
get_par_pars_4 = _make_getter("pars_4")


def len_pars(tel: Telephone) -> int:
    """Combined length of all runs of generic parameters."""
    return sum(run.size for run in tel.params.runs)


def get_pars(tel: Telephone, buf: bytearray) -> tuple[bytearray | None, int]:
    """
    Copies all runs of generic parameters, in source order.  Every run starts
    with its own ";", so nothing is inserted between them.
    """
    if not tel.params.runs:
        return None, 0
    return _copy_out(b"".join(run.of(tel.source) for run in tel.params.runs), buf)

import pytest

from uripathfinder import ConfigurationError, Opts, Options, Span, URIParser, parse_telephone
from uripathfinder.defs import DEFAULT_MAX_PARAMS


def test_opts_call_overrides_given_fields():
    opts = Opts(strict_order=True)
    derived = opts(max_params=5)
    assert derived == Opts(strict_order=True, max_params=5)
    assert opts == Opts(strict_order=True)


def test_options_override():
    options = Options()
    assert options.max_params == DEFAULT_MAX_PARAMS
    assert not options.strict_order
    assert options.override(None) is options
    overridden = options.override(Opts(strict_order=True))
    assert overridden.strict_order
    assert overridden.max_params == DEFAULT_MAX_PARAMS
    assert overridden.override(Opts(max_params=3)) == Options(strict_order=True, max_params=3)


@pytest.mark.parametrize("max_params", (0, -1))
def test_invalid_max_params(max_params: int):
    with pytest.raises(ConfigurationError):
        Options(max_params=max_params)
    with pytest.raises(ValueError):
        parse_telephone("tel:+1", opts=Opts(max_params=max_params))


def test_parser_options():
    parser = URIParser(Opts(strict_order=True))
    assert parser.options.strict_order
    assert parser.options.alpha is None


def test_span():
    span = Span(2, 5)
    assert span.size == 3
    assert span.of(b"abcdefg") == b"cde"

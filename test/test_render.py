import io

from colorama import Back, Fore, Style

from uripathfinder import parse_telephone, parse_uri, render_telephone, render_uri


def test_render_uri():
    fp = io.StringIO()
    render_uri(parse_uri("http://user@example.com:80/path?q#f"), fp)
    lines = fp.getvalue().splitlines()
    assert Style.RESET_ALL in lines[0]
    names = [line.split(":")[0].strip() for line in lines[1:]]
    assert names == ["scheme", "userinfo", "host", "port", "path", "query", "fragment"]
    assert lines[3].endswith(f"example.com{Style.RESET_ALL}")


def test_render_uri_keeps_separators():
    fp = io.StringIO()
    render_uri(parse_uri("http://example.com/path"), fp)
    first = fp.getvalue().splitlines()[0]
    assert "http" in first
    assert "://" in first


def test_render_invalid():
    fp = io.StringIO()
    render_uri(parse_uri("://nope"), fp)
    assert fp.getvalue().splitlines() == [f"{Style.BRIGHT}{Back.RED}{Fore.BLACK}://nope{Style.RESET_ALL}"]


def test_render_telephone():
    fp = io.StringIO()
    render_telephone(parse_telephone("tel:+1;ext=2;a=b"), fp)
    lines = fp.getvalue().splitlines()
    assert [line.split(":")[0].strip() for line in lines[1:]] == ["global_number", "ext", "pars_1"]
    assert ";a=b" in lines[-1]

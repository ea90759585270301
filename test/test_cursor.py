from uripathfinder.cursor import Cursor, to_source


def test_fork_join():
    cur = Cursor(b"abcdef")
    cur.advance(2)
    local_cur = cur.fork()
    local_cur.advance(3)
    assert local_cur.pos == 5
    assert cur.pos == 2
    cur.join(local_cur)
    assert cur.pos == 5


def test_fork_keeps_classifiers():
    def alpha(c: Cursor) -> int | None:
        return None

    cur = Cursor(b"x", alpha=alpha)
    assert cur.fork().alpha is alpha
    assert cur.fork().digit is None


def test_save_restore():
    cur = Cursor(b"hello")
    checkpoint = cur.save()
    assert cur.advance(4) == 0
    assert cur.peek() == ord("o")
    cur.restore(checkpoint)
    assert cur.pos == 0
    assert cur.startswith(b"hell")
    assert not cur.startswith(b"help")


def test_end():
    cur = Cursor(b"a")
    assert not cur.at_end
    cur.advance()
    assert cur.at_end
    assert cur.peek() is None
    assert not cur.startswith(b"a")


def test_to_source():
    assert to_source("ü") == b"\xc3\xbc"
    assert to_source(b"abc") == b"abc"
    assert to_source(bytearray(b"abc")) == b"abc"

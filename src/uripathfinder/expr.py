from collections.abc import Callable
from typing import Final, NamedTuple, final

from frozenintset import FrozenIntSet

from .cursor import Cursor

# Every parser returns the start of its match and advances the cursor, or returns
# None and leaves the cursor exactly where it was.
type Parser = Callable[[Cursor], int | None]

type Term = Parser | str


@final
class Char(NamedTuple):
    allowed: FrozenIntSet

    @staticmethod
    def of(chars: str) -> "Char":
        return Char(FrozenIntSet(tuple(ord(c) for c in chars)))

    @staticmethod
    def range(lo: str, hi: str) -> "Char":
        return Char(FrozenIntSet(range(ord(lo), ord(hi) + 1)))

    @staticmethod
    def union(*cs: "Char") -> "Char":
        return Char(FrozenIntSet.union_all(c.allowed for c in cs))

    def __call__(self, cur: Cursor) -> int | None:
        if (c := cur.peek()) is not None and c in self.allowed:
            return cur.advance()
        return None

    def __str__(self) -> str:
        return "/".join(
            (f"%x{rng.start:02x}" if rng.start == rng.stop - 1 else f"%x{rng.start:02x}-{rng.stop - 1:02x}")
            for rng in self.allowed.ranges
        )


@final
class Lit(NamedTuple):
    text: bytes

    def __call__(self, cur: Cursor) -> int | None:
        if self.text and cur.startswith(self.text):
            return cur.advance(len(self.text))
        return None

    def __str__(self) -> str:
        return f'"{self.text.decode("ascii", "backslashreplace")}"'


ASCII_ALPHA: Final[Char] = Char.union(Char.range("A", "Z"), Char.range("a", "z"))
ASCII_DIGIT: Final[Char] = Char.range("0", "9")
HEXDIG: Final[Char] = Char.union(ASCII_DIGIT, Char.range("A", "F"), Char.range("a", "f"))


@final
class _Alpha:
    __slots__ = ()

    def __call__(self, cur: Cursor) -> int | None:
        if cur.alpha is not None:
            return cur.alpha(cur)
        return ASCII_ALPHA(cur)

    def __str__(self) -> str:
        return "ALPHA"


@final
class _Digit:
    __slots__ = ()

    def __call__(self, cur: Cursor) -> int | None:
        if cur.digit is not None:
            return cur.digit(cur)
        return ASCII_DIGIT(cur)

    def __str__(self) -> str:
        return "DIGIT"


ALPHA: Final[_Alpha] = _Alpha()
DIGIT: Final[_Digit] = _Digit()


@final
class _Empty:
    __slots__ = ()

    def __call__(self, cur: Cursor) -> int | None:
        return cur.pos

    def __str__(self) -> str:
        return "0<empty>"


EMPTY: Final[_Empty] = _Empty()


@final
class Alt(NamedTuple):
    branches: tuple[Parser, ...]

    def __call__(self, cur: Cursor) -> int | None:
        for p in self.branches:
            local_cur = cur.fork()
            if (match := p(local_cur)) is not None:
                cur.join(local_cur)
                return match
        return None

    def __str__(self) -> str:
        return "/".join(f"({e})" if isinstance(e, (Seq, Alt)) else f"{e}" for e in self.branches)


@final
class Seq(NamedTuple):
    steps: tuple[Parser, ...]

    def __call__(self, cur: Cursor) -> int | None:
        checkpoint = cur.save()
        for p in self.steps:
            if p(cur) is None:
                cur.restore(checkpoint)
                return None
        return checkpoint

    def __str__(self) -> str:
        return " ".join(f"({e})" if isinstance(e, (Seq, Alt)) else f"{e}" for e in self.steps)


@final
class Many(NamedTuple):
    min: int
    max: int | None  # None = infinite
    expr: Parser

    def __call__(self, cur: Cursor) -> int | None:
        checkpoint = cur.save()
        for _ in range(self.min):
            if self.expr(cur) is None:
                cur.restore(checkpoint)
                return None
        # the tail is greedy and never gives back what it consumed
        if self.max is None:
            while self.expr(cur) is not None:
                pass
        else:
            for _ in range(self.max - self.min):
                if self.expr(cur) is None:
                    break
        return checkpoint

    def __str__(self) -> str:
        expr = f"({self.expr})" if isinstance(self.expr, (Seq, Alt)) else f"{self.expr}"
        if self.min == self.max:
            return f"{self.min}{expr}"
        return f"{self.min or ''}*{self.max or ''}{expr}"


def lift(term: Term) -> Parser:
    if isinstance(term, str):
        if len(term) == 1:
            return Char.of(term)
        return Lit(term.encode("ascii"))
    return term


def char(chars: str) -> Char:
    return Char.of(chars)


def literal(text: str) -> Lit:
    return Lit(text.encode("ascii"))


def alternate(*terms: Term) -> Parser:
    ps = tuple(lift(t) for t in terms)
    if all(isinstance(p, Char) for p in ps):
        # single byte alternatives commute
        return Char.union(*ps)  # type: ignore[arg-type]
    return Alt(ps)


def sequence(*terms: Term) -> Seq:
    return Seq(tuple(lift(t) for t in terms))


def exactly(n: int, term: Term) -> Many:
    return Many(n, n, lift(term))


def at_least(n: int, term: Term) -> Many:
    return Many(n, None, lift(term))


def between(n: int, m: int, term: Term) -> Many:
    if m < n:
        raise ValueError(f"between({n}, {m}): upper bound below lower bound")
    return Many(n, m, lift(term))


def optional(term: Term) -> Many:
    return Many(0, 1, lift(term))

from collections.abc import Callable
from typing import Final, NewType, Self, final

Checkpoint = NewType("Checkpoint", int)

type Classifier = Callable[["Cursor"], int | None]


def to_source(text: str | bytes, /) -> bytes:
    if isinstance(text, str):
        return text.encode("utf-8")
    return bytes(text)


@final
class Cursor:
    """
    A read position within an immutable source.

    Parsers advance the cursor on success and leave it where it was on failure.
    The classifiers for letters and digits travel with the cursor, so every
    parse call carries its own configuration.
    """

    __slots__ = ("_src", "pos", "alpha", "digit")

    def __init__(
        self,
        src: bytes,
        pos: int = 0,
        *,
        alpha: Classifier | None = None,
        digit: Classifier | None = None,
    ):
        self._src: Final[bytes] = src
        self.pos: int = pos
        self.alpha: Classifier | None = alpha
        self.digit: Classifier | None = digit

    @property
    def src(self) -> bytes:
        return self._src

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self._src)

    def peek(self) -> int | None:
        if self.pos < len(self._src):
            return self._src[self.pos]
        return None

    def startswith(self, prefix: bytes) -> bool:
        return self._src.startswith(prefix, self.pos)

    def advance(self, n: int = 1) -> int:
        start = self.pos
        self.pos += n
        return start

    def save(self) -> Checkpoint:
        return Checkpoint(self.pos)

    def restore(self, checkpoint: Checkpoint) -> None:
        self.pos = checkpoint

    def fork(self) -> Self:
        return Cursor(self._src, self.pos, alpha=self.alpha, digit=self.digit)

    def join(self, cur: Self) -> None:
        self.pos = cur.pos

    def __repr__(self) -> str:
        return f"Cursor(pos={self.pos}, rest={self._src[self.pos : self.pos + 10]!r})"

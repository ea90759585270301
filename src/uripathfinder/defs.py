import dataclasses
from typing import Final, NamedTuple, Self, final

from .cursor import Classifier, Cursor, to_source
from .exc import ConfigurationError

DEFAULT_MAX_PARAMS: Final[int] = 1000


@final
class Span(NamedTuple):
    start: int
    stop: int

    @property
    def size(self) -> int:
        return self.stop - self.start

    def of(self, source: bytes) -> bytes:
        return source[self.start : self.stop]


@final
class Opts(NamedTuple):
    alpha: Classifier | None = None
    digit: Classifier | None = None
    strict_order: bool | None = None
    max_params: int | None = None

    def __call__(
        self,
        *,
        alpha: Classifier | None = None,
        digit: Classifier | None = None,
        strict_order: bool | None = None,
        max_params: int | None = None,
    ):
        return Opts(
            alpha=self.alpha if alpha is None else alpha,
            digit=self.digit if digit is None else digit,
            strict_order=self.strict_order if strict_order is None else strict_order,
            max_params=self.max_params if max_params is None else max_params,
        )


@final
@dataclasses.dataclass(frozen=True)
class Options:
    alpha: Classifier | None = None
    digit: Classifier | None = None
    strict_order: bool = False
    max_params: int = DEFAULT_MAX_PARAMS

    def __post_init__(self) -> None:
        if self.max_params < 1:
            raise ConfigurationError(f"max_params must be positive, got {self.max_params}")

    def override(self, opts: Opts | None) -> Self:
        if opts is None:
            return self
        return Options(
            alpha=opts.alpha if opts.alpha is not None else self.alpha,
            digit=opts.digit if opts.digit is not None else self.digit,
            strict_order=opts.strict_order if opts.strict_order is not None else self.strict_order,
            max_params=opts.max_params if opts.max_params is not None else self.max_params,
        )

    def cursor(self, text: str | bytes) -> Cursor:
        return Cursor(to_source(text), alpha=self.alpha, digit=self.digit)


class GrammarParser:
    """
    Common configuration surface of the URI and telephone parsers.

    Classifiers installed here only affect this parser instance; a per-call
    `opts=` overrides them for that call alone.
    """

    __slots__ = ("_options",)

    def __init__(self, opts: Opts | None = None) -> None:
        self._options: Options = Options().override(opts)

    @property
    def options(self) -> Options:
        return self._options

    def set_alpha_classifier(self, fn: Classifier | None) -> None:
        self._options = dataclasses.replace(self._options, alpha=fn)

    def set_digit_classifier(self, fn: Classifier | None) -> None:
        self._options = dataclasses.replace(self._options, digit=fn)

    def _resolve(self, opts: Opts | None) -> Options:
        return self._options.override(opts)

"""
Failures that carry a canonical status Code.

Errors built here are user-visible: both the code and the message should be
chosen from the perspective of the caller that ultimately receives them,
not of the layer that raised them. Transport layers recover the code with
`error_code` and translate it to their own status vocabulary.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional

from .codes import Code


class CodedError(ABC):
    """
    Capability of a failure that reports its own Code.

    Classification is opt-in: subclass it (as `RpcError` does) or call
    `CodedError.register(SomeError)` for an exception type whose `code`
    property already returns a `Code`. Exceptions that merely happen to have
    a `code` attribute, such as `SystemExit`, are not recognised.
    """

    @property
    @abstractmethod
    def code(self) -> Code:
        """Return the Code associated with this failure."""


class RpcError(CodedError, Exception):
    """
    An exception pairing a Code with a caller-facing message.

    `str(err)` is exactly the message: no code prefix, no decoration.
    Both fields are read-only once constructed.
    """

    def __init__(self, code: Code, message: str) -> None:
        super().__init__(message)
        self._code = code
        self._message = message

    @property
    def code(self) -> Code:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    def __str__(self) -> str:
        return self._message

    def __repr__(self) -> str:
        name = getattr(self._code, "name", None)
        code = f"Code.{name}" if name else repr(self._code)
        return f"{type(self).__name__}({code}, {self._message!r})"

    def __reduce__(self):
        # Exception pickling replays self.args, which only holds the message.
        return (type(self), (self._code, self._message))


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:
        return object.__repr__(value)


def _format_message(format: str, args: tuple[Any, ...]) -> str:
    if not args:
        return format

    # Same convention as logging: a lone mapping feeds "%(name)s" fields.
    values: Any = args
    if len(args) == 1 and isinstance(args[0], Mapping) and args[0]:
        values = args[0]

    try:
        return format % values
    except Exception:
        # Any failure, including a raising __str__ or __format__ hook.
        return " ".join([format, *(_safe_repr(arg) for arg in args)])


def new(code: Code, message: str) -> RpcError:
    """
    Create an RpcError from a code and a message.

    Code.OK is accepted but must not be used: it means success.
    """
    return RpcError(code, message)


def errorf(code: Code, format: str, *args: Any) -> RpcError:
    """
    Create an RpcError whose message is `format % args`.

    A format string that does not match its arguments never raises; the
    message falls back to the raw format followed by the argument reprs.
    """
    return RpcError(code, _format_message(format, args))


def error_code(err: Optional[BaseException]) -> Code:
    """
    Return the Code carried by `err`.

    Returns Code.OK when `err` is None and Code.UNKNOWN when `err` does not
    implement `CodedError`. Never raises and never mutates `err`.
    """
    if err is None:
        return Code.OK

    if isinstance(err, CodedError):
        return err.code
    return Code.UNKNOWN

from enum import Enum


class ErrorKind(str, Enum):
    INVOCATION = "invocation"
    EXTRACTION = "extraction"
    VALIDATION = "validation"
    TRANSPORT = "transport"
    BUSY = "busy"


class InvocationError(RuntimeError):
    """The model backend call failed (network, HTTP status or provider error)."""


class TransportError(RuntimeError):
    """The evaluation endpoint was unreachable or answered with something unexpected."""

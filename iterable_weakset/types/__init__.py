from .handle import Token, WeakHandle
from .missing import MISSING

__all__ = (
    "MISSING",
    "Token",
    "WeakHandle",
)

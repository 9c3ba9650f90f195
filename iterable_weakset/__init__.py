from .errors import (
    InvalidKeyType,
    ItemTypeError,
    ItemTypeParameterError,
    ReclamationError,
    ReclamationWarning,
)
from .types import MISSING, Token, WeakHandle
from .weakset import IterableWeakSet

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "IterableWeakSet",
    "InvalidKeyType",
    "ItemTypeError",
    "ItemTypeParameterError",
    "ReclamationError",
    "ReclamationWarning",
    "MISSING",
    "Token",
    "WeakHandle",
]

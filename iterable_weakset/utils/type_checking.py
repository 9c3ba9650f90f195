import inspect
import sys
import types
from typing import Any, Type, TypeVar, Union

# pylint: disable=protected-access
from typing_extensions import Literal as LiteralExtension

try:
    from typing import Literal
except ImportError:  # pragma: no cover
    from typing_extensions import Literal  # pylint: disable=reimported


def check_type(value: Any, item_type: Type) -> bool:
    """
    Check whether a given element `value` matches the provided `item_type`.

    Elements of weak containers are arbitrary objects, so parameterized
    generics (e.g. `Callable[[], None]`) are only checked against their origin
    type; their arguments cannot be verified without consuming or calling the
    element.
    """
    if item_type is Any or isinstance(item_type, TypeVar):
        return True

    if sys.version_info >= (3, 10) and isinstance(item_type, types.UnionType):
        return any(check_type(value, type_) for type_ in item_type.__args__)

    if hasattr(item_type, "__origin__"):  # we are dealing with a `typing` object.
        if item_type.__origin__ is Union:
            return any(check_type(value, type_) for type_ in item_type.__args__)

        if item_type.__origin__ in (Literal, LiteralExtension):
            return any(value is arg for arg in item_type.__args__)

        if item_type.__origin__ is type:
            return inspect.isclass(value) and issubclass(
                value, item_type.__args__[0]
            )

        return isinstance(value, item_type.__origin__)

    return isinstance(value, item_type)


def type_label(item_type: Type) -> str:
    """
    Generate the label used to describe `item_type` in error messages and
    representations.
    """
    if item_type is type(None):
        return "None"
    if (
        sys.version_info >= (3, 10)
        and isinstance(item_type, types.UnionType)
        or getattr(item_type, "__origin__", None) is Union
    ):
        return " | ".join(type_label(arg) for arg in item_type.__args__)
    if hasattr(item_type, "__origin__"):  # Generics
        if str(item_type.__origin__).rsplit(".", 1)[-1] == "Literal":
            return f"Literal[{', '.join(repr(arg) for arg in item_type.__args__)}]"
        label = type_label(item_type.__origin__)
        if hasattr(item_type, "__args__") and not any(
            isinstance(arg, TypeVar) for arg in item_type.__args__
        ):
            return f"{label}[{', '.join(_arg_label(arg) for arg in item_type.__args__)}]"
        return label
    if str(item_type).startswith("typing."):
        return str(item_type).replace("typing.", "", 1)
    if not inspect.isclass(item_type):
        if hasattr(item_type, "__orig_class__"):
            return type_label(item_type.__orig_class__)
        return type_label(type(item_type))
    return item_type.__name__


def _arg_label(arg: Any) -> str:
    if isinstance(arg, list):  # e.g. the argument list of `Callable[[int], str]`
        return f"[{', '.join(type_label(a) for a in arg)}]"
    if arg is Ellipsis:
        return "..."
    return type_label(arg)

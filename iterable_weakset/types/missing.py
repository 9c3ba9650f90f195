# Sentinel for unset inputs to container methods


class _MissingType(type):
    """
    This metaclass is used to create singleton falsey classes for use as missing
    placeholder values.
    """

    def __repr__(cls):
        return cls.__name__

    def __bool__(cls):
        return False

    def __call__(cls):
        return cls


class MISSING(metaclass=_MissingType):
    """
    Used to represent arguments that were not passed, which is useful when
    `None` is itself a meaningful value.
    """

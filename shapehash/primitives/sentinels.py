"""The absent-value sentinel.

Python has no native "undefined"; callers that need to say "field present but
never assigned" use UNDEFINED. Canonicalization drops it from objects.
"""


class _Undefined:
    """The absent value. Falsy, compared by identity."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED = _Undefined()

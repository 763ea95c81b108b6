"""
Shared value types for the Interchange core.
"""


class Absent:
    """
    Marker for a field or document that is not present.

    ``ABSENT`` is distinct from ``None``: a RECORD without a version and a
    RECORD whose version is ``null`` decode to different values. The remote
    storage backend also returns ``ABSENT`` when a blob does not exist.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self):
        return (Absent, ())


ABSENT = Absent()


def is_absent(value) -> bool:
    """Return True if value is the ABSENT marker."""
    return value is ABSENT

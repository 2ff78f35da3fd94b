"""Intent names reserved by the router."""

from enum import Enum


class InternalIntent(str, Enum):
    """Intent names the router itself understands."""

    UNHANDLED = "UNHANDLED"


__all__ = ["InternalIntent"]

from .controller import (  # noqa: F401
    HIGHLIGHT,
    INVALIDATES,
    SCATTER,
    InteractionController,
)

__all__ = ["SCATTER", "HIGHLIGHT", "INVALIDATES", "InteractionController"]

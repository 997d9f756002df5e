"""Progress events emitted while an EPUB is opened."""

from enum import Enum
from typing import Any, Callable, Mapping


class ParseEvent(str, Enum):
    """Checkpoints of the open sequence, in the order they fire."""

    ROOT = "root"
    METADATA = "metadata"
    MANIFEST = "manifest"
    SPINE = "spine"
    FLOW = "flow"
    TOC = "toc"
    LOADED = "loaded"


Listener = Callable[[Any], None]
Emitter = Callable[[ParseEvent, Any], None]


def prepare_emit(listeners: Mapping["ParseEvent | str", Listener] | None) -> Emitter:
    """Build an emit function from a mapping of event name to callback.

    Event names may be given as strings or ``ParseEvent`` members. An
    unknown name raises ``ValueError`` right away rather than being
    silently ignored. Events without a listener are skipped.
    """
    callbacks = {ParseEvent(name): fn for name, fn in (listeners or {}).items()}

    def emit(event: ParseEvent, payload: Any) -> None:
        callback = callbacks.get(event)
        if callback is not None:
            callback(payload)

    return emit

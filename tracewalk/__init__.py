"""
tracewalk: Event-trace validation against a tree of known-good transitions.

This package provides a small core for:
- Declaring the known-good orderings of named events as a transition tree
- Walking that tree event by event as an external producer fires events
- Resolving a one-shot completion to a terminal label, or failing with the full observed history
- Replaying recorded event logs offline and summarizing batches of outcomes

The walker is passive: it never schedules the events it consumes. It was written to check
the event sequences fired by a script loader's bytecode cache, but any producer of named
events can be validated the same way.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"

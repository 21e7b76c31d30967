"""Instrumented algorithm engines, one per family."""

from __future__ import annotations

from ..errors import InputError
from ._base import BaseEngine

# Lazy imports to avoid loading every engine at startup
_ENGINE_CLASSES: dict[str, str] = {
    "sorting": "sorting.SortingEngine",
    "searching": "searching.SearchingEngine",
    "recursion": "recursion.RecursionEngine",
    "stack": "containers.StackEngine",
    "queue": "containers.QueueEngine",
    "bst": "bst.BSTEngine",
    "graph": "graph.GraphEngine",
    "array": "arrays.ArrayEngine",
    "linked_list": "linked_list.LinkedListEngine",
}


def get_engine(family: str) -> BaseEngine:
    """Instantiate the engine for *family*.

    Raises ``InputError`` if *family* has no registered engine.
    """
    entry = _ENGINE_CLASSES.get(family)
    if entry is None:
        raise InputError(
            f"Unknown algorithm family: {family}. Available: {list(_ENGINE_CLASSES)}"
        )
    module_name, class_name = entry.split(".")
    import importlib

    mod = importlib.import_module(f".{module_name}", package=__package__)
    cls = getattr(mod, class_name)
    return cls()


SUPPORTED_FAMILIES: tuple[str, ...] = tuple(_ENGINE_CLASSES.keys())

__all__ = [
    "BaseEngine",
    "get_engine",
    "SUPPORTED_FAMILIES",
]

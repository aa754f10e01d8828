"""Class-name composition for templates."""

from __future__ import annotations

from collections.abc import Iterable, Mapping


def _tokens(value: object) -> Iterable[str]:
    if not value:
        return
    if isinstance(value, str):
        yield from value.split()
    elif isinstance(value, Mapping):
        for name, enabled in value.items():
            if enabled:
                yield from str(name).split()
    elif isinstance(value, Iterable):
        for item in value:
            yield from _tokens(item)
    else:
        yield str(value)


def cn(*inputs: object) -> str:
    """Join class names from strings, iterables and ``{name: condition}`` mappings.

    Falsy inputs are skipped. A class repeated later moves to its later
    position, so ``cn("p-2 text-sm", {"text-sm": error})`` keeps one copy.

    >>> cn("btn", None, ["btn-primary", False], {"disabled": True, "hidden": False})
    'btn btn-primary disabled'
    """
    ordered: dict[str, None] = {}
    for token in _tokens(inputs):
        ordered.pop(token, None)
        ordered[token] = None
    return " ".join(ordered)

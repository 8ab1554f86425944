"""Generic visitor over parsed form trees.

Form values are nested mappings and sequences of scalars with no depth
limit. Traversal uses an explicit stack so deep documents never hit the
interpreter recursion limit.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, MutableMapping, MutableSequence

from core.types import FormValue

ScalarRewrite = Callable[[Any], Any]


def iter_scalars(value: FormValue) -> Iterator[Any]:
    """Yield every leaf scalar in document order.

    Args:
        value: Parsed form value of any shape.

    Yields:
        Leaf values that are neither mappings nor sequences.
    """
    stack: list[Any] = [value]
    while stack:
        current = stack.pop()
        if isinstance(current, dict):
            stack.extend(reversed(list(current.values())))
        elif isinstance(current, list):
            stack.extend(reversed(current))
        else:
            yield current


def rewrite_scalars(value: FormValue, rewrite: ScalarRewrite) -> int:
    """Replace leaf scalars in place.

    Args:
        value: Mapping or sequence to mutate.
        rewrite: Called with each leaf; its return value replaces the leaf.

    Returns:
        Number of leaves whose value changed.
    """
    changed = 0
    stack: list[MutableMapping[str, Any] | MutableSequence[Any]] = []
    if isinstance(value, (dict, list)):
        stack.append(value)
    while stack:
        container = stack.pop()
        slots = container.items() if isinstance(container, dict) else enumerate(container)
        for slot, child in list(slots):
            if isinstance(child, (dict, list)):
                stack.append(child)
                continue
            replacement = rewrite(child)
            if replacement != child:
                container[slot] = replacement
                changed += 1
    return changed

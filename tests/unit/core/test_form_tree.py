"""Unit tests for the form tree visitor."""

from __future__ import annotations

from core.form_tree import iter_scalars, rewrite_scalars


def test_iter_scalars_yields_leaves_in_document_order() -> None:
    """Leaves should come out in the order they appear."""
    form = {"a": "1", "b": [{"c": "2"}, "3"], "d": {"e": ["4", ["5"]]}}

    assert list(iter_scalars(form)) == ["1", "2", "3", "4", "5"]


def test_iter_scalars_handles_nesting_beyond_recursion_limit() -> None:
    """Traversal should not depend on the interpreter recursion limit."""
    form: dict = {"leaf": "photo.jpg"}
    for depth in range(5000):
        form = {"level": [form]} if depth % 2 else {"level": form}

    assert list(iter_scalars(form)) == ["photo.jpg"]


def test_rewrite_scalars_replaces_in_place() -> None:
    """Rewrite should mutate matching leaves and count changes."""
    form = {"photo": "a.jpg", "repeat": [{"photo": "a.jpg"}, "b.jpg"], "count": 2}

    changed = rewrite_scalars(form, lambda value: "x.jpg" if value == "a.jpg" else value)

    assert changed == 2
    assert form == {"photo": "x.jpg", "repeat": [{"photo": "x.jpg"}, "b.jpg"], "count": 2}

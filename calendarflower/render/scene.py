"""Retained scene graph for the flower SVG.

The primary renderer builds a fresh ``Scene`` on every pass. Elements that
other components need to touch later (ring hit bands, petals, transient year
labels) carry a stable key derived from their ring or petal index, so a
mutation can always be found and undone regardless of which pass created the
scene.
"""

from __future__ import annotations

import html as _html
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


def _fmt_attr(value: Any) -> str:
    if isinstance(value, float):
        s = f"{value:.2f}".rstrip("0").rstrip(".")
        return "0" if s in ("-0", "") else s
    return str(value)


@dataclass
class SceneElement:
    """One SVG node with attributes, optional text and children."""

    tag: str
    attrs: Dict[str, Any] = field(default_factory=dict)
    key: Optional[str] = None
    text: Optional[str] = None
    children: List["SceneElement"] = field(default_factory=list)

    def append(self, child: "SceneElement") -> "SceneElement":
        self.children.append(child)
        return child

    def set(self, **attrs: Any) -> "SceneElement":
        """Update attributes; underscores in names become hyphens."""
        for name, value in attrs.items():
            self.attrs[name.replace("_", "-")] = value
        return self

    def iter(self) -> Iterator["SceneElement"]:
        yield self
        for child in self.children:
            yield from child.iter()

    def to_svg(self) -> str:
        attrs = "".join(
            f' {name}="{_html.escape(_fmt_attr(value), quote=True)}"'
            for name, value in self.attrs.items()
            if value is not None
        )
        if self.key is not None and "id" not in self.attrs:
            attrs = f' id="{_html.escape(self.key, quote=True)}"' + attrs
        inner = _html.escape(self.text) if self.text is not None else ""
        inner += "".join(child.to_svg() for child in self.children)
        if not inner:
            return f"<{self.tag}{attrs}/>"
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"

    def signature(self) -> Tuple:
        return (
            self.tag,
            self.key,
            tuple(sorted((k, _fmt_attr(v)) for k, v in self.attrs.items())),
            self.text,
            tuple(c.signature() for c in self.children),
        )


class Scene:
    """Keyed tree of ``SceneElement`` objects rooted at an ``<svg>`` node."""

    def __init__(self, width: float, height: float, css_class: str = "calendar-flower"):
        self.root = SceneElement(
            "svg",
            {
                "class": css_class,
                "width": width,
                "height": height,
                "viewBox": f"0 0 {_fmt_attr(width)} {_fmt_attr(height)}",
                "xmlns": "http://www.w3.org/2000/svg",
            },
        )
        self._index: Dict[str, SceneElement] = {}
        self._parents: Dict[str, SceneElement] = {}

    def add(self, element: SceneElement, parent: Optional[str] = None) -> SceneElement:
        """Attach ``element`` under the keyed ``parent`` (or the root).

        Raises:
            KeyError: If ``parent`` is unknown or ``element.key`` is taken.
        """
        container = self.root if parent is None else self._index[parent]
        for node in element.iter():
            if node.key is not None and node.key in self._index:
                raise KeyError(f"Duplicate scene key: {node.key}")
        container.append(element)
        self._register(element, container)
        return element

    def _register(self, element: SceneElement, parent: SceneElement) -> None:
        if element.key is not None:
            self._index[element.key] = element
            self._parents[element.key] = parent
        for child in element.children:
            self._register(child, element)

    def get(self, key: str) -> Optional[SceneElement]:
        return self._index.get(key)

    def has(self, key: str) -> bool:
        return key in self._index

    def remove(self, key: str) -> bool:
        """Detach the keyed element and its subtree; returns whether it existed."""
        element = self._index.get(key)
        if element is None:
            return False
        parent = self._parents[key]
        parent.children = [c for c in parent.children if c is not element]
        for node in element.iter():
            if node.key is not None:
                self._index.pop(node.key, None)
                self._parents.pop(node.key, None)
        return True

    def keys(self) -> List[str]:
        return list(self._index)

    def find_all(self, css_class: str) -> List[SceneElement]:
        return [
            el
            for el in self.root.iter()
            if css_class in str(el.attrs.get("class", "")).split()
        ]

    def signature(self) -> Tuple:
        return self.root.signature()

    def to_svg(self) -> str:
        return self.root.to_svg()

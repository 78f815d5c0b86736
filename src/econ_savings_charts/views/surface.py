"""
In-memory drawing surface.

A `Surface` holds addressable `Target`s ("stacked", "scatter"); a target is
an ordered set of named layers, each an ordered mapping of keyed `Element`s
(rects, circles, lines, text). Renderers only ever talk to this model; the
export module rasterizes it.

Keyed joins (`Layer.join`) match incoming elements to existing ones by key so
that an element that survives a re-render is *updated* (with a recorded
`Transition` from its previous attributes) instead of being recreated.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple


@dataclass
class Element:
    kind: str
    attrs: Dict[str, Any]
    key: Optional[str] = None
    title: Optional[str] = None


@dataclass(frozen=True)
class Transition:
    key: str
    start: Dict[str, Any]
    end: Dict[str, Any]
    duration_ms: int


@dataclass
class JoinResult:
    entered: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    exited: List[str] = field(default_factory=list)
    transitions: List[Transition] = field(default_factory=list)


class Layer:
    def __init__(self, name: str) -> None:
        self.name = name
        self._elements: "OrderedDict[str, Element]" = OrderedDict()
        self._auto = 0

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(list(self._elements.values()))

    def get(self, key: str) -> Optional[Element]:
        return self._elements.get(key)

    def keys(self) -> List[str]:
        return list(self._elements)

    def clear(self) -> None:
        self._elements.clear()
        self._auto = 0

    def append(self, kind: str, title: Optional[str] = None, key: Optional[str] = None, **attrs: Any) -> Element:
        if key is None:
            key = f"{self.name}-{self._auto}"
            self._auto += 1
        element = Element(kind=kind, attrs=dict(attrs), key=key, title=title)
        self._elements[key] = element
        return element

    def join(
        self,
        incoming: Sequence[Element],
        *,
        duration_ms: int = 0,
        enter_from: Optional[Dict[str, Any]] = None,
    ) -> JoinResult:
        """
        Replace the layer's content with `incoming`, matched by key.

        - key already present: attrs updated in place, transition old -> new
        - new key: element added; with `enter_from` it transitions from
          those attrs (e.g. r=0) to its final ones
        - key no longer present: element removed

        Incoming keys must be unique. Resulting order follows `incoming`.
        """
        result = JoinResult()
        next_elements: "OrderedDict[str, Element]" = OrderedDict()

        for new in incoming:
            if new.key is None:
                raise ValueError("Keyed join needs a key on every element")
            if new.key in next_elements:
                raise ValueError(f"Duplicate key in join: {new.key!r}")

            current = self._elements.get(new.key)
            if current is not None and current.kind == new.kind:
                start = dict(current.attrs)
                current.attrs = dict(new.attrs)
                current.title = new.title
                next_elements[new.key] = current
                result.updated.append(new.key)
                result.transitions.append(Transition(new.key, start, dict(new.attrs), duration_ms))
            else:
                next_elements[new.key] = Element(new.kind, dict(new.attrs), new.key, new.title)
                result.entered.append(new.key)
                if enter_from is not None:
                    start = {**new.attrs, **enter_from}
                    result.transitions.append(Transition(new.key, start, dict(new.attrs), duration_ms))

        result.exited = [k for k in self._elements if k not in next_elements]
        self._elements = next_elements
        return result


class Target:
    """One addressable drawing target with a fixed size."""

    def __init__(self, name: str, width: float, height: float) -> None:
        self.name = name
        self.width = float(width)
        self.height = float(height)
        self._layers: "OrderedDict[str, Layer]" = OrderedDict()
        self.transitions: List[Transition] = []

    def layer(self, name: str) -> Layer:
        if name not in self._layers:
            self._layers[name] = Layer(name)
        return self._layers[name]

    def has_layer(self, name: str) -> bool:
        return name in self._layers

    def layers(self) -> List[Layer]:
        return list(self._layers.values())

    def elements(self) -> List[Element]:
        return [el for layer in self._layers.values() for el in layer]

    def clear(self) -> None:
        self._layers.clear()
        self.transitions = []

    def resize(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)

    def start_transitions(self, transitions: Sequence[Transition]) -> None:
        """Pending transitions replace whatever was still running."""
        self.transitions = list(transitions)


class Surface:
    def __init__(self, sizes: Dict[str, Tuple[float, float]]) -> None:
        self._targets: "OrderedDict[str, Target]" = OrderedDict(
            (name, Target(name, w, h)) for name, (w, h) in sizes.items()
        )

    def target(self, name: str) -> Target:
        try:
            return self._targets[name]
        except KeyError:
            raise KeyError(f"No drawing target named {name!r}") from None

    def targets(self) -> List[Target]:
        return list(self._targets.values())


__all__ = ["Element", "Transition", "JoinResult", "Layer", "Target", "Surface"]

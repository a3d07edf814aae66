"""Stack of layers for nested style scopes."""

from typing import Callable, Iterator, Optional

from sgr_layers.render.layer import BASE, Code, Layer, LayerView


class LayerStack:
    """
    Nested layers, starting from BASE.

    Each push overlays a partial layer on the current top and each pop
    returns to the layer below; both return the codes that move the
    terminal between the two visible states.

    Example:
        >>> stack = LayerStack()
        >>> stack.diffpush(Layer.from_codes(1))
        [1]
        >>> stack.diffpop()
        [22]
    """

    def __init__(self) -> None:
        self._layers: list[Layer] = [BASE]

    @property
    def top(self) -> Layer:
        return self._layers[-1]

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._layers)

    def diffpush(self, layer: Optional[Layer] = None, tag: Optional[str] = None) -> list[Code]:
        """
        Push ``layer`` over the current top and return the codes to show it.

        The layer's effects run against the combined layer, with a read-only
        view of the previous top, before it is frozen.
        """
        under = self.top
        new_top = under.overlay(layer)
        if layer is not None:
            for effect in layer.effects:
                effect(LayerView(new_top), LayerView(under))
        new_top.tag = tag
        self._layers.append(new_top.freeze())
        return new_top.diff(under)

    def diffpop(self) -> list[Code]:
        """
        Pop the top layer and return the codes to show the one below.

        Popping BASE is a no-op that returns BASE's full description.
        """
        if len(self._layers) == 1:
            return self.top.codes()
        old_top = self._layers.pop()
        return self.top.diff(old_top)

    def diffpop_until(self, predicate: Callable[[Layer], bool]) -> list[Code]:
        """Pop until ``predicate(top)`` holds or only BASE is left."""
        if predicate(self.top):
            return []
        old_top = self.top
        while len(self._layers) > 1:
            self._layers.pop()
            if predicate(self.top):
                break
        return self.top.diff(old_top)

    def diffpop_until_tag(self) -> list[Code]:
        """Pop untagged layers down to the nearest tagged one."""
        return self.diffpop_until(lambda layer: layer.tag is not None)

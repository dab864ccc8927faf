"""Labels for generated code and the stack of enclosing loops."""

from __future__ import annotations

from dataclasses import dataclass, field


class SplError(Exception):
    """An error in an SPL program found during compilation."""


@dataclass(frozen=True)
class Label:
    """A named position in the generated assembly."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class LabelRegistry:
    """Generates fresh labels, records declared ones and tracks loops."""

    _declared: dict[str, Label] = field(default_factory=dict)
    _loops: list[tuple[Label, Label]] = field(default_factory=list)
    _next: int = 1

    def __init__(self):
        self._declared = {}
        self._loops = []
        self._next = 1

    def create(self) -> Label:
        """Return a new unused label named ``_L<n>``; it is not declared."""
        label = Label(f"_L{self._next}")
        self._next += 1
        return label

    def add(self, name: str, line: int) -> Label:
        """Declare a named label; redeclaring one is an error."""
        if name in self._declared:
            raise SplError(f"{line}: Label '{name}' redeclared.")
        label = Label(name)
        self._declared[name] = label
        return label

    def get(self, name: str) -> Label | None:
        """Return the declared label with this name, or None."""
        return self._declared.get(name)

    def push_loop(self, start: Label, end: Label) -> None:
        """Enter a loop whose start and end labels break/continue use."""
        self._loops.append((start, end))

    def pop_loop(self) -> None:
        """Leave the innermost loop."""
        if not self._loops:
            raise SplError("no loop to leave")
        self._loops.pop()

    def _innermost(self) -> tuple[Label, Label]:
        if not self._loops:
            raise SplError("break or continue outside a loop")
        return self._loops[-1]

    def loop_start(self) -> Label:
        """Return the start label of the innermost loop."""
        return self._innermost()[0]

    def loop_end(self) -> Label:
        """Return the end label of the innermost loop."""
        return self._innermost()[1]
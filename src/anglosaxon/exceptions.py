"""
Exception classes.

Compile errors are raised before any output is written. Resolution errors
abort a run part way through, leaving the output already written in place.
"""


class AngloSaxonError(Exception):
    pass


class CompileError(AngloSaxonError):
    pass


class UnknownDirectiveError(CompileError):
    _directive: str

    def __init__(self, directive: str):
        super().__init__(f"Unknown directive: {directive}")
        self._directive = directive

    @property
    def directive(self) -> str:
        return self._directive


class ActionBeforeScopeError(CompileError):
    _directive: str

    def __init__(self, directive: str, label: str | None = None):
        super().__init__(
            f"Cannot use {label or directive} before an event has been chosen"
        )
        self._directive = directive

    @property
    def directive(self) -> str:
        return self._directive


class UnknownFilterError(CompileError):
    _name: str

    def __init__(self, name: str):
        super().__init__(f"Unknown filter: {name!r}")
        self._name = name

    @property
    def name(self) -> str:
        return self._name


class ResolutionError(AngloSaxonError):
    pass


class MissingAttributeError(ResolutionError):
    _attribute: str
    _tag: str
    _present: tuple[str, ...]

    def __init__(self, attribute: str, tag: str, present):
        self._attribute = attribute
        self._tag = tag
        self._present = tuple(present)
        super().__init__(
            f"No attribute {attribute} found for element {tag}. "
            f"Attributes: {','.join(self._present)}"
        )

    @property
    def attribute(self) -> str:
        return self._attribute

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def present(self) -> tuple[str, ...]:
        return self._present


class AncestorDepthError(ResolutionError):
    _level: int
    _depth: int
    _attribute: str

    def __init__(self, level: int, depth: int, attribute: str):
        self._level = level
        self._depth = depth
        self._attribute = attribute
        super().__init__(
            f"Cannot read attribute {attribute} {level} level(s) up: "
            f"only {depth} ancestor(s) are open"
        )

    @property
    def level(self) -> int:
        return self._level

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def attribute(self) -> str:
        return self._attribute


class InvalidActionError(AngloSaxonError):
    """An attribute action was reached where no element attributes exist."""

    def __init__(self, action, event: str):
        super().__init__(f"{type(action).__name__} cannot be used on {event}")
        self.action = action
        self.event = event

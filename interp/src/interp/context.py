"""Evaluation context - the scoped variable environment for templates.

Each agent owns exactly one EvaluationContext. It holds:
- environments: subject objects consulted for variable lookup, most recent first
- scopes: local variables set by agent code, innermost first
- registers: values for extensions only (at least {"agent": owner})

Usage:
    context = EvaluationContext(agent)

    with context.with_subject(event):
        ...  # "{{ title }}" resolves against the event

    with context.stack():
        context["_something_"] = 42
        ...  # "{{ _something_ }}" renders 42
"""

import dataclasses
from collections.abc import Hashable, Mapping, Sequence, Set
from contextlib import contextmanager
from typing import Any, Iterator

from pydantic import BaseModel

# Not a valid identifier, so templates cannot reach the registers directly
REGISTERS_KEY = "@registers"


def to_template_value(subject: Any) -> dict[str, Any]:
    """Convert a subject into the mapping pushed onto the environment stack.

    Supports objects with a ``to_template()`` method, pydantic models,
    dataclass instances and plain mappings.
    """
    if hasattr(subject, "to_template"):
        value = subject.to_template()
    elif isinstance(subject, BaseModel):
        value = subject.model_dump()
    elif dataclasses.is_dataclass(subject) and not isinstance(subject, type):
        value = dataclasses.asdict(subject)
    else:
        value = subject

    if not isinstance(value, Mapping):
        raise TypeError(
            f"Cannot use {type(subject).__name__} as an interpolation subject; "
            f"expected a mapping, dataclass, pydantic model or an object with to_template()"
        )
    return dict(value)


def freeze(value: Any) -> Hashable:
    """Build an immutable, hashable snapshot of a value.

    Mappings keep their insertion order so two trees that differ only in
    key order produce different keys (their rendered output differs too).
    """
    if isinstance(value, Mapping):
        return ("map", tuple((freeze(k), freeze(v)) for k, v in value.items()))
    if isinstance(value, (str, bytes)):
        return value
    if isinstance(value, Sequence):
        return (type(value).__name__, tuple(freeze(v) for v in value))
    if isinstance(value, Set):
        return frozenset(freeze(v) for v in value)
    try:
        hash(value)
    except TypeError:
        return (type(value).__qualname__, repr(value))
    # 1, 1.0 and True hash alike but render differently
    return (type(value).__qualname__, value)


class EvaluationContext:
    """Push/pop scoped variable environment handed to the template engine."""

    def __init__(self, agent: Any, registers: dict[str, Any] | None = None):
        self.environments: list[dict[str, Any]] = []
        self.scopes: list[dict[str, Any]] = [{}]
        self.registers: dict[str, Any] = {"agent": agent, **(registers or {})}

    @property
    def agent(self) -> Any:
        return self.registers["agent"]

    @property
    def depth(self) -> int:
        """Number of subjects currently on the environment stack."""
        return len(self.environments)

    # Subject stack

    def push(self, subject: Any) -> None:
        self.environments.insert(0, to_template_value(subject))

    def pop(self) -> dict[str, Any]:
        if not self.environments:
            raise IndexError("pop from an empty environment stack")
        return self.environments.pop(0)

    @contextmanager
    def with_subject(self, subject: Any = None) -> Iterator["EvaluationContext"]:
        """Take ``subject`` as the current subject while the block runs.

        ``None`` leaves the stack untouched. The subject is popped on every
        exit path, including exceptions raised inside the block.
        """
        if subject is None:
            yield self
            return

        self.push(subject)
        try:
            yield self
        finally:
            self.pop()

    # Local variables

    @contextmanager
    def stack(self, variables: dict[str, Any] | None = None) -> Iterator["EvaluationContext"]:
        """Open a fresh local scope for the duration of the block."""
        self.scopes.insert(0, dict(variables or {}))
        try:
            yield self
        finally:
            self.scopes.pop(0)

    def __setitem__(self, key: str, value: Any) -> None:
        self.scopes[0][key] = value

    def __getitem__(self, key: str) -> Any:
        for scope in self.scopes:
            if key in scope:
                return scope[key]
        for environment in self.environments:
            if key in environment:
                return environment[key]
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        try:
            self[key]  # type: ignore[index]
        except KeyError:
            return False
        return True

    def to_template_vars(self) -> dict[str, Any]:
        """Flatten the context into the variables passed to Template.render."""
        variables: dict[str, Any] = {}
        for environment in reversed(self.environments):
            variables.update(environment)
        for scope in reversed(self.scopes):
            variables.update(scope)
        variables[REGISTERS_KEY] = self.registers
        return variables

    # Identity

    def snapshot(self) -> Hashable:
        """Immutable key describing the context's current contents."""
        return (
            freeze(self.environments),
            freeze(self.scopes),
            freeze(self.registers),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EvaluationContext):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    def __hash__(self) -> int:
        return hash(self.snapshot())

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(depth={self.depth}, "
            f"scopes={len(self.scopes)}, registers={sorted(self.registers)})"
        )


__all__ = [
    "EvaluationContext",
    "REGISTERS_KEY",
    "freeze",
    "to_template_value",
]

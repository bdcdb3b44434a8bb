"""Interpolation engine - render template expressions inside agent options.

Interpolatable is a mixin for any class that has:
- options: the configuration tree (strings, mappings, sequences, scalars)
- credential(name): the credential value or None

Typical use, evaluating options once per incoming event:

    for event in incoming_events:
        with agent.interpolate_with(event):
            url = agent.interpolated()["url"]

or, in one call:

    options = agent.interpolated(event)

Local variables for a single evaluation:

    with agent.interpolation_context.stack():
        agent.interpolation_context["_page_"] = 2
        options = agent.interpolated()  # "{{ _page_ }}" renders 2
"""

import logging
from collections.abc import Mapping, Sequence
from contextlib import AbstractContextManager
from enum import Enum
from typing import Any, ClassVar

from jinja2 import Environment

from interp.cache import InterpolationCache
from interp.context import EvaluationContext, freeze
from interp.environment import get_default_environment, render_template
from interp.errors import TemplatingError
from interp.validation import AgentValidationError, ValidationErrors

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """Shape of a node in a configuration tree."""
    TEXT = "text"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


def classify(value: Any) -> NodeKind:
    if isinstance(value, str):
        return NodeKind.TEXT
    if isinstance(value, Mapping):
        return NodeKind.MAPPING
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR


class Interpolatable:
    """Mixin adding option interpolation and its validation hook."""

    options: Any

    # Method names run by is_valid(), in order
    validators: ClassVar[tuple[str, ...]] = ("validate_interpolation",)

    def credential(self, name: str) -> str | None:
        raise NotImplementedError

    # State, created on first use and kept for the owner's lifetime

    @property
    def interpolation_context(self) -> EvaluationContext:
        """The owner's single evaluation context."""
        context = getattr(self, "_interpolation_context", None)
        if context is None:
            context = EvaluationContext(self)
            self._interpolation_context = context
        return context

    @property
    def interpolation_cache(self) -> InterpolationCache:
        cache = getattr(self, "_interpolation_cache", None)
        if cache is None:
            cache = InterpolationCache()
            self._interpolation_cache = cache
        return cache

    @property
    def template_environment(self) -> Environment:
        return getattr(self, "_template_environment", None) or get_default_environment()

    # Interpolation

    def interpolate_with(self, subject: Any = None) -> AbstractContextManager[EvaluationContext]:
        """Take ``subject`` as the current subject while the block runs."""
        return self.interpolation_context.with_subject(subject)

    def interpolate(self, configuration: Any, subject: Any = None) -> Any:
        """Interpolate a configuration tree, memoized per context snapshot.

        Args:
            configuration: Tree of strings, mappings, sequences and scalars
            subject: Optional current subject (e.g. an incoming event)

        Returns:
            A new tree with every string rendered. The cached tree is shared
            between calls, so callers must not mutate it.

        Raises:
            TemplatingError: A template failed to parse or render
            UndefinedVariableError: A template needs data the context lacks
        """
        with self.interpolate_with(subject):
            key = (freeze(configuration), self.interpolation_context.snapshot())
            return self.interpolation_cache.get_or_compute(
                key, lambda: self.interpolate_options(configuration)
            )

    def interpolated(self, subject: Any = None) -> Any:
        """The owner's options, interpolated."""
        return self.interpolate(self.options, subject)

    def interpolate_options(self, options: Any, subject: Any = None) -> Any:
        """Interpolate a configuration tree without consulting the cache."""
        with self.interpolate_with(subject):
            return self._walk(options)

    def _walk(self, value: Any) -> Any:
        kind = classify(value)

        if kind is NodeKind.TEXT:
            return self.interpolate_string(value)
        if kind is NodeKind.MAPPING:
            return {key: self._walk(item) for key, item in value.items()}
        if kind is NodeKind.SEQUENCE:
            items = [self._walk(item) for item in value]
            if isinstance(value, tuple):
                # namedtuples take their fields positionally
                return value._make(items) if hasattr(value, "_make") else type(value)(items)
            if isinstance(value, list):
                return type(value)(items)
            return items
        return value

    def interpolate_string(self, text: str, subject: Any = None) -> str:
        """Render a single template string (no cache lookup)."""
        with self.interpolate_with(subject):
            return render_template(
                self.template_environment,
                text,
                self.interpolation_context.to_template_vars(),
            )

    # Validation

    @property
    def errors(self) -> ValidationErrors:
        errors = getattr(self, "_errors", None)
        if errors is None:
            errors = ValidationErrors()
            self._errors = errors
        return errors

    def validate_interpolation(self) -> None:
        """Render the options without a subject and report templating errors."""
        try:
            self.interpolated()
        except TemplatingError as e:
            self.errors.add("options", f"has an error with templating: {e}")
        except Exception as e:
            # Without an incoming subject, options that expect one may fail
            # in any number of ways; that alone does not make them invalid.
            logger.debug(f"Ignoring {type(e).__name__} while validating options: {e}")

    def is_valid(self) -> bool:
        """Run every validator and report whether no errors were added."""
        self.errors.clear()
        try:
            for name in self.validators:
                getattr(self, name)()
        except TemplatingError:
            pass
        return not self.errors

    def validate(self) -> None:
        """Raise AgentValidationError if is_valid() fails."""
        if not self.is_valid():
            raise AgentValidationError(self.errors.full_messages())


__all__ = ["Interpolatable", "NodeKind", "classify"]

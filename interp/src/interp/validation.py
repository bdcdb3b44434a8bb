"""Validation errors - per-field error accumulation for agents."""

from collections import defaultdict


class ValidationErrors:
    """Field -> messages accumulator, filled by an agent's validators."""

    def __init__(self):
        self._errors: dict[str, list[str]] = defaultdict(list)

    def add(self, field: str, message: str) -> None:
        self._errors[field].append(message)

    def on(self, field: str) -> list[str]:
        return list(self._errors.get(field, []))

    def clear(self) -> None:
        self._errors.clear()

    def full_messages(self) -> list[str]:
        return [
            f"{field} {message}"
            for field, messages in self._errors.items()
            for message in messages
        ]

    def to_dict(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self._errors.items()}

    def __bool__(self) -> bool:
        return any(self._errors.values())

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._errors.values())

    def __repr__(self) -> str:
        return f"ValidationErrors({self.to_dict()!r})"


class AgentValidationError(Exception):
    """Raised when an agent fails validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Agent validation failed: {'; '.join(errors)}")


__all__ = ["ValidationErrors", "AgentValidationError"]

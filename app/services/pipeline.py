"""Request pipeline primitives.

A request is described by an immutable :class:`RequestContext`. Each step of
a :class:`Pipeline` inspects the context and returns either
:class:`Continue` (possibly with an updated context) or :class:`Terminate`
(with the response to send). The HTTP layer owns routing; the pipeline only
decides whether a request may proceed.
"""

from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from app.core.responses import ApiResponse


@dataclass(frozen=True)
class IdentityClaim:
    """Decoded access-token payload for the current request."""

    id: Any
    email: str | None
    role: str | None
    exp: int | None
    claims: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "IdentityClaim":
        return cls(
            id=payload.get("id"),
            email=payload.get("email"),
            role=payload.get("role"),
            exp=payload.get("exp"),
            claims=dict(payload),
        )


@dataclass(frozen=True)
class RequestContext:
    """What the pipeline knows about a request."""

    headers: Mapping[str, str] = field(default_factory=dict)
    body: Mapping[str, Any] | None = None
    identity: IdentityClaim | None = None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    def with_identity(self, identity: IdentityClaim) -> "RequestContext":
        return replace(self, identity=identity)


@dataclass(frozen=True)
class Continue:
    context: RequestContext


@dataclass(frozen=True)
class Terminate:
    response: ApiResponse


StepResult = Continue | Terminate
Step = Callable[[RequestContext], Awaitable[StepResult]]


class Pipeline:
    """Runs steps in order until one terminates."""

    def __init__(self, steps: Iterable[Step]):
        self.steps = list(steps)

    async def run(self, context: RequestContext) -> StepResult:
        result: StepResult = Continue(context)
        for step in self.steps:
            result = await step(result.context)
            if isinstance(result, Terminate):
                return result
        return result

# uiauto_appium/context.py
"""
@file context.py
@brief Nested step/action contexts, used for the action trace of a failed step.
"""

from __future__ import annotations
import functools
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional
from uuid import uuid4

from .actionlogger import ACTION_LOGGER


@dataclass
class ActionContext:
    """A step or an action inside a step, linked to its enclosing context."""
    action_name: str
    element_name: Optional[str] = None
    step_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    action_id: str = field(default_factory=lambda: uuid4().hex[:8])
    start_time: float = field(default_factory=time.monotonic)
    parent_context: Optional[ActionContext] = None

    @property
    def description(self) -> str:
        text = self.action_name
        if self.element_name:
            text += f" on '{self.element_name}'"
        if self.step_name:
            text += f" in step '{self.step_name}'"
        return text

    @property
    def elapsed_time(self) -> float:
        return time.monotonic() - self.start_time

    def chain(self) -> Iterator[ActionContext]:
        """This context, then each enclosing one outwards."""
        ctx: Optional[ActionContext] = self
        while ctx is not None:
            yield ctx
            ctx = ctx.parent_context

    def format_trace(self) -> str:
        lines = ["Action trace (most recent first):"]
        for depth, ctx in enumerate(self.chain()):
            marker = "  X " if depth == 0 else "  -> "
            lines.append(f"{marker}{ctx.description} [{ctx.elapsed_time:.2f}s]")
        return "\n".join(lines)


class _ThreadState(threading.local):
    def __init__(self) -> None:
        self.stack: List[ActionContext] = []
        self.last_failed: Optional[ActionContext] = None


class ActionContextManager:
    """
    Per-thread context stack.

    When an exception leaves a context, the innermost one is remembered as
    `last_failed()` until the next clear(). The runner clears it before
    every step.
    """

    _state = _ThreadState()

    @classmethod
    def current(cls) -> Optional[ActionContext]:
        stack = cls._state.stack
        return stack[-1] if stack else None

    @classmethod
    def push(cls, context: ActionContext) -> None:
        context.parent_context = cls.current()
        cls._state.stack.append(context)

    @classmethod
    def pop(cls) -> Optional[ActionContext]:
        stack = cls._state.stack
        return stack.pop() if stack else None

    @classmethod
    @contextmanager
    def action(
        cls,
        action_name: str,
        element_name: Optional[str] = None,
        step_name: Optional[str] = None,
        **metadata: Any
    ) -> Iterator[ActionContext]:
        context = ActionContext(action_name, element_name, step_name, metadata)
        cls.push(context)
        try:
            yield context
        except BaseException:
            if cls._state.last_failed is None:
                cls._state.last_failed = context
            raise
        finally:
            cls.pop()

    @classmethod
    def last_failed(cls) -> Optional[ActionContext]:
        return cls._state.last_failed

    @classmethod
    def clear(cls) -> None:
        cls._state.stack = []
        cls._state.last_failed = None


def tracked_action(action_name: Optional[str] = None) -> Callable:
    """
    Decorate an Actions method taking the element key as first argument.

    The call runs inside an action context and emits one `action_finish`
    event: status "ok", "skipped" when the method returns False, or "error".
    """
    def decorator(func: Callable) -> Callable:
        name = action_name or func.__name__

        @functools.wraps(func)
        def wrapper(self, element: str, *args: Any, **kwargs: Any) -> Any:
            step = kwargs.get("step")
            meta = {k: v for k, v in kwargs.items() if k != "step"}

            with ActionContextManager.action(name, element_name=element, step_name=step) as ctx:
                meta["action_id"] = ctx.action_id

                def finish(status: str, exc: Optional[BaseException] = None) -> None:
                    ACTION_LOGGER.log(
                        event="action_finish",
                        action=name,
                        step=step,
                        element=element,
                        status=status,
                        duration_ms=int(ctx.elapsed_time * 1000),
                        metadata=meta,
                        exception=exc,
                    )

                try:
                    result = func(self, element, *args, **kwargs)
                except Exception as exc:
                    finish("error", exc)
                    raise
                finish("skipped" if result is False else "ok")
                return result

        return wrapper

    return decorator

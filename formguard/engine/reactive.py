"""
Formguard Reactive Cells
========================

Observable cells used to feed a form controller and to expose its
results. Any input of a controller may be a plain value or a cell; the
controller reads both through `unref`.

Features:
- State: mutable observable cell
- Computed: derived cell with lazy recomputation
- Effect: side effect re-run when the cells it read change
- batch: defer effects until a group of writes is done

Example:
    from formguard.engine.reactive import State, Effect

    values = State({"email": ""})

    @Effect
    def show():
        print(values.value)

    values.value = {"email": "a@b.co"}  # re-runs show()
"""

from __future__ import annotations

import weakref
from typing import Any, Callable, Generic, List, Optional, Set, TypeVar

T = TypeVar("T")


# Tracking context
_current_effect: Optional[Any] = None
_batch_depth: int = 0
_pending_effects: Set[Any] = set()


def _get_current_effect() -> Optional[Any]:
    """Get the currently running effect for dependency tracking."""
    return _current_effect


def _set_current_effect(effect: Optional[Any]) -> None:
    """Set the currently running effect."""
    global _current_effect
    _current_effect = effect


class State(Generic[T]):
    """
    Observable cell.

    Reading `value` inside an effect subscribes that effect; writing a
    different value notifies every subscriber.

    Example:
        errors = State({})
        errors.value = {"email": "The Email is required"}
    """

    __slots__ = ("_value", "_subscribers", "_name")

    def __init__(self, initial: T, name: str = "") -> None:
        """
        Create a cell.

        Args:
            initial: Initial value
            name: Optional name for debugging
        """
        self._value = initial
        self._subscribers: Set[weakref.ref] = set()
        self._name = name

    @property
    def value(self) -> T:
        """Get current value, tracking as dependency."""
        effect = _get_current_effect()
        if effect is not None:
            self._track(effect)
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        """Set value and notify subscribers if it changed."""
        if self._value != new_value:
            self._value = new_value
            self._trigger()

    def _track(self, effect: Any) -> None:
        self._subscribers.add(weakref.ref(effect))
        effect._dependencies.add(self)

    def _trigger(self) -> None:
        """Notify all live subscribers of change."""
        live: List[Any] = []
        dead: List[weakref.ref] = []

        for ref in self._subscribers:
            subscriber = ref()
            if subscriber is not None:
                live.append(subscriber)
            else:
                dead.append(ref)

        for ref in dead:
            self._subscribers.discard(ref)

        # Invalidate computeds before effects read them
        live.sort(key=lambda s: not isinstance(s, Computed))

        if _batch_depth > 0:
            _pending_effects.update(live)
        else:
            for subscriber in live:
                subscriber._run()

    def peek(self) -> T:
        """Get value without tracking dependency."""
        return self._value

    def update(self, fn: Callable[[T], T]) -> None:
        """Update value using function."""
        self.value = fn(self._value)

    def __repr__(self) -> str:
        name = f" {self._name}" if self._name else ""
        return f"<State{name}: {self._value!r}>"


class Computed(Generic[T]):
    """
    Read-only cell derived from other cells.

    The function runs on first read and again on the first read after
    any cell it depends on changed.

    Example:
        values = State({"age": "12"})
        age = Computed(lambda: values.value["age"])
    """

    __slots__ = ("_fn", "_value", "_dirty", "_dependencies", "_name", "__weakref__")

    def __init__(self, fn: Callable[[], T], name: str = "") -> None:
        self._fn = fn
        self._value: Optional[T] = None
        self._dirty = True
        self._dependencies: Set[State] = set()
        self._name = name

    @property
    def value(self) -> T:
        """Get computed value, recalculating if dirty."""
        if self._dirty:
            self._compute()

        # Readers of a computed depend on its sources
        effect = _get_current_effect()
        if effect is not None:
            for dep in list(self._dependencies):
                dep._track(effect)

        return self._value  # type: ignore

    def _compute(self) -> None:
        self._detach()

        old_effect = _get_current_effect()
        _set_current_effect(self)
        try:
            self._value = self._fn()
            self._dirty = False
        finally:
            _set_current_effect(old_effect)

    def _detach(self) -> None:
        for dep in self._dependencies:
            dep._subscribers.discard(weakref.ref(self))
        self._dependencies.clear()

    def _run(self) -> None:
        """Invalidate on dependency change."""
        self._dirty = True

    def peek(self) -> T:
        """Get value without tracking dependency."""
        if self._dirty:
            self._compute()
        return self._value  # type: ignore

    def __repr__(self) -> str:
        name = f" {self._name}" if self._name else ""
        return f"<Computed{name}: {self._value!r}>"


class Effect:
    """
    Side effect that runs when dependencies change.

    Effects track which cells they read and re-run when any of those
    cells change.

    Example:
        controller = FormController(values)

        @Effect
        def render_errors():
            print(controller.errors.value)
    """

    __slots__ = ("_fn", "_dependencies", "_active", "_name", "__weakref__")

    def __init__(self, fn: Callable[[], Any], name: str = "") -> None:
        """
        Create effect and run it once to collect dependencies.

        Args:
            fn: Effect function
            name: Optional name for debugging
        """
        self._fn = fn
        self._dependencies: Set[State] = set()
        self._active = True
        self._name = name

        self._run()

    def _run(self) -> None:
        if not self._active:
            return

        for dep in self._dependencies:
            dep._subscribers.discard(weakref.ref(self))
        self._dependencies.clear()

        old_effect = _get_current_effect()
        _set_current_effect(self)
        try:
            self._fn()
        finally:
            _set_current_effect(old_effect)

    def stop(self) -> None:
        """Stop the effect from running."""
        self._active = False
        for dep in self._dependencies:
            dep._subscribers.discard(weakref.ref(self))
        self._dependencies.clear()

    def __repr__(self) -> str:
        name = f" {self._name}" if self._name else ""
        status = "active" if self._active else "stopped"
        return f"<Effect{name} ({status})>"


def batch(fn: Callable[[], Any]) -> Any:
    """
    Batch multiple cell writes into a single update cycle.

    Example:
        def publish():
            controller.errors.value = {}
            controller.generic_error.value = ""

        batch(publish)  # effects run once
    """
    global _batch_depth

    _batch_depth += 1
    try:
        result = fn()
    finally:
        _batch_depth -= 1

        if _batch_depth == 0:
            effects = sorted(_pending_effects, key=lambda s: not isinstance(s, Computed))
            _pending_effects.clear()

            for eff in effects:
                eff._run()

    return result


def is_ref(obj: Any) -> bool:
    """Check whether obj is an observable cell."""
    return isinstance(obj, (State, Computed))


def unref(obj: Any) -> Any:
    """Return the current value of a cell, or obj itself if it is not one."""
    if is_ref(obj):
        return obj.value
    return obj

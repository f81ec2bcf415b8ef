"""Tests for observable cells."""

from formguard.engine.reactive import Computed, Effect, State, batch, is_ref, unref


class TestState:
    """Tests for State."""

    def test_read_and_write(self):
        cell = State(1, name="count")

        cell.value = 2

        assert cell.value == 2
        assert cell.peek() == 2
        assert "count" in repr(cell)

    def test_update_applies_function(self):
        cell = State(3)

        cell.update(lambda v: v * 2)

        assert cell.value == 6


class TestEffect:
    """Tests for Effect."""

    def test_runs_immediately_and_on_change(self):
        cell = State("a")
        seen = []

        effect = Effect(lambda: seen.append(cell.value))
        cell.value = "b"

        assert seen == ["a", "b"]
        assert "active" in repr(effect)

    def test_equal_write_does_not_notify(self):
        cell = State({"x": 1})
        seen = []

        effect = Effect(lambda: seen.append(cell.value))
        cell.value = {"x": 1}

        assert len(seen) == 1
        effect.stop()

    def test_stop_detaches(self):
        cell = State(0)
        seen = []

        effect = Effect(lambda: seen.append(cell.value))
        effect.stop()
        cell.value = 1

        assert seen == [0]
        assert "stopped" in repr(effect)

    def test_batch_runs_effect_once(self):
        first = State(0)
        second = State(0)
        seen = []

        effect = Effect(lambda: seen.append((first.value, second.value)))

        def write_both():
            first.value = 1
            second.value = 2

        batch(write_both)

        assert seen == [(0, 0), (1, 2)]
        effect.stop()


class TestComputed:
    """Tests for Computed."""

    def test_recomputes_after_dependency_change(self):
        values = State({"age": "12"})
        calls = []

        def read_age():
            calls.append(1)
            return values.value["age"]

        age = Computed(read_age)

        assert age.value == "12"
        assert age.value == "12"
        assert len(calls) == 1

        values.value = {"age": "13"}

        assert age.value == "13"
        assert len(calls) == 2

    def test_effect_sees_fresh_computed_value(self):
        source = State(2)
        doubled = Computed(lambda: source.value * 2)
        seen = []

        effect = Effect(lambda: seen.append(doubled.value))
        source.value = 5

        assert seen == [4, 10]
        effect.stop()


class TestUnref:
    """Tests for is_ref and unref."""

    def test_plain_values_pass_through(self):
        payload = {"name": "x"}

        assert unref(payload) is payload
        assert unref(None) is None
        assert not is_ref(payload)

    def test_cells_are_dereferenced(self):
        state = State({"name": "x"})
        computed = Computed(lambda: {"name": state.value["name"].upper()})

        assert is_ref(state)
        assert is_ref(computed)
        assert unref(state) == {"name": "x"}
        assert unref(computed) == {"name": "X"}

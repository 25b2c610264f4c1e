"""Tests for site_freezer.registry — priority-ordered generators."""

from site_freezer.registry import GeneratorRegistry


def _gen(label):
    def generator():
        return [label]
    generator.__name__ = label
    return generator


class TestRegister:
    def test_returns_registry(self) -> None:
        registry = GeneratorRegistry()
        assert registry.register(_gen("a")) is registry

    def test_default_priority(self) -> None:
        registry = GeneratorRegistry().register(_gen("a"))
        assert registry.priorities() == [100]

    def test_negative_priority_normalised(self) -> None:
        registry = GeneratorRegistry().register(_gen("a"), -20)
        assert registry.priorities() == [20]

    def test_collision_moves_after_highest(self) -> None:
        a, b, c = _gen("a"), _gen("b"), _gen("c")
        registry = GeneratorRegistry().register(a, 100).register(b, 50).register(c, 100)
        assert registry.priorities() == [50, 100, 101]
        assert list(registry) == [b, a, c]

    def test_collision_with_lower_priority(self) -> None:
        registry = GeneratorRegistry().register(_gen("a"), 10).register(_gen("b"), 300)
        registry.register(_gen("c"), 10)
        assert registry.priorities() == [10, 300, 301]

    def test_nothing_dropped(self) -> None:
        registry = GeneratorRegistry()
        for label in "abcde":
            registry.register(_gen(label))
        assert len(registry) == 5
        assert registry.priorities() == [100, 101, 102, 103, 104]


class TestDecorator:
    def test_returns_function(self) -> None:
        registry = GeneratorRegistry()

        @registry.register(priority=5)
        def pages():
            return ["/"]

        assert pages() == ["/"]
        assert list(registry) == [pages]
        assert registry.priorities() == [5]

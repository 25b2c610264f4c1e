"""Priority-ordered registry of URL generators."""

from bisect import insort


class GeneratorRegistry:
    """Generators kept sorted by priority, lowest first.

    No two generators share a priority: registering at a taken priority
    places the generator after every other one.
    """

    def __init__(self):
        self._entries = []

    def register(self, generator=None, priority: int = 100):
        """Add ``generator`` at ``priority``; returns the registry.

        Without a generator, returns a decorator that registers the
        decorated function and hands it back unchanged.
        """
        if generator is None:
            def decorator(func):
                self.register(func, priority)
                return func
            return decorator

        priority = abs(priority)
        if priority in self.priorities():
            priority = max(self.priorities()) + 1
        insort(self._entries, (priority, generator), key=lambda entry: entry[0])
        return self

    def priorities(self) -> list[int]:
        return [priority for priority, _ in self._entries]

    def __iter__(self):
        return (generator for _, generator in self._entries)

    def __len__(self):
        return len(self._entries)

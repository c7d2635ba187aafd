"""
Tests for evostream/util/random_registry.py
"""

import threading

import pytest
import numpy as np

from evostream.util import random_registry


class TestRandomRegistry:
    """Tests for scoped and default random sources."""

    def test_using_binds_generator(self):
        """Inside using(), get_random returns the bound generator."""
        rng = np.random.default_rng(1)
        with random_registry.using(rng) as bound:
            assert bound is rng
            assert random_registry.get_random() is rng

    def test_using_seed_is_reproducible(self):
        """A seed gives the same draws every time."""
        with random_registry.using(42):
            a = random_registry.get_random().random(3)
        with random_registry.using(42):
            b = random_registry.get_random().random(3)

        np.testing.assert_array_equal(a, b)

    def test_nested_scopes_restore(self):
        """Leaving an inner scope restores the outer binding."""
        outer = np.random.default_rng(1)
        inner = np.random.default_rng(2)
        with random_registry.using(outer):
            with random_registry.using(inner):
                assert random_registry.get_random() is inner
            assert random_registry.get_random() is outer

    def test_restored_on_exception(self):
        """The previous binding is restored when the block raises."""
        before = random_registry.get_random()
        with pytest.raises(RuntimeError):
            with random_registry.using(7):
                raise RuntimeError("boom")

        assert random_registry.get_random() is before

    def test_scope_is_thread_local(self):
        """A binding in one thread is invisible in another."""
        bound = np.random.default_rng(3)
        seen = []

        def worker():
            seen.append(random_registry.get_random())

        with random_registry.using(bound):
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join()

        assert seen[0] is not bound

    def test_resolve_prefers_explicit(self):
        """An explicit generator wins over the bound one."""
        explicit = np.random.default_rng(5)
        with random_registry.using(6):
            assert random_registry.resolve(explicit) is explicit

    def test_set_random_and_reset(self):
        """set_random replaces the default; reset installs a fresh one."""
        rng = random_registry.set_random(11)
        try:
            assert random_registry.get_random() is rng
        finally:
            random_registry.reset()

        assert random_registry.get_random() is not rng

    def test_rejects_invalid_source(self):
        """Anything but a generator or an integer seed is rejected."""
        with pytest.raises(TypeError):
            with random_registry.using("seed"):
                pass

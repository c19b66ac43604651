#!/usr/bin/env python3
"""
Benchmark Instrumentation
=========================
CPU-time accounting for dictionary operations.

Timing lives outside the Dictionary: wrap an instance in TimedDictionary
and every load/check/size/unload call is charged to a Benchmark.
"""

import functools
import time
from contextlib import contextmanager
from typing import Callable, Dict

__version__ = "1.0.0"

OPERATIONS = ('load', 'check', 'size', 'unload')


class Benchmark:
    """Accumulates user+system CPU seconds per operation name."""

    def __init__(self, clock: Callable[[], float] = time.process_time):
        self._clock = clock
        self.timings: Dict[str, float] = {name: 0.0 for name in OPERATIONS}
        self.calls: Dict[str, int] = {name: 0 for name in OPERATIONS}

    @contextmanager
    def measure(self, name: str):
        """Charge the time spent inside the block to `name`."""
        before = self._clock()
        try:
            yield
        finally:
            self.timings[name] = self.timings.get(name, 0.0) + (self._clock() - before)
            self.calls[name] = self.calls.get(name, 0) + 1

    def wrap(self, name: str, func: Callable) -> Callable:
        """Decorate `func` so each call is measured under `name`."""
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with self.measure(name):
                return func(*args, **kwargs)
        return wrapper

    @property
    def total(self) -> float:
        return sum(self.timings.values())

    def to_dict(self) -> Dict[str, float]:
        result = {name: round(seconds, 4) for name, seconds in self.timings.items()}
        result['total'] = round(self.total, 4)
        return result


class TimedDictionary:
    """Dictionary decorator that times each operation."""

    def __init__(self, dictionary, benchmark: Benchmark = None):
        self.dictionary = dictionary
        self.benchmark = benchmark or Benchmark()
        for name in OPERATIONS:
            setattr(self, name, self.benchmark.wrap(name, getattr(dictionary, name)))

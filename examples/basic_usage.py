#!/usr/bin/env python3
"""
Basic usage examples for iterpipe.
"""

import logging
import random

from iterpipe import IterPipeConfig, Stream, pipe
from iterpipe import streams as s


def example_streaming():
    """Example: Filter and transform records lazily."""
    print("\n=== Stream Processing Example ===")

    data = [
        {'name': 'Alice', 'age': 25, 'score': 85},
        {'name': 'Bob', 'age': 30, 'score': 90},
        {'name': 'Charlie', 'age': 25, 'score': 78},
        {'name': 'David', 'age': 30, 'score': 92},
        {'name': 'Eve', 'age': 25, 'score': 88},
    ]

    result = Stream.from_iterable(data) \
        .filter(lambda x, i: x['age'] == 25) \
        .map(lambda x, i: {'name': x['name'], 'grade': 'A' if x['score'] >= 85 else 'B'}) \
        .to_list()

    print("Filtered and transformed data:")
    for item in result:
        print(f"  {item}")


def example_windowing():
    """Example: Group an endless sensor feed into windows."""
    print("\n=== Windowing Example ===")

    readings = s.generate(20.0, lambda value, i: round(value + random.uniform(-1, 1), 2))

    # Fixed windows of five readings
    averages = pipe(
        readings,
        s.buffer(lambda v, i, window: len(window) == 5),
        s.map(lambda window, i: round(sum(window) / len(window), 2)),
        s.take(4),
        s.unwrap(),
    )
    print(f"Window averages: {averages}")

    # Overlapping windows opened on every third reading, each three long
    windows = pipe(
        s.range(0, 10),
        s.buffer_toggle(lambda v, i: (lambda cv, ci, window: len(window) == 3) if i % 3 == 0 else False),
        s.unwrap(),
    )
    print(f"Toggled windows: {windows}")


def example_accumulation():
    """Example: Fold and replay streams."""
    print("\n=== Accumulation Example ===")

    total = pipe(s.range(1, 100), s.unwrap_reduce(lambda acc, v: acc + v))
    print(f"Sum of 1..100: {total}")

    longest = Stream.of("pipe", "stream", "fold").unwrap_reduce(
        lambda acc, word: word if len(word) > len(acc) else acc
    )
    print(f"Longest word: {longest}")

    pattern = Stream.of("on", "off").repeat().take(5).to_list()
    print(f"Blink pattern: {pattern}")


def example_distinct():
    """Example: Drop repeated events."""
    print("\n=== Distinctness Example ===")

    events = ['login', 'login', 'view', 'view', 'view', 'logout', 'login']
    print(f"Unique events: {Stream.of(*events).distinct().to_list()}")
    print(f"Event changes: {Stream.of(*events).distinct_until_changed().to_list()}")

    users = [{'id': 1, 'name': 'Alice'}, {'id': 2, 'name': 'Bob'}, {'id': 1, 'name': 'Alice B.'}]
    first_seen = pipe(users, s.distinct(lambda user: user['id']), s.map(lambda u, i: u['name']), s.unwrap())
    print(f"First record per user: {first_seen}")


def main():
    """Run all examples."""
    print("=== iterpipe Examples ===")

    logging.basicConfig(level=logging.INFO)

    # Sample memory every 1000 retained elements
    IterPipeConfig.set_defaults(state_check_interval=1000)

    example_streaming()
    example_windowing()
    example_accumulation()
    example_distinct()

    print("\n=== All examples completed! ===")


if __name__ == "__main__":
    main()

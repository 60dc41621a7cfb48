"""Lazy pull-based stream operators, sources and sinks."""

from iterpipe.streams.operators import (
    NOTHING,
    Slot,
    StreamOperator,
    MapOperator,
    FlatMapOperator,
    TapOperator,
    FilterOperator,
    FindOperator,
    EveryOperator,
    TakeOperator,
    TakeWhileOperator,
    SkipOperator,
    SkipWhileOperator,
    StartWithOperator,
    EndWithOperator,
    ElementAtOperator,
    CountOperator,
    DefaultIfEmptyOperator,
    SortOperator,
    map,
    flat_map,
    tap,
    filter,
    find,
    every,
    take,
    take_while,
    skip,
    skip_while,
    start_with,
    end_with,
    element_at,
    count,
    default_if_empty,
    sort,
)
from iterpipe.streams.windowing import (
    BufferOperator,
    BufferToggleOperator,
    buffer,
    buffer_toggle,
)
from iterpipe.streams.accumulation import (
    ReduceOperator,
    RepeatOperator,
    reduce,
    repeat,
)
from iterpipe.streams.distinctness import (
    DistinctOperator,
    DistinctUntilChangedOperator,
    distinct,
    distinct_until_changed,
)
from iterpipe.streams.sources import (
    range,
    generate,
    just,
    of,
    empty,
    zip,
    concat,
)
from iterpipe.streams.sinks import (
    for_each,
    unwrap,
    unwrap_first,
    unwrap_last,
    unwrap_reduce,
)
from iterpipe.streams.stream import Stream

__all__ = [
    "NOTHING",
    "Slot",
    "Stream",
    "StreamOperator",
    "MapOperator",
    "FlatMapOperator",
    "TapOperator",
    "FilterOperator",
    "FindOperator",
    "EveryOperator",
    "TakeOperator",
    "TakeWhileOperator",
    "SkipOperator",
    "SkipWhileOperator",
    "StartWithOperator",
    "EndWithOperator",
    "ElementAtOperator",
    "CountOperator",
    "DefaultIfEmptyOperator",
    "SortOperator",
    "BufferOperator",
    "BufferToggleOperator",
    "ReduceOperator",
    "RepeatOperator",
    "DistinctOperator",
    "DistinctUntilChangedOperator",
    "map",
    "flat_map",
    "tap",
    "filter",
    "find",
    "every",
    "take",
    "take_while",
    "skip",
    "skip_while",
    "start_with",
    "end_with",
    "element_at",
    "count",
    "default_if_empty",
    "sort",
    "buffer",
    "buffer_toggle",
    "reduce",
    "repeat",
    "distinct",
    "distinct_until_changed",
    "range",
    "generate",
    "just",
    "of",
    "empty",
    "zip",
    "concat",
    "for_each",
    "unwrap",
    "unwrap_first",
    "unwrap_last",
    "unwrap_reduce",
]

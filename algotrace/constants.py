"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

ELEMENT_ID_PREFIX = "el-"
ITEM_ID_PREFIX = "item-"
NODE_ID_PREFIX = "node-"
CALL_ID_PREFIX = "call-"
DISK_ID_PREFIX = "disk-"

DEFAULT_CAPACITY = 10

HANOI_SOURCE_ROD = "A"
HANOI_TARGET_ROD = "C"
HANOI_AUXILIARY_ROD = "B"

NOT_FOUND_INDEX = -1

DEFAULT_DELAY_MS = 100.0
MAX_DELAY_MS = 500.0

FAMILY_SORTING = "sorting"
FAMILY_SEARCHING = "searching"
FAMILY_RECURSION = "recursion"
FAMILY_STACK = "stack"
FAMILY_QUEUE = "queue"
FAMILY_BST = "bst"
FAMILY_GRAPH = "graph"
FAMILY_ARRAY = "array"
FAMILY_LINKED_LIST = "linked_list"

SORTING_ALGORITHMS: tuple[str, ...] = (
    "bubble",
    "selection",
    "insertion",
    "merge",
    "quick",
    "heap",
)

STABLE_SORTING_ALGORITHMS: tuple[str, ...] = ("bubble", "insertion", "merge")

SEARCHING_ALGORITHMS: tuple[str, ...] = (
    "linear",
    "binary",
    "jump",
    "interpolation",
    "exponential",
)

SORTED_INPUT_SEARCHES: tuple[str, ...] = (
    "binary",
    "jump",
    "interpolation",
    "exponential",
)

SAMPLE_CONTAINER_VALUES: tuple[int, ...] = (10, 20, 30, 40, 50)
SAMPLE_ARRAY_VALUES: tuple[int, ...] = (10, 20, 30, 40, 50, 60, 70, 80)
SAMPLE_BST_VALUES: tuple[int, ...] = (50, 30, 70, 20, 40, 60, 80)
SAMPLE_LIST_VALUES: tuple[int, ...] = (10, 20, 30, 40)
SAMPLE_GRAPH_NODES: tuple[str, ...] = ("A", "B", "C", "D", "E")
SAMPLE_GRAPH_EDGES: tuple[tuple[str, str, float], ...] = (
    ("A", "B", 4),
    ("A", "C", 2),
    ("B", "C", 1),
    ("B", "D", 5),
    ("C", "D", 8),
    ("C", "E", 10),
    ("D", "E", 2),
)

PATTERN_RANDOM = "random"
PATTERN_SORTED = "sorted"
PATTERN_NEARLY_SORTED = "nearly_sorted"
PATTERN_REVERSED = "reversed"
PATTERN_FEW_UNIQUE = "few_unique"

FEW_UNIQUE_VALUES: tuple[int, ...] = (20, 40, 60, 80)

PATTERNS: tuple[str, ...] = (
    PATTERN_RANDOM,
    PATTERN_SORTED,
    PATTERN_NEARLY_SORTED,
    PATTERN_REVERSED,
    PATTERN_FEW_UNIQUE,
)

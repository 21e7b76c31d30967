"""Algorithm instrumentation and playback core."""

from .run import run_algorithm  # noqa: F401
from .api import (  # noqa: F401
    sort_array,
    search_array,
    run_recursion,
    stack_operation,
    queue_operation,
    bst_operation,
    graph_traversal,
    array_operation,
    linked_list_operation,
)
from .playback import PlaybackController, PlaybackHandle, PlaybackState  # noqa: F401
from .projector import VisualState, project, project_prefix  # noqa: F401
from .run_types import PlaybackConfig, RunConfig  # noqa: F401

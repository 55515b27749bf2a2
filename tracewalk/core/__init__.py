from .errors import TracewalkError, TreeError, UnmatchedTrace, CompletionError, LateEventError, SchedulerError
from .event import Event, EventLog
from .tree import Branch, Leaf, NotFound, lookup, build_tree, iter_paths, labels, vocabulary, tree_to_dict
from .completion import Completion, Success, Failure
from .scheduling import Scheduler, LoopScheduler, ManualScheduler
from .policies import (
    ImmediateFailure,
    DelayedFailure,
    AfterTerminal,
    OriginFilter,
    AcceptAll,
    ExactOrigin,
    PredicateFilter,
    as_origin_filter,
)
from .walker import TraceWalker, WalkerConfig, Pending, Succeeded, Failed
from .evaluator import Evaluator, ReplayRequest, ReplayResult
from .metrics import OutcomeSummary, summarize

__all__ = [
    "TracewalkError",
    "TreeError",
    "UnmatchedTrace",
    "CompletionError",
    "LateEventError",
    "SchedulerError",
    "Event",
    "EventLog",
    "Branch",
    "Leaf",
    "NotFound",
    "lookup",
    "build_tree",
    "iter_paths",
    "labels",
    "vocabulary",
    "tree_to_dict",
    "Completion",
    "Success",
    "Failure",
    "Scheduler",
    "LoopScheduler",
    "ManualScheduler",
    "ImmediateFailure",
    "DelayedFailure",
    "AfterTerminal",
    "OriginFilter",
    "AcceptAll",
    "ExactOrigin",
    "PredicateFilter",
    "as_origin_filter",
    "TraceWalker",
    "WalkerConfig",
    "Pending",
    "Succeeded",
    "Failed",
    "Evaluator",
    "ReplayRequest",
    "ReplayResult",
    "OutcomeSummary",
    "summarize",
]

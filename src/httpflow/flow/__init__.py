"""Execution pipeline - classification, retry, parsing and delivery."""

from .classifier import classify, raise_for_outcome
from .observable import Flow, Subscription, SubscriptionState
from .parsers import (
    Parser,
    discard_parser,
    json_parser,
    lenient_json_parser,
    strict_json_parser,
    utf8_parser,
)
from .pipeline import RequestPipeline
from .scheduling import (
    BaseScheduler,
    ExecutorScheduler,
    ImmediateScheduler,
    LoopScheduler,
    QueueScheduler,
)

__all__ = [
    "classify",
    "raise_for_outcome",
    "Flow",
    "Subscription",
    "SubscriptionState",
    "Parser",
    "discard_parser",
    "json_parser",
    "lenient_json_parser",
    "strict_json_parser",
    "utf8_parser",
    "RequestPipeline",
    "BaseScheduler",
    "ExecutorScheduler",
    "ImmediateScheduler",
    "LoopScheduler",
    "QueueScheduler",
]

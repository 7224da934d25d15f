"""httpflow - fluent HTTP requests as cancellable, retrying flows."""

from .app import App, create_app
from .client import FlowClient
from .config import Environment, LogLevel, Settings, build_settings, settings_from_env
from .domain import (
    ClientNotInitialisedError,
    CommunicationError,
    ConfigurationError,
    DelayStrategy,
    FlowError,
    Headers,
    HTTPMethod,
    HttpFlowError,
    JsonMode,
    NonHttpResponseError,
    ParseError,
    RequestDescriptor,
    RetryFailedError,
    RetryPolicy,
    SessionInvalidatedError,
    UnsupportedStatusCodeError,
)
from .events import EventEmitter, NullEmitter
from .flow import (
    BaseScheduler,
    ExecutorScheduler,
    Flow,
    ImmediateScheduler,
    LoopScheduler,
    QueueScheduler,
    Subscription,
    discard_parser,
    json_parser,
    lenient_json_parser,
    strict_json_parser,
    utf8_parser,
)
from .infrastructure.http import AiohttpTransport, BaseTransport
from .target import Target

__all__ = [
    # Wiring
    "App",
    "create_app",
    "Settings",
    "Environment",
    "LogLevel",
    "build_settings",
    "settings_from_env",
    # Client surface
    "FlowClient",
    "Target",
    "Flow",
    "Subscription",
    "AiohttpTransport",
    "BaseTransport",
    # Schedulers
    "BaseScheduler",
    "ExecutorScheduler",
    "ImmediateScheduler",
    "LoopScheduler",
    "QueueScheduler",
    # Parsers
    "discard_parser",
    "json_parser",
    "lenient_json_parser",
    "strict_json_parser",
    "utf8_parser",
    # Domain
    "DelayStrategy",
    "Headers",
    "HTTPMethod",
    "JsonMode",
    "RequestDescriptor",
    "RetryPolicy",
    # Events
    "EventEmitter",
    "NullEmitter",
    # Errors
    "HttpFlowError",
    "ConfigurationError",
    "ClientNotInitialisedError",
    "SessionInvalidatedError",
    "FlowError",
    "CommunicationError",
    "UnsupportedStatusCodeError",
    "NonHttpResponseError",
    "ParseError",
    "RetryFailedError",
]

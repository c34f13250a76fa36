from zably_contracts.events.topics import (
    BaseEventMessage,
    EventBusConfig,
    InstallCompletedMessage,
    InstallCreatedMessage,
    InstallRequestedMessage,
    ListingPublishedMessage,
    ListingUpdatedMessage,
    RunCompletedMessage,
    TopicConfig,
    UsageRollupMessage,
    ZablyEventMessage,
    ZablyTopic,
    parse_event_message,
)

__all__ = [
    "BaseEventMessage",
    "EventBusConfig",
    "InstallCompletedMessage",
    "InstallCreatedMessage",
    "InstallRequestedMessage",
    "ListingPublishedMessage",
    "ListingUpdatedMessage",
    "RunCompletedMessage",
    "TopicConfig",
    "UsageRollupMessage",
    "ZablyEventMessage",
    "ZablyTopic",
    "parse_event_message",
]

"""
Newsletter component.

Subscriber status state machine (active / unsubscribed / bounced) and the
public subscribe/unsubscribe and admin management flows.
"""

from portfolio.components.newsletter.component import (
    EMAIL_REGEX,
    SUBSCRIBER_SORT_FIELDS,
    export_csv,
    run,
    run_delete,
    run_get,
    run_list,
    run_stats,
    run_subscribe,
    run_unsubscribe,
    run_update,
    transition,
    validate_email,
)
from portfolio.components.newsletter.models import (
    VALID_TRANSITIONS,
    DeleteSubscriberInput,
    ListSubscribersInput,
    SubscribeInput,
    SubscribeOutput,
    SubscriberFilter,
    SubscriberListOutput,
    SubscriberOutput,
    SubscriberQuery,
    SubscriberStats,
    SubscriberUpdateSchema,
    SubscribeSchema,
    UnsubscribeInput,
    UnsubscribeOutput,
    UpdateSubscriberInput,
    ValidateEmailOutput,
    can_transition,
)
from portfolio.components.newsletter.ports import SubscriberRepoPort

__all__ = [
    # Component
    "run",
    "run_subscribe",
    "run_unsubscribe",
    "run_list",
    "run_get",
    "run_update",
    "run_delete",
    "run_stats",
    "export_csv",
    # State machine
    "VALID_TRANSITIONS",
    "can_transition",
    "transition",
    # Validation
    "validate_email",
    "EMAIL_REGEX",
    "SUBSCRIBER_SORT_FIELDS",
    # Schemas
    "SubscribeSchema",
    "SubscriberUpdateSchema",
    # Input/Output
    "SubscribeInput",
    "SubscribeOutput",
    "UnsubscribeInput",
    "UnsubscribeOutput",
    "ListSubscribersInput",
    "SubscriberFilter",
    "SubscriberQuery",
    "SubscriberListOutput",
    "SubscriberOutput",
    "UpdateSubscriberInput",
    "DeleteSubscriberInput",
    "SubscriberStats",
    "ValidateEmailOutput",
    # Ports
    "SubscriberRepoPort",
]

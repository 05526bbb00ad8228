"""Provider domain - routing, predicate composition, dispatch and notification."""

from tagstore.provider.selection import (
    append_selection_args,
    concatenate_where,
    merge,
)
from tagstore.provider.router import (
    AddressRouter,
    RouteMatch,
    RouteRule,
    default_router,
)
from tagstore.provider.projection import (
    ProjectionMap,
    default_projections,
)
from tagstore.provider.notifier import (
    ChangeBus,
    ChangeNotifier,
    LoggingSink,
    NotificationSink,
)
from tagstore.provider.dispatcher import (
    CrudDispatcher,
    ResultCursor,
)
from tagstore.provider.tag_provider import TagProvider

__all__ = [
    # Predicate composition
    "merge",
    "concatenate_where",
    "append_selection_args",
    # Routing
    "AddressRouter",
    "RouteMatch",
    "RouteRule",
    "default_router",
    # Projection
    "ProjectionMap",
    "default_projections",
    # Notification
    "ChangeBus",
    "ChangeNotifier",
    "LoggingSink",
    "NotificationSink",
    # Dispatch
    "CrudDispatcher",
    "ResultCursor",
    # Call surface
    "TagProvider",
]

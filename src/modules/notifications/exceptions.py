"""Notification exceptions.

``NotificationError`` is the only error a notifier lets escape.  The
order service absorbs it after commit and records an audit row instead
of failing the request.
"""

from __future__ import annotations


class NotificationError(Exception):
    """A notification could not be delivered (includes timeouts)."""

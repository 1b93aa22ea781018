# apigestion/services/errors.py
"""Exceptions raised by the alert engine."""


class AlertError(Exception):
    """Alert could not be persisted or queried (storage failure)."""


class AlertNotFoundError(AlertError):
    """No alert matches the given id for this owner."""

    def __init__(self, alert_id, owner_id):
        super().__init__(f"Alert {alert_id} not found for user {owner_id}")
        self.alert_id = alert_id
        self.owner_id = owner_id

"""Notifications app package.

Delivers the booking update email to owners when staff post news about a
stay in progress. Delivery runs in Celery so a slow or failing mail server
never affects the booking write that triggered it.
"""

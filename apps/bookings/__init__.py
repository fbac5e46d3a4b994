"""Bookings app package.

This app is the booking admission and consistency engine: period checks,
capacity admission against the shared calendar, fee computation, the status
state machine per role, and keeping the child's denormalized booking list
in step with each booking's child reference. Every write runs in one
database transaction; notifications go out only after it commits.
"""

"""
Shared Kernel

Entities, value objects, errors and the write-batch plumbing used by the
children and bookings apps.
"""

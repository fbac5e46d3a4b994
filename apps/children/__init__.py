"""Children app package.

A child is the resource being booked. Each child keeps a denormalized list
of its booking ids, maintained by the booking write path, and cannot be
deleted while any booking still references it.
"""

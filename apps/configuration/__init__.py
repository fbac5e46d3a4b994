"""Daycare-wide settings: the place capacity and the daily fee."""

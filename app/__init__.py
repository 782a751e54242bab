"""Hostel allocation service."""

"""Ritual Sessions package.

Daily team rituals (standups, learning hours): session lifecycle, attendance
reconciliation, learning-point locking and attendance streaks. Organized by
feature modules with a thin Flask controller layer over service/repository
layers.
"""

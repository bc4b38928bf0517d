"""Patrol checkpoint system package.

Organized by feature modules (checkpoints, users, patrols, schedules, reports)
with a thin Flask controller layer over service/repository layers. The
geofence evaluator and the coverage matrix builder are pure functions with
no I/O.
"""

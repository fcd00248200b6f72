"""API route modules, each exposing an ``APIRouter`` named ``router``.

Collection routes are registered on both ``""`` and ``"/"``. In production
the frontend is mounted at ``/`` and would otherwise answer the bare
prefix (``/events``, ``/api/feedback``) before any slash redirect happens.
"""

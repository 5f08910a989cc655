"""
Features package: each sub-package encapsulates a self-contained concern.

Convention:
  features/<name>/
    __init__.py     : public API re-exports
    models.py       : data models specific to this concern
    ...             : any other modules (service, parser, view, ...)

Packages:
  store  : persistent store (Postgres + in-memory)
  queue  : feature backlog: lifecycle, priorities, derived views
  engine : engine control plane (pause/resume, policy flags)
"""

"""
appdb.observability

Observability package.

Responsibilities:
- Structured logging configuration shared by the DB layer and the HTTP surface.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Metrics/tracing exporters can be added here without touching the DB layer.

"""
appdb.api

HTTP surface exposing liveness/readiness of the shared database handle.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API owns the shared handle's lifetime (see `appdb.api.app`).

"""
appdb.api.routers

Router package; routers are imported directly from submodules.
"""


# --- Module Notes -----------------------------------------------------------
# Routers resolve the database via `appdb.api.deps`, never by importing the registry.

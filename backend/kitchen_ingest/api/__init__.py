"""API package.

This exposes router modules to simplify test imports like:
	from kitchen_ingest.api.routes.ingest import router
"""

__all__ = [
	"routes",
]

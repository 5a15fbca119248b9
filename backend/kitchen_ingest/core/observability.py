"""Sentry wiring for the ingestion API.

Everything here is a no-op until ``SENTRY_DSN`` is set, so tests and
local runs never talk to Sentry. The helpers below never raise: a
reporting problem must not turn a successful ingestion into a failure.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from kitchen_ingest.core.config import settings

logger = logging.getLogger(__name__)

_SECRET_HEADERS = {"authorization", "cookie", "set-cookie", "x-api-key"}
_initialised = False


def _before_send(event: Dict[str, Any], hint: Dict[str, Any] | None = None):
	"""Drop credentials and uploaded content from outgoing events.

	Request bodies are multipart uploads of household photos, so only
	method and URL are kept.
	"""
	req = event.get("request")
	if isinstance(req, dict):
		headers = req.get("headers")
		if isinstance(headers, dict):
			for name in [h for h in headers if h.lower() in _SECRET_HEADERS]:
				del headers[name]
		req.pop("data", None)
		req.pop("cookies", None)
	return event


def sentry_enabled() -> bool:
	return bool(settings.SENTRY_DSN)


def init_sentry(service: str) -> bool:
	"""Initialise Sentry once per process; True when it is active."""
	global _initialised
	if not sentry_enabled():
		return False
	if _initialised:
		return True
	sentry_sdk.init(
		dsn=settings.SENTRY_DSN,
		integrations=[
			FastApiIntegration(),
			LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
		],
		traces_sample_rate=float(settings.SENTRY_TRACES_SAMPLE_RATE or 0),
		environment=settings.ENVIRONMENT,
		release=settings.SENTRY_RELEASE,
		send_default_pii=False,
		before_send=_before_send,
	)
	sentry_sdk.set_tag("service", service)
	_initialised = True
	return True


def sentry_set_tags(tags: Dict[str, Any]) -> None:
	"""Tag the current scope; values are cut to short strings."""
	if not sentry_enabled():
		return
	try:
		for key, value in (tags or {}).items():
			sentry_sdk.set_tag(str(key), "" if value is None else str(value)[:128])
	except Exception:
		logger.debug("[sentry] set_tag failed", exc_info=True)


def sentry_breadcrumb(category: str, message: str, level: str = "info", data: Optional[Dict[str, Any]] = None) -> None:
	"""Record a job lifecycle step as a breadcrumb."""
	if not sentry_enabled():
		return
	try:
		sentry_sdk.add_breadcrumb(category=category, message=message, level=level, data=data or {})
	except Exception:
		logger.debug("[sentry] breadcrumb failed", exc_info=True)


def sentry_capture(exc: BaseException) -> None:
	if not sentry_enabled():
		return
	try:
		sentry_sdk.capture_exception(exc)
	except Exception:
		logger.debug("[sentry] capture failed", exc_info=True)


__all__ = ["init_sentry", "sentry_set_tags", "sentry_breadcrumb", "sentry_capture", "sentry_enabled"]

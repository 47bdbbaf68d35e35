"""aiohttp binding for the IP blocker.

The stored lists are read on every request, so the check runs in a worker
thread to keep file I/O off the event loop.

Example:
    app = web.Application()
    setup_ip_blocker(app, config_file="ipblocker.yaml")
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path

from aiohttp import web

from ipblocker.blocker import IPBlocker
from ipblocker.core.config import BlockerConfig, get_config
from ipblocker.core.logging import configure_logging
from ipblocker.security.decision import FORBIDDEN_MESSAGE

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def ip_blocker_middleware(blocker: IPBlocker) -> Callable[[web.Request, Handler], Awaitable[web.StreamResponse]]:
    """Build a middleware that answers blocked requests with 403 Forbidden."""

    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        verdict = await asyncio.to_thread(
            blocker.check,
            forwarded_for=request.headers.get("X-Forwarded-For"),
            remote_address=request.remote,
        )
        if not verdict.allowed:
            return web.Response(text=FORBIDDEN_MESSAGE, status=verdict.status_code)
        return await handler(request)

    return middleware


def setup_ip_blocker(
    app: web.Application,
    config: BlockerConfig | None = None,
    config_file: str | Path | None = None,
) -> IPBlocker | None:
    """Install the blocker on ``app``.

    Args:
        app: The application to protect.
        config: Explicit configuration. Takes precedence over ``config_file``.
        config_file: YAML or TOML file to read the configuration from. When
            neither is given, the environment-driven global config is used.

    Returns:
        The installed blocker, or None when checks are disabled.
    """
    if config is None:
        config = BlockerConfig.from_file(config_file) if config_file is not None else get_config()

    configure_logging(config.log_level)
    if not config.enabled:
        return None

    blocker = IPBlocker.from_config(config)
    app.middlewares.append(ip_blocker_middleware(blocker))
    return blocker

"""aiohttp status surface: dashboard page plus JSON endpoints."""

from __future__ import annotations

import logging

from aiohttp import web

from sol_forwarder.api.data_api import StatusAggregator

log = logging.getLogger(__name__)

AGGREGATOR_KEY = web.AppKey("aggregator", StatusAggregator)

DASHBOARD_HTML = """<!doctype html>
<html lang="en"><head><meta charset="utf-8"><title>sol-forwarder</title>
<style>body{font-family:sans-serif;background:#f5f6fa;padding:20px}
.log{background:#fff;margin:8px 0;padding:8px;border-radius:6px;border-left:5px solid #ccc}
.log.send{border-color:#007bff}.log.receive{border-color:#28a745}.log.error{border-color:#dc3545}
.log.warning{border-color:#ffc107}.log.info{border-color:#6c757d}
small{color:#555}.pre{white-space:pre-wrap;font-family:monospace;background:#f8f9fa;padding:6px;border-radius:4px}
</style></head><body>
<h1>Events</h1>
<div id="logs"></div>
<h2>Send details</h2>
<div id="details"></div>
<script>
async function load(){
  const l = await fetch('/api/logs').then(r=>r.json());
  document.getElementById('logs').innerHTML = l.map(x=>'<div class="log '+x.type+'"><b>'+x.type+'</b>: '+x.msg+'<br><small>'+new Date(x.timestamp).toLocaleString()+'</small></div>').join('');
  const d = await fetch('/api/send-details?limit=5').then(r=>r.json());
  document.getElementById('details').innerHTML = d.map(x=>'<div class="log send"><div class="pre">'+JSON.stringify(x,null,2)+'</div></div>').join('');
}
load();setInterval(load,2000);
</script></body></html>"""


async def _index(request: web.Request) -> web.Response:
    return web.Response(text=DASHBOARD_HTML, content_type="text/html")


async def _logs(request: web.Request) -> web.Response:
    return web.json_response(request.app[AGGREGATOR_KEY].get_logs())


async def _send_details(request: web.Request) -> web.Response:
    raw = request.query.get("limit")
    limit = None
    if raw is not None:
        try:
            limit = int(raw)
        except ValueError:
            return web.json_response({"error": f"Invalid limit: {raw}"}, status=400)
        if limit < 0:
            return web.json_response({"error": "limit must be >= 0"}, status=400)
    return web.json_response(request.app[AGGREGATOR_KEY].get_send_details(limit))


async def _status(request: web.Request) -> web.Response:
    return web.json_response(request.app[AGGREGATOR_KEY].get_status().to_dict())


def create_app(aggregator: StatusAggregator) -> web.Application:
    app = web.Application()
    app[AGGREGATOR_KEY] = aggregator
    app.router.add_get("/", _index)
    app.router.add_get("/api/logs", _logs)
    app.router.add_get("/api/send-details", _send_details)
    app.router.add_get("/api/status", _status)
    return app


class StatusServer:
    """Runs the status app on a TCP site alongside the daemon."""

    def __init__(self, aggregator: StatusAggregator, host: str, port: int) -> None:
        self._app = create_app(aggregator)
        self._host = host
        self._port = port
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._host, self._port)
        await site.start()
        log.info("Status page on http://%s:%d", self._host, self._port)

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None

from __future__ import annotations

from aiohttp import web

from config.defaults import HEALTH_RESPONSE_TEXT


def create_health_app(text: str = HEALTH_RESPONSE_TEXT) -> web.Application:
    async def handle_root(request: web.Request) -> web.Response:
        return web.Response(text=text)

    app = web.Application()
    app.router.add_get("/", handle_root)
    return app


async def start_health_server(port: int, *, host: str = "0.0.0.0") -> web.AppRunner:
    runner = web.AppRunner(create_health_app())
    await runner.setup()
    site = web.TCPSite(runner, host, int(port))
    await site.start()
    print(f"[HTTP] health endpoint running at http://{host}:{int(port)}/")
    return runner

"""HTTP variant: a single page showing the cgroup report."""

import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from loguru import logger

from cgroupinfo.config import CgroupConfig
from cgroupinfo.inspector import CgroupInspector
from cgroupinfo.render import render_html

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


def create_app(inspector: CgroupInspector | None = None) -> FastAPI:
    """
    Build the FastAPI app.

    The handler is a plain function so FastAPI runs it in its thread pool:
    each request blocks only its own worker for the sampling interval.
    """
    inspector = inspector or CgroupInspector()
    app = FastAPI(title="cgroupinfo", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/", response_class=HTMLResponse)
    def report_page() -> HTMLResponse:
        report = inspector.inspect()
        logger.info(f"Served report for {report.version}")
        return HTMLResponse(render_html(report), status_code=200)

    return app


def serve(config: CgroupConfig | None = None, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    logger.info(f"Listening on {host}:{port}")
    uvicorn.run(create_app(CgroupInspector(config)), host=host, port=port)

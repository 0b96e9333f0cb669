"""Demo host: a FastAPI app behind the AuthHack middleware"""

import logging

from fastapi import FastAPI
from starlette.requests import Request

from authhack.config import AuthHackConfig, settings
from authhack.middleware import AuthHackMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Raises ValidationError on a bad AUTHHACK_* value.
authhack_config = AuthHackConfig()

app = FastAPI(
    title="AuthHack demo",
    description="Echoes what a downstream service receives after credential reconciliation",
    version="1.0.0",
)

app.add_middleware(AuthHackMiddleware, config=authhack_config, name="demo")


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "AuthHack"}


@app.api_route("/echo", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def echo(request: Request):
    """Return the request as seen downstream of the middleware"""
    return {
        "method": request.method,
        "path": request.url.path,
        "query_string": request.url.query,
        "query": dict(request.query_params),
        "authorization": request.headers.get("Authorization", ""),
        "cookie": request.headers.get("Cookie", ""),
        "cookies": dict(request.cookies),
    }


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting AuthHack demo on %s:%s", settings.host, settings.port)
    uvicorn.run(
        "authhack.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import install_error_handlers
from api.routers import deepseek, flowchart, ops

# Logging configuration
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

PORT = int(os.getenv("PORT", "3001"))
CORS_ALLOW_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if origin.strip()
]

app = FastAPI(title="LexiCal")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_error_handlers(app)

app.include_router(ops.router)
app.include_router(deepseek.router)
app.include_router(flowchart.router)


if __name__ == "__main__":
    import uvicorn

    logger.info(f"LexiCal backend listening on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from air_indices.api import router
from air_indices.config import HOST, LOG_LEVEL, PORT, SIMULATOR_ENABLED
from air_indices.service import get_service

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="Environmental Indices Service", redoc_url=None)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


@app.on_event("startup")
def _startup():
    if SIMULATOR_ENABLED:
        get_service().start()
    LOGGER.info("Indices service ready on http://%s:%d/data", HOST, PORT)


@app.on_event("shutdown")
def _shutdown():
    get_service().stop()


def main():
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()

import logging

from fastapi import (
    FastAPI,
)
from fastapi.middleware.cors import CORSMiddleware

from hillcipher import __version__
from hillcipher.middleware import RateLimit
from hillcipher.routers import get_routers
from hillcipher.shared import Logger, load_config

logger = Logger(__name__, level=logging.DEBUG).get_logger()

config = load_config()


# ================================================================================
#       FastAPI Setup
# ================================================================================
app = FastAPI(title="Hill Cipher Text Service", version=__version__)

for router in get_routers():
    app.include_router(router)

origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RateLimit)


# ================================================================================
#       Server
# ================================================================================
def welcome():
    # Log server banner
    for line in config.general.title.split("\n"):
        logger.info(line)

    logger.info("Starting Hill cipher text server v%s", __version__)


def serve():
    welcome()

    import uvicorn

    uvicorn.run(
        "hillcipher.main:app",
        host=config.network.host,
        port=config.network.port,
        reload=config.network.reload,
    )


if __name__ == "__main__":
    serve()

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import auth
import ranking
from config import Settings, get_settings
from database import ScoreLedger, UserStore, make_pwd_context
from errors import register_exception_handlers

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("%s started", app.title)
    yield
    logger.info("Shutting down %s", app.title)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title=settings.APP_NAME, version=settings.VERSION, lifespan=lifespan)

    # --- Configuración de CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Almacenamiento en memoria, vive lo que vive la app ---
    app.state.settings = settings
    app.state.users = UserStore(make_pwd_context(settings.BCRYPT_ROUNDS))
    app.state.ledger = ScoreLedger()
    app.state.tokens = auth.TokenIssuer(
        settings.JWT_SECRET,
        algorithm=settings.ALGORITHM,
        lifetime=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )

    register_exception_handlers(app)
    app.include_router(auth.router)
    app.include_router(ranking.router)

    # --- Raíz ---
    @app.get("/")
    def root():
        return {"message": settings.APP_NAME, "version": settings.VERSION}

    return app


configure_logging(get_settings().LOG_LEVEL)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)

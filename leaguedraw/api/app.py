from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import Settings
from ..errors import InvalidArgumentError
from ..service import DrawService

logger = logging.getLogger(__name__)


# === API Schema ===
class DrawRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    drawer_name: str = Field(alias="drawerName", min_length=2)
    number_of_groups: int = Field(alias="numberOfGroups", gt=0)

    @field_validator("drawer_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Drawer name must be at least 2 characters")
        return value


def get_service(request: Request) -> DrawService:
    return request.app.state.service


router = APIRouter(prefix="/api/draws", tags=["Draws"])


@router.post("")
def create_draw(req: DrawRequest, service: DrawService = Depends(get_service)):
    """Run a new draw and return it with its groups."""
    try:
        result = service.create_draw(req.drawer_name, req.number_of_groups)
    except InvalidArgumentError as e:
        return JSONResponse(status_code=400, content={"detail": str(e)})
    except Exception:
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error occurred while creating draw"},
        )
    return result.to_json()


@router.get("")
def list_draws(service: DrawService = Depends(get_service)):
    try:
        results = service.list_draws()
    except Exception:
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error occurred while getting draws"},
        )
    return [result.to_json() for result in results]


@router.get("/{draw_id}")
def get_draw(draw_id: int, service: DrawService = Depends(get_service)):
    try:
        result = service.get_draw(draw_id)
    except Exception:
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error occurred while getting draw"},
        )
    if result is None:
        return JSONResponse(
            status_code=404, content={"detail": f"Draw with id {draw_id} not found"}
        )
    return result.to_json()


async def _validation_error(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": errors})


def create_app(
    service: Optional[DrawService] = None, settings: Optional[Settings] = None
) -> FastAPI:
    """Build the FastAPI application around ``service``.

    Without an explicit service one is wired from ``settings`` (or the
    environment) via :func:`leaguedraw.bootstrap.build_service`.
    """
    if service is None:
        from ..bootstrap import build_service
        from ..log import setup_logging

        settings = settings or Settings.from_env()
        setup_logging(settings.log_level)
        service = build_service(settings)

    app = FastAPI(
        title="League Draw API",
        description="Football group draw with operation event monitoring",
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.include_router(router)

    # === Health Check Endpoint ===
    @app.get("/health")
    async def health_check():
        return JSONResponse(content={"status": "ok"})

    return app


def main(settings: Optional[Settings] = None) -> None:
    import uvicorn

    settings = settings or Settings.from_env()
    uvicorn.run(
        "leaguedraw.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    main()

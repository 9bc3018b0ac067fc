from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException

from cuboid_packer.containers import BIN_PRESETS_M, PRESET_ALIASES
from cuboid_packer.errors import InvariantViolationError, ItemsDoNotFitError, TooManyItemsError, UnknownPresetError
from cuboid_packer.models import PackingResult, PackRequest
from cuboid_packer.plan import build_plan
from cuboid_packer.settings import Settings, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ASGI servers only configure their own loggers
    level = get_settings().log_level
    logging.getLogger("cuboid_packer").setLevel(level)
    logger.info("cuboid_packer log level set to %s", level)
    yield


# FastAPI app instance (exactly one)
app = FastAPI(
    title="Cuboid Packer API",
    description="3D first-fit-decreasing bin packing service",
    lifespan=lifespan,
)


def error_detail(error: str, summary: str, details: Any = None) -> dict[str, Any]:
    return {"error": error, "summary": summary, "details": details if details is not None else []}


@app.post("/pack", response_model=PackingResult)
def pack_endpoint(request: PackRequest, settings: Settings = Depends(get_settings)) -> PackingResult:
    """
    Pack items into as few identical bins as the heuristic manages.

    Input (request body):
        {
            "bin": {"length": 8, "width": 8, "height": 12},
            "items": [
                {"id": "deck", "length": 2, "width": 8, "height": 12, "quantity": 4},
                {"id": "die", "length": 8, "width": 8, "height": 8}
            ]
        }
    """
    try:
        return build_plan(request, settings)
    except ItemsDoNotFitError as e:
        logger.info("rejected request: %d item(s) do not fit", len(e.item_ids))
        raise HTTPException(
            status_code=422,
            detail=error_detail("ITEMS_DO_NOT_FIT", str(e), [str(i) for i in e.item_ids]),
        )
    except TooManyItemsError as e:
        raise HTTPException(
            status_code=413,
            detail=error_detail("TOO_MANY_ITEMS", str(e), {"count": e.count, "limit": e.limit}),
        )
    except UnknownPresetError as e:
        raise HTTPException(status_code=422, detail=error_detail("UNKNOWN_BIN_PRESET", str(e), e.valid))
    except InvariantViolationError as e:
        logger.error(f"Internal packing error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL_ERROR", str(e)))
    except ValueError as e:
        # e.g. a fractional dimension with CUBOID_PACKER_SCALAR=int
        raise HTTPException(status_code=422, detail=error_detail("INVALID_DIMENSIONS", str(e)))
    except Exception as e:
        logger.error(f"ERROR in /pack endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL_ERROR", str(e)))


@app.get("/presets")
async def presets() -> dict[str, Any]:
    """Named bin templates, in meters."""
    table = {name: list(dims) for name, dims in BIN_PRESETS_M.items()}
    table.update({alias: list(BIN_PRESETS_M[target]) for alias, target in PRESET_ALIASES.items()})
    return {"units": "m", "presets": table}


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "ok": True,
        "scalar": settings.scalar,
        "exact_fit_tolerance": str(settings.exact_fit_tolerance),
        "max_items": settings.max_items,
    }

"""Market data routes: snapshot, refresh and single-indicator probes."""

from fastapi import APIRouter, HTTPException, Request
from fastapi.encoders import jsonable_encoder

from cspi.web.models import APIResponse
from cspi.web.utils import get_engine, get_request_id

router = APIRouter()


@router.get("/snapshot", response_model=APIResponse)
async def get_snapshot(request: Request) -> APIResponse:
    """
    Latest market snapshot.

    Returns whatever the last cycle published without fetching anything.
    """
    snapshot = get_engine(request).get_current()
    return APIResponse(
        success=True,
        data=snapshot.model_dump(mode="json"),
        message="current snapshot",
        request_id=get_request_id(request),
    )


@router.post("/refresh", response_model=APIResponse)
async def refresh(request: Request) -> APIResponse:
    """
    Run one collection cycle.

    The response carries the snapshot, score breakdown, sell signals and the
    outcome of every collector. A refresh requested while another one is
    running returns ``success=false`` without touching the snapshot.
    """
    result = await get_engine(request).collect_all()
    return APIResponse(
        success=result.success,
        data=result.model_dump(mode="json"),
        message=result.error or f"collected {sum(1 for o in result.outcomes.values() if o.ok)} indicators",
        request_id=get_request_id(request),
    )


@router.get("/indicators/{name}", response_model=APIResponse)
async def probe_indicator(request: Request, name: str) -> APIResponse:
    """Run a single collector and return its value."""
    engine = get_engine(request)
    if name not in engine.collectors:
        raise HTTPException(status_code=404, detail=f"Unknown indicator '{name}'")

    value = await engine.test_indicator(name)
    if value is None:
        return APIResponse(
            success=False,
            data={"indicator": name, "value": None},
            message=f"{name} returned no value",
            request_id=get_request_id(request),
        )
    return APIResponse(
        success=True,
        data={"indicator": name, "value": jsonable_encoder(value)},
        message=f"{name} collected",
        request_id=get_request_id(request),
    )

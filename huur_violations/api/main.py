"""FastAPI lookup service."""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.security import APIKeyHeader
from pydantic import BaseModel, Field

from huur_violations.config import config, Config
from huur_violations.finders.registry import load_finders, supported_finders
from huur_violations.jobs.loader import Query, ViolationLoader

logger = logging.getLogger(__name__)

app = FastAPI(title="Huur Violations Finder API", version="0.1.0")

# API Key security (if configured)
API_KEY_HEADER = APIKeyHeader(name="X-API-KEY", auto_error=False)


def verify_api_key(api_key: Optional[str] = Depends(API_KEY_HEADER)) -> bool:
    """Verify API key if configured."""
    expected_key = config.API_KEY
    if expected_key:
        if not api_key or api_key != expected_key:
            raise HTTPException(status_code=403, detail="Invalid API key")
    return True


class FinderInfo(BaseModel):
    key: str
    name: str
    link: str


class SearchRequest(BaseModel):
    """Request model for a plate search."""
    plate: str = Field(..., min_length=1)
    state: str = Field(..., min_length=2)
    finders: Optional[list[str]] = None
    submit: bool = False


class SearchResponse(BaseModel):
    """Response model for a plate search."""
    plate: str
    state: str
    count: int
    submitted: int
    violations: list[dict]
    errors: list[str]


@app.get("/health")
async def health():
    """Health check endpoint (no auth required)."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "sink_configured": bool(config.HUUR_API_BASE),
    }


@app.get("/finders", response_model=list[FinderInfo])
async def list_finders(_: bool = Depends(verify_api_key)):
    """Registered finders."""
    return [
        FinderInfo(key=f.key, name=f.name, link=f.link)
        for f in load_finders(supported_finders())
    ]


@app.post("/violations/search", response_model=SearchResponse)
async def search_violations(request: SearchRequest, _: bool = Depends(verify_api_key)):
    """Run the finders for one plate, optionally submitting what is found."""
    finders = load_finders(request.finders)
    if request.finders and not finders:
        raise HTTPException(status_code=400, detail="No valid finders requested")

    try:
        loader = ViolationLoader(finders=finders, dry_run=not request.submit)
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e))

    query = Query(plate=request.plate.strip().upper(), state=request.state.strip().upper())
    summary = await loader.run([query], submit=request.submit)
    return SearchResponse(
        plate=query.plate,
        state=query.state,
        count=len(summary.violations),
        submitted=summary.submitted,
        violations=[v.to_payload() for v in summary.violations],
        errors=[f"{e.finder_name}: {e.message}" for e in summary.errors],
    )


if __name__ == "__main__":
    import uvicorn
    from huur_violations.logging_conf import setup_logging

    setup_logging()
    Config.validate(require_sink=False)
    uvicorn.run(app, host="0.0.0.0", port=8000)

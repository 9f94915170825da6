"""FastAPI server exposing the one-shot generation trigger."""
import secrets
from typing import Optional
from fastapi import Depends, FastAPI, Header, HTTPException
from synthlead import __version__
from synthlead.agents.orchestrator import Orchestrator
from synthlead.config import ADMIN_SECRET
from synthlead.errors import InsufficientCorpus, PersistenceError, ProviderError
from synthlead.memory.corpus import LeadStore
from synthlead.server.schemas import ErrorDetail, GenerateLeadResponse
from synthlead.utils.logging import get_logger

logger = get_logger(__name__)

# Global state
_orchestrator: Optional[Orchestrator] = None

app = FastAPI(
    title="Synthetic Lead API",
    description="Generates unique synthetic community comments",
    version=__version__,
)


def get_orchestrator() -> Orchestrator:
    """Get or create the shared orchestrator."""
    global _orchestrator
    if _orchestrator is None:
        store = LeadStore()
        _orchestrator = Orchestrator(corpus=store, sink=store)
    return _orchestrator


def get_admin_secret() -> Optional[str]:
    return ADMIN_SECRET


def require_admin(
    authorization: Optional[str] = Header(default=None),
    admin_secret: Optional[str] = Depends(get_admin_secret),
):
    """Static bearer-token check."""
    if not admin_secret:
        logger.error("ADMIN_SECRET not configured; rejecting request")
        raise HTTPException(status_code=401, detail="Unauthorized")
    expected = f"Bearer {admin_secret}"
    if authorization is None or not secrets.compare_digest(authorization, expected):
        raise HTTPException(status_code=401, detail="Unauthorized")


@app.post(
    "/generate-lead",
    response_model=GenerateLeadResponse,
    dependencies=[Depends(require_admin)],
)
def generate_lead(
    dry_run: bool = False,
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    """Run one generation cycle."""
    try:
        result = orchestrator.run_cycle(dry_run=dry_run)
    except InsufficientCorpus as e:
        logger.error(str(e))
        detail = ErrorDetail(
            error=str(e),
            kind="insufficient_corpus",
            available=e.available,
            required=e.required,
        )
        raise HTTPException(status_code=409, detail=detail.model_dump())
    except ProviderError as e:
        logger.error(f"Provider error: {e}")
        raise HTTPException(
            status_code=502,
            detail=ErrorDetail(error=str(e), kind="provider_error").model_dump(),
        )
    except PersistenceError as e:
        logger.error(f"Persistence error: {e}")
        raise HTTPException(
            status_code=500,
            detail=ErrorDetail(error=str(e), kind="persistence_error").model_dump(),
        )

    return GenerateLeadResponse.from_result(result)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

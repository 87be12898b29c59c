from fastapi import FastAPI, Depends, HTTPException, Query
from pydantic import BaseModel
from typing import List, Optional

from vsm_engine.application.settings import get_settings, Settings
from vsm_engine.application.log_setup import setup_logging
from vsm_engine.application.services.documents import Document
from vsm_engine.application.services.errors import NormalizationError
from vsm_engine.application.services.vsm_service import VectorSpaceModel
from loguru import logger

# Configure logging once
setup_logging()

app = FastAPI(title="Vector Space Model Engine (TF-IDF + cosine)")

# --- Dependencies ---
def settings_dep() -> Settings:
    return get_settings()

# Build a single in-memory model instance for the app lifetime
_vsm: VectorSpaceModel | None = None
def vsm_dep(settings: Settings = Depends(settings_dep)) -> VectorSpaceModel:
    global _vsm
    # Lazy initialization; build on first request
    if _vsm is None:
        _vsm = VectorSpaceModel.build(settings)
    return _vsm


# --- Schemas ---
class DocumentIn(BaseModel):
    text: str
    label: str

class DocumentOut(BaseModel):
    text: str
    label: str

class SearchOut(BaseModel):
    query: str
    match: Optional[DocumentOut] = None


# --- Endpoints ---
@app.get("/", tags=["meta"])
def root(settings: Settings = Depends(settings_dep), vsm: VectorSpaceModel = Depends(vsm_dep)):
    return {
        "ok": True,
        "app_name": settings.app_name,
        "environment": settings.app_env,
        "debug": settings.debug,
        "documents": vsm.count(),
    }

@app.post("/train", tags=["vsm"])
def train(items: List[DocumentIn], vsm: VectorSpaceModel = Depends(vsm_dep)):
    # documents are trained one by one; each one is all-or-nothing on its own
    trained = 0
    for it in items:
        try:
            vsm.train(Document(text=it.text, label=it.label))
        except NormalizationError as e:
            logger.warning("Training failed for label='{}': {}", it.label, e)
            raise HTTPException(
                status_code=422,
                detail=f"Training failed for label {it.label!r} after {trained} document(s): {e}",
            )
        trained += 1
    return {"trained": trained}

@app.get("/search", tags=["vsm"], response_model=SearchOut)
def search(q: str = Query(..., description="Query sentence"), vsm: VectorSpaceModel = Depends(vsm_dep)):
    try:
        doc = vsm.search(q)
    except NormalizationError as e:
        logger.warning("Search failed for q='{}': {}", q, e)
        raise HTTPException(status_code=422, detail=f"Search failed: {e}")

    # no match is a normal, empty answer
    if doc is None:
        return SearchOut(query=q, match=None)
    return SearchOut(query=q, match=DocumentOut(text=doc.text, label=doc.label))

@app.get("/stats", tags=["meta"])
def stats(vsm: VectorSpaceModel = Depends(vsm_dep)):
    return {"documents": vsm.count(), "terms": vsm.term_count()}

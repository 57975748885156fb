"""
Markov Chain Router
Train chains from text, generate text, export/import serialized chains
"""

import logging
import random
import threading
from collections import OrderedDict
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from malarkey.config import settings
from malarkey.services.chain import Chain
from malarkey.services.chain_builder import ChainBuilder, prepare_tokens, token_stats
from malarkey.services.errors import CorruptModel, InvalidInput, MarkovError
from malarkey.services.text_generator import StopConditions, TextGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/markov", tags=["markov"])

# In-memory chain cache, least recently used evicted first
MODEL_CACHE: "OrderedDict[str, Chain]" = OrderedDict()
_CACHE_LOCK = threading.Lock()


class TrainRequest(BaseModel):
    text: str
    coherence: int = settings.DEFAULT_COHERENCE
    ignore_line_breaks: bool = False
    model_name: str = "default"


class GenerateRequest(BaseModel):
    model_name: str = "default"
    max_paragraphs: Optional[int] = None
    max_sentences: Optional[int] = None
    max_words: Optional[int] = None
    word_separator: str = settings.DEFAULT_WORD_SEPARATOR
    paragraph_separator: str = settings.DEFAULT_PARAGRAPH_SEPARATOR
    seed: Optional[int] = None


class ImportRequest(BaseModel):
    payload: str


def remember_chain(name: str, chain: Chain):
    """Store a chain under a name, evicting the oldest entries if full."""
    with _CACHE_LOCK:
        MODEL_CACHE[name] = chain
        MODEL_CACHE.move_to_end(name)
        while len(MODEL_CACHE) > settings.MAX_CACHED_CHAINS:
            evicted, _ = MODEL_CACHE.popitem(last=False)
            logger.info(f"[Markov] Evicted chain '{evicted}' from cache")


def get_chain(name: str) -> Chain:
    with _CACHE_LOCK:
        chain = MODEL_CACHE.get(name)
        if chain is None:
            raise HTTPException(status_code=404, detail="model not found, train first")
        MODEL_CACHE.move_to_end(name)
        return chain


@router.post("/train")
async def train(req: TrainRequest):
    if settings.MAX_CORPUS_CHARS is not None and len(req.text) > settings.MAX_CORPUS_CHARS:
        raise HTTPException(status_code=413, detail="text is too large")

    tokens = prepare_tokens(req.text, req.ignore_line_breaks)
    try:
        chain = ChainBuilder().build(tokens, req.coherence)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))

    remember_chain(req.model_name, chain)
    stats = token_stats(tokens)
    logger.info(
        f"[Markov] Trained '{req.model_name}': {stats.word_count} words, "
        f"{len(chain)} states, coherence {chain.coherence}"
    )
    return {
        "ok": True,
        "model": req.model_name,
        "coherence": chain.coherence,
        "states": len(chain),
        "starting_states": len(chain.starting_states()),
        "stats": {
            "paragraphs": stats.paragraph_count,
            "words": stats.word_count,
            "unique_tokens": stats.unique_tokens,
        },
    }


@router.post("/generate")
async def generate(req: GenerateRequest):
    chain = get_chain(req.model_name)
    stop = StopConditions(req.max_paragraphs, req.max_sentences, req.max_words).with_defaults()
    rng = random.Random(req.seed) if req.seed is not None else None
    generator = TextGenerator(rng=rng, max_iterations=settings.generation_iteration_cap)

    try:
        text = generator.generate(chain, stop, req.word_separator, req.paragraph_separator)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except MarkovError as e:
        logger.warning(f"[Markov] Generation failed for '{req.model_name}': {e}")
        raise HTTPException(status_code=409, detail=str(e))

    return {"ok": True, "data": {"text": text}}


@router.get("/models")
async def list_models():
    with _CACHE_LOCK:
        names = list(MODEL_CACHE)
    return {"ok": True, "data": {"models": names}}


@router.get("/models/{name}/export")
async def export_model(name: str):
    chain = get_chain(name)
    return {"ok": True, "data": {"payload": chain.serialize().decode("utf-8")}}


@router.post("/models/{name}/import")
async def import_model(name: str, req: ImportRequest):
    try:
        chain = Chain.deserialize(req.payload)
    except CorruptModel as e:
        raise HTTPException(status_code=422, detail=str(e))

    remember_chain(name, chain)
    return {"ok": True, "model": name, "coherence": chain.coherence, "states": len(chain)}


@router.delete("/models/{name}")
async def delete_model(name: str):
    with _CACHE_LOCK:
        if MODEL_CACHE.pop(name, None) is None:
            raise HTTPException(status_code=404, detail="model not found")
    return {"ok": True, "model": name}

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from loanfx.core.config import settings
from loanfx.api.routes.evolution import router as evolution_router
from loanfx.api.routes.balances import router as balances_router

logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(title="loanfx")

origins = [o.strip() for o in (settings.cors_origins or "").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
@app.get("/api/health")
def health():
    return {"status": "ok"}

app.include_router(evolution_router)
app.include_router(balances_router)

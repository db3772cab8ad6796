from fastapi import FastAPI

from leadrelay.routes import health, lead

# CORS headers are set by the /lead route itself, preflights included.
app = FastAPI(title="Lead Relay API", version="0.1.0")

app.include_router(health.router)
app.include_router(lead.router)

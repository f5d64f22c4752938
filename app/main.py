from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.impact_endpoints import router as impact_router
from app.core.config import settings

app = FastAPI(
    title=settings.app_name,
    description="API for estimating the environmental impact of sustainable habits",
    version="1.0.0"
)

# --- CORS: allow the frontend to call this API ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],          # tighten in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(impact_router, prefix=settings.api_prefix)

@app.get("/")
def read_root():
    return {"message": "Welcome to the EcoHabit impact API!"}

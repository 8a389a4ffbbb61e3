from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import get_settings
from core.exceptions import register_exception_handlers
from app.startup import configure_logging, run_startup_checks

from modules.businesses.routers.business_router import router as business_router
from modules.reviews.routers.reviews_router import router as reviews_router
from modules.analytics.routers.review_analytics_router import router as analytics_router

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    run_startup_checks()
    yield


app = FastAPI(
    title="Review Collection Backend",
    description="Collects star ratings, routes happy customers to public review "
    "platforms and keeps daily review analytics per business.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(business_router)
app.include_router(reviews_router)
app.include_router(analytics_router)


@app.get("/", tags=["health"])
def read_root():
    return {"status": "ok", "message": "Review backend is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

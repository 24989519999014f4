from fastapi import FastAPI

from src.api.routes.jobs import router as jobs_router

app = FastAPI(
    title="Chat-Log Analytics API",
    description="Map-reduce statistics over day-partitioned chat logs",
    version="0.1.0",
)

app.include_router(jobs_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}

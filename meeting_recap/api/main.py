from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from meeting_recap.api.routes.process import router as process_router
from meeting_recap.config import get_settings
from meeting_recap.logging_config import setup_logging

setup_logging(get_settings().log_level)

app = FastAPI(
    title="Meeting Recap API",
    description="Structured summaries, decisions, open questions and tasks from meeting transcripts",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(process_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}

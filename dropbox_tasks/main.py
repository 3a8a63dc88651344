from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import logging

from dropbox_tasks import config

# Configure logging
config.configure_logging()
logger = logging.getLogger(__name__)

# Import API routers
from dropbox_tasks.api import storage, tasks

# Create FastAPI app
app = FastAPI(title="Dropbox Tasks")

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
app.include_router(storage.router, prefix="/api/storage", tags=["storage"])


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("dropbox_tasks.main:app", host="0.0.0.0", port=8000, reload=True)

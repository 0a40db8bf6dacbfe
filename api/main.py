# api/main.py
import sys
import asyncio

# Fix for Windows: Use SelectorEventLoop instead of ProactorEventLoop
# This is required for Playwright subprocess creation to work
if sys.platform == 'win32':
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .routes import spec_sheet_routes, artifact_routes

app = FastAPI(title="Spec Sheet API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(spec_sheet_routes.router, prefix="/api")
app.include_router(artifact_routes.router, prefix="/api")

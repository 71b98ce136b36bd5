"""
ThreadNotes FastAPI Application

A REST API server for the ThreadNotes store.
Provides endpoints for listing, creating, updating, deleting and reordering notes.
The caller's identity is taken from the X-User-Id header.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from threadnotes.config import Config
from threadnotes.core.database.base import Database
from threadnotes.core.factory import DatabaseFactory
from threadnotes.core.notes_store import NotesStore
from threadnotes.models import DEFAULT_COLOR, Note, NoteUpdate, ReorderItem
from threadnotes.utils.exceptions import (
    NoteNotFoundOrUnauthorizedError,
    PartialOwnershipError,
    ThreadNotesError,
    ValidationError,
)
from threadnotes.utils.logger import get_logger, setup_logging

# Global store instance
store: NotesStore | None = None
database: Database | None = None
logger = get_logger(__name__)


# Pydantic models for API
class CreateNoteRequest(BaseModel):
    """Request model for creating a note."""

    thread_id: str = Field(..., min_length=1, description="Thread the note belongs to")
    content: str = Field(..., description="Note text")
    color: str = Field(default=DEFAULT_COLOR)
    is_pinned: bool | None = Field(default=False)


class ReorderRequest(BaseModel):
    """Request model for a batch reorder."""

    notes: list[ReorderItem] = Field(default_factory=list)


class SuccessResponse(BaseModel):
    """Boolean operation result."""

    success: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    store_initialized: bool


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global store, database

    config = Config.from_env()

    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting ThreadNotes server")
    logger.info("Configuration: Database={}:{}", config.database.backend, config.database.path)

    database = DatabaseFactory.create(config)
    await database.initialize()
    store = NotesStore(database)
    logger.info("ThreadNotes store initialized")

    yield

    logger.info("Shutting down ThreadNotes server")
    await database.close()
    store = None
    database = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="ThreadNotes API",
    description="User and thread scoped notes with manual ordering",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NoteNotFoundOrUnauthorizedError)
async def not_found_handler(request: Request, exc: NoteNotFoundOrUnauthorizedError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(PartialOwnershipError)
async def partial_ownership_handler(request: Request, exc: PartialOwnershipError):
    return JSONResponse(
        status_code=403,
        content={"detail": exc.message, "note_ids": exc.note_ids},
    )


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.exception_handler(ThreadNotesError)
async def store_error_handler(request: Request, exc: ThreadNotesError):
    logger.error("Store error on {}: {}", request.url.path, exc.message)
    return JSONResponse(status_code=500, content={"detail": exc.message})


def get_store() -> NotesStore:
    if not store:
        raise HTTPException(status_code=503, detail="Store not initialized")
    return store


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if store else "initializing",
        store_initialized=store is not None,
    )


@app.get("/notes", response_model=list[Note])
async def list_notes(x_user_id: str = Header(...)):
    """List the caller's notes, pinned first, then by order, newest first."""
    return await get_store().list_notes(x_user_id)


@app.get("/threads/{thread_id}/notes", response_model=list[Note])
async def list_thread_notes(thread_id: str, x_user_id: str = Header(...)):
    """List the caller's notes in one thread."""
    return await get_store().list_thread_notes(x_user_id, thread_id)


@app.post("/notes", response_model=Note, status_code=201)
async def create_note(request: CreateNoteRequest, x_user_id: str = Header(...)):
    """Create a note at the end of the caller's manual order."""
    return await get_store().create_note(
        user_id=x_user_id,
        thread_id=request.thread_id,
        content=request.content,
        color=request.color,
        is_pinned=request.is_pinned,
    )


@app.patch("/notes/{note_id}", response_model=Note)
async def update_note(note_id: str, request: NoteUpdate, x_user_id: str = Header(...)):
    """
    Partially update a note.

    Only fields present in the request body change. Unknown fields,
    including id, user_id and thread_id, are rejected.
    """
    return await get_store().update_note(x_user_id, note_id, request)


@app.delete("/notes/{note_id}", response_model=SuccessResponse)
async def delete_note(note_id: str, x_user_id: str = Header(...)):
    """Delete a note owned by the caller."""
    return SuccessResponse(success=await get_store().delete_note(x_user_id, note_id))


@app.post("/notes/reorder", response_model=SuccessResponse)
async def reorder_notes(request: ReorderRequest, x_user_id: str = Header(...)):
    """
    Apply a batch of order/pin changes atomically.

    Fails with 403 and the offending IDs if any note is not the caller's.
    """
    return SuccessResponse(success=await get_store().reorder_notes(x_user_id, request.notes))


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "ThreadNotes API",
        "version": "1.0.0",
        "description": "User and thread scoped notes with manual ordering",
        "docs": "/docs",
        "health": "/health",
    }

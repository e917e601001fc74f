"""
Camera Service - Main FastAPI Application
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))

from api.exceptions import register_exception_handlers  # noqa: E402
from api.routers import camera, picker, system  # noqa: E402
from config import Settings, get_settings  # noqa: E402
from core.camera_picker import OpenCVCameraPicker  # noqa: E402
from core.capture_controller import CaptureController  # noqa: E402
from core.constants import SystemConstants  # noqa: E402
from core.enums import SourceType  # noqa: E402
from core.file_cache import FileCacheManager  # noqa: E402
from core.media_picker import SelectionPicker  # noqa: E402
from core.output_formatter import OutputFormatter  # noqa: E402
from services.camera_service import CameraService  # noqa: E402

# Get configuration
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.system.log_level.upper(), logging.INFO),
    format=SystemConstants.LOG_FORMAT,
)
logger = logging.getLogger(__name__)

# Suppress watchfiles debug messages
logging.getLogger("watchfiles").setLevel(logging.WARNING)


def init_state(app: FastAPI, settings: Settings):
    """Create the managers and the camera service and store them on app state"""
    file_cache = FileCacheManager(
        root_dir=settings.storage.root_dir,
        photo_dir_name=settings.storage.photo_dir_name,
        video_dir_name=settings.storage.video_dir_name,
        file_prefix=settings.storage.file_prefix,
        max_photo_files=settings.storage.max_photo_files,
        max_video_files=settings.storage.max_video_files,
        enforce_limit=settings.storage.enforce_cache_limit,
    )
    file_cache.ensure_directories()

    selection_picker = SelectionPicker()
    camera_picker = OpenCVCameraPicker(
        devices=settings.capture.camera_devices,
        video_duration_s=settings.capture.video_duration_s,
        video_fps=settings.capture.video_fps,
    )

    capture_controller = CaptureController(
        pickers={
            SourceType.CAMERA: camera_picker,
            SourceType.PHOTO_LIBRARY: selection_picker,
            SourceType.SAVED_ALBUM: selection_picker,
        },
        formatter=OutputFormatter(file_cache),
        session_timeout_s=settings.capture.session_timeout_s,
    )

    app.state.file_cache = file_cache
    app.state.selection_picker = selection_picker
    app.state.capture_controller = capture_controller
    app.state.camera_service = CameraService(capture_controller, file_cache)
    app.state.config = settings.to_dict()
    app.state.debug = settings.system.debug


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    # Startup
    logger.info("Starting Camera Service...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")

    init_state(app, settings)
    logger.info("All managers initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down Camera Service...")
    try:
        await app.state.capture_controller.shutdown()
    except Exception as e:
        logger.error(f"Error during cleanup: {e}")

    logger.info("Server shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Camera Service",
    description="Camera capture, photo library selection and media cache for web clients",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for the web client
if settings.api.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register exception handlers
register_exception_handlers(app)
app.add_exception_handler(StarletteHTTPException, camera.method_not_allowed_handler)

# Include routers
app.include_router(camera.router, prefix=camera.PREFIX, tags=["Camera"])
app.include_router(picker.router, prefix="/camera-picker", tags=["Picker"])
app.include_router(system.router, prefix="/api/system", tags=["System"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "name": "Camera Service",
        "status": "running",
        "version": "1.0.0",
        "endpoints": {
            "camera": "/camera",
            "picker": "/camera-picker",
            "system": "/api/system",
            "docs": "/docs",
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "services": {
            "file_cache": getattr(app.state, "file_cache", None) is not None,
            "capture_controller": getattr(app.state, "capture_controller", None) is not None,
            "camera_service": getattr(app.state, "camera_service", None) is not None,
        },
    }


# Error handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": f"Internal server error: {str(exc)}"})


def run():
    """Run the server with uvicorn"""
    server_config = uvicorn.Config(
        "main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        log_level="info",
        loop="asyncio",
    )
    server = uvicorn.Server(server_config)

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        logger.info("Server exiting...")


if __name__ == "__main__":
    run()

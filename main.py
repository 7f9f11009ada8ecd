import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from settings.config import settings
from db.db_operation import create_indexes
from core.exceptions import AppException, app_exception_handler, request_validation_handler, global_exception_handler
from services.storage import ensure_upload_dir
from utils.logger import get_logger
from routes import auth, menu_routes, booking_routes, contact_routes, upload_routes

logger = get_logger("main")

app = FastAPI(title="Restaurant API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.client_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, global_exception_handler)

@app.get("/")
async def health_check():
    logger.info("Health check is successful")
    return {
        "status": "ok",
        "app": settings.PROJECT_NAME,
        "message": "Restaurant API is running"
    }

@app.on_event("startup")
async def startup_event():
    ensure_upload_dir()
    await create_indexes()

app.include_router(auth.router)
app.include_router(contact_routes.router)
app.include_router(booking_routes.router)
app.include_router(menu_routes.router)
app.include_router(upload_routes.router)

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT)

import traceback

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from config import CORS_ALLOW_CREDENTIALS, CORS_ORIGINS
from database import Base, engine
from routes import (
    auth,
    profile,
    blogs,
    buddies,
    trips,
    todos,
    reviews,
    chats,
    groups,
    admin,
    destinations,
    hotels,
)
from utils.auth import auth_gateway
from utils.logger import setup_api_logger

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Travel Buddy API (Blogs, Buddies, Trips, Chats, Groups)")

# setup file logger for API failures
api_logger = setup_api_logger()

# CORS is added after the gateway so it stays the outermost layer
app.middleware("http")(auth_gateway)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    api_logger.error("Unhandled exception on %s %s | error=%s\n%s",
                     request.method, request.url.path, str(exc), tb)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    api_logger.warning("HTTPException on %s %s | status=%s | detail=%s",
                       request.method, request.url.path, exc.status_code, str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    api_logger.warning("Validation error on %s %s | errors=%s",
                       request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    api_logger.warning("IntegrityError on %s %s | error=%s",
                       request.method, request.url.path, str(exc.orig))
    return JSONResponse(status_code=400, content={"detail": "Duplicate record"})


app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(blogs.router)
app.include_router(blogs.wishlist_router)
app.include_router(buddies.router)
app.include_router(buddies.chat_buddies_router)
app.include_router(trips.router)
app.include_router(todos.router)
app.include_router(reviews.router)
app.include_router(chats.router)
app.include_router(groups.router)
app.include_router(admin.router)
app.include_router(destinations.router)
app.include_router(hotels.router)

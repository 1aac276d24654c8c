from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import articles
import auth
import database
import feeds
import interactions
from config import get_settings
from errors import AppError, InvalidCredentials, NotFound, PersistenceError, format_validation_errors
from logger import CorrelationContext, generate_correlation_id, setup_logging
from schemas import (
    LIKED_ARTICLES,
    SAVED_ARTICLES,
    ArticleListResponse,
    ArticleOut,
    ChangePasswordRequest,
    InteractionRequest,
    LikedResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    SavedResponse,
    UserRequest,
    UserResponse,
)

settings = get_settings()
logger = setup_logging(settings.service_name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        database.ensure_indexes()
    except PersistenceError:
        # Keep serving so /health and /test can report the outage.
        logger.error("Could not ensure indexes; database unavailable at startup")
    logger.info(f"{settings.service_name} started ({settings.environment})")
    yield
    database.client.close()
    logger.info("Database connection closed")


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    correlation_id = request.headers.get("X-Request-ID") or generate_correlation_id()
    with CorrelationContext(correlation_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = correlation_id
    return response


# ---------------------- Error translation ----------------------

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc.__cause__)
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = format_validation_errors(exc.errors())
    logger.info(f"{request.method} {request.url.path} -> 400: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"success": False, "message": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error in {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal Server Error"},
    )


# ---------------------- Service ----------------------

@app.get("/")
def read_root():
    return {"message": "Magazine Backend Running"}


@app.get("/health")
def health():
    diagnostics = database.describe()
    healthy = diagnostics["connection_status"] == "Connected"
    return {"status": "healthy" if healthy else "unhealthy", "database": diagnostics["connection_status"]}


@app.get("/test")
def test_database():
    """Test endpoint to check if database is available and accessible"""
    response = {"backend": "✅ Running"}
    response.update(database.describe())
    return response


# ---------------------- Articles ----------------------

@app.get("/api/articles", response_model=List[ArticleOut])
def list_articles(category: Optional[str] = None):
    return articles.list_articles(category)


@app.post("/api/articles", response_model=ArticleOut, status_code=status.HTTP_201_CREATED)
def create_article(payload: Dict[str, Any] = Body(...)):
    return articles.create(payload)


@app.get("/api/articles/categories", response_model=Dict[str, List[ArticleOut]])
def articles_by_category():
    return feeds.group_by_category(articles.list_articles())


@app.get("/api/articles/{article_id}", response_model=ArticleOut)
def get_article(article_id: str):
    return articles.get_by_id(article_id)


@app.get("/api/editions")
def list_editions() -> Dict[str, int]:
    groups = feeds.group_by_edition(articles.list_articles())
    return {key: len(items) for key, items in groups.items()}


@app.get("/api/editions/{edition}", response_model=List[ArticleOut])
def get_edition(edition: str):
    return feeds.filter_by_edition(articles.list_articles(), edition)


# ---------------------- Likes / saves ----------------------

def _liked(items: List[str], article_id: str) -> LikedResponse:
    liked = database.normalize_id(article_id) in items
    return LikedResponse(message="Article liked" if liked else "Article unliked", liked_articles=items)


def _saved(items: List[str], article_id: str) -> SavedResponse:
    saved = database.normalize_id(article_id) in items
    return SavedResponse(message="Article saved" if saved else "Article removed from saved articles", saved_articles=items)


@app.post("/api/articles/like-article", response_model=LikedResponse)
def like_article(payload: InteractionRequest):
    items = interactions.toggle(payload.user_id, payload.article_id, LIKED_ARTICLES)
    return _liked(items, payload.article_id)


@app.post("/api/articles/like/{article_id}", response_model=LikedResponse)
def like_article_by_path(article_id: str, payload: UserRequest):
    items = interactions.toggle(payload.user_id, article_id, LIKED_ARTICLES)
    return _liked(items, article_id)


@app.post("/api/articles/save-article", response_model=SavedResponse)
def save_article(payload: InteractionRequest):
    items = interactions.toggle(payload.user_id, payload.article_id, SAVED_ARTICLES)
    return _saved(items, payload.article_id)


@app.post("/api/articles/save/{article_id}", response_model=SavedResponse)
def save_article_by_path(article_id: str, payload: UserRequest):
    items = interactions.toggle(payload.user_id, article_id, SAVED_ARTICLES)
    return _saved(items, article_id)


@app.post("/api/articles/remove-liked-article", response_model=LikedResponse)
def remove_liked_article(payload: InteractionRequest):
    items = interactions.set_membership(payload.user_id, payload.article_id, LIKED_ARTICLES, desired=False)
    return _liked(items, payload.article_id)


@app.post("/api/articles/remove-saved-article", response_model=SavedResponse)
def remove_saved_article(payload: InteractionRequest):
    items = interactions.set_membership(payload.user_id, payload.article_id, SAVED_ARTICLES, desired=False)
    return _saved(items, payload.article_id)


@app.post("/api/articles/list-liked-articles", response_model=ArticleListResponse)
def list_liked_articles(payload: UserRequest):
    return ArticleListResponse(data=interactions.list_articles(payload.user_id, LIKED_ARTICLES))


@app.post("/api/articles/list-saved-articles", response_model=ArticleListResponse)
def list_saved_articles(payload: UserRequest):
    return ArticleListResponse(data=interactions.list_articles(payload.user_id, SAVED_ARTICLES))


# ---------------------- Auth ----------------------

@app.post("/auth/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest):
    user = auth.register(payload.name, payload.email, payload.password)
    return UserResponse(message="User registered successfully", user=user)


@app.post("/auth/login", response_model=UserResponse)
def login(payload: LoginRequest):
    try:
        user = auth.login(payload.email, payload.password)
    except NotFound as e:
        # Same answer as a wrong password, so registered emails are not revealed.
        raise InvalidCredentials() from e
    return UserResponse(user=user)


@app.get("/auth/user/{user_id}", response_model=UserResponse)
def get_user(user_id: str):
    return UserResponse(user=auth.get_profile(user_id))


@app.put("/auth/user/{user_id}", response_model=UserResponse)
def update_user(user_id: str, payload: Dict[str, Any] = Body(...)):
    return UserResponse(message="Profile updated", user=auth.update_profile(user_id, payload))


@app.put("/auth/user/{user_id}/password", response_model=MessageResponse)
def change_password(user_id: str, payload: ChangePasswordRequest):
    auth.change_password(user_id, payload.current_password, payload.new_password)
    return MessageResponse(message="Password updated successfully")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.server.port)

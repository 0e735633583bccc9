"""
HTTP surface of the personal website.
Serves the static pages, the article API and the image API.
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Tuple, Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, JSONResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from website.admin_auth import AdminCookieAuthorizer, Authorizer, password_matches
from website.article import Article, split_paragraphs
from website.article_store import ArticleStore, parse_article_id
from website.article_store_factory import create_article_store
from website.config import Config
from website.errors import InvalidImageNameError
from website.image_store import ImageStore

# Configure site logger
logger = logging.getLogger('website')
logger.setLevel(logging.INFO)

# Add console handler if not already present
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")

# route -> (file in STATIC_DIR, media type)
STATIC_PAGES = {
    "/": ("index.html", "text/html"),
    "/style": ("style.css", "text/css"),
    "/wave": ("wave.svg", "image/svg+xml"),
    "/favicon.svg": ("favicon.svg", "image/svg+xml"),
    "/new": ("new_article.html", "text/html"),
    "/login": ("login.html", "text/html"),
}

REQUIRED_ARTICLE_FIELDS = ("title", "intro", "content")


def sanitize_log_input(value: Any) -> str:
    """
    Sanitize user input for logging to prevent log injection attacks.
    Removes newlines and other control characters that could be used for log forging.

    Args:
        value: The user input to sanitize

    Returns:
        Sanitized string safe for logging
    """
    if not isinstance(value, str):
        value = str(value)
    sanitized = value.replace('\n', '_').replace('\r', '_').replace('\t', '_')
    # Truncate to reasonable length to prevent log flooding
    return sanitized[:200]


def _static_endpoint(filename: str, media_type: str):
    """Build an endpoint serving one file from STATIC_DIR."""
    path = os.path.join(STATIC_DIR, filename)

    async def serve_static():
        return FileResponse(path, media_type=media_type)

    serve_static.__name__ = f"serve_{os.path.splitext(filename)[0]}"
    return serve_static


def _form_content(form) -> Optional[List[str]]:
    """Extract paragraphs from the content field(s) of a form."""
    values = [v for v in form.getlist("content") if isinstance(v, str)]
    if not values:
        return None
    if len(values) == 1:
        return split_paragraphs(values[0])
    return [v.strip() for v in values if v.strip()]


def _is_form_request(request: Request) -> bool:
    content_type = request.headers.get("content-type", "").lower()
    return content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded"))


def create_site_app(
    config: Optional[Config] = None,
    store: Optional[ArticleStore] = None,
    image_store: Optional[ImageStore] = None,
    authorizer: Optional[Authorizer] = None,
) -> FastAPI:
    """
    Create the website FastAPI application.

    Args:
        config: Configuration (default: loaded from the environment)
        store: Article store (default: loaded from the configured snapshot)
        image_store: Image storage (default: the configured images directory)
        authorizer: Predicate deciding whether a request may mutate state
            (default: admin cookie check against ADMIN_PASSWORD_HASH)

    Returns:
        FastAPI application instance

    Raises:
        SnapshotLoadError: If the snapshot cannot be loaded and
            ALLOW_EMPTY_STORE is not set
    """
    config = config or Config()
    if store is None:
        store = create_article_store(config)
    if image_store is None:
        image_store = ImageStore(images_dir=config.images_dir)
    if authorizer is None:
        authorizer = AdminCookieAuthorizer(
            admin_token=config.admin_password_hash,
            cookie_name=config.admin_cookie_name,
        )

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        logger.info("Shutting down, flushing article snapshot")
        store.close()

    app = FastAPI(lifespan=lifespan)  # pylint: disable=redefined-outer-name
    app.state.store = store
    app.state.image_store = image_store

    # ================== STATIC PAGES ==================
    for route, (filename, media_type) in STATIC_PAGES.items():
        app.add_api_route(route, _static_endpoint(filename, media_type), methods=["GET"])

    # ================== ARTICLE API ==================
    @app.get("/api/article/{article_id}")
    async def get_article(article_id: str):
        """Get a single article."""
        sanitized_id = sanitize_log_input(article_id)
        logger.info(f"GET /api/article/{sanitized_id}")
        parsed_id = parse_article_id(article_id, store.id_strategy)
        article = None
        if parsed_id is not None:
            article = await run_in_threadpool(store.get, parsed_id)
        if article is None:
            logger.warning(f"GET /api/article/{sanitized_id} - 404 Article not found")
            raise HTTPException(status_code=404, detail="Article not found")
        return JSONResponse(content=article.to_dict())

    @app.get("/api/articles")
    async def list_articles():
        """List the identifiers of all articles."""
        logger.info("GET /api/articles")
        return JSONResponse(content=await run_in_threadpool(store.list))

    @app.post("/api/new_article")
    async def new_article(request: Request):
        """Create an article from a JSON body or a form with an optional image."""
        logger.info("POST /api/new_article")
        if not authorizer(request):
            logger.warning("POST /api/new_article - 401 Unauthorized")
            raise HTTPException(status_code=401, detail="Unauthorized")

        upload = None
        if _is_form_request(request):
            data, upload = await _article_data_from_form(request)
        else:
            try:
                data = await request.json()
            except ValueError as e:
                logger.warning("POST /api/new_article - 400 Invalid JSON body")
                raise HTTPException(status_code=400, detail="Invalid JSON body") from e
            if not isinstance(data, dict):
                logger.warning("POST /api/new_article - 400 JSON body is not an object")
                raise HTTPException(status_code=400, detail="JSON body must be an object")

        missing = [field for field in REQUIRED_ARTICLE_FIELDS if data.get(field) is None]
        if missing:
            logger.warning(f"POST /api/new_article - 400 Missing fields: {', '.join(missing)}")
            raise HTTPException(status_code=400, detail=f"Missing fields: {', '.join(missing)}")

        try:
            article = Article(
                title=data["title"],
                intro=data["intro"],
                content=data["content"],
                image_path=data.get("image_path") or "",
            )
        except ValidationError as e:
            logger.warning("POST /api/new_article - 400 Invalid article fields")
            raise HTTPException(status_code=400, detail="Invalid article fields") from e

        if upload is not None:
            image_name = await _store_upload(upload, "/api/new_article")
            article = article.model_copy(update={"image_path": image_name})

        result = await run_in_threadpool(store.insert_reporting, article)
        if not result.persisted:
            logger.error(f"POST /api/new_article - 201 Article {result.article_id} not persisted")
        else:
            logger.info(f"POST /api/new_article - 201 Article {result.article_id} created")
        return JSONResponse(
            status_code=201,
            content={
                "status": "ok",
                "article_id": result.article_id,
                "persisted": result.persisted,
            },
        )

    async def _article_data_from_form(
        request: Request,
    ) -> Tuple[Dict[str, Union[str, List[str], None]], Optional[UploadFile]]:
        form = await request.form()
        image_path = form.get("image_path")
        upload = form.get("image")
        if not isinstance(upload, UploadFile) or not upload.filename:
            upload = None
        data = {
            "title": form.get("title"),
            "intro": form.get("intro"),
            "content": _form_content(form),
            "image_path": image_path if isinstance(image_path, str) else None,
        }
        return data, upload

    async def _store_upload(upload: UploadFile, route: str) -> str:
        try:
            return await run_in_threadpool(image_store.save, upload.filename, upload.file)
        except InvalidImageNameError as e:
            logger.warning(f"POST {route} - 400 {sanitize_log_input(e)}")
            raise HTTPException(status_code=400, detail="Invalid image name") from e

    # ================== IMAGE API ==================
    @app.get("/api/image/{name}")
    async def get_image(name: str):
        """Get an uploaded image by name."""
        sanitized_name = sanitize_log_input(name)
        logger.info(f"GET /api/image/{sanitized_name}")
        path = image_store.path_for(name)
        if path is None:
            logger.warning(f"GET /api/image/{sanitized_name} - 404 Image not found")
            raise HTTPException(status_code=404, detail="Image not found")
        return FileResponse(path)

    @app.get("/api/images")
    async def list_images():
        """List the names of all uploaded images."""
        logger.info("GET /api/images")
        return JSONResponse(content=await run_in_threadpool(image_store.list_images))

    @app.post("/api/upload_image")
    async def upload_image(request: Request):
        """Upload an image as the 'image' field of a multipart form."""
        logger.info("POST /api/upload_image")
        if not authorizer(request):
            logger.warning("POST /api/upload_image - 401 Unauthorized")
            raise HTTPException(status_code=401, detail="Unauthorized")

        form = await request.form()
        upload = form.get("image")
        if not isinstance(upload, UploadFile) or not upload.filename:
            logger.warning("POST /api/upload_image - 400 Missing image file")
            raise HTTPException(status_code=400, detail="Missing image file")

        name = await _store_upload(upload, "/api/upload_image")
        logger.info(f"POST /api/upload_image - 201 Stored {sanitize_log_input(name)}")
        return JSONResponse(status_code=201, content={"status": "ok", "name": name})

    # ================== ADMIN SESSION ==================
    @app.post("/api/login")
    async def login(request: Request):
        """Exchange the admin password for the admin cookie."""
        logger.info("POST /api/login")
        form = await request.form()
        password = form.get("password")
        if not isinstance(password, str) or not password_matches(password, config.admin_password_hash):
            logger.warning("POST /api/login - 401 Invalid password")
            raise HTTPException(status_code=401, detail="Invalid password")

        response = JSONResponse(content={"status": "ok"})
        response.set_cookie(
            key=config.admin_cookie_name,
            value=config.admin_password_hash,
            httponly=True,
            samesite="strict",
        )
        logger.info("POST /api/login - 200 Admin cookie set")
        return response

    @app.post("/api/logout")
    async def logout():
        """Clear the admin cookie."""
        logger.info("POST /api/logout")
        response = JSONResponse(content={"status": "ok"})
        response.delete_cookie(key=config.admin_cookie_name)
        return response

    return app

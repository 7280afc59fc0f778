# bolucompras/main.py
import logging
import time
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from .config import Settings, load_settings
from .database import get_db, init_db, make_engine, make_session_factory
from .errors import install_error_handlers
from .logs import configure_logging
from .models import Product, ProductIn, ProductPage, ProductPatch
from .store import ProductStore

logger = logging.getLogger(__name__)


def get_store(db: Session = Depends(get_db)) -> ProductStore:
    return ProductStore(db)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    engine = make_engine(settings.database_url)
    init_db(engine)

    app = FastAPI(title="Bolucompras API")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration = round((time.perf_counter() - start) * 1000, 2)
        logger.info("%s %s -> %s (%s ms)", request.method, request.url.path, response.status_code, duration)
        return response

    install_error_handlers(app)

    # ---------------------------
    # Health
    # ---------------------------
    @app.get("/")
    def root():
        return {"status": "ok", "service": "bolucompras"}

    # ---------------------------
    # Product endpoints
    # ---------------------------
    @app.get("/api/products", response_model=ProductPage)
    def list_products(
        page: int = Query(1, ge=1),
        limit: int = Query(settings.page_size, ge=1),
        store: ProductStore = Depends(get_store),
    ):
        return store.list_page(page=page, limit=limit)

    @app.post("/api/products", status_code=201, response_model=Product)
    def create_product(
        payload: ProductIn,
        force: bool = Query(False),
        store: ProductStore = Depends(get_store),
    ):
        return store.create(payload, force=force)

    @app.get("/api/products/{product_id}", response_model=Product)
    def get_product(product_id: str, store: ProductStore = Depends(get_store)):
        return store.get(product_id)

    @app.patch("/api/products/{product_id}", response_model=Product)
    def update_product(product_id: str, payload: ProductPatch, store: ProductStore = Depends(get_store)):
        return store.update(product_id, payload.changes())

    @app.delete("/api/products/{product_id}")
    def delete_product(product_id: str, store: ProductStore = Depends(get_store)):
        store.delete(product_id)
        return {"message": "Producto eliminado"}

    # ---------------------------
    # Utility: reset (for tests/demo)
    # ---------------------------
    if settings.enable_reset:
        @app.post("/reset")
        def reset_all(store: ProductStore = Depends(get_store)):
            return {"status": "reset", "deleted": store.clear()}

    return app

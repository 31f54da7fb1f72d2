"""
BeautyScan FastAPI application.

Endpoints:
    GET    /                               Health check
    POST   /scan                           Ingredient label -> catalog match -> risk summary
    GET    /products/barcode/{barcode}     Open Food Facts lookup (+ analysis when ingredients are listed)
    POST   /products                       Add a product (auth)
    GET    /products/{product_id}          Product + analysis
    GET    /search?q=                      Products and catalog ingredients
    POST   /diagnostics/{type}             Skin / hair / beauty diagnostic (auth)
    GET    /diagnostics/{type}/latest      Latest diagnostic of the caller (auth)
    GET    /history                        Scan history (auth)
    GET    /history/stats                  Scan statistics (auth)
    DELETE /history/{item_id}              Remove a history entry (auth)
    GET    /routines?type=                 Care routines (auth)
    GET    /admin/ingredients              Catalog listing (admin)
    POST   /admin/ingredients              Add a catalog ingredient (admin)
    PUT    /admin/ingredients/{id}         Edit a catalog ingredient (admin)
    DELETE /admin/ingredients/{id}         Remove a catalog ingredient (admin)
    GET    /admin/products                 Product listing (admin)
    PUT    /admin/products/{id}            Edit a product (admin)
    DELETE /admin/products/{id}            Remove a product (admin)
    GET    /admin/routines                 Routine listing (admin)
    POST   /admin/routines                 Add a routine step (admin)
    PUT    /admin/routines/{id}            Edit a routine step (admin)
    DELETE /admin/routines/{id}            Remove a routine step (admin)
    GET    /admin/diagnostics              All diagnostics (admin)
"""
from functools import lru_cache
from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError
from typing import Annotated, Any, Callable, Dict, List, Optional
import json
import logging
from dotenv import load_dotenv
from pathlib import Path

# Load env vars
load_dotenv(Path(__file__).parent / ".env")

# Initialize App
app = FastAPI(title="BeautyScan API")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from beautyscan.config import log_config
from beautyscan.catalog.catalog_store import ReadOnlyCatalogError, build_catalog
from beautyscan.diagnostics.beauty import BeautyGenerativeClassifier
from beautyscan.diagnostics.hair import HairGenerativeClassifier
from beautyscan.diagnostics.service import DiagnosticService, validate_answers
from beautyscan.diagnostics.skin import SkinRuleClassifier
from beautyscan.evaluation.risk_aggregator import BucketScheme
from beautyscan.external_apis import GatewayError, lookup_barcode
from beautyscan.models.auth_context import AuthContext
from beautyscan.models.diagnostic import DiagnosticType
from beautyscan.models.hazard import HazardTier
from beautyscan.models.ingredient import IngredientRecord
from beautyscan.scan_service import analyze_ingredient_list, analyze_label
from beautyscan.storage.auth import AuthenticationError, extract_bearer_token, resolve_auth_context
from beautyscan.storage.diagnostic_store import DiagnosticStore
from beautyscan.storage.product_store import ProductStore
from beautyscan.storage.routine_store import RoutineStore
from beautyscan.storage.scan_history import ScanHistoryStore, compute_scan_stats
from beautyscan.storage.supabase_client import get_supabase_client

log_config()


# --- Dependencies (overridable in tests via app.dependency_overrides) ---

@lru_cache(maxsize=1)
def get_catalog():
    return build_catalog()


def get_product_store() -> ProductStore:
    return ProductStore(get_supabase_client())


def get_history_store() -> ScanHistoryStore:
    return ScanHistoryStore(get_supabase_client())


def get_history_store_factory() -> Callable[[], ScanHistoryStore]:
    # /scan opens the history store only when it records the scan
    return get_history_store


def get_routine_store() -> RoutineStore:
    return RoutineStore(get_supabase_client())


def get_diagnostic_store() -> DiagnosticStore:
    return DiagnosticStore(get_supabase_client())


def get_diagnostic_service(store: DiagnosticStore = Depends(get_diagnostic_store)) -> DiagnosticService:
    classifiers = {
        DiagnosticType.SKIN: SkinRuleClassifier(),
        DiagnosticType.HAIR: HairGenerativeClassifier(),
        DiagnosticType.BEAUTY: BeautyGenerativeClassifier(),
    }
    return DiagnosticService(classifiers, store)


def _resolve(authorization: Optional[str]) -> AuthContext:
    try:
        return resolve_auth_context(get_supabase_client(), extract_bearer_token(authorization))
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))


def get_auth_context(authorization: Optional[str] = Header(None)) -> AuthContext:
    return _resolve(authorization)


def get_optional_auth_context(authorization: Optional[str] = Header(None)) -> Optional[AuthContext]:
    if not authorization:
        return None
    return _resolve(authorization)


def require_admin(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if not ctx.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return ctx


# --- Request Models ---

class ScanRequest(BaseModel):
    ingredients_text: str
    product_name: Optional[str] = None
    brand: Optional[str] = None
    barcode: Optional[str] = None
    product_id: Optional[str] = None
    record_history: bool = False


class ProductBody(BaseModel):
    name: str = Field(min_length=1)
    ingredients_text: str = Field(min_length=1)
    brand: Optional[str] = None
    barcode: Optional[str] = None
    category: str = "cosmetic"


class DiagnosticRequest(BaseModel):
    answers: Dict[str, Any]


class IngredientBody(BaseModel):
    name: str = Field(min_length=1)
    hazard_tier: Optional[HazardTier] = None
    category: Optional[str] = None
    description: Optional[str] = None


class IngredientPatch(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    hazard_tier: Optional[HazardTier] = None
    category: Optional[str] = None
    description: Optional[str] = None


class ProductPatch(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    brand: Optional[str] = None
    barcode: Optional[str] = None
    category: Optional[str] = None
    ingredients_text: Optional[str] = None


class RoutineBody(BaseModel):
    title: str = Field(min_length=2, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    step: str = Field(min_length=1, max_length=100)
    routine_type: str = Field(min_length=1, max_length=50)
    order_index: int = Field(default=0, ge=0)
    recommended_for: Optional[List[Annotated[str, Field(max_length=100)]]] = None


class RoutinePatch(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    step: Optional[str] = Field(default=None, min_length=1, max_length=100)
    routine_type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    order_index: Optional[int] = Field(default=None, ge=0)
    recommended_for: Optional[List[Annotated[str, Field(max_length=100)]]] = None


# --- Endpoints ---

@app.get("/")
def health_check():
    return {"status": "ok", "service": "BeautyScan"}


@app.post("/scan")
def scan_label(
    request: ScanRequest,
    ctx: Optional[AuthContext] = Depends(get_optional_auth_context),
    catalog=Depends(get_catalog),
    history_factory: Callable[[], ScanHistoryStore] = Depends(get_history_store_factory),
):
    """Parse -> match -> aggregate; optionally record the scan in the caller's history."""
    if request.record_history and ctx is None:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    try:
        analysis = analyze_label(
            request.ingredients_text, catalog.fetch_all(),
            product_name=request.product_name, brand=request.brand,
        )
        body = analysis.to_dict()
        if request.record_history:
            row = history_factory().record(
                ctx.user_id,
                request.product_name or "Produit sans nom",
                overall_tier=int(analysis.summary.overall_tier),
                product_id=request.product_id,
                product_brand=request.brand,
                barcode=request.barcode,
            )
            body["history_id"] = row.get("id")
        return body
    except Exception as e:
        logger.error("Scan failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/products/barcode/{barcode}")
def product_by_barcode(barcode: str, catalog=Depends(get_catalog)):
    product = lookup_barcode(barcode)
    if product is None:
        return {"found": False, "barcode": barcode}
    try:
        analysis = None
        if product.ingredients_text:
            analysis = analyze_label(
                product.ingredients_text, catalog.fetch_all(),
                product_name=product.product_name, brand=product.brands,
            ).to_dict()
        return {"found": True, "product": product.to_dict(), "analysis": analysis}
    except Exception as e:
        logger.error("Barcode analysis failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/products")
def create_product(
    body: ProductBody,
    ctx: AuthContext = Depends(get_auth_context),
    products: ProductStore = Depends(get_product_store),
):
    try:
        row = products.create(
            body.name, body.ingredients_text,
            brand=body.brand, barcode=body.barcode, category=body.category,
        )
        logger.info("PRODUCT_ADD user_id=%s name=%s", ctx.user_id, body.name[:60])
        return {"status": "ok", "product": row}
    except Exception as e:
        logger.error("Product create failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/products/{product_id}")
def get_product(
    product_id: str,
    products: ProductStore = Depends(get_product_store),
    catalog=Depends(get_catalog),
):
    try:
        product = products.get(product_id)
        if product is None:
            raise HTTPException(status_code=404, detail="Product not found")
        analysis = analyze_ingredient_list(
            product.get("ingredients") or [], catalog.fetch_all(),
            product_name=product.get("name"), brand=product.get("brand"),
            scheme=BucketScheme.BINARY,
        )
        return {"product": product, "analysis": analysis.to_dict()}
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Product fetch failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/search")
def search(
    q: str = Query("", max_length=200),
    limit: int = Query(10, ge=1, le=50),
    products: ProductStore = Depends(get_product_store),
    catalog=Depends(get_catalog),
):
    if not q.strip():
        return {"products": [], "ingredients": []}
    try:
        return {
            "products": products.search(q, limit=limit),
            "ingredients": [r.to_dict() for r in catalog.search(q, limit=limit)],
        }
    except Exception as e:
        logger.error("Search failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/diagnostics/{diagnostic_type}")
def run_diagnostic(
    diagnostic_type: DiagnosticType,
    request: DiagnosticRequest,
    ctx: AuthContext = Depends(get_auth_context),
    service: DiagnosticService = Depends(get_diagnostic_service),
):
    try:
        answers = validate_answers(diagnostic_type, request.answers)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=json.loads(e.json(include_url=False)))

    logger.info("DIAGNOSTIC_RUN user_id=%s type=%s", ctx.user_id, diagnostic_type.value)
    try:
        return service.run(ctx, diagnostic_type, answers)
    except GatewayError as e:
        logger.error("Diagnostic gateway failure type=%s: %s", diagnostic_type.value, e)
        raise HTTPException(status_code=e.status_code, detail=e.user_message)
    except Exception as e:
        logger.error("Diagnostic failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/diagnostics/{diagnostic_type}/latest")
def latest_diagnostic(
    diagnostic_type: DiagnosticType,
    ctx: AuthContext = Depends(get_auth_context),
    store: DiagnosticStore = Depends(get_diagnostic_store),
):
    try:
        row = store.latest_for_user(ctx.user_id, diagnostic_type)
    except Exception as e:
        logger.error("Latest diagnostic fetch failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    if row is None:
        raise HTTPException(status_code=404, detail="No diagnostic found")
    return row


@app.get("/history")
def list_history(
    ctx: AuthContext = Depends(get_auth_context),
    history: ScanHistoryStore = Depends(get_history_store),
):
    try:
        return {"items": history.list_for_user(ctx.user_id)}
    except Exception as e:
        logger.error("History fetch failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/history/stats")
def history_stats(
    ctx: AuthContext = Depends(get_auth_context),
    history: ScanHistoryStore = Depends(get_history_store),
):
    try:
        return compute_scan_stats(history.list_for_user(ctx.user_id)).to_dict()
    except Exception as e:
        logger.error("History stats failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.delete("/history/{item_id}")
def delete_history_item(
    item_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    history: ScanHistoryStore = Depends(get_history_store),
):
    try:
        history.delete(ctx.user_id, item_id)
        return {"status": "ok"}
    except Exception as e:
        logger.error("History delete failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/routines")
def list_routines(
    routine_type: Optional[str] = Query(None, alias="type", max_length=50),
    recommended_for: Optional[str] = Query(None, max_length=100),
    ctx: AuthContext = Depends(get_auth_context),
    routines: RoutineStore = Depends(get_routine_store),
):
    try:
        return {"routines": routines.list_all(routine_type, recommended_for)}
    except Exception as e:
        logger.error("Routine listing failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


# --- Admin ---

@app.get("/admin/ingredients")
def admin_list_ingredients(ctx: AuthContext = Depends(require_admin), catalog=Depends(get_catalog)):
    try:
        return {"ingredients": [r.to_dict() for r in catalog.fetch_all()]}
    except Exception as e:
        logger.error("Admin ingredient listing failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/admin/ingredients")
def admin_create_ingredient(
    body: IngredientBody,
    ctx: AuthContext = Depends(require_admin),
    catalog=Depends(get_catalog),
):
    record = IngredientRecord(
        name=body.name.strip(),
        hazard_tier=body.hazard_tier,
        category=body.category,
        description=body.description,
    )
    try:
        created = catalog.create(record)
    except ReadOnlyCatalogError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error("Admin ingredient create failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    logger.info("ADMIN_INGREDIENT create by=%s name=%s", ctx.user_id, record.name)
    return {"status": "ok", "ingredient": created.to_dict()}


@app.put("/admin/ingredients/{ingredient_id}")
def admin_update_ingredient(
    ingredient_id: str,
    body: IngredientPatch,
    ctx: AuthContext = Depends(require_admin),
    catalog=Depends(get_catalog),
):
    fields = body.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=422, detail="No fields to update")
    try:
        updated = catalog.update(ingredient_id, fields)
    except ReadOnlyCatalogError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error("Admin ingredient update failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail="Ingredient not found")
    logger.info("ADMIN_INGREDIENT update by=%s id=%s", ctx.user_id, ingredient_id)
    return {"status": "ok", "ingredient": updated.to_dict()}


@app.delete("/admin/ingredients/{ingredient_id}")
def admin_delete_ingredient(
    ingredient_id: str,
    ctx: AuthContext = Depends(require_admin),
    catalog=Depends(get_catalog),
):
    try:
        catalog.delete(ingredient_id)
    except ReadOnlyCatalogError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error("Admin ingredient delete failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    logger.info("ADMIN_INGREDIENT delete by=%s id=%s", ctx.user_id, ingredient_id)
    return {"status": "ok"}


@app.get("/admin/products")
def admin_list_products(
    limit: int = Query(200, ge=1, le=1000),
    ctx: AuthContext = Depends(require_admin),
    products: ProductStore = Depends(get_product_store),
):
    try:
        return {"products": products.list_all(limit=limit)}
    except Exception as e:
        logger.error("Admin product listing failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.put("/admin/products/{product_id}")
def admin_update_product(
    product_id: str,
    body: ProductPatch,
    ctx: AuthContext = Depends(require_admin),
    products: ProductStore = Depends(get_product_store),
):
    fields = body.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=422, detail="No fields to update")
    try:
        updated = products.update(product_id, fields)
    except Exception as e:
        logger.error("Admin product update failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info("ADMIN_PRODUCT update by=%s id=%s", ctx.user_id, product_id)
    return {"status": "ok", "product": updated}


@app.delete("/admin/products/{product_id}")
def admin_delete_product(
    product_id: str,
    ctx: AuthContext = Depends(require_admin),
    products: ProductStore = Depends(get_product_store),
):
    try:
        products.delete(product_id)
    except Exception as e:
        logger.error("Admin product delete failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    logger.info("ADMIN_PRODUCT delete by=%s id=%s", ctx.user_id, product_id)
    return {"status": "ok"}


@app.get("/admin/routines")
def admin_list_routines(
    ctx: AuthContext = Depends(require_admin),
    routines: RoutineStore = Depends(get_routine_store),
):
    try:
        return {"routines": routines.list_all()}
    except Exception as e:
        logger.error("Admin routine listing failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/admin/routines")
def admin_create_routine(
    body: RoutineBody,
    ctx: AuthContext = Depends(require_admin),
    routines: RoutineStore = Depends(get_routine_store),
):
    try:
        created = routines.create(body.model_dump())
    except Exception as e:
        logger.error("Admin routine create failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    logger.info("ADMIN_ROUTINE create by=%s type=%s", ctx.user_id, body.routine_type)
    return {"status": "ok", "routine": created}


@app.put("/admin/routines/{routine_id}")
def admin_update_routine(
    routine_id: str,
    body: RoutinePatch,
    ctx: AuthContext = Depends(require_admin),
    routines: RoutineStore = Depends(get_routine_store),
):
    fields = body.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=422, detail="No fields to update")
    try:
        updated = routines.update(routine_id, fields)
    except Exception as e:
        logger.error("Admin routine update failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail="Routine not found")
    logger.info("ADMIN_ROUTINE update by=%s id=%s", ctx.user_id, routine_id)
    return {"status": "ok", "routine": updated}


@app.delete("/admin/routines/{routine_id}")
def admin_delete_routine(
    routine_id: str,
    ctx: AuthContext = Depends(require_admin),
    routines: RoutineStore = Depends(get_routine_store),
):
    try:
        routines.delete(routine_id)
    except Exception as e:
        logger.error("Admin routine delete failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    logger.info("ADMIN_ROUTINE delete by=%s id=%s", ctx.user_id, routine_id)
    return {"status": "ok"}


@app.get("/admin/diagnostics")

def admin_list_diagnostics(
    diagnostic_type: Optional[DiagnosticType] = Query(None, alias="type"),
    limit: int = Query(100, ge=1, le=500),
    ctx: AuthContext = Depends(require_admin),
    store: DiagnosticStore = Depends(get_diagnostic_store),
) -> Dict[str, List[Dict[str, Any]]]:
    try:
        return {"diagnostics": store.list_all(diagnostic_type, limit=limit)}
    except Exception as e:
        logger.error("Admin diagnostics listing failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)

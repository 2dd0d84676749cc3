import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# stockroom: models, storage, service, logging
from stockroom import (
    InventoryError,
    InventoryService,
    KeyedStore,
    ns_to_iso,
    setup_logging,
)
from stockroom.config import DB_PATH, SERVICE_NAME
from stockroom.models import ErrorResult, InventoryPayload, ItemListResult, ItemResult, invalid_input

# Logging via stockroom (stdout, timestamps, service name)
setup_logging(SERVICE_NAME)
logger = logging.getLogger(__name__)

app = FastAPI()

_STATUS = {"NotFound": 404, "InvalidInput": 422, "StorageFailure": 500}


@app.on_event("startup")
def startup():
    """Open (or create) the SQLite store and build the service once."""
    app.state.service = InventoryService(KeyedStore(DB_PATH))


def get_service(request: Request) -> InventoryService:
    return request.app.state.service


@app.exception_handler(InventoryError)
async def inventory_error(request: Request, exc: InventoryError):
    if exc.kind == "StorageFailure":
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.msg, exc_info=exc)
    return JSONResponse(
        status_code=_STATUS[exc.kind],
        content=ErrorResult.from_error(exc).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    return await inventory_error(request, invalid_input(exc.errors()))


@app.get("/items")
def list_items(service: InventoryService = Depends(get_service)):
    return ItemListResult(Ok=service.list_items()).model_dump()


@app.get("/items/{id}")
def get_item(id: int, service: InventoryService = Depends(get_service)):
    return ItemResult(Ok=service.get_item(id)).model_dump()


@app.post("/items")
def add_item(payload: InventoryPayload, service: InventoryService = Depends(get_service)):
    item = service.add_item(payload)
    logger.info("Item %d created at %s", item.id, ns_to_iso(item.created_at))
    return ItemResult(Ok=item).model_dump()


@app.put("/items/{id}")
def update_item(id: int, payload: InventoryPayload, service: InventoryService = Depends(get_service)):
    item = service.update_item(id, payload)
    logger.info("Item %d updated at %s", item.id, ns_to_iso(item.updated_at))
    return ItemResult(Ok=item).model_dump()


@app.delete("/items/{id}")
def delete_item(id: int, service: InventoryService = Depends(get_service)):
    item = service.delete_item(id)
    logger.info("Item %d deleted", item.id)
    return ItemResult(Ok=item).model_dump()

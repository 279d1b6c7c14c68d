from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from pydantic import BaseModel, Field

from config.settings import Settings, get_settings
from resort import (
    FilterPredicate,
    NotFound,
    ResortInfoError,
    filter_information,
    get_chunk,
    get_schema,
    list_sources,
)
from resort.tools import ConversationRecord, SheetsLogger, get_sheets_logger


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("resort_info")

app = FastAPI(title="Resort Information API", version="1.0.0")

# CORS: browser-based callers during development
settings = get_settings()
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

ENDPOINTS = [
    "/api/filter-information",
    "/api/get-chunk",
    "/api/sources/:primary_name",
    "/api/schema/:primary_name/:source",
    "/api/log-conversation",
]


class ColumnFilter(BaseModel):
    column_name: str = Field(..., description="CSV column to compare")
    value: str = Field(..., description="Exact value the column must equal")


class QueryArgs(BaseModel):
    primary_name: str = Field(..., min_length=1, description="Resort directory name")
    source: str = Field(..., min_length=1, description="CSV source name without extension")
    additional_filters: Optional[List[ColumnFilter]] = Field(
        default=None,
        description="Equality filters, all of which must match",
    )

    def predicates(self) -> List[FilterPredicate]:
        return [
            FilterPredicate(f.column_name, f.value)
            for f in (self.additional_filters or [])
        ]


class ChunkQueryArgs(QueryArgs):
    chunk_number: int = Field(..., description="1-based chunk index")


class FilterRequest(BaseModel):
    args: QueryArgs


class ChunkRequest(BaseModel):
    args: ChunkQueryArgs


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Missing or invalid required fields",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


def _http_error(exc: ResortInfoError) -> HTTPException:
    status_code = 404 if isinstance(exc, NotFound) else 400
    return HTTPException(status_code=status_code, detail=str(exc))


@app.post("/api/filter-information")
def filter_information_endpoint(
    req: FilterRequest, settings: Settings = Depends(get_settings)
) -> Dict[str, Any]:
    args = req.args
    logger.info(
        "Filter request: primary_name=%s source=%s filters=%s",
        args.primary_name,
        args.source,
        len(args.additional_filters or []),
    )
    try:
        result = filter_information(
            settings.data_root,
            args.primary_name,
            args.source,
            args.predicates(),
            budget=settings.token_budget,
        )
    except ResortInfoError as e:
        raise _http_error(e)
    except Exception as e:
        logger.exception("Error processing request: %s", e)
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(
        "Returning %s of %s rows (chunked=%s, ~%s tokens)",
        len(result.data),
        result.total_count,
        result.chunked,
        result.estimated_token_count,
    )
    return result.to_payload()


@app.post("/api/get-chunk")
def get_chunk_endpoint(
    req: ChunkRequest, settings: Settings = Depends(get_settings)
) -> Dict[str, Any]:
    args = req.args
    logger.info(
        "Chunk request: primary_name=%s source=%s filters=%s chunk=%s",
        args.primary_name,
        args.source,
        len(args.additional_filters or []),
        args.chunk_number,
    )
    try:
        result = get_chunk(
            settings.data_root,
            args.primary_name,
            args.source,
            args.predicates(),
            chunk_number=args.chunk_number,
            budget=settings.token_budget,
        )
    except ResortInfoError as e:
        raise _http_error(e)
    except Exception as e:
        logger.exception("Error processing chunk request: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    return result.to_payload()


@app.get("/api/sources/{primary_name}")
def sources_endpoint(
    primary_name: str, settings: Settings = Depends(get_settings)
) -> Dict[str, Any]:
    try:
        available = list_sources(settings.data_root, primary_name)
    except ResortInfoError as e:
        raise _http_error(e)
    except Exception as e:
        logger.exception("Error getting sources: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    return {"primary_name": primary_name, "available_sources": available}


@app.get("/api/schema/{primary_name}/{source}")
def schema_endpoint(
    primary_name: str, source: str, settings: Settings = Depends(get_settings)
) -> Dict[str, Any]:
    try:
        columns = get_schema(settings.data_root, primary_name, source)
    except ResortInfoError as e:
        raise _http_error(e)
    except Exception as e:
        logger.exception("Error getting schema: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    return {"primary_name": primary_name, "source": source, "columns": columns}


@app.post("/api/log-conversation")
def log_conversation_endpoint(
    record: ConversationRecord, sheets: SheetsLogger = Depends(get_sheets_logger)
):
    try:
        result = sheets.log_conversation(record)
    except Exception as e:
        logger.exception("Error logging conversation: %s", e)
        raise HTTPException(status_code=500, detail=str(e))

    if not result.get("success"):
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Failed to log conversation",
                "details": result.get("error"),
            },
        )
    return {
        "success": True,
        "message": "Conversation logged successfully",
        "details": result,
    }


@app.get("/")
def root() -> Dict[str, Any]:
    return {
        "status": "online",
        "message": "Resort Information API is running",
        "endpoints": ENDPOINTS,
    }


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port)

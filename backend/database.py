# backend/database.py
import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from fastapi import Request
from pydantic import BaseModel, Field, TypeAdapter

from models.product import Product
from schemas.product import ProductCreate, ProductUpdate
from schemas.result import DbResult

logger = logging.getLogger(__name__)

_products_adapter = TypeAdapter(List[Product])


class IdSequence(BaseModel):
    last_id: int = Field(default=0, ge=0)

# File reads, JSON parsing and record validation all fail with one of these
STORE_ERRORS = (OSError, ValueError)


def _error_text(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


class JsonDatabase:
    """Product records kept as one JSON array in a single file.

    Every write loads the whole collection, changes it in memory and replaces
    the file. Writes are serialized by a lock owned by this instance and land
    through a temp file + rename, so readers never see a half written file.
    Separate processes sharing the file are not coordinated.

    Public methods never raise; they return a ``DbResult``.
    """

    def __init__(self, data_path: Path, seed_path: Optional[Path] = None):
        self.data_path = Path(data_path)
        self.data_dir = self.data_path.parent
        self.seed_path = Path(seed_path) if seed_path else None
        # Highest id ever handed out, survives deletes
        self.seq_path = self.data_path.with_name(self.data_path.name + ".seq")
        self._write_lock = asyncio.Lock()
        self._initialized = False

    # ---- INITIALIZATION ----
    async def connect(self) -> DbResult:
        try:
            await self._ensure_initialized()
        except STORE_ERRORS as e:
            logger.error("Database initialization failed: %s", e)
            return DbResult.fail(_error_text(e), "Database connection failed")
        logger.info("JSON database ready at %s", self.data_path)
        return DbResult.ok(message="Database connected")

    async def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        async with self._write_lock:
            if self._initialized:
                return
            await asyncio.to_thread(self._initialize_sync)
            self._initialized = True

    def _initialize_sync(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        if self.data_path.exists():
            return

        if self.seed_path and self.seed_path.exists():
            seed = _products_adapter.validate_json(self.seed_path.read_bytes())
            self._write_sync(seed)
            logger.info("Initialized database with %d sample products", len(seed))
        else:
            self._write_sync([])
            logger.info("Created empty database")

    # ---- FILE ACCESS ----
    def _read_sync(self) -> List[Product]:
        return _products_adapter.validate_json(self.data_path.read_bytes())

    def _write_sync(self, products: List[Product]) -> None:
        payload = json.dumps([p.to_record() for p in products], indent=2, ensure_ascii=False)
        self._atomic_write(self.data_path, payload)

    def _atomic_write(self, path: Path, payload: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read_last_id_sync(self) -> int:
        if not self.seq_path.exists():
            return 0
        return IdSequence.model_validate_json(self.seq_path.read_bytes()).last_id

    def _write_last_id_sync(self, last_id: int) -> None:
        self._atomic_write(self.seq_path, json.dumps({"last_id": last_id}))

    async def _load(self) -> List[Product]:
        await self._ensure_initialized()
        return await asyncio.to_thread(self._read_sync)

    async def _save(self, products: List[Product]) -> None:
        await asyncio.to_thread(self._write_sync, products)

    # ---- READS ----
    async def read_all(self) -> DbResult:
        try:
            products = await self._load()
        except STORE_ERRORS as e:
            logger.error("Failed to read %s: %s", self.data_path, e)
            return DbResult.fail(_error_text(e), "Failed to read products")
        return DbResult.ok(products, "Products retrieved successfully")

    async def get_by_id(self, product_id: int) -> DbResult:
        result = await self.read_all()
        if not result.success:
            return DbResult.fail(result.error, "Failed to retrieve product")

        product = next((p for p in result.data if p.id == product_id), None)
        if product is None:
            return DbResult.not_found(product_id)
        return DbResult.ok(product, "Product retrieved successfully")

    async def find_by_category(self, category: str) -> DbResult:
        result = await self.read_all()
        if not result.success:
            return DbResult.fail(result.error, "Failed to retrieve products by category")

        wanted = category.lower()
        found = [p for p in result.data if p.category.lower() == wanted]
        return DbResult.ok(found, f"Found {len(found)} products in category: {category}")

    async def find_by_name_contains(self, query: str) -> DbResult:
        result = await self.read_all()
        if not result.success:
            return DbResult.fail(result.error, "Failed to search products")

        q = query.lower()
        found = [p for p in result.data if q in p.name.lower()]
        return DbResult.ok(found, f"Found {len(found)} products matching: {query}")

    async def list_categories(self) -> DbResult:
        result = await self.read_all()
        if not result.success:
            return DbResult.fail(result.error, "Failed to list categories")

        categories = sorted({p.category for p in result.data if p.category})
        return DbResult.ok(categories, f"Found {len(categories)} categories")

    # ---- WRITES ----
    async def create(self, product_data: ProductCreate) -> DbResult:
        try:
            await self._ensure_initialized()
            async with self._write_lock:
                products = await asyncio.to_thread(self._read_sync)
                last_id = await asyncio.to_thread(self._read_last_id_sync)

                new_id = max([last_id] + [p.id for p in products]) + 1
                new_product = Product(id=new_id, **product_data.model_dump())
                products.append(new_product)

                # Reserve the id first; a failed data write only skips it
                await asyncio.to_thread(self._write_last_id_sync, new_id)
                await self._save(products)
        except STORE_ERRORS as e:
            logger.error("Failed to create product: %s", e)
            return DbResult.fail(_error_text(e), "Failed to create product")

        return DbResult.ok(new_product, "Product created successfully")

    async def update(self, product_id: int, update_data: ProductUpdate) -> DbResult:
        try:
            await self._ensure_initialized()
            async with self._write_lock:
                products = await asyncio.to_thread(self._read_sync)
                index = next((i for i, p in enumerate(products) if p.id == product_id), None)
                if index is None:
                    return DbResult.not_found(product_id)

                changes = update_data.changes()
                # Empty imageUrl clears the image
                if changes.get("image_url") == "":
                    changes["image_url"] = None

                updated = products[index].model_copy(update=changes)
                products[index] = updated
                await self._save(products)
        except STORE_ERRORS as e:
            logger.error("Failed to update product %s: %s", product_id, e)
            return DbResult.fail(_error_text(e), "Failed to update product")

        return DbResult.ok(updated, "Product updated successfully")

    async def delete(self, product_id: int) -> DbResult:
        try:
            await self._ensure_initialized()
            async with self._write_lock:
                products = await asyncio.to_thread(self._read_sync)
                remaining = [p for p in products if p.id != product_id]
                if len(remaining) == len(products):
                    return DbResult.not_found(product_id)
                await self._save(remaining)
        except STORE_ERRORS as e:
            logger.error("Failed to delete product %s: %s", product_id, e)
            return DbResult.fail(_error_text(e), "Failed to delete product")

        return DbResult.ok(message="Product deleted successfully")


def init_db(settings) -> JsonDatabase:
    return JsonDatabase(settings.data_path, seed_path=settings.SEED_FILE)


def get_db(request: Request) -> JsonDatabase:
    return request.app.state.db

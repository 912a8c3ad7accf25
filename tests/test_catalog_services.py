"""
Tests for the category and product services.
"""
from __future__ import annotations

import pytest
from sqlalchemy import insert

from app.application.services.category_service import CategoryService
from app.application.services.product_service import ProductService
from app.core.exceptions import BadRequestError, ResourceNotFoundError
from app.domain.models.product import Attribute, Product, ProductAttributeValue, ProductImage
from app.domain.schemas.product import ProductCreate
from app.infrastructure.repositories.category_repository import CategoryRepository
from app.infrastructure.repositories.product_repository import ProductRepository

from conftest import checked_out, count_rows


class UnreachableCategoryRepository(CategoryRepository):
    async def count(self, status=None, search=None):
        raise AssertionError("query should not run")

    async def find_all(self, *args, **kwargs):
        raise AssertionError("query should not run")


# ── Categories ────────────────────────────────────────


async def test_category_lifecycle(category_service):
    category = await category_service.store({"title": "Shoes"})
    assert category.title == "Shoes"

    renamed = await category_service.update(category.id, {"title": "Sneakers"})
    assert renamed.title == "Sneakers"

    await category_service.delete(category.id)
    with pytest.raises(BadRequestError) as exc_info:
        await category_service.update(category.id, {"title": "Boots"})
    assert exc_info.value.message == "The category is deleted"

    await category_service.restore(category.id)
    assert (await category_service.find_by_id(category.id)).deleted_at is None


async def test_category_not_found(category_service):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await category_service.find_by_id(7)
    assert exc_info.value.message == "The category was not found"


async def test_category_pagination(category_service):
    for title in ("Alpha", "Beta", "Gamma", "Delta", "Epsilon"):
        await category_service.store({"title": title})

    first = await category_service.find_all(page=1, size=2, sort="title")
    assert [c.title for c in first["items"]] == ["Alpha", "Beta"]
    assert first["pagination"] == {"page": 1, "size": 2, "total_elements": 5, "total_pages": 3}

    last = await category_service.find_all(page=3, size=2, sort="title")
    assert last["pagination"]["size"] == 1

    beyond = await category_service.find_all(page=4, size=2)
    assert beyond["items"] == []
    assert beyond["pagination"] == {"page": 4, "size": 0, "total_elements": 5, "total_pages": 3}


async def test_category_descending_sort_and_search(category_service):
    for title in ("Home Decor", "Garden", "Home Office"):
        await category_service.store({"title": title})

    ordered = await category_service.find_all(sort="-title")
    assert [c.title for c in ordered["items"]] == ["Home Office", "Home Decor", "Garden"]

    found = await category_service.find_all(search="home off")
    assert [c.title for c in found["items"]] == ["Home Office"]


async def test_empty_listing(category_service):
    result = await category_service.find_all()
    assert result["items"] == []
    assert result["pagination"] == {"page": 1, "size": 0, "total_elements": 0, "total_pages": 0}


@pytest.mark.parametrize(
    "params",
    [
        {"sort": "password"},
        {"sort": "-title; DROP TABLE categories"},
        {"search": "50%"},
        {"search": "a_b"},
        {"status": "archived"},
        {"page": 0},
        {"page": 10**19},
        {"size": 201},
    ],
)
async def test_invalid_listing_params_rejected_before_querying(pool, params):
    service = CategoryService(pool, category_repository=UnreachableCategoryRepository)

    with pytest.raises(BadRequestError):
        await service.find_all(**params)

    assert checked_out(pool) == 0


# ── Products ──────────────────────────────────────────


async def test_product_store_derives_slug(product_service, category_service):
    category = await category_service.store({"title": "Shoes"})

    product = await product_service.store(ProductCreate(title="Café Runner 2", category_id=category.id))

    assert product.slug == "cafe-runner-2"
    assert product.category == "Shoes"
    assert product.featured is False
    assert product.active is True


async def test_product_slug_must_be_free(product_service):
    await product_service.store({"title": "Runner"})

    with pytest.raises(BadRequestError) as exc_info:
        await product_service.store({"title": "Other", "slug": "runner"})
    assert exc_info.value.message == "The slug runner is already in use"


async def test_product_invalid_slug(product_service):
    with pytest.raises(BadRequestError):
        await product_service.store({"title": "Runner", "slug": "Not A Slug"})


async def test_product_requires_active_category(product_service, category_service):
    category = await category_service.store({"title": "Old"})
    await category_service.delete(category.id)

    with pytest.raises(BadRequestError) as exc_info:
        await product_service.store({"title": "Runner", "category_id": category.id})
    assert exc_info.value.message == "The category does not exist"

    with pytest.raises(BadRequestError):
        await product_service.store({"title": "Runner", "category_id": 999})


async def test_product_detail_includes_attributes_and_images(product_service, pool):
    product = await product_service.store({"title": "Runner"})
    async with pool.connection() as conn:
        attribute_id = (
            await conn.execute(insert(Attribute.__table__).values(name="Color"))
        ).inserted_primary_key[0]
        await conn.execute(
            insert(ProductAttributeValue.__table__).values(
                product_id=product.id, attribute_id=attribute_id, value="Red"
            )
        )
        await conn.execute(insert(ProductImage.__table__).values(product_id=product.id, url="/img/runner.png"))

    detail = await product_service.find_by_id(product.id)

    assert [(a.title, a.value) for a in detail.attributes] == [("Color", "Red")]
    assert [i.url for i in detail.images] == ["/img/runner.png"]


async def test_product_update_and_soft_delete(product_service):
    product = await product_service.store({"title": "Runner"})

    updated = await product_service.update(product.id, {"featured": True, "slug": "runner-pro"})
    assert updated.featured is True
    assert updated.slug == "runner-pro"

    await product_service.delete(product.id)
    with pytest.raises(BadRequestError):
        await product_service.update(product.id, {"title": "Again"})

    listed = await product_service.find_all(status="deleted")
    assert [p.id for p in listed["items"]] == [product.id]


async def test_product_category_can_be_removed(product_service, category_service):
    category = await category_service.store({"title": "Shoes"})
    product = await product_service.store({"title": "Runner", "category_id": category.id})

    updated = await product_service.update(product.id, {"category_id": None})

    assert updated.category_id is None
    assert updated.category is None
    assert (await product_service.find_by_id(product.id)).category_id is None


async def test_product_update_without_category_keeps_it(product_service, category_service):
    category = await category_service.store({"title": "Shoes"})
    product = await product_service.store({"title": "Runner", "category_id": category.id})

    updated = await product_service.update(product.id, {"featured": True})

    assert updated.category_id == category.id


class BlindProductRepository(ProductRepository):
    """Misses a slug claimed by a concurrent writer."""

    async def find_by_slug(self, slug):
        return None


async def test_unique_slug_constraint_reported_as_bad_request(pool, product_service):
    await product_service.store({"title": "Runner"})
    racing = ProductService(pool, product_repository=BlindProductRepository)

    with pytest.raises(BadRequestError) as exc_info:
        await racing.store({"title": "Runner"})

    assert exc_info.value.message == "The slug runner is already in use"
    assert await count_rows(pool, Product) == 1
    assert checked_out(pool) == 0


async def test_unique_slug_constraint_on_update(pool, product_service):
    await product_service.store({"title": "Runner"})
    walker = await product_service.store({"title": "Walker"})
    racing = ProductService(pool, product_repository=BlindProductRepository)

    with pytest.raises(BadRequestError) as exc_info:
        await racing.update(walker.id, {"slug": "runner"})

    assert exc_info.value.message == "The slug runner is already in use"
    assert (await product_service.find_by_id(walker.id)).slug == "walker"

"""
Catalog Backend - Product Repository Tests
============================================

What:  Tests for ProductRepository against a real SQLite database.
How:   aiosqlite file database per test (see conftest.database).
"""

import uuid

import pytest

from catalog.exceptions import NotFoundError
from catalog.services.product_repository import ProductRepository, parse_product_id


class TestParseProductId:

    def test_accepts_uuid_strings(self):
        value = uuid.uuid4()
        assert parse_product_id(str(value)) == value

    def test_accepts_uuid_objects(self):
        value = uuid.uuid4()
        assert parse_product_id(value) is value

    def test_rejects_malformed_ids(self):
        with pytest.raises(ValueError):
            parse_product_id("64b7f0c2e1d3a4b5c6d7e8f9")


class TestProductRepository:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_defaults(self, db_session):
        repo = ProductRepository(db_session)

        product = await repo.create(sku="A1", name="Widget", quantity=3, description="x")

        assert isinstance(product.id, uuid.UUID)
        assert product.images == []
        assert product.featured_image is None
        assert product.is_favorite is False

    @pytest.mark.asyncio
    async def test_get_returns_created_product(self, db_session):
        repo = ProductRepository(db_session)
        created = await repo.create(
            sku="A1",
            images=["uploads/1.png", "uploads/2.png"],
            featured_image="uploads/1.png",
        )

        fetched = await repo.get(str(created.id))

        assert fetched.id == created.id
        assert fetched.images == ["uploads/1.png", "uploads/2.png"]
        assert fetched.featured_image == "uploads/1.png"

    @pytest.mark.asyncio
    async def test_get_unknown_id_raises_not_found(self, db_session):
        repo = ProductRepository(db_session)

        with pytest.raises(NotFoundError, match="Product not found"):
            await repo.get(str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_find_malformed_id_raises_value_error(self, db_session):
        repo = ProductRepository(db_session)

        with pytest.raises(ValueError):
            await repo.find("not-a-uuid")

    @pytest.mark.asyncio
    async def test_list_all_returns_every_product(self, db_session):
        repo = ProductRepository(db_session)
        for sku in ("A1", "B2", "C3"):
            await repo.create(sku=sku)

        products = await repo.list_all()

        assert sorted(p.sku for p in products) == ["A1", "B2", "C3"]

    @pytest.mark.asyncio
    async def test_update_replaces_fields_and_images(self, db_session):
        repo = ProductRepository(db_session)
        created = await repo.create(sku="A1", name="Widget", images=["uploads/old.png"])

        updated = await repo.update(
            created.id,
            {"name": "Gadget", "sku": None, "images": ["uploads/new.png"], "featured_image": None},
        )

        assert updated.name == "Gadget"
        assert updated.sku is None
        assert updated.images == ["uploads/new.png"]
        refetched = await repo.get(created.id)
        assert refetched.images == ["uploads/new.png"]

    @pytest.mark.asyncio
    async def test_update_without_images_key_keeps_stored_images(self, db_session):
        repo = ProductRepository(db_session)
        created = await repo.create(sku="A1", images=["uploads/1.png", "uploads/2.png"])

        updated = await repo.update(
            str(created.id),
            {"sku": "A2", "name": None, "quantity": 1.0, "description": None, "featured_image": None},
        )

        assert updated.sku == "A2"
        assert updated.images == ["uploads/1.png", "uploads/2.png"]

    @pytest.mark.asyncio
    async def test_update_unknown_id_raises_not_found(self, db_session):
        repo = ProductRepository(db_session)

        with pytest.raises(NotFoundError):
            await repo.update(uuid.uuid4(), {"name": "Ghost"})

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_fields(self, db_session):
        repo = ProductRepository(db_session)
        created = await repo.create(sku="A1")

        with pytest.raises(ValueError, match="is_favorite"):
            await repo.update(created.id, {"is_favorite": True})

    @pytest.mark.asyncio
    async def test_toggle_twice_restores_flag(self, db_session):
        repo = ProductRepository(db_session)
        created = await repo.create(sku="A1")

        first = await repo.toggle_favorite(created.id)
        assert first.is_favorite is True
        second = await repo.toggle_favorite(created.id)
        assert second.is_favorite is False

    @pytest.mark.asyncio
    async def test_toggle_unknown_id_raises_not_found(self, db_session):
        repo = ProductRepository(db_session)

        with pytest.raises(NotFoundError):
            await repo.toggle_favorite(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_delete_removes_product(self, db_session):
        repo = ProductRepository(db_session)
        created = await repo.create(sku="A1")

        await repo.delete(str(created.id))

        assert await repo.find(created.id) is None

    @pytest.mark.asyncio
    async def test_delete_unknown_id_is_silent(self, db_session):
        repo = ProductRepository(db_session)

        await repo.delete(str(uuid.uuid4()))

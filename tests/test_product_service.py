import random

import pytest
from pymongo.errors import DuplicateKeyError

from catalog.models.product import MAX_INT64
from catalog.services.product_service import ProductService, build_filter
from catalog.utils.exceptions import ConflictError, NotFoundError, StoreError, ValidationError
from tests.fakes import FakeCollection, UnreachableCollection, make_product


async def seed(service, *products):
    for product in products:
        await service.create_product(product)


class TestBuildFilter:
    def test_no_criteria_matches_everything(self):
        assert build_filter() == {}
        assert build_filter(category="all", search="   ") == {}

    def test_category_is_trimmed(self):
        assert build_filter(category=" tools ") == {"category": "tools"}
        assert build_filter(category=" all ") == {}

    def test_category_and_search(self):
        assert build_filter(category="tools", search="a.b") == {
            "category": "tools",
            "$or": [
                {"name": {"$regex": r"a\.b", "$options": "i"}},
                {"description": {"$regex": r"a\.b", "$options": "i"}},
            ],
        }


class TestCreateAndGet:
    async def test_create_returns_formatted_product(self, service, collection):
        created = await service.create_product(
            {"id": 1, "name": "Widget", "price": 9.999, "category": "tools", "images": ["http://e/a.jpg"]}
        )

        assert created["price"] == 10.0
        assert created["bulkPrice"] == 10.0
        assert created["bulkQty"] == 1
        assert "_id" not in created
        assert isinstance(created["createdAt"], str)
        assert collection.stored(1)["price"] == 10.0

    async def test_get_returns_stored_product(self, service):
        await seed(service, make_product(5, name="Saw"))

        product = await service.get_product(5)

        assert product["id"] == 5
        assert product["name"] == "Saw"
        assert "_id" not in product

    async def test_get_missing_product(self, service):
        with pytest.raises(NotFoundError):
            await service.get_product(404)

    async def test_duplicate_id_conflicts(self, service):
        await seed(service, make_product(1))

        with pytest.raises(ConflictError):
            await service.create_product(make_product(1, name="Other"))

    async def test_unique_index_race_is_a_conflict(self):
        class RacingCollection(FakeCollection):
            async def find_one(self, query):
                return None

            async def insert_one(self, document):
                raise DuplicateKeyError("E11000 duplicate key error")

        with pytest.raises(ConflictError):
            await ProductService(RacingCollection()).create_product(make_product(1))

    async def test_validation_happens_before_any_write(self, service, collection):
        with pytest.raises(ValidationError):
            await service.create_product(make_product(1, images=[]))

        assert collection.docs == []


class TestListProducts:
    async def test_search_matches_name_or_description(self, service):
        await seed(
            service,
            make_product(1, name="Food processor"),
            make_product(2, name="Blender", description="Crushes FOO and ice"),
            make_product(3, name="Kettle", description="Boils water"),
        )

        result = await service.list_products(search="foo")

        assert [product["id"] for product in result["data"]] == [1, 2]
        assert result["total"] == 2

    async def test_search_is_literal(self, service):
        await seed(service, make_product(1, name="a.b"), make_product(2, name="axb"))

        result = await service.list_products(search="a.b")

        assert [product["id"] for product in result["data"]] == [1]

    async def test_category_filter(self, service):
        await seed(
            service,
            make_product(1, category="tools"),
            make_product(2, category="garden"),
            make_product(3, category="tools"),
        )

        tools = await service.list_products(category="tools")
        everything = await service.list_products(category="all")

        assert [product["id"] for product in tools["data"]] == [1, 3]
        assert everything["total"] == 3

    async def test_pages_cover_every_match_once_in_id_order(self, service):
        ids = list(range(1, 12))
        random.Random(7).shuffle(ids)
        await seed(service, *(make_product(product_id) for product_id in ids))

        first = await service.list_products(page=1, limit=4)
        assert first["pages"] == 3
        assert first["total"] == 11

        collected = []
        for page in range(1, first["pages"] + 1):
            result = await service.list_products(page=page, limit=4)
            assert result["count"] == len(result["data"]) <= 4
            assert result["page"] == page
            collected.extend(product["id"] for product in result["data"])

        assert collected == list(range(1, 12))

    async def test_page_past_the_end_is_empty(self, service):
        await seed(service, make_product(1))

        result = await service.list_products(page=3, limit=10)

        assert result == {"count": 0, "total": 1, "page": 3, "pages": 1, "data": []}

    async def test_empty_collection(self, service):
        assert await service.list_products() == {"count": 0, "total": 0, "page": 1, "pages": 0, "data": []}

    async def test_limit_is_capped(self, collection):
        service = ProductService(collection, default_page_size=2, max_page_size=3)
        await seed(service, *(make_product(product_id) for product_id in range(1, 6)))

        assert (await service.list_products())["count"] == 2
        capped = await service.list_products(limit=100)
        assert capped["count"] == 3
        assert capped["pages"] == 2

    @pytest.mark.parametrize("page, limit", [(0, 10), (-1, 10), (1, 0), ("2", 10), (True, 10)])
    async def test_invalid_pagination(self, service, page, limit):
        with pytest.raises(ValidationError):
            await service.list_products(page=page, limit=limit)

    @pytest.mark.parametrize("page, limit", [(10 ** 19, 1), (MAX_INT64 // 10 + 2, 10), (MAX_INT64, None)])
    async def test_page_offset_must_fit_int64(self, service, page, limit):
        with pytest.raises(ValidationError) as exc_info:
            await service.list_products(page=page, limit=limit)

        assert exc_info.value.errors[0]["field"] == "page"

    async def test_last_addressable_page_is_empty(self, service):
        await seed(service, make_product(1))

        result = await service.list_products(page=MAX_INT64 // 10 + 1, limit=10)

        assert result["data"] == []
        assert result["total"] == 1

    async def test_category_is_trimmed(self, service):
        await seed(service, make_product(1, category="tools"), make_product(2, category="garden"))

        result = await service.list_products(category="  tools ")

        assert [product["id"] for product in result["data"]] == [1]


class TestUpdateAndDelete:
    async def test_update_rounds_price_and_keeps_other_fields(self, service, collection):
        await seed(service, make_product(1, name="Widget", bulkPrice=8, bulkQty=4))
        before = dict(collection.stored(1))

        updated = await service.update_product(1, {"price": 12.345})

        assert updated["price"] == 12.35
        stored = collection.stored(1)
        for field in ("name", "description", "bulkPrice", "bulkQty", "category", "inStock", "images", "createdAt"):
            assert stored[field] == before[field]

    async def test_update_missing_product(self, service):
        with pytest.raises(NotFoundError):
            await service.update_product(1, {"price": 1})

    async def test_invalid_update_leaves_record_alone(self, service, collection):
        await seed(service, make_product(1))

        with pytest.raises(ValidationError):
            await service.update_product(1, {"price": -3})

        assert collection.stored(1)["price"] == 10.0

    async def test_delete_then_get(self, service):
        await seed(service, make_product(1))

        assert await service.delete_product(1) == {"success": True}
        with pytest.raises(NotFoundError):
            await service.get_product(1)

    async def test_delete_missing_product(self, service):
        with pytest.raises(NotFoundError):
            await service.delete_product(1)


class TestLegacyRecords:
    @pytest.fixture
    def collection(self):
        return FakeCollection(
            [{"id": 1, "name": "Old lamp", "price": 12, "category": "home", "image": "http://e/lamp.jpg", "__v": 0}]
        )

    async def test_legacy_image_is_presented_as_list(self, service):
        product = await service.get_product(1)

        assert product["images"] == ["http://e/lamp.jpg"]
        assert "image" not in product
        assert "__v" not in product

    async def test_update_migrates_legacy_image(self, service, collection):
        await service.update_product(1, {"inStock": False})

        stored = collection.stored(1)
        assert stored["images"] == ["http://e/lamp.jpg"]
        assert "image" not in stored
        assert stored["bulkPrice"] == 12.0
        assert stored["bulkQty"] == 1


class TestStoreFailures:
    @pytest.fixture
    def service(self):
        return ProductService(UnreachableCollection())

    async def test_reads_raise_store_error(self, service):
        with pytest.raises(StoreError) as exc_info:
            await service.list_products()

        assert "connection refused" in exc_info.value.detail
        assert exc_info.value.status_code == 500

    async def test_writes_raise_store_error(self, service):
        with pytest.raises(StoreError):
            await service.create_product(make_product(1))
        with pytest.raises(StoreError):
            await service.delete_product(1)

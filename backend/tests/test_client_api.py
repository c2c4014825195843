"""
Dashboard API — Resource Client Tests
======================================

What:  ResourceClient and build_query, driven against the real app through
       the test_client fixture (ASGITransport, in-memory database).
"""

import pytest

from dashboard_api.client import (
    FilterConfig,
    ListParams,
    ResourceAPIError,
    ResourceClient,
    TableController,
    build_query,
)


class TestBuildQuery:

    def test_full_parameters(self):
        params = ListParams(
            page=2,
            page_size=10,
            search="golden retriever",
            sort_by="name",
            sort_order="desc",
            filters={
                "status": ["paid", None, "pending"],
                "storeId": None,
                "isActive": True,
                "quantity": 3,
            },
        )

        assert build_query(params) == (
            "page=2&pageSize=10&search=golden+retriever&sortBy=name&sortOrder=desc"
            "&status=paid&status=pending&storeId=null&isActive=true&quantity=3"
        )

    def test_falsy_reserved_values_are_omitted(self):
        assert build_query(ListParams(page=0, page_size=0, search="", sort_by="")) == ""
        assert build_query() == ""

    def test_false_filter_is_sent(self):
        assert build_query(ListParams(filters={"isActive": False})) == "isActive=false"


class TestResourceClient:

    @pytest.mark.asyncio
    async def test_crud_round_trip(self, test_client):
        api = ResourceClient(client=test_client)

        created = await api.create("stores", {"name": "Central", "slug": "central", "city": "Shanghai"})
        fetched = await api.fetch_item("stores", created["id"])
        updated = await api.update("stores", created["id"], {"city": "Hangzhou"})
        await api.delete("stores", created["id"])

        assert fetched == created
        assert updated["city"] == "Hangzhou"
        with pytest.raises(ResourceAPIError) as exc_info:
            await api.fetch_item("stores", created["id"])
        assert exc_info.value.status == 404
        assert exc_info.value.message == "Resource not found"

    @pytest.mark.asyncio
    async def test_fetch_list(self, test_client, seed_stores):
        await seed_stores(40)
        api = ResourceClient(client=test_client)

        page = await api.fetch_list(
            "stores",
            ListParams(page=2, page_size=5, sort_by="slug", filters={"city": ["Shanghai", None]}),
        )

        assert page.pagination.total_count == 20
        assert page.pagination.total_pages == 4
        assert page.pagination.page == 2
        assert [row["slug"] for row in page.data] == [
            "store-11", "store-13", "store-15", "store-17", "store-19",
        ]

    @pytest.mark.asyncio
    async def test_unknown_resource_error(self, test_client):
        api = ResourceClient(client=test_client)

        with pytest.raises(ResourceAPIError) as exc_info:
            await api.fetch_list("widgets")

        assert exc_info.value.status == 404
        assert exc_info.value.message == "Unknown resource: widgets"

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self, test_client):
        async with ResourceClient(client=test_client):
            pass

        assert not test_client.is_closed

    @pytest.mark.asyncio
    async def test_table_fetcher_drives_a_table(self, test_client, seed_stores):
        await seed_stores(40)
        api = ResourceClient(client=test_client)
        table = TableController(
            fetch_data=api.table_fetcher("stores"),
            columns=["name", "slug"],
            filters=[FilterConfig(key="city", label="City")],
        )

        await table.hydrate("pageSize=5&sortBy=slug&isActive=false")

        assert table.total_count == 40
        assert table.state.total_pages == 8
        assert [row["slug"] for row in table.data][:2] == ["store-01", "store-02"]

        await table.set_filter("city", "Beijing")

        assert table.total_count == 20
        assert table.current_page == 1
        assert table.data[0]["city"] == "Beijing"

    @pytest.mark.asyncio
    async def test_url_follows_server_page_size_clamp(self, test_client, seed_stores):
        await seed_stores(3)
        urls = []
        api = ResourceClient(client=test_client)
        table = TableController(fetch_data=api.table_fetcher("stores"), columns=["name"], url_writer=urls.append)

        await table.hydrate("pageSize=500")

        assert table.state.page_size == 100
        assert urls == ["page=1&pageSize=500", "page=1&pageSize=100"]

import asyncio

import pytest

from lumera.client import (
    AuthState,
    LocalStorage,
    LocalStore,
    Notifier,
    WishlistReconciler,
    WishlistRequestError,
)


class FakeRemoteStore:
    """In-memory stand-in for the wishlist API that records every call"""

    def __init__(self, initial=(), fail_on=(), delay=0.01, fail_status=500, list_delay=0):
        self.server = list(initial)
        self.fail_on = set(fail_on)
        self.fail_status = fail_status
        self.delay = delay
        self.list_delay = list_delay
        self.calls = []
        self.list_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    def adds(self):
        return [product_id for op, product_id in self.calls if op == "add"]

    async def _call(self, op, product_id):
        self.calls.append((op, product_id))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if product_id in self.fail_on:
                raise WishlistRequestError(self.fail_status, f"Failed to {op} {product_id}")
        finally:
            self.in_flight -= 1

    async def list_product_ids(self):
        self.list_calls += 1
        # The response reflects the server at request time
        ids = list(self.server)
        await asyncio.sleep(self.list_delay)
        return ids

    async def add(self, product_id):
        await self._call("add", product_id)
        if product_id not in self.server:
            self.server.append(product_id)
        return {"productId": product_id}

    async def remove(self, product_id):
        await self._call("remove", product_id)
        if product_id in self.server:
            self.server.remove(product_id)
        return {"success": True}


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "local-storage.json"


@pytest.fixture
def storage(storage_path):
    return LocalStorage(storage_path)


@pytest.fixture
def local(storage):
    return LocalStore(storage, "lumera-wishlist")


@pytest.fixture
def remote():
    return FakeRemoteStore()


@pytest.fixture
def auth():
    return AuthState()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def make_reconciler(local, auth, notifier):
    def factory(remote, retain_failed=True):
        return WishlistReconciler(
            local=local,
            remote=remote,
            auth=auth,
            notifier=notifier,
            retain_failed=retain_failed,
        ).attach()
    return factory


@pytest.fixture
def make_remote():
    return FakeRemoteStore

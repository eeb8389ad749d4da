import asyncio
import json

import pytest

from lumera.client import Anonymous, Authenticated, LocalStorage, LocalStore, NotificationVariant


@pytest.mark.asyncio
async def test_anonymous_toggle_persists_immediately(make_reconciler, remote, storage_path):
    reconciler = make_reconciler(remote)

    await reconciler.toggle_wishlist("p1")

    assert reconciler.wishlist_product_ids == ["p1"]
    assert reconciler.is_in_wishlist("p1")
    stored = json.loads(storage_path.read_text())
    assert json.loads(stored["lumera-wishlist"]) == ["p1"]
    assert remote.calls == []


@pytest.mark.asyncio
async def test_anonymous_toggle_twice_restores_membership(make_reconciler, remote, local):
    local.add("p9")
    reconciler = make_reconciler(remote)

    await reconciler.toggle_wishlist("p1")
    await reconciler.toggle_wishlist("p1")

    assert reconciler.wishlist_product_ids == ["p9"]
    assert reconciler.notifier.history[-1].title == "Removed from wishlist"


@pytest.mark.asyncio
async def test_local_wishlist_survives_reload(make_reconciler, remote, storage_path):
    reconciler = make_reconciler(remote)
    await reconciler.toggle_wishlist("p1")
    await reconciler.toggle_wishlist("p2")

    reloaded = LocalStore(LocalStorage(storage_path), "lumera-wishlist")
    assert reloaded.ids == ["p1", "p2"]


@pytest.mark.asyncio
async def test_merge_is_a_union(make_reconciler, make_remote, auth, local, storage):
    remote = make_remote(initial=["A", "B"])
    local.add("B")
    local.add("C")
    reconciler = make_reconciler(remote)

    await auth.login("token")

    assert set(remote.server) == {"A", "B", "C"}
    assert sorted(reconciler.wishlist_product_ids) == ["A", "B", "C"]
    assert local.ids == []
    assert "lumera-wishlist" not in storage
    assert isinstance(reconciler.identity, Authenticated)


@pytest.mark.asyncio
async def test_login_scenario(make_reconciler, make_remote, auth, local, storage_path, notifier):
    remote = make_remote(initial=["p2", "p3"])
    local.add("p1")
    local.add("p2")
    reconciler = make_reconciler(remote)

    await auth.login("token")

    assert set(await remote.list_product_ids()) == {"p1", "p2", "p3"}
    assert set(reconciler.wishlist_product_ids) == {"p1", "p2", "p3"}
    assert "lumera-wishlist" not in json.loads(storage_path.read_text())
    assert sorted(remote.adds()) == ["p1", "p2"]
    # Both adds were in flight at the same time
    assert remote.max_in_flight == 2
    assert [n.title for n in notifier.history] == ["Wishlist synced"]


@pytest.mark.asyncio
async def test_merge_runs_once_per_transition(make_reconciler, make_remote, auth, local):
    remote = make_remote()
    local.add("p1")
    reconciler = make_reconciler(remote)

    await auth.login("token")
    for _ in range(3):
        assert await reconciler.sync_auth_state() is None
    await auth.login("token")

    assert remote.adds() == ["p1"]


@pytest.mark.asyncio
async def test_overlapping_evaluations_merge_once(make_reconciler, make_remote, auth, local):
    remote = make_remote(delay=0.05)
    local.add("p1")
    local.add("p2")
    reconciler = make_reconciler(remote)
    reconciler.detach()

    auth._token = "token"
    results = await asyncio.gather(
        reconciler.sync_auth_state(),
        reconciler.sync_auth_state(),
        reconciler.sync_auth_state(),
    )

    assert sorted(remote.adds()) == ["p1", "p2"]
    assert sum(1 for result in results if result is not None) == 1


@pytest.mark.asyncio
async def test_empty_local_transition_is_a_noop(make_reconciler, make_remote, auth, notifier):
    remote = make_remote(initial=["p5"])
    reconciler = make_reconciler(remote)

    await auth.login("token")

    assert remote.adds() == []
    assert list(notifier.history) == []
    assert reconciler.wishlist_product_ids == ["p5"]


@pytest.mark.asyncio
async def test_merge_result_reports_failures(make_reconciler, make_remote, auth, local, notifier):
    remote = make_remote(fail_on={"p2"})
    for product_id in ("p1", "p2", "p3"):
        local.add(product_id)
    reconciler = make_reconciler(remote)
    reconciler.detach()

    auth._token = "token"
    result = await reconciler.sync_auth_state()

    assert sorted(result.succeeded) == ["p1", "p3"]
    assert list(result.failed) == ["p2"]
    assert result.retained == ["p2"]
    assert not result.ok
    assert result.total == 3
    # Failed ids stay on the device for the next sign-in
    assert local.ids == ["p2"]
    assert len(notifier.history) == 1
    notification = notifier.history[0]
    assert notification.title == "Wishlist synced"
    assert notification.variant == NotificationVariant.WARNING
    assert "1 of 3" in notification.description


@pytest.mark.asyncio
async def test_merge_can_discard_failures(make_reconciler, make_remote, auth, local, storage, notifier):
    remote = make_remote(fail_on={"p1"})
    local.add("p1")
    local.add("p2")
    make_reconciler(remote, retain_failed=False)

    await auth.login("token")

    assert local.ids == []
    assert "lumera-wishlist" not in storage
    assert remote.server == ["p2"]
    assert len(notifier.history) == 1


@pytest.mark.asyncio
async def test_failed_merge_ids_retry_on_next_login(make_reconciler, make_remote, auth, local):
    remote = make_remote(fail_on={"p1"})
    local.add("p1")
    make_reconciler(remote)

    await auth.login("token")
    await auth.logout()
    remote.fail_on.clear()
    await auth.login("token")

    assert remote.adds() == ["p1", "p1"]
    assert remote.server == ["p1"]
    assert local.ids == []


@pytest.mark.asyncio
async def test_authenticated_toggle_adds_then_removes(make_reconciler, make_remote, auth, notifier):
    remote = make_remote(initial=["p3"])
    reconciler = make_reconciler(remote)
    await auth.login("token")

    await reconciler.toggle_wishlist("p1")
    assert remote.calls == [("add", "p1")]
    assert set(reconciler.wishlist_product_ids) == {"p1", "p3"}
    assert notifier.history[-1].title == "Added to wishlist"

    await reconciler.toggle_wishlist("p3")
    assert remote.calls[-1] == ("remove", "p3")
    assert reconciler.wishlist_product_ids == ["p1"]
    assert notifier.history[-1].title == "Removed from wishlist"


@pytest.mark.asyncio
async def test_authenticated_toggle_failure_leaves_state(make_reconciler, make_remote, auth, notifier, local):
    remote = make_remote(initial=["p3"], fail_on={"p1"})
    reconciler = make_reconciler(remote)
    await auth.login("token")
    list_calls = remote.list_calls

    await reconciler.toggle_wishlist("p1")

    assert reconciler.wishlist_product_ids == ["p3"]
    assert remote.list_calls == list_calls
    assert local.ids == []
    notification = notifier.history[-1]
    assert notification.variant == NotificationVariant.DESTRUCTIVE
    assert notification.title == "Error"
    assert notification.description == "Failed to add p1"


@pytest.mark.asyncio
async def test_is_loading_while_request_in_flight(make_reconciler, make_remote, auth):
    remote = make_remote(delay=0.05)
    reconciler = make_reconciler(remote)
    await auth.login("token")
    assert not reconciler.is_loading

    task = asyncio.create_task(reconciler.toggle_wishlist("p1"))
    await asyncio.sleep(0.01)
    assert reconciler.is_loading

    await task
    assert not reconciler.is_loading


@pytest.mark.asyncio
async def test_logout_switches_back_to_local(make_reconciler, make_remote, auth, local):
    remote = make_remote(initial=["p3"])
    reconciler = make_reconciler(remote)
    await auth.login("token")
    assert reconciler.wishlist_product_ids == ["p3"]

    await auth.logout()

    assert isinstance(reconciler.identity, Anonymous)
    assert reconciler.wishlist_product_ids == []
    await reconciler.toggle_wishlist("p4")
    assert local.ids == ["p4"]
    assert remote.server == ["p3"]
    assert ("add", "p4") not in remote.calls


@pytest.mark.asyncio
async def test_rejected_ids_are_not_kept_for_retry(make_reconciler, make_remote, auth, local, notifier):
    remote = make_remote(fail_on={"retired"}, fail_status=404)
    local.add("retired")
    local.add("p1")
    make_reconciler(remote)

    for _ in range(3):
        await auth.login("token")
        await auth.logout()

    assert remote.adds() == ["retired", "p1"]
    assert local.ids == []
    warnings = [n for n in notifier.history if n.variant == NotificationVariant.WARNING]
    assert len(warnings) == 1
    assert "retried" not in warnings[0].description


@pytest.mark.asyncio
async def test_only_transient_failures_are_kept(make_reconciler, make_remote, auth, local, notifier):
    remote = make_remote(fail_on={"p1", "p2"}, fail_status=503)
    local.add("p1")
    local.add("p2")
    local.add("p3")
    reconciler = make_reconciler(remote)
    reconciler.detach()

    auth._token = "token"
    result = await reconciler.sync_auth_state()

    assert sorted(result.retained) == ["p1", "p2"]
    assert local.ids == ["p1", "p2"]
    assert notifier.history[-1].description == (
        "2 of 3 saved items could not be synced and will be retried next time you sign in."
    )


@pytest.mark.asyncio
async def test_logout_during_merge_keeps_new_guest_items(make_reconciler, make_remote, auth, local):
    remote = make_remote(delay=0.05)
    local.add("p1")
    reconciler = make_reconciler(remote)

    login = asyncio.create_task(auth.login("token"))
    await asyncio.sleep(0.01)
    await auth.logout()
    await reconciler.toggle_wishlist("p9")
    await login

    assert remote.server == ["p1"]
    assert local.ids == ["p9"]
    assert reconciler.wishlist_product_ids == ["p9"]


@pytest.mark.asyncio
async def test_fetch_finishing_after_logout_is_not_shown_later(make_reconciler, make_remote, auth):
    remote = make_remote(initial=["a1"], list_delay=0.05)
    reconciler = make_reconciler(remote)

    first_login = asyncio.create_task(auth.login("token-a"))
    await asyncio.sleep(0.01)
    await auth.logout()
    await first_login

    remote.server = ["b1"]
    remote.list_delay = 0
    await auth.login("token-b")

    assert reconciler.wishlist_product_ids == ["b1"]


@pytest.mark.asyncio
async def test_switching_accounts_refetches_server_ids(make_reconciler, make_remote, auth):
    remote = make_remote(initial=["a1"])
    reconciler = make_reconciler(remote)
    await auth.login("token-a")
    assert reconciler.wishlist_product_ids == ["a1"]

    remote.server = ["b1"]
    await auth.login("token-b")

    assert reconciler.wishlist_product_ids == ["b1"]
    assert remote.adds() == []

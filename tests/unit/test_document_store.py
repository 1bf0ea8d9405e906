import pytest

from app.documents.exceptions import NotFoundError, RemoteError
from app.documents.models import DocumentStatus
from app.lifecycle.optimistic import run_optimistic
from app.lifecycle.state import DocumentStore


class TestDocumentStore:
    def test_replace_all_notifies_listeners(self, make_document) -> None:
        store = DocumentStore()
        calls: list[int] = []
        store.subscribe(lambda: calls.append(1))

        store.replace_all([make_document("a")])

        assert calls == [1]
        assert [d.id for d in store.documents] == ["a"]

    def test_unsubscribe_stops_notifications(self, make_document) -> None:
        store = DocumentStore()
        calls: list[int] = []
        unsubscribe = store.subscribe(lambda: calls.append(1))
        unsubscribe()

        store.add(make_document("a"))

        assert calls == []

    def test_add_puts_newest_first(self, make_document) -> None:
        store = DocumentStore()
        store.replace_all([make_document("old")])

        store.add(make_document("new"))

        assert [d.id for d in store.documents] == ["new", "old"]

    def test_patch_replaces_record(self, make_document) -> None:
        store = DocumentStore()
        original = make_document("a", DocumentStatus.PENDING)
        store.replace_all([original])

        updated = store.patch("a", status=DocumentStatus.PROCESSING)

        assert updated.status is DocumentStatus.PROCESSING
        assert original.status is DocumentStatus.PENDING
        assert store.get("a") is updated

    def test_get_unknown_raises(self) -> None:
        with pytest.raises(NotFoundError):
            DocumentStore().get("missing")

    def test_outstanding_work(self, make_document) -> None:
        store = DocumentStore()
        store.replace_all([make_document("a"), make_document("b", DocumentStatus.ERROR)])
        assert not store.has_outstanding_work()

        store.patch("b", status=DocumentStatus.PENDING)
        assert store.has_outstanding_work()

    def test_remove_unknown_does_not_notify(self, make_document) -> None:
        store = DocumentStore()
        calls: list[int] = []
        store.subscribe(lambda: calls.append(1))

        store.remove("missing")

        assert calls == []

    def test_count_by_status(self, make_document) -> None:
        store = DocumentStore()
        store.replace_all(
            [make_document("a"), make_document("b"), make_document("c", DocumentStatus.ERROR)]
        )
        counts = store.count_by_status()
        assert counts[DocumentStatus.DONE] == 2
        assert counts[DocumentStatus.ERROR] == 1
        assert counts[DocumentStatus.PENDING] == 0


@pytest.mark.asyncio
class TestRunOptimistic:
    async def test_success_keeps_tentative_state(self, make_document) -> None:
        store = DocumentStore()
        store.replace_all([make_document("a", DocumentStatus.DONE)])
        seen: list[DocumentStatus] = []

        async def effect() -> str:
            seen.append(store.get("a").status)
            return "ok"

        result = await run_optimistic(store, "a", {"status": DocumentStatus.PROCESSING}, effect)

        assert result == "ok"
        assert seen == [DocumentStatus.PROCESSING]
        assert store.get("a").status is DocumentStatus.PROCESSING

    async def test_failure_restores_snapshot_fields(self, make_document) -> None:
        store = DocumentStore()
        store.replace_all([make_document("a", DocumentStatus.DONE, error_message="old")])

        async def effect() -> None:
            raise RemoteError("boom")

        with pytest.raises(RemoteError):
            await run_optimistic(
                store,
                "a",
                {"status": DocumentStatus.PROCESSING, "error_message": None},
                effect,
            )

        assert store.get("a").status is DocumentStatus.DONE
        assert store.get("a").error_message == "old"

    async def test_failure_uses_compensating_patch(self, make_document) -> None:
        store = DocumentStore()
        store.replace_all([make_document("a", DocumentStatus.DONE)])

        async def effect() -> None:
            raise RemoteError("analyzer down")

        with pytest.raises(RemoteError):
            await run_optimistic(
                store,
                "a",
                {"status": DocumentStatus.PROCESSING},
                effect,
                on_failure=lambda _snap, exc: {
                    "status": DocumentStatus.ERROR,
                    "error_message": str(exc),
                },
            )

        assert store.get("a").status is DocumentStatus.ERROR
        assert store.get("a").error_message == "analyzer down"

    async def test_failure_after_removal_leaves_store_alone(self, make_document) -> None:
        store = DocumentStore()
        store.replace_all([make_document("a", DocumentStatus.DONE)])

        async def effect() -> None:
            store.replace_all([])
            raise RemoteError("gone")

        with pytest.raises(RemoteError):
            await run_optimistic(store, "a", {"status": DocumentStatus.PROCESSING}, effect)

        assert store.documents == ()

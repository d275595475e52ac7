from threading import Barrier, Thread

import pytest

from backend.domain.errors import AssetNotFoundError, ProcessingConflictError, StoreError
from backend.domain.models import Artifacts, AssetStatus


def test_update_only_touches_supplied_fields(store, make_asset):
    original = make_asset(description="keep me")

    updated = store.update_status("video-1", {"status": AssetStatus.PROCESSING, "processing_progress": 10})

    assert updated.status == AssetStatus.PROCESSING
    assert updated.processing_progress == 10
    assert updated.description == "keep me"
    assert updated.title == original.title
    assert updated.created_at == original.created_at
    assert updated.updated_at >= original.updated_at
    assert store.read("video-1") == updated


def test_snapshots_are_not_mutated_by_later_writes(store, make_asset):
    make_asset()
    before = store.read("video-1")

    store.update_status("video-1", {"status": AssetStatus.PROCESSING, "processing_progress": 10})

    assert before.status == AssetStatus.PENDING
    assert before.processing_progress == 0


def test_expected_status_mismatch_writes_nothing(store, make_asset):
    make_asset(status=AssetStatus.PROCESSING, processing_progress=40)

    with pytest.raises(ProcessingConflictError):
        store.update_status(
            "video-1",
            {"processing_progress": 10},
            expected=(AssetStatus.PENDING, AssetStatus.FAILED),
        )

    assert store.read("video-1").processing_progress == 40


def test_expected_job_id_mismatch_writes_nothing(store, make_asset):
    make_asset(status=AssetStatus.PROCESSING, processing_progress=20, job_id="new-job")

    with pytest.raises(ProcessingConflictError):
        store.update_status("video-1", {"processing_progress": 40}, expected_job_id="old-job")

    assert store.read("video-1").processing_progress == 20


def test_progress_cannot_go_backwards_while_processing(store, make_asset):
    make_asset(status=AssetStatus.PROCESSING, processing_progress=60)

    with pytest.raises(StoreError):
        store.update_status("video-1", {"processing_progress": 40})


def test_reopening_resets_progress(store, make_asset):
    make_asset(status=AssetStatus.COMPLETED, processing_progress=100)

    updated = store.update_status(
        "video-1", {"status": AssetStatus.PROCESSING, "processing_progress": 10}
    )

    assert updated.processing_progress == 10


def test_unknown_fields_are_rejected(store, make_asset):
    make_asset()

    with pytest.raises(StoreError):
        store.update_status("video-1", {"title": "renamed"})


def test_update_missing_asset_raises_not_found(store):
    with pytest.raises(AssetNotFoundError):
        store.update_status("nope", {"processing_progress": 20})


def test_artifacts_are_stored_as_given(store, make_asset):
    make_asset(status=AssetStatus.PROCESSING, processing_progress=100)
    artifacts = Artifacts(
        transcript="hello",
        ai_script={"sections": ["intro"]},
        captions=[{"start": 0.0, "end": 1.0, "text": "hello"}],
        cuts=[{"start": 1.0, "end": 2.0, "reason": "pause"}],
        voiceover="voiceovers/video-1.mp3",
        zoom_points=[{"timestamp": 0.5, "scale": 1.3, "duration": 1.0}],
    )

    store.update_status("video-1", {"status": AssetStatus.COMPLETED, "artifacts": artifacts})

    assert store.read("video-1").artifacts is artifacts


def test_concurrent_conditional_updates_have_one_winner(store, make_asset):
    make_asset()
    workers = 16
    barrier = Barrier(workers)
    winners = []
    conflicts = []

    def claim(n):
        barrier.wait()
        try:
            store.update_status(
                "video-1",
                {"status": AssetStatus.PROCESSING, "job_id": f"job-{n}"},
                expected=(AssetStatus.PENDING,),
            )
            winners.append(n)
        except ProcessingConflictError:
            conflicts.append(n)

    threads = [Thread(target=claim, args=(n,)) for n in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(winners) == 1
    assert len(conflicts) == workers - 1
    assert store.read("video-1").job_id == f"job-{winners[0]}"


def test_delete_respects_expected_status(store, make_asset):
    make_asset(status=AssetStatus.PROCESSING)

    with pytest.raises(ProcessingConflictError):
        store.delete("video-1", expected=(AssetStatus.PENDING,))
    assert store.read("video-1") is not None

    store.update_status("video-1", {"status": AssetStatus.FAILED, "error_message": "boom"})
    store.delete("video-1", expected=(AssetStatus.FAILED,))
    assert store.read("video-1") is None


def test_list_by_project_is_newest_first(store, make_asset):
    first = make_asset("video-a")
    second = make_asset("video-b")
    make_asset("video-c", project_id="project-2")

    listed = store.list_by_project("project-1")

    assert [a.id for a in listed] == sorted(
        [first.id, second.id], key=lambda i: store.read(i).created_at, reverse=True
    )

from dam_backend.features.selection import LifecycleSnapshot, summarize
from dam_backend.shared import ItemKind


def test_summary_is_none_for_empty_selection() -> None:
    assert summarize([], [LifecycleSnapshot("a1")]) is None


def test_summary_is_none_when_no_selected_entity_is_known() -> None:
    assert summarize(["a1", "a2"], [LifecycleSnapshot("other")]) is None


def test_summary_counts_only_known_selected_entities() -> None:
    snaps = [
        LifecycleSnapshot("a1", is_published=True, approval_status="approved"),
        LifecycleSnapshot("a2", published_at="2024-01-01", archived_at="2024-02-01", approval_status="pending"),
        LifecycleSnapshot("a3", deleted_at="2024-03-01", approval_status="rejected"),
        LifecycleSnapshot("not-selected", is_published=True),
    ]
    summary = summarize(["a1", "a2", "a3", "unknown"], snaps)

    assert summary is not None
    assert summary.known_count == 3
    assert summary.published_count == 2
    assert summary.unpublished_count == 1
    assert summary.archived_count == 1
    assert summary.deleted_count == 1
    assert (summary.approval.approved, summary.approval.pending, summary.approval.rejected) == (1, 1, 1)


def test_empty_timestamps_count_as_absent() -> None:
    summary = summarize(["a1"], [LifecycleSnapshot("a1", published_at="", archived_at="", deleted_at="")])
    assert summary is not None
    assert summary.published_count == 0
    assert summary.unpublished_count == 1
    assert summary.archived_count == 0
    assert summary.deleted_count == 0


def test_unrecognized_approval_status_falls_in_no_bucket() -> None:
    snaps = [
        LifecycleSnapshot("a1", approval_status="in_review"),
        LifecycleSnapshot("a2", approval_status="none"),
        LifecycleSnapshot("a3", approval_status="PENDING"),
    ]
    summary = summarize(["a1", "a2", "a3"], snaps)
    assert summary is not None
    assert summary.approval.approved == 0
    assert summary.approval.pending == 1
    assert summary.approval.rejected == 0


def test_duplicate_snapshots_are_counted_once() -> None:
    snap = LifecycleSnapshot("a1", is_published=True)
    summary = summarize(["a1"], [snap, snap])
    assert summary is not None
    assert summary.known_count == 1
    assert summary.published_count == 1


def test_snapshot_from_mapping_parses_wire_rows() -> None:
    snap = LifecycleSnapshot.from_mapping(
        {"id": 7, "type": "execution", "is_published": "yes", "published_at": "", "deleted_at": "2024-05-05"}
    )
    assert snap.id == "7"
    assert snap.kind is ItemKind.EXECUTION
    # Only a literal true counts as published.
    assert snap.published is False
    assert snap.deleted is True


def test_summary_to_dict_shape() -> None:
    summary = summarize(["a1"], [LifecycleSnapshot("a1", approval_status="approved")])
    assert summary is not None
    assert summary.to_dict() == {
        "published_count": 0,
        "unpublished_count": 1,
        "archived_count": 0,
        "deleted_count": 0,
        "approval": {"approved": 1, "pending": 0, "rejected": 0},
        "known_count": 1,
    }

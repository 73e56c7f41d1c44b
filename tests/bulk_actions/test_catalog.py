import pytest

from dam_backend.features.bulk_actions import (
    ACTION_GROUPS,
    LIFECYCLE_ACTIONS,
    METADATA_ACTIONS,
    ActionId,
    GroupId,
    Tint,
    action_label,
    confirm_summary_text,
    filter_groups,
    get_action,
    metadata_operation,
)


def test_catalog_covers_every_action_once_in_presentation_order() -> None:
    ids = [a.id for g in ACTION_GROUPS for a in g.actions]
    assert sorted(ids, key=lambda a: a.value) == sorted(ActionId, key=lambda a: a.value)
    assert len(ids) == len(set(ids))
    assert [g.id for g in ACTION_GROUPS] == [
        GroupId.PUBLICATION,
        GroupId.ARCHIVE,
        GroupId.APPROVAL,
        GroupId.METADATA,
        GroupId.TRASH,
    ]


def test_severity_tints() -> None:
    assert get_action(ActionId.REJECT).severity_tint is Tint.WARNING
    assert get_action(ActionId.SOFT_DELETE).severity_tint is Tint.DANGER
    assert get_action(ActionId.FORCE_DELETE).severity_tint is Tint.DANGER
    assert get_action(ActionId.PUBLISH).severity_tint is None


def test_lifecycle_and_metadata_sets_are_disjoint() -> None:
    assert not (LIFECYCLE_ACTIONS & METADATA_ACTIONS)
    assert ActionId.REJECT not in LIFECYCLE_ACTIONS
    assert metadata_operation(ActionId.METADATA_CLEAR) == "clear"
    with pytest.raises(KeyError):
        metadata_operation(ActionId.PUBLISH)


def test_action_id_parse() -> None:
    assert ActionId.parse("publish") is ActionId.PUBLISH
    assert ActionId.parse(ActionId.REJECT) is ActionId.REJECT
    assert ActionId.parse("nope") is None
    assert ActionId.parse(None) is None


def test_confirm_summary_text() -> None:
    assert confirm_summary_text(ActionId.PUBLISH, 3) == "This will publish 3 selected items."
    assert confirm_summary_text(ActionId.RESTORE_TRASH, 1) == "This will restore from trash 1 selected item."
    assert action_label(ActionId.FORCE_DELETE) == "Permanently Delete"


def test_filter_groups_unknown_eligibility_returns_everything() -> None:
    assert filter_groups(ACTION_GROUPS, None) == list(ACTION_GROUPS)


def test_filter_groups_drops_empty_groups_and_keeps_order() -> None:
    eligible = {ActionId.FORCE_DELETE, ActionId.PUBLISH, ActionId.RESTORE_TRASH}
    groups = filter_groups(ACTION_GROUPS, eligible)

    assert [g.id for g in groups] == [GroupId.PUBLICATION, GroupId.TRASH]
    assert [a.id for a in groups[1].actions] == [ActionId.RESTORE_TRASH, ActionId.FORCE_DELETE]
    assert all(g.actions for g in groups)
    assert {a.id for g in groups for a in g.actions} == eligible


def test_filter_groups_with_empty_eligible_set() -> None:
    assert filter_groups(ACTION_GROUPS, frozenset()) == []


def test_group_to_dict() -> None:
    data = ACTION_GROUPS[2].to_dict()
    assert data["id"] == "approval"
    assert data["actions"][2] == {
        "id": "REJECT",
        "group": "approval",
        "label": "Mark Rejected",
        "helper_text": "Reject with a reason",
        "severity_tint": "warning",
    }

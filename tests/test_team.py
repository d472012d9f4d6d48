from bson import ObjectId

from projectdesk.services.project_service import merge_team_members

CREATOR = ObjectId()


def creator_team():
    return [{"user": CREATOR, "role": "admin"}]


def test_creator_is_never_added_again():
    team = merge_team_members(creator_team(), [CREATOR], CREATOR)
    assert team == creator_team()


def test_members_are_appended_in_order():
    b, c = ObjectId(), ObjectId()
    team = merge_team_members(creator_team(), [b, c], CREATOR)
    assert team == [
        {"user": CREATOR, "role": "admin"},
        {"user": b, "role": "member"},
        {"user": c, "role": "member"},
    ]


def test_repeated_candidates_are_added_once():
    b = ObjectId()
    team = merge_team_members(creator_team(), [b, b, CREATOR, b], CREATOR)
    assert [m["user"] for m in team] == [CREATOR, b]


def test_existing_members_are_kept_and_not_duplicated():
    b = ObjectId()
    existing = creator_team() + [{"user": b, "role": "admin"}]
    team = merge_team_members(existing, [b], CREATOR)
    assert team == existing


def test_input_team_is_not_mutated():
    original = creator_team()
    merge_team_members(original, [ObjectId()], CREATOR)
    assert original == creator_team()

from context_fusion.domain.models import Candidate
from context_fusion.domain.services.grouping import group_by_parent


def test_groups_in_first_appearance_order():
    selection = [
        Candidate(id="c1", parent_id="B", title="Doc B", text="b1"),
        Candidate(id="c2", parent_id="A", title="Doc A", text="a1"),
        Candidate(id="c3", parent_id="B", title="Doc B", text="b2"),
    ]
    groups = group_by_parent(selection)
    assert [g.parent_id for g in groups] == ["B", "A"]
    assert groups[0].chunks == ("b1", "b2")
    assert groups[1].chunks == ("a1",)


def test_first_non_empty_title_wins():
    selection = [
        Candidate(id="c1", parent_id="A", title=None, text="one"),
        Candidate(id="c2", parent_id="A", title="", text="two"),
        Candidate(id="c3", parent_id="A", title="Handbook", text="three"),
        Candidate(id="c4", parent_id="A", title="Other", text="four"),
    ]
    [group] = group_by_parent(selection)
    assert group.title == "Handbook"


def test_text_less_candidates_keep_their_group():
    selection = [
        Candidate(id="c1", parent_id="A", title="Empty"),
        Candidate(id="c2", parent_id=None, title=None, text="own parent"),
    ]
    groups = group_by_parent(selection)
    assert [(g.parent_id, g.chunks) for g in groups] == [("A", ()), ("c2", ("own parent",))]


def test_empty_selection():
    assert group_by_parent([]) == []

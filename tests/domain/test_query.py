from context_fusion.domain.services.query import augment_query


def test_focus_terms_are_appended():
    assert (
        augment_query("vacation policy", ["pto", "carry-over"])
        == "vacation policy\n\n[focus terms: pto, carry-over]"
    )


def test_no_terms_leaves_query_unchanged():
    assert augment_query("vacation policy") == "vacation policy"
    assert augment_query("vacation policy", ["", "  "]) == "vacation policy"


def test_terms_are_stripped():
    assert augment_query("q", [" a ", "b"]) == "q\n\n[focus terms: a, b]"

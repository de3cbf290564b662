from popravci.models import QueryState
from popravci.search import DirectorySearchEngine, DirectorySnapshot, apply_query
from tests.conftest import make_record


def ids(result):
    return [r.id for r in result.items]


# -------------------------
# Scenarios
# -------------------------
def test_category_filter_sorted_by_name(scenario_snapshot):
    result = apply_query(scenario_snapshot, QueryState(categories=("Vodoinstalacije",)))

    assert ids(result) == ["r1", "r3"]
    assert result.total_count == 2
    assert result.total_pages == 1


def test_free_text_only_keeps_real_matches(scenario_snapshot):
    result = apply_query(scenario_snapshot, QueryState(free_text_query="Ivan"))

    assert ids(result) == ["r1"]
    assert result.items[0].search_score == 20


def test_emergency_only_without_candidates_is_empty(scenario_snapshot):
    result = apply_query(scenario_snapshot, QueryState(emergency_only=True))

    assert result.items == []
    assert result.total_count == 0
    assert result.total_pages == 0


def test_page_past_the_end_is_empty():
    snapshot = DirectorySnapshot([make_record(f"r{i:02d}", f"Majstor {i:02d}") for i in range(12)])
    result = apply_query(snapshot, QueryState(page_size=10, page_number=5))

    assert result.items == []
    assert result.total_count == 12
    assert result.total_pages == 2


def test_clearing_search_restores_chosen_sort_and_drops_scores(directory_snapshot):
    state = QueryState(sort_field="wait_time_days", sort_order="desc")

    searching = apply_query(directory_snapshot, state.with_search("zagreb"))
    assert searching.sort_field == "search_score"
    assert all(r.search_score is not None for r in searching.items)

    cleared = apply_query(directory_snapshot, state.with_search("zagreb").with_search(""))
    assert (cleared.sort_field, cleared.sort_order) == ("wait_time_days", "desc")
    assert ids(cleared) == ["d", "b", "a", "e", "c"]
    assert all(r.search_score is None for r in cleared.items)


# -------------------------
# Properties
# -------------------------
def test_apply_query_is_idempotent(directory_snapshot):
    state = QueryState(free_text_query="zagreb vodo", languages=("Hrvatski",))

    first = apply_query(directory_snapshot, state)
    second = apply_query(directory_snapshot, state)

    assert first == second
    assert [r.search_score for r in first.items] == [r.search_score for r in second.items]


def test_tightening_filters_never_grows_results(directory_snapshot):
    engine = DirectorySearchEngine(directory_snapshot)
    state = QueryState()
    previous = engine.apply_query(state).total_count

    for tighten in (
        lambda s: s.with_search("zagreb split"),
        lambda s: s.toggle_language("Hrvatski"),
        lambda s: s.with_location("zag"),
        lambda s: s.with_emergency_only(True),
        lambda s: s.with_weekend_only(True),
    ):
        state = tighten(state)
        count = engine.apply_query(state).total_count
        assert count <= previous
        previous = count


def test_pages_concatenate_to_the_full_list(directory_snapshot):
    engine = DirectorySearchEngine(directory_snapshot)
    full = ids(engine.apply_query(QueryState(sort_field="created_at", page_size=100)))

    for page_size in (1, 2, 3, 4, 5, 7):
        state = QueryState(sort_field="created_at", page_size=page_size)
        first = engine.apply_query(state)
        collected = []
        for page in range(1, first.total_pages + 1):
            collected.extend(ids(engine.apply_query(state.go_to_page(page, first.total_pages))))
        assert collected == full


def test_search_ranks_by_relevance_even_when_name_sort_chosen():
    snapshot = DirectorySnapshot([
        make_record("z", "Zora Perić", location="Zagreb"),
        make_record("m", "Zagreb Majstori", location="Zagreb"),
        make_record("a", "ante Kos", location="Zagreb"),
        make_record("s", "Boris", location="Split"),
    ])
    state = QueryState(free_text_query="zagreb", sort_field="name", sort_order="desc")

    result = apply_query(snapshot, state)

    assert (result.sort_field, result.sort_order) == ("search_score", "desc")
    # equal scores fall back to name A-Z, ignoring case
    assert ids(result) == ["m", "a", "z"]
    assert [r.search_score for r in result.items] == [28, 8, 8]


# -------------------------
# Filters
# -------------------------
def test_category_filter_uses_exact_labels(directory_snapshot):
    result = apply_query(directory_snapshot, QueryState(categories=("Vodoinstalacije",)))
    assert ids(result) == ["a"]


def test_multi_select_filters_are_any_of(directory_snapshot):
    languages = apply_query(directory_snapshot, QueryState(languages=("Deutsch", "Italiano")))
    categories = apply_query(directory_snapshot, QueryState(categories=("Kupaonica", "Klima / Grijanje")))

    assert ids(languages) == ["b", "d"]
    assert ids(categories) == ["a", "d"]


def test_flag_filters_combine_with_and(directory_snapshot):
    assert ids(apply_query(directory_snapshot, QueryState(emergency_only=True))) == ["a", "d"]
    assert ids(apply_query(directory_snapshot, QueryState(weekend_only=True))) == ["b", "d"]
    both = QueryState(emergency_only=True, weekend_only=True)
    assert ids(apply_query(directory_snapshot, both)) == ["d"]


def test_location_matches_location_or_service_area(directory_snapshot):
    assert ids(apply_query(directory_snapshot, QueryState(location_query="split"))) == ["b", "e"]
    assert ids(apply_query(directory_snapshot, QueryState(location_query="ZAGREB"))) == ["a", "c"]


def test_search_reaches_bio_categories_and_subcategories(directory_snapshot):
    result = apply_query(directory_snapshot, QueryState(free_text_query="klima"))

    assert ids(result) == ["d"]
    assert result.items[0].search_score == 29


# -------------------------
# Sorting
# -------------------------
def test_name_sort_ignores_case(directory_snapshot):
    assert ids(apply_query(directory_snapshot, QueryState())) == ["b", "a", "c", "d", "e"]


def test_missing_wait_time_sorts_as_zero(directory_snapshot):
    result = apply_query(directory_snapshot, QueryState(sort_field="wait_time_days"))
    assert ids(result) == ["c", "e", "a", "b", "d"]


def test_location_sort_is_stable_for_equal_values(directory_snapshot):
    asc = apply_query(directory_snapshot, QueryState(sort_field="location"))
    desc = apply_query(directory_snapshot, QueryState(sort_field="location", sort_order="desc"))

    assert ids(asc) == ["e", "d", "b", "a", "c"]
    assert ids(desc) == ["a", "c", "b", "d", "e"]


def test_missing_created_at_sorts_first(directory_snapshot):
    asc = apply_query(directory_snapshot, QueryState(sort_field="created_at"))
    desc = apply_query(directory_snapshot, QueryState(sort_field="created_at", sort_order="desc"))

    assert ids(asc) == ["d", "c", "e", "a", "b"]
    assert ids(desc) == ["b", "a", "e", "c", "d"]


# -------------------------
# Snapshot
# -------------------------
def test_search_does_not_annotate_snapshot_records(directory_snapshot):
    apply_query(directory_snapshot, QueryState(free_text_query="zagreb"))
    assert all(r.search_score is None for r in directory_snapshot)


def test_duplicate_ids_keep_first_record():
    snapshot = DirectorySnapshot([make_record("x", "First"), make_record("x", "Second")])

    assert len(snapshot) == 1
    assert snapshot.get("x").name == "First"
    assert snapshot.get("missing") is None


def test_facets_in_first_seen_order(directory_snapshot):
    assert directory_snapshot.available_categories() == [
        "Vodoinstalacije",
        "Kupaonica",
        "Električne instalacije",
        "2. Vodoinstalacije",
        "Klima / Grijanje",
    ]
    assert directory_snapshot.available_languages() == ["Hrvatski", "English", "Deutsch", "Italiano"]


def test_from_rows_skips_only_unidentifiable_rows():
    snapshot = DirectorySnapshot.from_rows([
        {"id": "ok", "name": "Ana", "categories": None},
        {"name": "No id"},
        {"id": "   "},
        "not a row",
        {"id": "bad", "categories": 5},
    ])

    assert [r.id for r in snapshot] == ["ok", "bad"]
    assert snapshot.get("bad").categories == []


def test_badly_typed_fields_keep_the_majstor_listed():
    snapshot = DirectorySnapshot.from_rows([
        {"id": "a", "name": "Ivan Horvat", "created_at": ""},
        {"id": "b", "name": "Ana Babić", "wait_time_days": 2.5},
        {"id": "c", "name": "Marko Ivić", "created_at": "not a date", "emergency_available": "yes"},
    ])

    result = apply_query(snapshot, QueryState())

    assert ids(result) == ["b", "a", "c"]
    assert snapshot.get("a").created_at is None
    assert snapshot.get("b").wait_time_days is None
    assert snapshot.get("c").emergency_available is True
    assert ids(apply_query(snapshot, QueryState(sort_field="created_at"))) == ["a", "b", "c"]


def test_failed_snapshot_surfaces_error_with_empty_results():
    result = apply_query(DirectorySnapshot(error="HTTP 401"), QueryState(free_text_query="klima"))

    assert result.items == []
    assert result.total_count == 0
    assert result.total_pages == 0
    assert result.error == "HTTP 401"

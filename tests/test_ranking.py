import types

from marketplace.schemas.search_schema import SearchCriteria, SortByEnum
from marketplace.utils.ranking import rank_freelancers

# 1 公里對應的緯度 (沿經線)
KM_IN_DEGREES = 1 / 111.195


def make_candidate(name, category="design", hourly_rate=50, title="Freelancer", skills=(),
                   location=None, latitude=None, longitude=None, avg_rating=0.0, review_count=0):
    return {
        "user": types.SimpleNamespace(name=name, location=location, latitude=latitude, longitude=longitude),
        "profile": types.SimpleNamespace(title=title, category=category, hourly_rate=hourly_rate, skills=list(skills)),
        "avg_rating": avg_rating,
        "review_count": review_count,
    }


def names(results):
    return [r["user"].name for r in results]


def test_no_criteria_keeps_enumeration_order():
    candidates = [make_candidate("A"), make_candidate("B"), make_candidate("C")]
    results = rank_freelancers(candidates, SearchCriteria())
    assert names(results) == ["A", "B", "C"]
    assert all(r["distance"] is None for r in results)


def test_query_matches_name_title_or_skill_case_insensitive():
    candidates = [
        make_candidate("Alice Wang"),
        make_candidate("Bob", title="Senior LOGO Designer"),
        make_candidate("Carol", skills=["Figma", "Logo design"]),
        make_candidate("Dave", title="Copywriter", skills=["SEO"]),
    ]
    assert names(rank_freelancers(candidates, SearchCriteria(query="logo"))) == ["Bob", "Carol"]
    assert names(rank_freelancers(candidates, SearchCriteria(query="ALICE"))) == ["Alice Wang"]


def test_price_bounds_are_inclusive_and_conjunctive():
    candidates = [make_candidate(str(rate), hourly_rate=rate) for rate in (40, 50, 75, 100, 120)]
    results = rank_freelancers(candidates, SearchCriteria(min_price=50, max_price=100))
    assert names(results) == ["50", "75", "100"]
    assert all(50 <= r["profile"].hourly_rate <= 100 for r in results)


def test_empty_intersection_returns_empty_list():
    candidates = [make_candidate("A", hourly_rate=60), make_candidate("B", category="writing", hourly_rate=30)]
    assert rank_freelancers(candidates, SearchCriteria(min_price=100, max_price=50)) == []
    assert rank_freelancers(candidates, SearchCriteria(category="writing", min_price=50)) == []


def test_category_and_location_filters():
    candidates = [
        make_candidate("A", category="design", location="Taipei City"),
        make_candidate("B", category="design", location="Kaohsiung"),
        make_candidate("C", category="marketing", location="taipei"),
        make_candidate("D", category="design"),
    ]
    results = rank_freelancers(candidates, SearchCriteria(category="design", location="TAIPEI"))
    assert names(results) == ["A"]


def test_zero_review_freelancer_excluded_by_positive_min_rating():
    candidates = [
        make_candidate("New"),
        make_candidate("Rated", avg_rating=4.5, review_count=2),
    ]
    assert names(rank_freelancers(candidates, SearchCriteria(min_rating=0.5))) == ["Rated"]
    assert names(rank_freelancers(candidates, SearchCriteria(min_rating=0))) == ["New", "Rated"]
    # 邊界為「含」
    assert names(rank_freelancers(candidates, SearchCriteria(min_rating=4.5))) == ["Rated"]


def test_distance_sort_puts_unknown_distances_last():
    candidates = [
        make_candidate("F1", latitude=5 * KM_IN_DEGREES, longitude=0.0),
        make_candidate("F2"),
        make_candidate("F3", latitude=2 * KM_IN_DEGREES, longitude=0.0),
    ]
    criteria = SearchCriteria(latitude=0.0, longitude=0.0, sort_by=SortByEnum.distance)
    results = rank_freelancers(candidates, criteria)
    assert names(results) == ["F3", "F1", "F2"]
    assert results[0]["distance"] < results[1]["distance"]
    assert results[2]["distance"] is None


def test_distance_sort_is_stable_among_unknown_distances():
    candidates = [make_candidate("X"), make_candidate("Near", latitude=0.0, longitude=0.0), make_candidate("Y")]
    criteria = SearchCriteria(latitude=0.0, longitude=0.0, sort_by=SortByEnum.distance)
    assert names(rank_freelancers(candidates, criteria)) == ["Near", "X", "Y"]


def test_max_distance_never_excludes_candidates_without_coordinates():
    candidates = [
        make_candidate("Close", latitude=1 * KM_IN_DEGREES, longitude=0.0),
        make_candidate("Far", latitude=50 * KM_IN_DEGREES, longitude=0.0),
        make_candidate("Unknown"),
    ]
    criteria = SearchCriteria(latitude=0.0, longitude=0.0, max_distance=10)
    assert names(rank_freelancers(candidates, criteria)) == ["Close", "Unknown"]


def test_searcher_at_equator_still_gets_distances():
    # 緯度 0 是合法座標
    candidates = [make_candidate("A", latitude=0.0, longitude=1.0)]
    results = rank_freelancers(candidates, SearchCriteria(latitude=0.0, longitude=0.0))
    assert results[0]["distance"] is not None


def test_sort_by_rating_and_price():
    candidates = [
        make_candidate("A", hourly_rate=80, avg_rating=3.0),
        make_candidate("B", hourly_rate=50, avg_rating=5.0),
        make_candidate("C", hourly_rate=65, avg_rating=4.0),
    ]
    assert names(rank_freelancers(candidates, SearchCriteria(sort_by=SortByEnum.rating))) == ["B", "C", "A"]
    assert names(rank_freelancers(candidates, SearchCriteria(sort_by=SortByEnum.price_asc))) == ["B", "C", "A"]
    assert names(rank_freelancers(candidates, SearchCriteria(sort_by=SortByEnum.price_desc))) == ["A", "C", "B"]


def test_design_sorted_by_price_ascending():
    candidates = [
        make_candidate("A", category="design", hourly_rate=80),
        make_candidate("B", category="design", hourly_rate=50),
        make_candidate("C", category="marketing", hourly_rate=40),
    ]
    criteria = SearchCriteria(category="design", sort_by=SortByEnum.price_asc)
    assert names(rank_freelancers(candidates, criteria)) == ["B", "A"]

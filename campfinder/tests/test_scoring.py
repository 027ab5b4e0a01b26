from __future__ import annotations

from datetime import date, datetime, timezone

from campfinder.recommendations.config import LocationConfig
from campfinder.recommendations.matchers import LocationClassifier
from campfinder.recommendations.models import (
    AmenityGroup,
    BudgetRange,
    DurationPreference,
    LocationPreference,
    LocationType,
    ParentGoal,
    Preferences,
    SpecialNeeds,
)
from campfinder.recommendations.scoring import (
    AGE_MISMATCH_REASON,
    AGE_UNKNOWN_REASON,
    score_camp,
)
from campfinder.tests.factories import ARTS, SPORTS, STEM, make_camp

NOW = datetime(2027, 3, 1, tzinfo=timezone.utc)
AGE_REASON = "Perfect for 12-year-olds"


def _score(camp, **prefs):
    prefs.setdefault("child_age", 12)
    return score_camp(camp, Preferences(**prefs), now=NOW)


# ── Age filter ───────────────────────────────────────────────────────────


class TestAgeFilter:
    def test_child_too_young(self):
        camp = make_camp(age_min=10, age_max=14, featured=True, categories=[STEM])
        result = _score(camp, child_age=8, interests=["stem"])
        assert result.score == 0
        assert result.reasons == [AGE_MISMATCH_REASON]

    def test_child_too_old(self):
        result = _score(make_camp(age_min=6, age_max=10), child_age=11)
        assert result.score == 0
        assert result.reasons == ["Age does not match camp requirements"]

    def test_missing_age_bounds(self):
        result = _score(make_camp(age_min=None), interests=["stem"])
        assert result.score == 0
        assert result.reasons == [AGE_UNKNOWN_REASON]

    def test_missing_child_age_is_no_match(self):
        result = score_camp(make_camp(), Preferences(), now=NOW)
        assert result.score == 0
        assert result.reasons == [AGE_MISMATCH_REASON]

    def test_bounds_are_inclusive(self):
        camp = make_camp(age_min=12, age_max=12)
        result = _score(camp)
        assert result.reasons == [AGE_REASON]


# ── Worked scenarios ─────────────────────────────────────────────────────


def test_full_match_is_clamped_to_100():
    camp = make_camp(
        age_min=10,
        age_max=14,
        categories=[STEM],
        price=600.0,
        early_bird_price=500.0,
        early_bird_deadline=date(2027, 5, 1),
        start_date=date(2027, 7, 5),
        end_date=date(2027, 7, 11),
        featured=True,
        capacity=20,
        enrolled_count=5,
    )
    result = _score(
        camp,
        interests=["stem"],
        budget_range=BudgetRange(min=400, max=700),
        duration=DurationPreference.week,
    )
    assert result.score == 100
    assert result.reasons == [
        AGE_REASON,
        "Matches STEM interest",
        "Early bird discount available",
        "Week-long intensive",
        "Plenty of spots available",
    ]


def test_local_preference_penalises_camp_abroad():
    camp = make_camp(categories=[STEM], location="Hong Kong")
    result = _score(
        camp,
        interests=["stem"],
        location_preference=LocationPreference(type=LocationType.local),
    )
    # 70 for the category, minus 20 for being outside the home market
    assert result.score == 50
    assert result.reasons == [AGE_REASON, "Matches STEM interest"]


def test_penalty_alone_clamps_to_zero():
    camp = make_camp(location="Hong Kong")
    result = _score(camp, location_preference=LocationPreference(type=LocationType.local))
    assert result.score == 0
    assert result.reasons == [AGE_REASON]


def test_penalty_is_not_clamped_before_later_signals():
    # -20 from location, then +5 featured: the running total stays negative.
    camp = make_camp(location="Hong Kong", featured=True)
    result = _score(camp, location_preference=LocationPreference(type=LocationType.local))
    assert result.score == 0


# ── Parent goals ─────────────────────────────────────────────────────────


class TestParentGoals:
    def test_partial_goal_match(self):
        camp = make_camp(name="Engineers Week", description="A coding workshop for builders.")
        result = _score(
            camp,
            parent_goals=[ParentGoal.skill_development, ParentGoal.physical_activity],
        )
        assert result.score == 20
        assert "Aligns with your skill development goals" in result.reasons

    def test_multiple_goals_listed_in_request_order(self):
        camp = make_camp(name="Team Sports Camp", description="Outdoor games and friends.")
        result = _score(
            camp,
            parent_goals=[ParentGoal.social_connection, ParentGoal.physical_activity],
        )
        assert result.score == 40
        assert "Aligns with your social connection and physical activity goals" in result.reasons

    def test_no_goal_match_adds_nothing(self):
        result = _score(make_camp(), parent_goals=[ParentGoal.academic_enrichment])
        assert result.score == 0
        assert result.reasons == [AGE_REASON]

    def test_keywords_match_inside_words(self):
        # "art" is a substring of "party"
        camp = make_camp(name="Pool Party Week")
        result = _score(camp, parent_goals=[ParentGoal.creative_expression])
        assert result.score == 40


# ── Categories ───────────────────────────────────────────────────────────


class TestCategories:
    def test_superset_of_interests_gets_full_credit(self):
        camp = make_camp(categories=[STEM, ARTS, SPORTS])
        result = _score(camp, interests=["stem", "arts"])
        assert result.score == 70
        assert "Matches STEM, Arts interests" in result.reasons

    def test_fraction_of_requested_interests(self):
        camp = make_camp(categories=[STEM])
        result = _score(camp, interests=["stem", "arts"])
        assert result.score == 35

    def test_no_overlap(self):
        result = _score(make_camp(categories=[SPORTS]), interests=["stem"])
        assert result.score == 0


# ── Budget ───────────────────────────────────────────────────────────────


class TestBudget:
    def test_within_budget(self):
        result = _score(make_camp(price=300.0), budget_range=BudgetRange(min=200, max=400))
        assert result.score == 50
        assert "Within your budget" in result.reasons

    def test_slightly_above_budget(self):
        result = _score(make_camp(price=450.0), budget_range=BudgetRange(min=200, max=400))
        assert result.score == 25
        assert "Slightly above budget but great value" in result.reasons

    def test_well_above_budget(self):
        result = _score(make_camp(price=500.0), budget_range=BudgetRange(min=200, max=400))
        assert result.score == 0
        assert result.reasons == [AGE_REASON]

    def test_active_early_bird_is_effective_price(self):
        camp = make_camp(price=450.0, early_bird_price=350.0, early_bird_deadline=date(2027, 4, 1))
        result = _score(camp, budget_range=BudgetRange(min=200, max=400))
        assert result.score == 50
        assert "Early bird discount available" in result.reasons

    def test_expired_early_bird_uses_list_price(self):
        camp = make_camp(price=450.0, early_bird_price=350.0, early_bird_deadline=date(2027, 2, 1))
        result = _score(camp, budget_range=BudgetRange(min=200, max=400))
        assert result.score == 25


# ── Duration ─────────────────────────────────────────────────────────────


class TestDuration:
    def test_week(self):
        camp = make_camp(start_date=date(2027, 7, 5), end_date=date(2027, 7, 11))
        result = _score(camp, duration=DurationPreference.week)
        assert result.score == 50
        assert "Week-long intensive" in result.reasons

    def test_single_day_counts_as_half_day(self):
        camp = make_camp(start_date=date(2027, 7, 1), end_date=date(2027, 7, 1))
        result = _score(camp, duration=DurationPreference.half_day)
        assert result.reasons[-1] == "Half-day schedule"

    def test_full_day_needs_exactly_one_day(self):
        camp = make_camp(start_date=date(2027, 7, 1), end_date=date(2027, 7, 2))
        assert _score(camp, duration=DurationPreference.full_day).score == 50
        assert _score(camp, duration=DurationPreference.week).score == 0

    def test_multi_week(self):
        camp = make_camp(start_date=date(2027, 7, 1), end_date=date(2027, 7, 15))
        result = _score(camp, duration=DurationPreference.multi_week)
        assert "Multi-week experience" in result.reasons

    def test_missing_dates_skip_duration(self):
        result = _score(make_camp(), duration=DurationPreference.week)
        assert result.score == 0


# ── Special needs ────────────────────────────────────────────────────────


class TestSpecialNeeds:
    def test_dietary_category(self):
        camp = make_camp(amenities=[AmenityGroup(category="Food & Drink", items=[])])
        result = _score(camp, special_needs=SpecialNeeds(dietary=["Halal"]))
        assert result.score == 8
        assert "Accommodates dietary needs" in result.reasons

    def test_accessibility_item_match(self):
        camp = make_camp(amenities=[AmenityGroup(category="Facilities", items=["Wheelchair Access"])])
        result = _score(camp, special_needs=SpecialNeeds(accessibility=["wheelchair"]))
        assert "Accessible facilities available" in result.reasons

    def test_both_needs(self):
        camp = make_camp(amenities=[
            AmenityGroup(category="Dietary", items=["Vegan"]),
            AmenityGroup(category="Accessibility", items=["Ramps"]),
        ])
        result = _score(
            camp,
            special_needs=SpecialNeeds(dietary=["Vegan"], accessibility=["Ramps"]),
        )
        assert result.score == 15

    def test_half_points_round_up(self):
        camp = make_camp(featured=True, amenities=[AmenityGroup(category="Dietary")])
        result = _score(camp, special_needs=SpecialNeeds(dietary=["Vegan"]))
        assert result.score == 13

    def test_no_support(self):
        camp = make_camp(amenities=[AmenityGroup(category="Safety", items=["First aid"])])
        result = _score(camp, special_needs=SpecialNeeds(dietary=["Vegan"], accessibility=["Ramps"]))
        assert result.score == 0


# ── Location ─────────────────────────────────────────────────────────────


class TestLocation:
    def test_local_with_county(self):
        camp = make_camp(location="Dublin, Ireland")
        result = _score(
            camp,
            location_preference=LocationPreference(type=LocationType.local, county="Dublin"),
        )
        assert result.score == 40
        assert "Located in Dublin" in result.reasons

    def test_local_other_county(self):
        camp = make_camp(location="Galway")
        result = _score(
            camp,
            location_preference=LocationPreference(type=LocationType.local, county="Kerry"),
        )
        assert result.score == 30
        assert "Located in Ireland" in result.reasons

    def test_international(self):
        camp = make_camp(location="Barcelona, Spain")
        result = _score(camp, location_preference=LocationPreference(type=LocationType.international))
        assert result.score == 30
        assert "International destination" in result.reasons

    def test_international_penalises_home_camp(self):
        camp = make_camp(location="Cork", categories=[STEM])
        result = _score(
            camp,
            interests=["stem"],
            location_preference=LocationPreference(type=LocationType.international),
        )
        assert result.score == 50

    def test_markers_are_configurable(self):
        classifier = LocationClassifier(LocationConfig(markers=("hong kong",), region_label="Hong Kong"))
        camp = make_camp(location="Hong Kong")
        result = score_camp(
            camp,
            Preferences(child_age=12, location_preference=LocationPreference(type=LocationType.local)),
            location_classifier=classifier,
            now=NOW,
        )
        assert result.score == 30
        assert "Located in Hong Kong" in result.reasons


# ── Availability & featured ──────────────────────────────────────────────


class TestAvailability:
    def test_plenty_of_spots(self):
        result = _score(make_camp(capacity=20, enrolled_count=5))
        assert result.score == 5
        assert result.reasons == [AGE_REASON, "Plenty of spots available"]

    def test_limited_spots_has_reason_but_no_points(self):
        result = _score(make_camp(capacity=10, enrolled_count=7))
        assert result.score == 0
        assert result.reasons == [AGE_REASON, "Limited spots remaining"]

    def test_full_camp(self):
        result = _score(make_camp(capacity=10, enrolled_count=10))
        assert result.reasons == [AGE_REASON]

    def test_featured_adds_points_without_reason(self):
        result = _score(make_camp(featured=True))
        assert result.score == 5
        assert result.reasons == [AGE_REASON]


# ── Properties ───────────────────────────────────────────────────────────


def test_omitting_a_preference_only_removes_its_own_contribution():
    camp = make_camp(
        categories=[STEM],
        price=300.0,
        start_date=date(2027, 7, 5),
        end_date=date(2027, 7, 7),
    )
    full = _score(camp, interests=["stem", "arts"], budget_range=BudgetRange(min=0, max=400))
    without_budget = _score(camp, interests=["stem", "arts"])

    assert full.score == 85
    assert without_budget.score == 35
    assert [r for r in full.reasons if r != "Within your budget"] == without_budget.reasons


def test_scores_are_bounded_integers():
    camp = make_camp(
        categories=[STEM],
        featured=True,
        capacity=50,
        enrolled_count=0,
        location="Dublin",
        amenities=[AmenityGroup(category="Dietary"), AmenityGroup(category="Accessibility")],
        start_date=date(2027, 7, 1),
        end_date=date(2027, 7, 20),
        description="Advanced team science adventure with art.",
    )
    prefs_list = [
        Preferences(child_age=age, interests=["stem"], parent_goals=list(ParentGoal))
        for age in (5, 6, 10, 14, 15)
    ] + [
        Preferences(
            child_age=10,
            interests=["stem"],
            budget_range=BudgetRange(min=0, max=1000),
            duration=DurationPreference.multi_week,
            special_needs=SpecialNeeds(dietary=["x"], accessibility=["y"]),
            location_preference=LocationPreference(type=LocationType.international),
        ),
    ]
    for prefs in prefs_list:
        result = score_camp(camp, prefs, now=NOW)
        assert isinstance(result.score, int)
        assert 0 <= result.score <= 100


def test_scoring_is_deterministic_for_pinned_time():
    camp = make_camp(price=450.0, early_bird_price=350.0, early_bird_deadline=date(2027, 4, 1))
    prefs = Preferences(child_age=12, budget_range=BudgetRange(min=0, max=400))
    assert score_camp(camp, prefs, now=NOW) == score_camp(camp, prefs, now=NOW)

"""Tests for pawjournal.assistant.parsing."""

import pytest

from pawjournal.assistant.parsing import (
    LabeledReplyParser,
    PlanMilestone,
    PlanTask,
    TriageUrgency,
    parse_care_plan_response,
    parse_triage_response,
)

TRIAGE_REPLY = """URGENCY: SOON
ASSESSMENT: Mild stomach upset, likely dietary.
RECOMMENDATIONS:
- Withhold food for 12 hours
- Offer small amounts of water
- Call the vet if vomiting continues
"""

PLAN_REPLY = """TITLE: Lean and Strong
DESCRIPTION: A gradual plan to bring Biscuit to a healthy weight.
TASKS:
- Morning walk|20 minutes at an easy pace
- Measure meals
MILESTONES:
- Day 7: Weigh-in
- Day 14: Vet check
"""


class TestLabeledReplyParser:
    def test_sections(self):
        parser = LabeledReplyParser(scalar_labels=("A",), list_labels=("ITEMS",))
        reply = parser.parse("A: one\nITEMS:\n- x\n* y\n1. z\nsomething else")
        assert reply.fields == {"A": "one"}
        assert reply.lists == {"ITEMS": ["x", "y", "z"]}
        assert reply.loose == ["something else"]

    def test_markdown_labels(self):
        parser = LabeledReplyParser(scalar_labels=("URGENCY",))
        assert parser.parse("**URGENCY:** URGENT").fields == {"URGENCY": "URGENT"}

    def test_scalar_label_closes_section(self):
        parser = LabeledReplyParser(scalar_labels=("B",), list_labels=("ITEMS",))
        reply = parser.parse("ITEMS:\n- x\nB: done\n- stray")
        assert reply.lists["ITEMS"] == ["x"]
        assert reply.loose == ["- stray"]

    @pytest.mark.parametrize("text", [None, "", "\n\n"])
    def test_empty(self, text):
        reply = LabeledReplyParser().parse(text)
        assert (reply.fields, reply.lists, reply.loose) == ({}, {}, [])


class TestTriage:
    @pytest.mark.smoke
    def test_well_formed(self):
        result = parse_triage_response(TRIAGE_REPLY, "Biscuit")
        assert result.urgency is TriageUrgency.SOON
        assert result.assessment == "Mild stomach upset, likely dietary."
        assert len(result.recommendations) == 3
        assert result.recommendations[0] == "Withhold food for 12 hours"

    @pytest.mark.parametrize(
        "text, urgency",
        [("EMERGENCY", TriageUrgency.EMERGENCY), ("urgent care", TriageUrgency.URGENT),
         ("soon-ish", TriageUrgency.SOON), ("", TriageUrgency.MONITOR), ("not sure", TriageUrgency.MONITOR)],
    )
    def test_urgency_from_text(self, text, urgency):
        assert TriageUrgency.from_text(text) is urgency

    def test_unstructured_reply_falls_back(self):
        result = parse_triage_response("It is probably nothing serious.", "Biscuit")
        assert result.urgency is TriageUrgency.MONITOR
        assert result.assessment == "It is probably nothing serious."
        assert "Ensure Biscuit stays hydrated" in result.recommendations

    def test_empty_reply_defaults(self):
        result = parse_triage_response(None, "Biscuit")
        assert result.assessment == "Based on the symptoms described, we recommend monitoring Biscuit closely."
        assert len(result.recommendations) == 3

    def test_urgency_titles(self):
        assert TriageUrgency.EMERGENCY.title == "Emergency"
        assert TriageUrgency.MONITOR.guidance.startswith("Keep an eye")


class TestCarePlan:
    @pytest.mark.smoke
    def test_well_formed(self):
        plan = parse_care_plan_response(PLAN_REPLY, "Biscuit", 14)
        assert plan.title == "Lean and Strong"
        assert plan.description.startswith("A gradual plan")
        assert plan.tasks == [PlanTask("Morning walk", "20 minutes at an easy pace"), PlanTask("Measure meals")]
        assert plan.milestones == [PlanMilestone(7, "Weigh-in"), PlanMilestone(14, "Vet check")]

    def test_defaults(self):
        plan = parse_care_plan_response("Sorry, I cannot help with that.", "Biscuit", 14)
        assert plan.title == "Biscuit's Care Plan"
        assert plan.description == ""
        assert [t.title for t in plan.tasks] == ["Morning check-in", "Activity session", "Evening log"]
        assert plan.milestones == [PlanMilestone(7, "Mid-plan check-in"), PlanMilestone(14, "Plan completion review")]

    def test_short_plan_milestone_floor(self):
        plan = parse_care_plan_response("", "Biscuit", 1)
        assert plan.milestones[0].day == 1

    def test_milestone_without_day_dropped(self):
        plan = parse_care_plan_response("MILESTONES:\n- Sometime: celebrate\n- Day 3: check", "Biscuit", 7)
        assert plan.milestones == [PlanMilestone(3, "check")]

from datetime import date
from unittest.mock import patch

import pytest

from study_planner.app import (
    WizardCancelled, wizard_prompt, wizard_int_prompt, parse_date, format_minutes, run_command,
)
from study_planner.db import init_db
from study_planner.distributor import finalize_goal
from study_planner.goals import (
    create_draft, add_topics, configure_routine, get_goal, get_topics, list_goals, remove_topic,
)
from study_planner.models import GOAL_ACTIVE, GOAL_DRAFT
from study_planner.tasks import list_sessions, get_session


def test_wizard_cancelled_is_exception():
    with pytest.raises(WizardCancelled):
        raise WizardCancelled()


def test_wizard_prompt_raises_on_q():
    with patch("study_planner.app.Prompt.ask", return_value="q"):
        with pytest.raises(WizardCancelled):
            wizard_prompt("Main subject")


def test_wizard_prompt_raises_on_menu():
    with patch("study_planner.app.Prompt.ask", return_value="menu"):
        with pytest.raises(WizardCancelled):
            wizard_prompt("Main subject")


def test_wizard_prompt_returns_normal_input():
    with patch("study_planner.app.Prompt.ask", return_value="Linear Algebra"):
        assert wizard_prompt("Main subject") == "Linear Algebra"


def test_wizard_int_prompt_retries_until_number():
    with patch("study_planner.app.Prompt.ask", side_effect=["lots", "3"]):
        assert wizard_int_prompt("Study hours per day") == 3


def test_parse_date():
    assert parse_date(" 2024-03-01 ") == date(2024, 3, 1)
    with pytest.raises(ValueError):
        parse_date("next friday")


def test_format_minutes():
    assert format_minutes(120) == "2h"
    assert format_minutes(90) == "1h30"


def test_new_goal_wizard(tmp_db, today):
    init_db(tmp_db)
    answers = ["Math", "2024-01-11", "Algebra", "6", "", "2", "SEG,QUA,SEX"]
    with patch("study_planner.app.Prompt.ask", side_effect=answers):
        run_command(tmp_db, "new", today)
    goals = list_goals(tmp_db)
    assert len(goals) == 1
    assert goals[0].status == GOAL_ACTIVE
    assert goals[0].weekdays == frozenset({0, 2, 4})
    assert len(list_sessions(tmp_db, goals[0].id)) == 4


def test_new_goal_wizard_cancelled(tmp_db, today):
    init_db(tmp_db)
    with patch("study_planner.app.Prompt.ask", side_effect=["q"]):
        run_command(tmp_db, "new", today)
    assert list_goals(tmp_db) == []


def test_new_goal_wizard_drops_suggested_topics(tmp_db, today):
    init_db(tmp_db)
    answers = ["Math", "2024-01-11", "Algebra", "6", "Geometry", "20", "", "2", "MON,WED,FRI"]
    with patch("study_planner.app.Prompt.ask", side_effect=answers), \
            patch("study_planner.app.Confirm.ask", return_value=True):
        run_command(tmp_db, "new", today)
    goal = list_goals(tmp_db)[0]
    assert goal.status == GOAL_ACTIVE
    assert [t.name for t in get_topics(tmp_db, goal.id) if t.is_active] == ["Algebra"]


def test_new_goal_wizard_keeps_draft_when_declined(tmp_db, today):
    init_db(tmp_db)
    answers = ["Math", "2024-01-11", "Geometry", "20", "", "2", "SEG"]
    with patch("study_planner.app.Prompt.ask", side_effect=answers), \
            patch("study_planner.app.Confirm.ask", return_value=False):
        run_command(tmp_db, "new", today)
    goal = list_goals(tmp_db)[0]
    assert goal.status == GOAL_DRAFT
    assert list_sessions(tmp_db, goal.id) == []


def test_new_goal_wizard_schedules_what_fits(tmp_db, today):
    init_db(tmp_db)
    answers = ["Math", "2024-01-11", "Geometry", "20", "", "2", "SEG"]
    with patch("study_planner.app.Prompt.ask", side_effect=answers), \
            patch("study_planner.app.Confirm.ask", side_effect=[False, True]):
        run_command(tmp_db, "new", today)
    goal = list_goals(tmp_db)[0]
    assert goal.status == GOAL_ACTIVE
    # Monday 8 is the only study date left
    assert [s.scheduled_date for s in list_sessions(tmp_db, goal.id)] == [date(2024, 1, 8)]


def _draft_goal(tmp_db, today):
    init_db(tmp_db)
    goal = create_draft(tmp_db, "Math", date(2024, 1, 11), today)
    add_topics(tmp_db, goal.id, [{"name": "Geometry", "hours": 20}])
    configure_routine(tmp_db, goal.id, 2, {0})
    return goal


def test_edit_command_makes_draft_feasible(tmp_db, today):
    goal = _draft_goal(tmp_db, today)
    answers = [str(goal.id), "6", "2", "SEG,QUA,SEX"]
    with patch("study_planner.app.Prompt.ask", side_effect=answers), \
            patch("study_planner.app.Confirm.ask", return_value=True):
        run_command(tmp_db, "edit", today)
    stored = get_goal(tmp_db, goal.id)
    assert stored.status == GOAL_ACTIVE
    assert stored.weekdays == frozenset({0, 2, 4})
    assert get_topics(tmp_db, goal.id)[0].estimated_hours == 6
    assert len(list_sessions(tmp_db, goal.id)) == 4


def test_edit_command_swaps_removed_topics(tmp_db, today):
    init_db(tmp_db)
    goal = create_draft(tmp_db, "Math", date(2024, 1, 22), today)
    algebra, geometry = add_topics(tmp_db, goal.id, [
        {"name": "Algebra", "hours": 4}, {"name": "Geometry", "hours": 4},
    ])
    remove_topic(tmp_db, geometry.id)
    configure_routine(tmp_db, goal.id, 2, {0, 2, 4})
    answers = [str(goal.id), "3", "2", "MON,WED,FRI"]
    with patch("study_planner.app.Prompt.ask", side_effect=answers), \
            patch("study_planner.app.Confirm.ask", side_effect=[False, True]):
        run_command(tmp_db, "edit", today)
    topics = {t.name: t for t in get_topics(tmp_db, goal.id)}
    assert not topics["Algebra"].is_active
    assert topics["Geometry"].is_active
    assert topics["Geometry"].estimated_hours == 3
    assert {s.topic_id for s in list_sessions(tmp_db, goal.id)} == {geometry.id}


def test_edit_command_cancelled_changes_nothing(tmp_db, today):
    goal = _draft_goal(tmp_db, today)
    with patch("study_planner.app.Prompt.ask", side_effect=[str(goal.id), "q"]), \
            patch("study_planner.app.Confirm.ask", return_value=True):
        run_command(tmp_db, "edit", today)
    assert get_topics(tmp_db, goal.id)[0].estimated_hours == 20
    assert get_goal(tmp_db, goal.id).status == GOAL_DRAFT


def test_reschedule_anyway_activates_draft(tmp_db, today):
    goal = _draft_goal(tmp_db, today)
    with patch("study_planner.app.Prompt.ask", return_value=str(goal.id)), \
            patch("study_planner.app.Confirm.ask", return_value=True):
        run_command(tmp_db, "reschedule", today)
    assert get_goal(tmp_db, goal.id).status == GOAL_ACTIVE
    assert len(list_sessions(tmp_db, goal.id)) == 1


def test_reschedule_declined_keeps_draft(tmp_db, today):
    goal = _draft_goal(tmp_db, today)
    with patch("study_planner.app.Prompt.ask", return_value=str(goal.id)), \
            patch("study_planner.app.Confirm.ask", return_value=False):
        run_command(tmp_db, "reschedule", today)
    assert get_goal(tmp_db, goal.id).status == GOAL_DRAFT
    assert list_sessions(tmp_db, goal.id) == []


def _scheduled_goal(tmp_db, today):
    init_db(tmp_db)
    goal = create_draft(tmp_db, "Physics", date(2024, 1, 22), today)
    add_topics(tmp_db, goal.id, [{"name": "Optics", "hours": 6}])
    configure_routine(tmp_db, goal.id, 2, {0, 2, 4})
    finalize_goal(tmp_db, goal.id, today)
    return goal


def test_done_and_undo_commands(tmp_db, today):
    goal = _scheduled_goal(tmp_db, today)
    session_id = list_sessions(tmp_db, goal.id)[0].id
    with patch("study_planner.app.Prompt.ask", return_value=str(session_id)):
        run_command(tmp_db, "done", today)
    assert get_session(tmp_db, session_id).completed
    with patch("study_planner.app.Prompt.ask", return_value=str(session_id)):
        run_command(tmp_db, "undo", today)
    assert not get_session(tmp_db, session_id).completed


def test_move_command(tmp_db, today):
    goal = _scheduled_goal(tmp_db, today)
    session_id = list_sessions(tmp_db, goal.id)[0].id
    with patch("study_planner.app.Prompt.ask", side_effect=[str(session_id), "2024-01-20"]):
        run_command(tmp_db, "move", today)
    assert get_session(tmp_db, session_id).scheduled_date == date(2024, 1, 20)


def test_reschedule_without_study_days_reports_error(tmp_db, today):
    goal = _scheduled_goal(tmp_db, today)
    before = list_sessions(tmp_db, goal.id)
    configure_routine(tmp_db, goal.id, 2, set())
    with patch("study_planner.app.Prompt.ask", return_value=str(goal.id)), \
            patch("study_planner.app.Confirm.ask", return_value=True):
        run_command(tmp_db, "reschedule", today)
    assert list_sessions(tmp_db, goal.id) == before


def test_unknown_goal_is_reported(tmp_db, today):
    init_db(tmp_db)
    with patch("study_planner.app.Prompt.ask", return_value="42"):
        run_command(tmp_db, "show", today)


def test_listing_commands_run(tmp_db, today):
    goal = _scheduled_goal(tmp_db, today)
    with patch("study_planner.app.Prompt.ask", return_value=str(goal.id)):
        for command in ("goals", "show", "today", "overdue", "dashboard"):
            run_command(tmp_db, command, date(2024, 1, 8))


def test_delete_command(tmp_db, today):
    goal = _scheduled_goal(tmp_db, today)
    with patch("study_planner.app.Prompt.ask", return_value=str(goal.id)), \
            patch("study_planner.app.Confirm.ask", return_value=True):
        run_command(tmp_db, "delete", today)
    assert list_goals(tmp_db) == []

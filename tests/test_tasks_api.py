"""
Tests for /tasks endpoints.
Calendar dates and clock times resolve in UTC (see the app_client fixture).
"""
import pytest


def create(client, headers, **fields):
    payload = {"title": "Task"}
    payload.update(fields)
    response = client.post("/tasks", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestTaskCrud:
    """Create, read, update and delete."""

    def test_requires_auth(self, app_client):
        assert app_client.get("/tasks").status_code == 401
        assert app_client.post("/tasks", json={"title": "x"}).status_code == 401

    def test_list_empty(self, app_client, auth_headers):
        response = app_client.get("/tasks", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_create_returns_camel_case_task(self, app_client, auth_headers):
        task = create(
            app_client, auth_headers,
            title="  Write <b>report</b> ",
            description="Quarterly numbers",
            startTime="2024-05-20T12:00:00Z",
            endTime="2024-05-20T13:30:00Z",
            owner="Amina",
            recurrence={"frequency": "weekly", "endDate": "2024-12-31"},
        )
        assert task["title"] == "Write report"
        assert task["completed"] is False
        assert task["status"] == "not-started"
        assert task["updates"] == []
        assert task["startTime"].startswith("2024-05-20T12:00:00")
        assert task["recurrence"]["frequency"] == "weekly"
        assert task["recurrence"]["endDate"] == "2024-12-31"
        assert "createdAt" in task
        assert "userId" in task

    def test_snake_case_input_accepted(self, app_client, auth_headers):
        task = create(app_client, auth_headers, start_time="2024-05-20T12:00:00Z")
        assert task["startTime"].startswith("2024-05-20T12:00:00")

    def test_title_required(self, app_client, auth_headers):
        response = app_client.post("/tasks", json={"title": "   "}, headers=auth_headers)
        assert response.status_code == 422
        response = app_client.post("/tasks", json={"description": "no title"}, headers=auth_headers)
        assert response.status_code == 422

    def test_list_newest_first(self, app_client, auth_headers):
        create(app_client, auth_headers, title="first")
        create(app_client, auth_headers, title="second")
        titles = [t["title"] for t in app_client.get("/tasks", headers=auth_headers).json()]
        assert titles == ["second", "first"]

    def test_get_update_delete(self, app_client, auth_headers):
        task = create(app_client, auth_headers, title="Draft")
        url = f"/tasks/{task['id']}"

        assert app_client.get(url, headers=auth_headers).json()["title"] == "Draft"

        response = app_client.put(url, json={"title": "Final", "description": "done soon"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["title"] == "Final"
        assert response.json()["description"] == "done soon"

        response = app_client.delete(url, headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Task deleted successfully"}
        assert app_client.get(url, headers=auth_headers).status_code == 404

    def test_partial_update_keeps_other_fields(self, app_client, auth_headers):
        task = create(app_client, auth_headers, title="Keep", owner="Amina", description="desc")
        response = app_client.put(f"/tasks/{task['id']}", json={"owner": "Baraka"}, headers=auth_headers)
        body = response.json()
        assert body["owner"] == "Baraka"
        assert body["title"] == "Keep"
        assert body["description"] == "desc"

    def test_blank_description_clears_it(self, app_client, auth_headers):
        task = create(app_client, auth_headers, description="desc")
        response = app_client.put(f"/tasks/{task['id']}", json={"description": "  "}, headers=auth_headers)
        assert response.json()["description"] is None

    def test_missing_task(self, app_client, auth_headers):
        assert app_client.get("/tasks/999", headers=auth_headers).status_code == 404
        assert app_client.put("/tasks/999", json={"title": "x"}, headers=auth_headers).status_code == 404
        assert app_client.delete("/tasks/999", headers=auth_headers).status_code == 404


class TestOwnership:
    """Another user's task is indistinguishable from a missing one."""

    def test_foreign_task_is_not_found(self, app_client, auth_headers, other_headers):
        task = create(app_client, auth_headers, title="Private")
        url = f"/tasks/{task['id']}"

        for response in (
            app_client.get(url, headers=other_headers),
            app_client.put(url, json={"title": "Hijacked"}, headers=other_headers),
            app_client.delete(url, headers=other_headers),
        ):
            assert response.status_code == 404
            assert response.json() == {"detail": "Task not found"}

        assert app_client.get(url, headers=auth_headers).json()["title"] == "Private"

    def test_lists_are_scoped(self, app_client, auth_headers, other_headers):
        create(app_client, auth_headers, title="Mine")
        assert app_client.get("/tasks", headers=other_headers).json() == []


class TestCompletionInvariant:
    """``completed`` and ``status == "completed"`` never disagree."""

    @pytest.mark.parametrize("payload, completed, status", [
        ({"status": "completed"}, True, "completed"),
        ({"status": "pending"}, False, "pending"),
        ({"completed": True}, True, "completed"),
        ({"completed": False}, False, "not-started"),
        ({"completed": True, "status": "pending"}, False, "pending"),
        ({"completed": False, "status": "completed"}, True, "completed"),
    ])
    def test_on_create(self, app_client, auth_headers, payload, completed, status):
        task = create(app_client, auth_headers, **payload)
        assert task["completed"] is completed
        assert task["status"] == status

    def test_toggle_on_update(self, app_client, auth_headers):
        task = create(app_client, auth_headers, status="pending")
        url = f"/tasks/{task['id']}"

        done = app_client.put(url, json={"completed": True}, headers=auth_headers).json()
        assert (done["completed"], done["status"]) == (True, "completed")

        reopened = app_client.put(url, json={"completed": False}, headers=auth_headers).json()
        assert (reopened["completed"], reopened["status"]) == (False, "not-started")

        pending = app_client.put(url, json={"status": "pending"}, headers=auth_headers).json()
        assert (pending["completed"], pending["status"]) == (False, "pending")

    def test_unrelated_update_leaves_status(self, app_client, auth_headers):
        task = create(app_client, auth_headers, status="completed")
        body = app_client.put(f"/tasks/{task['id']}", json={"title": "Renamed"}, headers=auth_headers).json()
        assert (body["completed"], body["status"]) == (True, "completed")

    def test_invalid_status_rejected(self, app_client, auth_headers):
        response = app_client.post("/tasks", json={"title": "x", "status": "blocked"}, headers=auth_headers)
        assert response.status_code == 422


class TestSearchAndBoard:
    """GET /tasks?q=&filter= and GET /tasks/board"""

    def test_query_and_filter(self, app_client, auth_headers):
        create(app_client, auth_headers, title="Report draft", status="pending")
        create(app_client, auth_headers, title="Report final", status="completed")
        create(app_client, auth_headers, title="Groceries", description="weekly report of spending")

        titles = lambda params: [t["title"] for t in app_client.get("/tasks", params=params, headers=auth_headers).json()]
        assert titles({"q": "REPORT"}) == ["Groceries", "Report final", "Report draft"]
        assert titles({"q": "report", "filter": "pending"}) == ["Report draft"]
        assert titles({"filter": "completed"}) == ["Report final"]
        assert titles({"filter": "not-started"}) == ["Groceries"]

    def test_unknown_filter_rejected(self, app_client, auth_headers):
        response = app_client.get("/tasks", params={"filter": "someday"}, headers=auth_headers)
        assert response.status_code == 422

    def test_board_partitions_and_sorts(self, app_client, auth_headers):
        create(app_client, auth_headers, title="afternoon", startTime="2024-05-20T15:00:00Z")
        create(app_client, auth_headers, title="undated")
        create(app_client, auth_headers, title="morning", startTime="2024-05-20T12:00:00Z")
        create(app_client, auth_headers, title="done", completed=True)

        board = app_client.get("/tasks/board", headers=auth_headers).json()
        assert [t["title"] for t in board["todo"]] == ["morning", "afternoon", "undated"]
        assert [t["title"] for t in board["completed"]] == ["done"]


class TestTasksForDate:
    """GET /tasks/for-date resolves recurring occurrences."""

    def test_recurring_and_one_off(self, app_client, auth_headers):
        create(app_client, auth_headers, title="standup", startTime="2024-05-01T13:00:00Z",
               recurrence={"frequency": "daily"})
        create(app_client, auth_headers, title="review", startTime="2024-05-06T12:00:00Z",
               recurrence={"frequency": "weekly"})
        create(app_client, auth_headers, title="dentist", startTime="2024-05-20T12:30:00Z")
        create(app_client, auth_headers, title="tomorrow", startTime="2024-05-21T12:00:00Z")
        create(app_client, auth_headers, title="no date")

        response = app_client.get("/tasks/for-date", params={"date": "2024-05-20"}, headers=auth_headers)
        assert response.status_code == 200
        # Ordered by time of day, not by the date each series started
        assert [t["title"] for t in response.json()] == ["review", "dentist", "standup"]

    def test_recurring_task_started_earlier_sorts_by_clock_time(self, app_client, auth_headers):
        create(app_client, auth_headers, title="evening walk", startTime="2024-01-01T18:00:00Z",
               recurrence={"frequency": "daily"})
        create(app_client, auth_headers, title="breakfast", startTime="2024-05-20T07:00:00Z")
        create(app_client, auth_headers, title="lunch", startTime="2024-05-20T12:00:00Z")

        response = app_client.get("/tasks/for-date", params={"date": "2024-05-20"}, headers=auth_headers)
        assert [t["title"] for t in response.json()] == ["breakfast", "lunch", "evening walk"]

    def test_date_required(self, app_client, auth_headers):
        assert app_client.get("/tasks/for-date", headers=auth_headers).status_code == 422


class TestHealth:
    """Service endpoints."""

    def test_root_and_health(self, app_client):
        assert app_client.get("/").status_code == 200
        assert app_client.get("/health").json() == {"status": "ok"}

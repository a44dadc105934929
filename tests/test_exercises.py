from ielts_portal.models.exercise import ExerciseTask, ExerciseType
from ielts_portal.repositories.exercise_repository import ExerciseRepository
from tests.conftest import reading_exercise_payload


def writing_task(**overrides) -> dict:
    task = {"task_type": "Writing", "title": "Essay", "minimum_word_count": 250}
    task.update(overrides)
    return task


class TestExerciseCreation:
    """Tests for POST /api/exercises"""

    def test_create_reading_exercise(self, client, editor_headers):
        response = client.post("/api/exercises", headers=editor_headers, json=reading_exercise_payload())

        assert response.status_code == 201
        exercise = response.json()
        assert exercise["exercise_type"] == "Reading"
        assert exercise["image_url"] == "https://example.com/compass.png"
        assert [task["id"] for task in exercise["tasks"]] == ["task-matching", "task-mcq"]
        assert exercise["tasks"][1]["allow_multiple_selections"] is False

    def test_media_fields_follow_module(self, client, editor_headers):
        """Reading keeps passage and image, drops the recording"""
        exercise = client.post("/api/exercises", headers=editor_headers, json=reading_exercise_payload()).json()
        assert exercise["recording_url"] is None

        data = reading_exercise_payload(exercise_type="Speaking", tasks=[writing_task()])
        exercise = client.post("/api/exercises", headers=editor_headers, json=data).json()
        assert exercise["passage"] is None
        assert exercise["image_url"] is None
        assert exercise["recording_url"] == "https://example.com/not-for-reading.mp3"

    def test_no_tasks_rejected(self, client, editor_headers):
        response = client.post("/api/exercises", headers=editor_headers, json=reading_exercise_payload(tasks=[]))

        assert response.status_code == 400
        assert response.json()["detail"] == "Please add at least one task before saving."

    def test_item_ids_generated(self, client, editor_headers):
        task = {"task_type": "QA", "title": "Questions", "questions": [{"value": "Where?"}, {"value": "Why?"}]}

        response = client.post(
            "/api/exercises", headers=editor_headers, json=reading_exercise_payload(tasks=[task])
        )

        assert response.status_code == 201
        created = response.json()["tasks"][0]
        assert created["id"]
        assert all(question["id"] for question in created["questions"])
        assert created["max_words_per_answer"] == 20

    def test_unknown_task_type(self, client, editor_headers):
        task = {"task_type": "Essay", "title": "Nope"}

        response = client.post(
            "/api/exercises", headers=editor_headers, json=reading_exercise_payload(tasks=[task])
        )

        assert response.status_code == 422

    def test_variant_fields_required(self, client, editor_headers):
        task = {"task_type": "Matching", "title": "No groups"}

        response = client.post(
            "/api/exercises", headers=editor_headers, json=reading_exercise_payload(tasks=[task])
        )

        assert response.status_code == 422

    def test_colliding_task_id_is_replaced(self, client, editor_headers, reading_exercise):
        """Task ids are global; a reused id from another exercise gets a fresh one"""
        response = client.post("/api/exercises", headers=editor_headers, json=reading_exercise_payload())

        assert response.status_code == 201
        ids = [task["id"] for task in response.json()["tasks"]]
        assert "task-matching" not in ids
        assert len(set(ids)) == 2

    def test_user_denied(self, client, user_headers):
        response = client.post("/api/exercises", headers=user_headers, json=reading_exercise_payload())

        assert response.status_code == 403


class TestExerciseRetrieval:
    """Tests for listing and fetching exercises"""

    def test_list_by_module(self, client, editor_headers, reading_exercise):
        data = reading_exercise_payload(exercise_type="Writing", tasks=[writing_task()])
        client.post("/api/exercises", headers=editor_headers, json=data)

        all_exercises = client.get("/api/exercises", headers=editor_headers).json()
        reading = client.get("/api/exercises", headers=editor_headers, params={"exercise_type": "Reading"}).json()

        assert all_exercises["total"] == 2
        assert reading["total"] == 1
        assert reading["exercises"][0]["id"] == reading_exercise["id"]

    def test_get_exercise(self, client, admin_headers, reading_exercise):
        response = client.get(f"/api/exercises/{reading_exercise['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["title"] == "The History of the Compass"

    def test_get_missing(self, client, editor_headers):
        assert client.get("/api/exercises/9999", headers=editor_headers).status_code == 404

    def test_user_cannot_list(self, client, user_headers):
        assert client.get("/api/exercises", headers=user_headers).status_code == 403


class TestExerciseUpdate:
    """Tests for PUT /api/exercises/{id}"""

    def test_replace_details_and_tasks(self, client, editor_headers, reading_exercise):
        data = reading_exercise_payload(title="Renamed", tasks=[reading_exercise["tasks"][1]])
        data.pop("exercise_type")

        response = client.put(f"/api/exercises/{reading_exercise['id']}", headers=editor_headers, json=data)

        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert [task["id"] for task in response.json()["tasks"]] == ["task-mcq"]

    def test_type_never_changes(self, client, editor_headers, reading_exercise):
        data = reading_exercise_payload(exercise_type="Writing")

        response = client.put(f"/api/exercises/{reading_exercise['id']}", headers=editor_headers, json=data)

        assert response.json()["exercise_type"] == "Reading"

    def test_empty_task_list_rejected(self, client, editor_headers, reading_exercise):
        data = reading_exercise_payload(tasks=[])

        response = client.put(f"/api/exercises/{reading_exercise['id']}", headers=editor_headers, json=data)

        assert response.status_code == 400


class TestTaskOperations:
    """Tests for /api/exercises/{id}/tasks"""

    def test_add_task(self, client, editor_headers, reading_exercise):
        response = client.post(
            f"/api/exercises/{reading_exercise['id']}/tasks",
            headers=editor_headers,
            json={
                "task_type": "Filling Blanks",
                "title": "Complete the notes",
                "blanks": [{"id": "b1", "text_before": "The needle floated in", "num_blanks": 2}],
            },
        )

        assert response.status_code == 201
        tasks = response.json()["tasks"]
        assert len(tasks) == 3
        assert tasks[2]["task_type"] == "Filling Blanks"
        assert tasks[2]["blanks"][0]["num_blanks"] == 2

    def test_update_task_keeps_id(self, client, editor_headers, reading_exercise):
        response = client.put(
            f"/api/exercises/{reading_exercise['id']}/tasks/task-mcq",
            headers=editor_headers,
            json={**reading_exercise["tasks"][1], "allow_multiple_selections": True, "id": "ignored"},
        )

        assert response.status_code == 200
        task = response.json()["tasks"][1]
        assert task["id"] == "task-mcq"
        assert task["allow_multiple_selections"] is True

    def test_update_missing_task(self, client, editor_headers, reading_exercise):
        response = client.put(
            f"/api/exercises/{reading_exercise['id']}/tasks/nope",
            headers=editor_headers,
            json=writing_task(),
        )
        assert response.status_code == 404

    def test_remove_task(self, client, editor_headers, reading_exercise, db_session):
        response = client.delete(f"/api/exercises/{reading_exercise['id']}/tasks/task-matching", headers=editor_headers)

        assert response.status_code == 200
        assert [task["id"] for task in response.json()["tasks"]] == ["task-mcq"]
        assert db_session.get(ExerciseTask, "task-matching") is None

    def test_last_task_cannot_be_removed(self, client, editor_headers, reading_exercise):
        client.delete(f"/api/exercises/{reading_exercise['id']}/tasks/task-matching", headers=editor_headers)

        response = client.delete(f"/api/exercises/{reading_exercise['id']}/tasks/task-mcq", headers=editor_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Please add at least one task before saving."


class TestExerciseDeletion:
    """Tests for DELETE /api/exercises/{id}"""

    def test_delete(self, client, editor_headers, reading_exercise):
        response = client.delete(f"/api/exercises/{reading_exercise['id']}", headers=editor_headers)

        assert response.status_code == 200
        assert response.json()["deleted_exercise_id"] == reading_exercise["id"]
        assert client.get(f"/api/exercises/{reading_exercise['id']}", headers=editor_headers).status_code == 404

    def test_user_cannot_delete(self, client, user_headers, reading_exercise):
        assert client.delete(f"/api/exercises/{reading_exercise['id']}", headers=user_headers).status_code == 403


class TestExerciseRepository:
    """Tests for ExerciseRepository queries"""

    def test_get_all_by_module(self, db_session, reading_exercise):
        repo = ExerciseRepository(db_session)

        assert [exercise.id for exercise in repo.get_all()] == [reading_exercise["id"]]
        assert repo.get_all(ExerciseType.WRITING) == []
        assert repo.existing_task_ids(["task-mcq", "unknown"]) == {"task-mcq"}

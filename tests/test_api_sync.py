import asyncio
import json

from schemas.auth import CurrentUser
from services.auth_service import tokens
from services.realtime import feed

SUBJECTS = [
    {
        "name": "La Création",
        "content": "<p>Six jours</p>",
        "quiz": [{"text": "Jour du repos ?", "options": ["1", "3", "6", "7"], "correctIndex": 3}],
    },
    {"name": "Le Déluge", "content": "<p>Noé</p>"},
]


def test_classes_bulk(client, admin_headers, classes):
    records = client.get("/v1/classes/", headers=admin_headers).json()["data"]
    assert client.put("/v1/classes/bulk", json=records, headers=admin_headers).json()["data"]["changed"] == 0

    records[0] = {**records[0], "name": "Agneau"}
    records.append({"id": "av7", "name": "Nouvelle", "age": 9, "club": "AVENTURIERS", "icon": None})
    assert client.put("/v1/classes/bulk", json=records, headers=admin_headers).json()["data"]["changed"] == 2
    assert client.get("/v1/classes/av7", headers=admin_headers).status_code == 200


def test_sessions_bulk_keeps_subject_json(client, admin_headers, classes):
    created = client.post("/v1/sessions/", json={"classId": "av4", "subjects": SUBJECTS}, headers=admin_headers).json()["data"]
    record = client.get(f"/v1/sessions/{created['id']}", headers=admin_headers).json()["data"]

    assert client.put("/v1/sessions/bulk", json=[record], headers=admin_headers).json()["data"]["changed"] == 0

    record["subjects"][0]["quiz"][0]["correctIndex"] = 2
    assert client.put("/v1/sessions/bulk", json=[record], headers=admin_headers).json()["data"]["changed"] == 1

    stored = client.get(f"/v1/sessions/{created['id']}", headers=admin_headers).json()["data"]
    assert stored["subjects"][0]["quiz"][0]["correctIndex"] == 2
    assert stored["subjects"][0]["id"] == created["subjects"][0]["id"]
    assert stored["subjects"][1]["quiz"] is None


def test_progress_bulk_diffs_on_composite_key(client, admin_headers, student):
    first = client.post("/v1/sessions/", json={"classId": "av4", "subjects": SUBJECTS}, headers=admin_headers).json()["data"]
    second = client.post("/v1/sessions/", json={"classId": "av4", "subjects": SUBJECTS}, headers=admin_headers).json()["data"]
    toggle = {"studentId": student.id, "sessionId": first["id"], "subjectId": first["subjects"][0]["id"]}
    record = client.post("/v1/tracking/toggle", json=toggle, headers=admin_headers).json()["data"]

    assert client.put("/v1/tracking/progress/bulk", json=[record], headers=admin_headers).json()["data"]["changed"] == 0

    # same student, other session -> new row; the first one is unchanged
    other = {**record, "sessionId": second["id"], "completedSubjects": [second["subjects"][0]["id"]]}
    r = client.put("/v1/tracking/progress/bulk", json=[record, other], headers=admin_headers)
    assert r.json()["data"]["changed"] == 1

    matrix = client.get("/v1/tracking/av4", headers=admin_headers).json()["data"]
    done = [row["completedBy"][student.id] for row in matrix["rows"]]
    assert done == [True, False, True, False]


def test_messages_bulk(client, admin_headers, student, student_headers):
    client.post("/v1/portal/messages", json={"content": "Bonjour"}, headers=student_headers)
    thread = client.get(f"/v1/messages/{student.id}", headers=admin_headers).json()["data"]

    assert client.put("/v1/messages/bulk", json=thread, headers=admin_headers).json()["data"]["changed"] == 0

    thread[0]["isRead"] = True
    assert client.put("/v1/messages/bulk", json=thread, headers=admin_headers).json()["data"]["changed"] == 1
    assert client.get("/v1/messages/unread", headers=admin_headers).json()["data"]["unread"] == 0


def test_stream_delivers_published_events():
    from routers.realtime import stream_changes

    token = tokens.issue(CurrentUser(type="admin", id="admin", name="Administrateur"))

    async def scenario():
        response = await stream_changes(token=token)
        events = response.body_iterator
        start = await events.__anext__()
        feed.publish("classes", "av1", {"id": "av1", "name": "Petit Agneau"})
        change = await asyncio.wait_for(events.__anext__(), 1)
        await events.aclose()
        return start, change

    start, change = asyncio.run(scenario())

    assert json.loads(start[len("data: "):]) == {"type": "start"}
    assert change.endswith("\n\n")
    assert json.loads(change[len("data: "):]) == {
        "table": "classes",
        "type": "UPSERT",
        "record": {"id": "av1", "name": "Petit Agneau"},
    }
    assert feed.subscriber_count == 0

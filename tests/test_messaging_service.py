from models.messages import Message
from models.students import Student
from services import messaging_service


def _msg(id, sender, receiver, ts, read=False):
    return Message(id=id, sender_id=sender, receiver_id=receiver, content=id, timestamp=ts, is_read=read)


def test_conversations_sorted_by_last_message(db):
    db.add_all([
        Student(id="s1", full_name="Alice"),
        Student(id="s2", full_name="Bruno"),
        Student(id="s3", full_name="Chloé"),
        _msg("m1", "s1", "admin", "2025-01-01T10:00:00Z"),
        _msg("m2", "admin", "s2", "2025-01-02T10:00:00Z"),
        _msg("m3", "s1", "admin", "2025-01-01T11:00:00Z"),
    ])
    db.commit()

    items = messaging_service.conversations(db, include_student_id="s3")

    assert [i["student"].id for i in items] == ["s2", "s1", "s3"]
    assert items[1]["last_message"].id == "m3"
    assert items[1]["unread_count"] == 2
    assert items[0]["unread_count"] == 0
    assert items[2]["last_message"] is None


def test_thread_and_mark_read(db):
    db.add(Student(id="s1", full_name="Alice"))
    db.commit()
    messaging_service.send(db, "s1", "admin", "Bonjour")
    messaging_service.send(db, "admin", "s1", "Bonjour Alice")

    assert [m.content for m in messaging_service.thread(db, "s1")] == ["Bonjour", "Bonjour Alice"]
    assert messaging_service.unread_count(db, "admin") == 1
    assert messaging_service.mark_read(db, "s1", "admin") == 1
    assert messaging_service.mark_read(db, "s1", "admin") == 0
    assert messaging_service.unread_count(db, "admin") == 0
    assert messaging_service.unread_count(db, "s1", sender_id="admin") == 1

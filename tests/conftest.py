import io
from datetime import date, datetime, time, timedelta, timezone
from types import SimpleNamespace

import pytest
from werkzeug.datastructures import FileStorage
from werkzeug.security import generate_password_hash

from app import create_app
from app.extensions import db
from app.models import (
    Assignment, Course, CourseMaterial, Department, Program, Quiz, Semester, Staff,
    Student, Timetable, User,
)
from app.services.permissions import Principal
from app.storage import ObjectStorage

PASSWORD = "secret"


class FakeS3Client:
    """Records put_object calls instead of talking to a bucket."""

    def __init__(self):
        self.objects = {}

    def put_object(self, Bucket, Key, Body, ContentType):
        self.objects[(Bucket, Key)] = (Body, ContentType)
        return {"ETag": '"fake"'}


@pytest.fixture()
def s3():
    return FakeS3Client()


@pytest.fixture()
def app(s3):
    app = create_app("config.TestConfig")
    app.extensions["storage"] = ObjectStorage(
        "test-bucket", s3,
        public_base_url=app.config["S3_PUBLIC_BASE_URL"],
        max_bytes=app.config["MAX_UPLOAD_BYTES"],
    )
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def _user(username, role):
    u = User(username=username, email=f"{username}@uni.test", role=role,
             password_hash=generate_password_hash(PASSWORD, method="pbkdf2:sha256:1000"))
    db.session.add(u)
    return u


def _staff(username, role, department, position):
    s = Staff(user=_user(username, role), department=department,
              first_name=username.capitalize(), last_name="Staff", position=position)
    db.session.add(s)
    return s


def _student(username, program, semester, reg):
    s = Student(user=_user(username, "student"), program=program,
                department=program.department, current_semester=semester,
                first_name=username.capitalize(), last_name="Student",
                registration_number=reg)
    db.session.add(s)
    return s


@pytest.fixture()
def campus(app):
    """A small university: two departments, two semesters, staff, students and course content."""
    with app.app_context():
        cs = Department(name="Computer Science")
        maths = Department(name="Mathematics")
        bsc_cs = Program(department=cs, name="BSc Computer Science", code="BSCCS", duration_semesters=8)
        bsc_math = Program(department=maths, name="BSc Mathematics", code="BSCMA", duration_semesters=8)
        sem1 = Semester(name="2025 Semester 1", start_date=date(2025, 1, 6), end_date=date(2025, 5, 2))
        sem2 = Semester(name="2025 Semester 2", start_date=date(2025, 8, 4), end_date=date(2025, 12, 5))
        db.session.add_all([cs, maths, bsc_cs, bsc_math, sem1, sem2])

        _user("admin", "admin")
        registrar = _staff("registrar", "registrar", cs, "Registrar")
        hod = _staff("hod", "hod", cs, "HOD")
        hod_math = _staff("hodmath", "hod", maths, "HOD")
        lecturer = _staff("lecturer", "lecturer", cs, "Lecturer")
        other_lecturer = _staff("otherlecturer", "lecturer", maths, "Lecturer")
        timetabled = _staff("timetabled", "lecturer", cs, "Lecturer")
        bursar = _staff("bursar", "bursar", cs, "Bursar")
        cs.head = hod
        maths.head = hod_math

        alice = _student("alice", bsc_cs, sem2, "CS/001")
        bob = _student("bob", bsc_cs, sem2, "CS/002")
        carol = _student("carol", bsc_cs, None, "CS/003")
        dave = _student("dave", bsc_math, sem2, "MA/001")

        algorithms = Course(program=bsc_cs, semester=sem2, lecturer=lecturer,
                            code="CS201", name="Algorithms", credits=3)
        intro = Course(program=bsc_cs, semester=sem1, lecturer=lecturer,
                       code="CS101", name="Intro to Programming", credits=4)
        databases = Course(program=bsc_cs, semester=sem2, lecturer=None,
                           code="CS205", name="Databases", credits=2)
        calculus = Course(program=bsc_math, semester=sem2, lecturer=other_lecturer,
                          code="MA201", name="Calculus II", credits=3)
        db.session.add_all([algorithms, intro, databases, calculus])
        db.session.add(Timetable(semester=sem2, course=databases, lecturer=timetabled,
                                 day_of_week="Tuesday", start_time=time(9), end_time=time(11),
                                 room="LT1"))

        now = datetime.now(timezone.utc)
        notes = CourseMaterial(course=algorithms, uploaded_by=lecturer, title="Week 1 notes",
                               type="notes", file_url="https://files.test/materials/w1.pdf")
        essay = Assignment(course=algorithms, assigned_by=lecturer, title="Sorting essay",
                           due_date=now + timedelta(days=7))
        quiz = Quiz(course=algorithms, created_by=lecturer, title="Quiz 1", total_marks=20,
                    quiz_date=now + timedelta(days=3))
        db.session.add_all([notes, essay, quiz])
        db.session.commit()

        return SimpleNamespace(
            cs=cs.id, maths=maths.id, sem1=sem1.id, sem2=sem2.id,
            bsc_cs=bsc_cs.id, bsc_math=bsc_math.id,
            admin=User.query.filter_by(username="admin").one().id,
            registrar=registrar.user_id, hod=hod.user_id, hod_math=hod_math.user_id,
            lecturer=lecturer.user_id, other_lecturer=other_lecturer.user_id,
            timetabled=timetabled.user_id, bursar=bursar.user_id,
            lecturer_staff=lecturer.id, timetabled_staff=timetabled.id,
            alice=alice.id, bob=bob.id, carol=carol.id, dave=dave.id,
            alice_user=alice.user_id, bob_user=bob.user_id, carol_user=carol.user_id,
            algorithms=algorithms.id, intro=intro.id, databases=databases.id,
            calculus=calculus.id, notes=notes.id, essay=essay.id, quiz=quiz.id,
        )


@pytest.fixture()
def ctx(app, campus):
    with app.app_context():
        yield


def as_principal(user_id):
    return Principal.from_user(db.session.get(User, user_id))


def upload(name="work.pdf", data=b"%PDF-1.4 answer", content_type="application/pdf"):
    return FileStorage(stream=io.BytesIO(data), filename=name, content_type=content_type)


def login(client, username):
    resp = client.post("/auth/login", data={"username": username, "password": PASSWORD})
    assert resp.status_code == 200
    return resp

"""
Seed data for local (offline) mode: the twelve standard classes of both
clubs, one demo week and one demo student per club.
"""

import logging
from datetime import date

from sqlalchemy.orm import Session

from models.classes import ClassLevel
from models.sessions import Session as SessionModel
from models.students import Student

logger = logging.getLogger(__name__)

STANDARD_CLASSES = [
    ("av1", "Petit Agneau", 4, "AVENTURIERS", "🐑"),
    ("av2", "Castor Enthousiaste", 5, "AVENTURIERS", "🦫"),
    ("av3", "Abeille Active", 6, "AVENTURIERS", "🐝"),
    ("av4", "Rayon de Soleil", 7, "AVENTURIERS", "☀️"),
    ("av5", "Constructeur", 8, "AVENTURIERS", "🛠️"),
    ("av6", "Main Utile", 9, "AVENTURIERS", "✋"),
    ("ex1", "Ami", 10, "EXPLORATEURS", "🤝"),
    ("ex2", "Compagnon", 11, "EXPLORATEURS", "🧭"),
    ("ex3", "Explorateur", 12, "EXPLORATEURS", "⛺"),
    ("ex4", "Pionnier", 13, "EXPLORATEURS", "🔥"),
    ("ex5", "Voyageur", 14, "EXPLORATEURS", "🗺️"),
    ("ex6", "Guide", 15, "EXPLORATEURS", "🌟"),
]


def standard_classes():
    return [ClassLevel(id=i, name=n, age=a, club=c, icon=ic) for i, n, a, c, ic in STANDARD_CLASSES]


def seed_local_data(db: Session):
    db.add_all(standard_classes())

    year = date.today().year
    demo_sessions = [
        SessionModel(
            id="demoav1", club="AVENTURIERS", class_id="av4", number=1,
            availability_date=date.today().isoformat(),
            subjects=[{
                "id": "dav01",
                "name": "La Création",
                "prerequisite": "Connaître les 7 jours de la création",
                "content": "<h2>La Création</h2><p>Dieu a créé le monde en six jours et s'est reposé le septième.</p>",
                "quiz": [{
                    "text": "Quel jour Dieu s'est-il reposé ?",
                    "options": ["Le premier", "Le troisième", "Le sixième", "Le septième"],
                    "correctIndex": 3,
                }],
            }],
        ),
        SessionModel(
            id="demoex1", club="EXPLORATEURS", class_id="ex1", number=1,
            availability_date=date.today().isoformat(),
            subjects=[{
                "id": "dex01",
                "name": "Les nœuds de base",
                "prerequisite": "Savoir faire un nœud plat",
                "content": "<h2>Le nœud plat</h2><p>Il sert à relier deux cordes de même diamètre.</p>",
                "quiz": [{
                    "text": "À quoi sert le nœud plat ?",
                    "options": ["Relier deux cordes", "Faire une boucle", "Grimper", "Amarrer un bateau"],
                    "correctIndex": 0,
                }],
            }],
        ),
    ]
    db.add_all(demo_sessions)

    demo_students = [
        Student(
            id="demostu01", full_name="Jean Dupont", birth_date=f"{year - 7}-03-14", age=7, class_id="av4",
            address="", mother_name="", father_name="",
            emergency_contacts=[{"name": "", "phone": "", "relationship": ""} for _ in range(2)],
            diseases=[], allergies=[], medications=[],
            password_changed=False, temporary_password="MJA1234",
        ),
        Student(
            id="demostu02", full_name="Marie Martin", birth_date=f"{year - 10}-09-02", age=10, class_id="ex1",
            address="", mother_name="", father_name="",
            emergency_contacts=[{"name": "", "phone": "", "relationship": ""} for _ in range(2)],
            diseases=[], allergies=[], medications=[],
            password_changed=False, temporary_password="MJA5678",
        ),
    ]
    db.add_all(demo_students)
    db.commit()
    logger.info("Local database seeded with demo data")

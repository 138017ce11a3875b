"""Database seeding service for sample school data."""
from datetime import time
from flask import current_app
from school_portal import db
from school_portal.models.school_class import SchoolClass
from school_portal.models.staff import Staff
from school_portal.models.student import Guardian, Student
from school_portal.models.timetable import TimetableEntry, WeekDay
from school_portal.models.user import User, UserRole

SAMPLE_PASSWORD = 'Password123'

TEACHERS = [
    ('Grace Hopper', 'grace.hopper', 'Mathematics'),
    ('Alan Turing', 'alan.turing', 'Computer Science'),
    ('Marie Curie', 'marie.curie', 'Chemistry'),
]

CLASSES = ['Grade 7A', 'Grade 7B', 'Grade 8A']

PERIODS = [(time(8, 0), time(8, 45)), (time(9, 0), time(9, 45)), (time(10, 0), time(10, 45))]

STUDENTS_PER_CLASS = 5

class SeedService:
    """Service to seed database with sample data."""

    @staticmethod
    def seed_all():
        """Seed all sample data; safe to run on an already seeded database."""
        SeedService.seed_admin()
        teachers = SeedService.seed_teachers()
        classes = SeedService.seed_classes(teachers)
        SeedService.seed_students(classes)
        SeedService.seed_timetable(classes, teachers)

    @staticmethod
    def _user(email, name, role):
        user = User.query.filter_by(email=email).first()
        if user:
            return user, False
        user = User(email=email, name=name, email_verified=True)
        user.set_password(SAMPLE_PASSWORD)
        user.grant_role(role)
        db.session.add(user)
        db.session.flush()
        return user, True

    @staticmethod
    def seed_admin():
        SeedService._user('admin@school.edu', 'School Administrator', UserRole.ADMIN)
        db.session.commit()

    @staticmethod
    def seed_teachers():
        teachers = []
        for name, username, subject in TEACHERS:
            user, created = SeedService._user(f'{username}@school.edu', name, UserRole.TEACHER)
            if created:
                db.session.add(Staff(user_id=user.id, full_name=name, subject=subject, position='Teacher'))
            teachers.append((user, subject))
        db.session.commit()
        current_app.logger.info(f"Seeded {len(teachers)} teachers")
        return teachers

    @staticmethod
    def seed_classes(teachers):
        classes = []
        for index, name in enumerate(CLASSES):
            school_class = SchoolClass.query.filter_by(name=name).first()
            if not school_class:
                school_class = SchoolClass(name=name, teacher_id=teachers[index % len(teachers)][0].id)
                db.session.add(school_class)
            classes.append(school_class)
        db.session.commit()
        return classes

    @staticmethod
    def seed_students(classes):
        created_count = 0
        for class_index, school_class in enumerate(classes):
            for number in range(1, STUDENTS_PER_CLASS + 1):
                roll_number = f'S{class_index + 1}{number:02d}'
                user, created = SeedService._user(
                    f'student.{roll_number.lower()}@school.edu',
                    f'Student {roll_number}',
                    UserRole.STUDENT
                )
                if not created:
                    continue

                student = Student(
                    user_id=user.id,
                    roll_number=roll_number,
                    full_name=user.name,
                    class_id=school_class.id
                )
                db.session.add(student)

                parent, _ = SeedService._user(
                    f'parent.{roll_number.lower()}@school.edu',
                    f'Parent of {roll_number}',
                    UserRole.PARENT
                )
                guardian = parent.guardian_profile or Guardian(user_id=parent.id, name=parent.name)
                guardian.students.append(student)
                db.session.add(guardian)
                created_count += 1

        db.session.commit()
        current_app.logger.info(f"Seeded {created_count} students with guardians")

    @staticmethod
    def seed_timetable(classes, teachers):
        for class_index, school_class in enumerate(classes):
            if TimetableEntry.query.filter_by(class_id=school_class.id).first():
                continue
            for day in WeekDay:
                if day == WeekDay.SATURDAY:
                    continue
                for period, (start, end) in enumerate(PERIODS):
                    teacher, subject = teachers[(class_index + period) % len(teachers)]
                    db.session.add(TimetableEntry(
                        class_id=school_class.id,
                        day=day,
                        start_time=start,
                        end_time=end,
                        subject=subject,
                        teacher_id=teacher.id
                    ))
        db.session.commit()

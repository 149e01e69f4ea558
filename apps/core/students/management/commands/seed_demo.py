import random
from datetime import date
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from faker import Faker

from apps.core.students.models import Student
from apps.core.students.services import register_student
from apps.core.teachers.models import Teacher
from apps.core.teachers.services import register_teacher


PLACEHOLDER_PHOTO = 'https://placehold.co/400x400.png'

DEMO_STUDENTS = [
    ('John Smith', 10, 16, 'Monthly', '1800.00', 'S1001', 'P123456789', date(2008, 5, 20), 2, 'Jane Smith',
     'Male', 'American', 'Christianity', True, '123 Main St, Anytown, USA', '555-123-4567', 'First Community Church'),
    ('Emily Johnson', 11, 17, 'Yearly', '1500.00', 'S1002', 'P987654321', date(2007, 8, 15), 3, 'Robert Johnson',
     'Female', 'Canadian', 'Christianity', False, '456 Oak Ave, Otherville, Canada', '555-987-6543', 'N/A'),
    ('Carlos Martinez', 9, 15, 'Monthly', '2400.00', 'S1003', 'P555666777', date(2009, 2, 10), 1, 'Maria Martinez',
     'Male', 'Mexican', 'Catholicism', True, '789 Pine Rd, Somewhere, USA', '555-111-2222', 'St. Marys Church'),
    ('Aisha Khan', 12, 18, 'Monthly', '3000.00', 'S1004', 'P888999000', date(2006, 11, 30), 4, 'Fatima Khan',
     'Female', 'Pakistani', 'Islam', True, '321 Maple Ln, Anytown, USA', '555-333-4444', 'N/A'),
    ('Kenji Tanaka', 10, 16, 'Yearly', '1650.00', 'S1005', 'P444555666', date(2008, 4, 22), 2, 'Yuki Tanaka',
     'Male', 'Japanese', 'Buddhism', True, '15 Cherry Blossom St, Tokyo, Japan', '555-777-8888', 'N/A'),
    ('Olivia Chen', 9, 14, 'Monthly', '2100.00', 'S1006', 'P111222333', date(2010, 1, 18), 1, 'David Chen',
     'Female', 'American', 'N/A', False, '987 Birch Ave, Someplace, USA', '555-444-5555', 'N/A'),
    ('Chloe Williams', 11, 17, 'Monthly', '2200.00', 'S1007', 'P777888999', date(2007, 3, 12), 3, 'Sophia Williams',
     'Female', 'Australian', 'Christianity', True, '555 Wattle St, Sydney, Australia', '555-666-7777', 'N/A'),
    ('Liam Brown', 9, 15, 'Yearly', '1550.00', 'S1008', 'P888999111', date(2009, 9, 9), 1, 'James Brown',
     'Male', 'British', 'N/A', False, '22 Acacia Ave, London, UK', '555-222-3333', 'N/A'),
]

STUDENT_COLUMNS = (
    'name', 'grade', 'age', 'payment_type', 'annual_fee', 'student_code', 'personal_id', 'date_of_birth',
    'years_of_enroll', 'parent_name', 'gender', 'nationality', 'religion', 'can_transfer_certificate',
    'address', 'contact_number', 'church_name',
)

DEMO_TEACHERS = [
    {
        'name': 'Michael Davis',
        'email': 'michael.davis@example.com',
        'subject': 'Mathematics',
        'hire_date': date(2020, 8, 1),
        'age': 35,
        'grade': 10,
        'teacher_code': 'T001',
    },
    {
        'name': 'Sarah Wilson',
        'email': 'sarah.wilson@example.com',
        'subject': 'English Literature',
        'hire_date': date(2018, 9, 15),
        'age': 42,
        'grade': 11,
        'teacher_code': 'T002',
    },
]


class Command(BaseCommand):
    help = 'Seeds the database with demo students and teachers.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--extra',
            type=int,
            default=0,
            help='Number of additional randomly generated students.',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Seeding demo data...')
        today = timezone.localdate()

        for row in DEMO_STUDENTS:
            data = dict(zip(STUDENT_COLUMNS, row))
            if Student.objects.filter(student_code=data['student_code']).exists():
                continue
            data['annual_fee'] = Decimal(data['annual_fee'])
            student = register_student(Student(photo_url=PLACEHOLDER_PHOTO, registration_date=today, **data))
            self.stdout.write(self.style.SUCCESS(f'Created student: {student}'))

        for data in DEMO_TEACHERS:
            if Teacher.objects.filter(teacher_code=data['teacher_code']).exists():
                continue
            teacher = register_teacher(Teacher(**data))
            self.stdout.write(self.style.SUCCESS(f'Created teacher: {teacher}'))

        fake = Faker()
        created = 0
        while created < options['extra']:
            student_code = f"S{fake.unique.random_int(min=2000, max=999999)}"
            if Student.objects.filter(student_code=student_code).exists():
                continue
            grade = random.randint(1, 12)
            register_student(Student(
                name=fake.name(),
                photo_url=PLACEHOLDER_PHOTO,
                grade=grade,
                age=grade + 5,
                payment_type=random.choice([Student.PAYMENT_MONTHLY, Student.PAYMENT_YEARLY]),
                annual_fee=Decimal(random.randrange(1200, 3600, 50)),
                student_code=student_code,
                personal_id=f"P{fake.unique.random_number(digits=9, fix_len=True)}",
                date_of_birth=fake.date_of_birth(minimum_age=grade + 5, maximum_age=grade + 6),
                registration_date=fake.date_between(start_date='-1y', end_date='today'),
                years_of_enroll=random.randint(0, 4),
                parent_name=fake.name(),
                gender=random.choice(['Male', 'Female']),
                nationality=fake.country()[:80],
                religion=random.choice(['Christianity', 'Islam', 'Buddhism', 'N/A']),
                can_transfer_certificate=fake.boolean(),
                address=fake.address().replace('\n', ', '),
                contact_number=f"555-{random.randint(100, 999)}-{random.randint(1000, 9999)}",
            ))
            created += 1

        if created:
            self.stdout.write(self.style.SUCCESS(f'Created {created} extra students.'))
        self.stdout.write(self.style.SUCCESS('Demo data ready.'))

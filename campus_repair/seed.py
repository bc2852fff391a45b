"""Load demo data: one student and a few complaints.

Usage:
    python -m campus_repair.seed [--clean]
"""
import argparse
import logging
import sys

from campus_repair.core.container import ServiceContainer, build_container_from_config
from campus_repair.core.errors import CampusRepairError
from campus_repair.core.logging import configure_logging
from campus_repair.models.user import STUDENT_ROLE

logger = logging.getLogger(__name__)

DEMO_STUDENT = {
    'name': 'Demo Student',
    'email': 'demo@student.com',
    'password': 'password123',
    'student_id': 'D123',
    'department': 'General',
}

SAMPLE_COMPLAINTS = [
    {
        'title': 'Broken Projector',
        'description': 'Projector in Room 101 is flickering.',
        'location': 'Room 101',
        'category': 'Classroom',
        'status': 'Pending',
        'priority': 'High',
    },
    {
        'title': 'Leaking Faucet',
        'description': 'Faucet in the second floor washroom keeps dripping.',
        'location': 'Block B Washroom',
        'category': 'Plumbing',
        'status': 'In-Progress',
        'priority': 'Medium',
    },
    {
        'title': 'Sparking Socket',
        'description': 'Wall socket near bench 4 sparks when used.',
        'location': 'Physics Lab',
        'category': 'Lab',
        'status': 'Pending',
        'priority': 'High',
    },
]


def seed(container: ServiceContainer, clean: bool = False) -> int:
    """Insert the sample complaints and return how many were created."""
    if clean:
        removed = container.complaints.delete_all()
        logger.info('Removed %d existing complaints', removed)

    student = container.users.find_by_email(DEMO_STUDENT['email'], role=STUDENT_ROLE)
    if student is None:
        logger.info('Creating demo student %s', DEMO_STUDENT['email'])
        student = container.users.create(
            name=DEMO_STUDENT['name'],
            email=DEMO_STUDENT['email'],
            hashed_password=container.credentials.hash_password(DEMO_STUDENT['password']),
            role=STUDENT_ROLE,
            student_id=DEMO_STUDENT['student_id'],
            department=DEMO_STUDENT['department'],
        )

    for sample in SAMPLE_COMPLAINTS:
        complaint = container.complaints.create(
            title=sample['title'],
            description=sample['description'],
            location=sample['location'],
            category=sample['category'],
            reported_by=student.id,
            student_name=student.name,
            student_email=student.email,
        )
        container.complaints.update(
            complaint.id,
            {'status': sample['status'], 'priority': sample['priority']},
        )
        logger.info('Complaint created: %s', sample['title'])

    return len(SAMPLE_COMPLAINTS)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--clean', action='store_true', help='delete all complaints before seeding')
    args = parser.parse_args(argv)

    configure_logging()
    try:
        container = build_container_from_config()
    except CampusRepairError as exc:
        logger.error('Seed error: %s', exc.message)
        sys.exit(1)

    try:
        seed(container, clean=args.clean)
    finally:
        container.close()


if __name__ == '__main__':
    main()

"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 4 users (admin, the couple, a planner, a family viewer)
- 1 wedding with 4 events
- Households and guests, including a few deliberate duplicates
  so the duplicate review queue has something to show
- Invitations per event
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from decimal import Decimal
from datetime import date, datetime, time

from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.weddings.models import Wedding, WeddingRole, WeddingRoleType, Event
from apps.weddings.services import create_wedding
from apps.guests.models import (
    Household,
    Guest,
    Invitation,
    Affiliation,
    RelationshipTier,
    PriorityTier,
)


SAMPLE_EMAILS = [
    'admin@example.com',
    'priya@example.com',
    'planner@example.com',
    'mausi@example.com',
]

HOUSEHOLDS = [
    {
        'name': 'Sharma Family',
        'contact_email': 'sharmas@example.com',
        'affiliation': Affiliation.BRIDE,
        'relationship_tier': RelationshipTier.IMMEDIATE_FAMILY,
        'priority_tier': PriorityTier.MUST_INVITE,
        'guests': [
            ('Rajesh Sharma', 'rajesh@example.com', '+91 98100 11111'),
            ('Sunita Sharma', '', ''),
        ],
    },
    {
        # Duplicate of the Sharmas, entered from the groom's spreadsheet
        'name': 'Sharma Fam',
        'contact_email': 'SHARMAS@example.com',
        'affiliation': Affiliation.MUTUAL,
        'relationship_tier': RelationshipTier.EXTENDED_FAMILY,
        'priority_tier': PriorityTier.SHOULD_INVITE,
        'guests': [
            ('rajesh sharma', '', '9810011111'),
            ('Anika Sharma', '', ''),
        ],
    },
    {
        'name': 'Mehta Household',
        'contact_email': 'mehtas@example.com',
        'affiliation': Affiliation.GROOM,
        'relationship_tier': RelationshipTier.FRIEND,
        'priority_tier': PriorityTier.SHOULD_INVITE,
        'guests': [
            ('Kabir Mehta', 'kabir@example.com', ''),
        ],
    },
    {
        # Shares an email with the Mehtas only
        'name': 'Kapoor Family',
        'contact_email': 'mehtas@example.com',
        'affiliation': Affiliation.GROOM,
        'relationship_tier': RelationshipTier.PARENTS_FRIEND,
        'priority_tier': PriorityTier.NICE_TO_HAVE,
        'guests': [
            ('Vinod Kapoor', '', ''),
        ],
    },
    {
        'name': 'Fernandes Family',
        'contact_email': '',
        'affiliation': Affiliation.BRIDE,
        'relationship_tier': RelationshipTier.FRIEND,
        'priority_tier': PriorityTier.NICE_TO_HAVE,
        'guests': [
            ('Leo Fernandes', 'leo@example.com', '+1 415 555 0100'),
            ('Maria Fernandes', '', ''),
        ],
    },
]

EVENTS = [
    ('Haldi', date(2027, 2, 12), 'Family home'),
    ('Mehndi', date(2027, 2, 12), 'Garden lawn'),
    ('Sangeet', date(2027, 2, 13), 'Rambagh Palace'),
    ('Wedding Ceremony', date(2027, 2, 14), 'Rambagh Palace'),
]


class Command(BaseCommand):
    help = 'Create sample data for trying out the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing sample data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        wedding = self.create_wedding(users)
        events = self.create_events(wedding)
        guests = self.create_households(wedding)
        self.create_invitations(guests, events)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  priya@example.com / password123 (owner)')
        self.stdout.write('  planner@example.com / password123 (planner)')
        self.stdout.write('  mausi@example.com / password123 (viewer)')
        self.stdout.write('')
        self.stdout.write(f'Duplicate review queue: /api/weddings/{wedding.id}/duplicate-households/')

    def clear_data(self):
        """Remove the sample users; their weddings cascade away with them."""
        Wedding.objects.filter(owner__email__in=SAMPLE_EMAILS).delete()
        User.objects.filter(email__in=SAMPLE_EMAILS).delete()

    def create_users(self):
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Admin User',
                'role': UserRole.ADMIN,
                'is_staff': True,
                'is_superuser': True,
                'email_verified': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        users = {'admin': admin}
        for key, email, display_name, role in [
            ('couple', 'priya@example.com', 'Priya & Arjun', UserRole.COUPLE),
            ('planner', 'planner@example.com', 'Shaadi Planners', UserRole.VENDOR),
            ('viewer', 'mausi@example.com', 'Mausi', UserRole.COUPLE),
        ]:
            user, _ = User.objects.get_or_create(
                email=email,
                defaults={
                    'display_name': display_name,
                    'role': role,
                    'email_verified': True,
                }
            )
            user.set_password('password123')
            user.save()
            users[key] = user

        return users

    def create_wedding(self, users):
        self.stdout.write('  Creating wedding...')

        wedding = create_wedding(
            owner=users['couple'],
            partner1_name='Priya',
            partner2_name='Arjun',
            date=date(2027, 2, 14),
            location='Jaipur',
            guest_count_estimate=250,
            budget=Decimal('4500000.00'),
        )
        WeddingRole.objects.create(user=users['planner'], wedding=wedding, role=WeddingRoleType.PLANNER)
        WeddingRole.objects.create(user=users['viewer'], wedding=wedding, role=WeddingRoleType.VIEWER)
        return wedding

    def create_events(self, wedding):
        self.stdout.write('  Creating events...')

        events = []
        for order, (name, day, location) in enumerate(EVENTS):
            events.append(Event.objects.create(
                wedding=wedding,
                name=name,
                date=timezone.make_aware(datetime.combine(day, time(18, 0))),
                location=location,
                order=order,
            ))
        return events

    def create_households(self, wedding):
        self.stdout.write('  Creating households and guests...')

        guests = []
        for data in HOUSEHOLDS:
            data = dict(data)
            members = data.pop('guests')
            household = Household.objects.create(wedding=wedding, max_count=len(members), **data)
            for index, (name, email, phone) in enumerate(members):
                guests.append(Guest.objects.create(
                    wedding=wedding,
                    household=household,
                    name=name,
                    email=email,
                    phone=phone,
                    side=household.affiliation,
                    is_main_household_contact=index == 0,
                ))
        return guests

    def create_invitations(self, guests, events):
        self.stdout.write('  Creating invitations...')

        for guest in guests:
            for event in events:
                Invitation.objects.create(guest=guest, event=event)

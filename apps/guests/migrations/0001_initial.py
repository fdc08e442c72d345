# Generated manually for the guests app

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


AFFILIATION_CHOICES = [('bride', 'Bride'), ('groom', 'Groom'), ('mutual', 'Mutual')]
RELATIONSHIP_CHOICES = [
    ('immediate_family', 'Immediate family'),
    ('extended_family', 'Extended family'),
    ('friend', 'Friend'),
    ('parents_friend', "Parents' friend"),
]
RSVP_CHOICES = [('pending', 'Pending'), ('attending', 'Attending'), ('not_attending', 'Not attending')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('weddings', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Household',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('name_normalized', models.CharField(db_index=True, editable=False, max_length=200)),
                ('contact_email', models.EmailField(blank=True, max_length=254)),
                ('max_count', models.PositiveIntegerField(default=1)),
                ('affiliation', models.CharField(choices=AFFILIATION_CHOICES, default='bride', max_length=20)),
                ('relationship_tier', models.CharField(choices=RELATIONSHIP_CHOICES, default='friend', max_length=30)),
                ('priority_tier', models.CharField(choices=[('must_invite', 'Must invite'), ('should_invite', 'Should invite'), ('nice_to_have', 'Nice to have')], default='should_invite', max_length=20)),
                ('magic_link_token_hash', models.CharField(blank=True, editable=False, max_length=64, null=True, unique=True)),
                ('magic_link_expires', models.DateTimeField(blank=True, editable=False, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('wedding', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='households', to='weddings.wedding')),
            ],
            options={
                'db_table': 'households',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['wedding', 'created_at'], name='households_wedding_idx')],
            },
        ),
        migrations.CreateModel(
            name='Guest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('phone', models.CharField(blank=True, max_length=40)),
                ('is_main_household_contact', models.BooleanField(default=False)),
                ('side', models.CharField(choices=AFFILIATION_CHOICES, default='mutual', max_length=20)),
                ('relationship_tier', models.CharField(blank=True, choices=RELATIONSHIP_CHOICES, max_length=30)),
                ('plus_one', models.BooleanField(default=False)),
                ('dietary_restrictions', models.CharField(blank=True, max_length=255)),
                ('rsvp_status', models.CharField(choices=RSVP_CHOICES, default='pending', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('household', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='guests', to='guests.household')),
                ('wedding', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='guests', to='weddings.wedding')),
            ],
            options={
                'db_table': 'guests',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['wedding', 'household'], name='guests_wedding_household_idx')],
            },
        ),
        migrations.CreateModel(
            name='Invitation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('rsvp_status', models.CharField(choices=RSVP_CHOICES, default='pending', max_length=20)),
                ('dietary_restrictions', models.CharField(blank=True, max_length=255)),
                ('plus_one_attending', models.BooleanField(blank=True, null=True)),
                ('invited_at', models.DateTimeField(auto_now_add=True)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='invitations', to='weddings.event')),
                ('guest', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='invitations', to='guests.guest')),
            ],
            options={
                'db_table': 'invitations',
                'ordering': ['invited_at'],
                'unique_together': {('guest', 'event')},
            },
        ),
        migrations.CreateModel(
            name='HouseholdMergeAudit',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('merged_household_id', models.UUIDField(db_index=True)),
                ('merged_household_name', models.CharField(max_length=200)),
                ('decision', models.CharField(choices=[('kept_older', 'Kept older'), ('kept_newer', 'Kept newer')], max_length=20)),
                ('guests_reassigned', models.PositiveIntegerField(default=0)),
                ('guests_removed', models.PositiveIntegerField(default=0)),
                ('invitations_moved', models.PositiveIntegerField(default=0)),
                ('merged_at', models.DateTimeField(auto_now_add=True)),
                ('merged_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='household_merges', to=settings.AUTH_USER_MODEL)),
                ('survivor', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='merge_audits', to='guests.household')),
                ('wedding', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='household_merges', to='weddings.wedding')),
            ],
            options={
                'db_table': 'household_merge_audits',
                'ordering': ['-merged_at'],
            },
        ),
    ]

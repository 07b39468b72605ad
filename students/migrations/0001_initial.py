# Generated migration for Student and MembershipHistory models
from decimal import Decimal
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


def _money():
    return models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('branches', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('email', models.EmailField(blank=True, max_length=254, null=True)),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
                ('address', models.TextField(blank=True, null=True)),
                ('registration_number', models.CharField(blank=True, max_length=50, null=True)),
                ('father_name', models.CharField(blank=True, max_length=255, null=True)),
                ('aadhar_number', models.CharField(blank=True, max_length=20, null=True)),
                ('profile_image_url', models.CharField(blank=True, max_length=500, null=True)),
                ('membership_start', models.DateField()),
                ('membership_end', models.DateField(db_index=True)),
                ('total_fee', _money()),
                ('amount_paid', _money()),
                ('due_amount', _money()),
                ('cash', _money()),
                ('online', _money()),
                ('security_money', _money()),
                ('remark', models.TextField(blank=True, null=True)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('branch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='students', to='branches.branch')),
            ],
            options={
                'verbose_name': 'Student',
                'verbose_name_plural': 'Students',
                'db_table': 'students',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='MembershipHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('email', models.EmailField(blank=True, max_length=254, null=True)),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
                ('address', models.TextField(blank=True, null=True)),
                ('registration_number', models.CharField(blank=True, max_length=50, null=True)),
                ('father_name', models.CharField(blank=True, max_length=255, null=True)),
                ('aadhar_number', models.CharField(blank=True, max_length=20, null=True)),
                ('membership_start', models.DateField()),
                ('membership_end', models.DateField()),
                ('status', models.CharField(default='active', max_length=20)),
                ('total_fee', _money()),
                ('amount_paid', _money()),
                ('due_amount', _money()),
                ('cash', _money()),
                ('online', _money()),
                ('security_money', _money()),
                ('remark', models.TextField(blank=True, null=True)),
                ('changed_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('branch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='membership_history', to='branches.branch')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='history', to='students.student')),
            ],
            options={
                'verbose_name': 'Membership history',
                'verbose_name_plural': 'Membership history',
                'db_table': 'student_membership_history',
                'ordering': ['-id'],
            },
        ),
        migrations.AddIndex(
            model_name='membershiphistory',
            index=models.Index(fields=['student', '-id'], name='history_student_latest_idx'),
        ),
        migrations.AddIndex(
            model_name='membershiphistory',
            index=models.Index(fields=['branch', 'changed_at'], name='history_branch_changed_idx'),
        ),
    ]

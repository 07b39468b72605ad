# Seat and shift references on history rows (seating depends on students, so they land here)
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        ('students', '0001_initial'),
        ('seating', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='membershiphistory',
            name='seat',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='membership_history', to='seating.seat'),
        ),
        migrations.AddField(
            model_name='membershiphistory',
            name='shift',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='membership_history', to='seating.shift'),
        ),
    ]

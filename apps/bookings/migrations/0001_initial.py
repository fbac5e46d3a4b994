from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(editable=False, primary_key=True, serialize=False)),
                ("created_by", models.CharField(blank=True, default="", max_length=64)),
                ("updated_by", models.CharField(blank=True, default="", max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("child_id", models.UUIDField(db_index=True)),
                ("owner_id", models.CharField(db_index=True, max_length=64)),
                ("arrival", models.DateTimeField()),
                ("departure", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("booked", "Booked"),
                            ("progress", "In progress"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="booked",
                        max_length=16,
                    ),
                ),
                ("fee", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("owner_notes", models.TextField(blank=True)),
                ("employee_notes", models.TextField(blank=True)),
                ("photos", models.JSONField(blank=True, default=list)),
                ("import_hash", models.CharField(blank=True, max_length=255, null=True, unique=True)),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "departure", "arrival"], name="booking_status_period_idx"),
                ],
            },
        ),
    ]

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Child",
            fields=[
                ("id", models.UUIDField(editable=False, primary_key=True, serialize=False)),
                ("created_by", models.CharField(blank=True, default="", max_length=64)),
                ("updated_by", models.CharField(blank=True, default="", max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("owner_id", models.CharField(db_index=True, max_length=64)),
                ("name", models.CharField(max_length=255)),
                (
                    "type",
                    models.CharField(
                        blank=True,
                        choices=[("boy", "Boy"), ("girl", "Girl")],
                        max_length=16,
                    ),
                ),
                ("breed", models.CharField(blank=True, max_length=255)),
                (
                    "size",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("toddler", "Toddler"),
                            ("preschooler", "Preschooler"),
                            ("schoolAged", "School aged"),
                        ],
                        max_length=16,
                    ),
                ),
                (
                    "booking_ids",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Denormalized booking ids. Written only by the booking write path.",
                    ),
                ),
                ("import_hash", models.CharField(blank=True, max_length=255, null=True, unique=True)),
            ],
            options={
                "verbose_name": "Child",
                "verbose_name_plural": "Children",
                "ordering": ["-created_at"],
            },
        ),
    ]

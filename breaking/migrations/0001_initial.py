from django.db import migrations, models


def flagged_item_fields():
    return [
        (
            "id",
            models.BigAutoField(
                auto_created=True,
                primary_key=True,
                serialize=False,
                verbose_name="ID",
            ),
        ),
        ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("title", models.CharField(max_length=500)),
        ("slug", models.SlugField(max_length=255, unique=True)),
        ("body", models.TextField()),
        ("priority", models.IntegerField(db_index=True, default=1)),
        ("is_active", models.BooleanField(db_index=True, default=False)),
        ("expires_at", models.DateTimeField(blank=True, null=True)),
        ("views", models.PositiveIntegerField(default=0)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="BreakingNews",
            fields=flagged_item_fields(),
            options={
                "verbose_name": "breaking news",
                "verbose_name_plural": "breaking news",
                "ordering": ["-priority", "-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="LastNews",
            fields=flagged_item_fields(),
            options={
                "verbose_name": "last news",
                "verbose_name_plural": "last news",
                "ordering": ["-priority", "-created_at"],
                "abstract": False,
            },
        ),
    ]

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Country",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, unique=True)),
                ("capital", models.CharField(blank=True, max_length=200, null=True)),
                ("region", models.CharField(blank=True, max_length=100, null=True)),
                ("population", models.BigIntegerField(default=0)),
                ("currency_code", models.CharField(blank=True, max_length=10, null=True)),
                ("exchange_rate", models.FloatField(blank=True, null=True)),
                ("estimated_gdp", models.FloatField(blank=True, null=True)),
                ("flag_url", models.URLField(blank=True, max_length=500, null=True)),
                ("last_refreshed_at", models.DateTimeField()),
            ],
            options={
                "verbose_name_plural": "countries",
                "indexes": [
                    models.Index(fields=["region"], name="country_region_idx"),
                    models.Index(fields=["currency_code"], name="country_currency_code_idx"),
                    models.Index(fields=["estimated_gdp"], name="country_estimated_gdp_idx"),
                    models.Index(fields=["last_refreshed_at"], name="country_refreshed_at_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SummaryImage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("png", models.BinaryField()),
                ("total_countries", models.IntegerField(default=0)),
                ("as_of", models.DateTimeField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
    ]

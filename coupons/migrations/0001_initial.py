from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Coupon",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("code", models.CharField(max_length=50, unique=True)),
                (
                    "discount_type",
                    models.CharField(
                        choices=[("PERCENTAGE", "Percentage"), ("FLAT", "Flat amount")], max_length=16
                    ),
                ),
                (
                    "discount_value",
                    models.PositiveIntegerField(help_text="Percentage points, or minor units for FLAT coupons"),
                ),
                (
                    "min_order_value",
                    models.PositiveIntegerField(default=0, help_text="Minimum subtotal in minor units"),
                ),
                ("max_uses", models.PositiveIntegerField()),
                ("current_uses", models.PositiveIntegerField(default=0)),
                ("expires_at", models.DateTimeField()),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("discount_type", "PERCENTAGE"), _negated=True),
                            ("discount_value__lte", 100),
                            _connector="OR",
                        ),
                        name="coupon_percentage_at_most_100",
                    ),
                ],
            },
        ),
    ]

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Appointment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("client_name", models.CharField(max_length=255, verbose_name="Клиент")),
                ("date", models.DateField(db_index=True, verbose_name="Дата")),
                ("time", models.CharField(help_text="Формат HH:MM", max_length=5, verbose_name="Слот")),
                ("service_type", models.CharField(max_length=255, verbose_name="Услуга")),
                ("location", models.CharField(max_length=255, verbose_name="Место")),
                ("is_home_service", models.BooleanField(default=False, verbose_name="Выезд на дом")),
                ("status", models.CharField(
                    choices=[("pending", "Pendiente"), ("completed", "Completado"), ("cancelled", "Cancelado")],
                    db_index=True, default="pending", max_length=20, verbose_name="Статус",
                )),
                ("price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name="Цена")),
                ("payment_method", models.CharField(
                    blank=True, choices=[("Efectivo", "Efectivo"), ("Mercado Pago", "Mercado Pago")],
                    max_length=32, null=True, verbose_name="Способ оплаты",
                )),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Создано")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Обновлено")),
            ],
            options={
                "verbose_name": "Запись",
                "verbose_name_plural": "Записи",
                "db_table": "appointments",
                "ordering": ["date", "time", "id"],
                "indexes": [models.Index(fields=["date", "time"], name="appointments_slot_idx")],
            },
        ),
        migrations.CreateModel(
            name="Service",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, unique=True, verbose_name="Название")),
                ("price", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="Цена")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Создано")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Обновлено")),
            ],
            options={
                "verbose_name": "Услуга",
                "verbose_name_plural": "Услуги",
                "db_table": "services",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Client",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="Имя")),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="Email")),
                ("phone", models.CharField(blank=True, default="", max_length=50, verbose_name="Телефон")),
                ("preferred_contact_method", models.CharField(
                    choices=[("email", "Email"), ("phone", "Teléfono"), ("whatsapp", "WhatsApp")],
                    default="phone", max_length=20, verbose_name="Предпочтительная связь",
                )),
                ("notes", models.TextField(blank=True, default="", verbose_name="Заметки")),
                ("loyalty_points", models.IntegerField(default=0, verbose_name="Баллы лояльности")),
                ("last_service_date", models.DateField(blank=True, null=True, verbose_name="Последняя услуга")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Создан")),
            ],
            options={
                "verbose_name": "Клиент",
                "verbose_name_plural": "Клиенты",
                "db_table": "clients",
                "ordering": ["name", "id"],
            },
        ),
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("make", models.CharField(max_length=100, verbose_name="Марка")),
                ("model", models.CharField(max_length=100, verbose_name="Модель")),
                ("year", models.CharField(blank=True, default="", max_length=4, verbose_name="Год")),
                ("license_plate", models.CharField(blank=True, default="", max_length=20, verbose_name="Номер")),
                ("vehicle_type", models.CharField(
                    choices=[("small", "Pequeño"), ("medium", "Mediano"), ("large", "Grande"),
                             ("suv", "SUV"), ("truck", "Camioneta")],
                    default="medium", max_length=10, verbose_name="Тип",
                )),
                ("color", models.CharField(blank=True, default="", max_length=50, verbose_name="Цвет")),
                ("client", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="vehicles",
                    to="washapp.client", verbose_name="Клиент",
                )),
            ],
            options={
                "verbose_name": "Машина",
                "verbose_name_plural": "Машины",
                "db_table": "vehicles",
            },
        ),
    ]

from django.db import migrations

DEFAULT_CATEGORIES = [
    ('all', 'All Items'),
    ('coffee', 'Coffee'),
    ('drinks', 'Drinks'),
    ('food', 'Food'),
    ('desserts', 'Desserts'),
]


def create_default_categories(apps, schema_editor):
    Category = apps.get_model('inventory', 'Category')
    for name, display_name in DEFAULT_CATEGORIES:
        Category.objects.get_or_create(name=name, defaults={'display_name': display_name})


def remove_default_categories(apps, schema_editor):
    Category = apps.get_model('inventory', 'Category')
    Category.objects.filter(
        name__in=[name for name, _ in DEFAULT_CATEGORIES],
        items__isnull=True,
    ).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_default_categories, remove_default_categories),
    ]

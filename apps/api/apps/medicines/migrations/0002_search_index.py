"""
GIN index over the full-text search vector (PostgreSQL only).

The expression matches SearchVector(name, composition, description,
manufacturer, config='english') as built by apps.medicines.services.
"""
from django.db import migrations

INDEX_NAME = 'idx_medicine_search'

CREATE_SQL = f"""
CREATE INDEX IF NOT EXISTS {INDEX_NAME} ON medicine USING GIN (
    to_tsvector(
        'english'::regconfig,
        COALESCE(name, '') || ' ' ||
        COALESCE(composition, '') || ' ' ||
        COALESCE(description, '') || ' ' ||
        COALESCE(manufacturer, '')
    )
)
"""

DROP_SQL = f'DROP INDEX IF EXISTS {INDEX_NAME}'


def create_index(apps, schema_editor):
    if schema_editor.connection.vendor != 'postgresql':
        return
    schema_editor.execute(CREATE_SQL)


def drop_index(apps, schema_editor):
    if schema_editor.connection.vendor != 'postgresql':
        return
    schema_editor.execute(DROP_SQL)


class Migration(migrations.Migration):

    dependencies = [
        ('medicines', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_index, drop_index),
    ]

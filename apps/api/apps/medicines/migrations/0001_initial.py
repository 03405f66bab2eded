from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Medicine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('composition', models.TextField(blank=True, default='')),
                ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('manufacturer', models.CharField(blank=True, default='', max_length=255)),
                ('type', models.CharField(choices=[('allopathy', 'Allopathy'), ('ayurvedic', 'Ayurvedic'), ('homeopathy', 'Homeopathy'), ('other', 'Other')], default='allopathy', max_length=20)),
                ('description', models.TextField(blank=True, default='')),
                ('side_effects', models.TextField(blank=True, default='')),
                ('drug_interactions', models.TextField(blank=True, default='')),
                ('packaging', models.CharField(blank=True, default='', max_length=255)),
                ('is_discontinued', models.BooleanField(default=False)),
            ],
            options={
                'verbose_name': 'Medicine',
                'verbose_name_plural': 'Medicines',
                'db_table': 'medicine',
                'indexes': [
                    models.Index(fields=['name'], name='idx_medicine_name'),
                    models.Index(fields=['manufacturer'], name='idx_medicine_manufacturer'),
                ],
            },
        ),
    ]

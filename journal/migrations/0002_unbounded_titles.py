"""Store note and poem titles without a length limit."""

from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('journal', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='note',
            name='title',
            field=models.TextField(),
        ),
        migrations.AlterField(
            model_name='poem',
            name='title',
            field=models.TextField(),
        ),
    ]

from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('review_rating', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='review',
            name='rescaled_at',
            field=models.DateTimeField(blank=True, editable=False, null=True),
        ),
    ]

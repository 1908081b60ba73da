import apps.estimates.fields
from decimal import Decimal
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import uuid


PART_TYPE_CHOICES = [
    ('plate_roll', 'Plate Roll'),
    ('section_roll', 'Section Roll'),
    ('angle_roll', 'Angle Roll'),
    ('beam_roll', 'Beam Roll'),
    ('pipe_roll', 'Pipe Roll'),
    ('tube_roll', 'Tube Roll'),
    ('channel_roll', 'Channel Roll'),
    ('flat_bar', 'Flat Bar'),
    ('cone_roll', 'Cone Roll'),
    ('tee_bar', 'Tee Bar'),
    ('press_brake', 'Press Brake'),
    ('flat_stock', 'Flat Stock'),
    ('fab_service', 'Fabrication Service'),
    ('shop_rate', 'Shop Rate'),
    ('rush_service', 'Rush Service'),
    ('other', 'Other'),
]


def part_fields():
    """Columns shared by estimate and work order parts."""
    return [
        ('part_number', models.PositiveIntegerField()),
        ('part_type', models.CharField(choices=PART_TYPE_CHOICES, max_length=20)),
        ('client_part_number', models.CharField(blank=True, max_length=100)),
        ('quantity', models.PositiveIntegerField(default=1)),
        ('material', models.CharField(blank=True, max_length=100)),
        ('material_description', models.CharField(blank=True, max_length=255)),
        ('thickness', models.CharField(blank=True, max_length=50)),
        ('width', models.CharField(blank=True, max_length=50)),
        ('length', models.CharField(blank=True, max_length=50)),
        ('outer_diameter', models.CharField(blank=True, max_length=50)),
        ('wall_thickness', models.CharField(blank=True, max_length=50)),
        ('section_size', models.CharField(blank=True, max_length=50)),
        ('roll_type', models.CharField(blank=True, choices=[('easy_way', 'Easy Way'), ('hard_way', 'Hard Way')], max_length=10)),
        ('radius', models.CharField(blank=True, max_length=50)),
        ('diameter', models.CharField(blank=True, max_length=50)),
        ('arc_degrees', models.CharField(blank=True, max_length=50)),
        ('special_instructions', models.TextField(blank=True)),
        ('material_source', models.CharField(choices=[('customer_supplied', 'Customer Supplied'), ('we_order', 'We Order')], default='customer_supplied', max_length=20)),
        ('supplier_name', models.CharField(blank=True, max_length=200)),
        ('material_unit_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
        ('material_markup_percent', models.DecimalField(blank=True, decimal_places=2, default=Decimal('20.00'), max_digits=6, null=True)),
        ('material_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
        ('labor_total', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
        ('rolling_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
        ('other_services_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
        ('other_services_markup_percent', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
        ('other_services_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
        ('service_drilling', models.BooleanField(default=False)),
        ('service_drilling_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
        ('service_cutting', models.BooleanField(default=False)),
        ('service_cutting_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
        ('service_fitting', models.BooleanField(default=False)),
        ('service_fitting_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
        ('service_welding', models.BooleanField(default=False)),
        ('service_welding_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
        ('part_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
        ('form_data', models.JSONField(blank=True, default=dict)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Estimate',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('estimate_number', models.CharField(max_length=50, unique=True)),
                ('client_name', models.CharField(max_length=200)),
                ('contact_name', models.CharField(blank=True, max_length=200)),
                ('contact_email', models.EmailField(blank=True, max_length=254)),
                ('contact_phone', models.CharField(blank=True, max_length=50)),
                ('project_description', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('sent', 'Sent'), ('accepted', 'Accepted'), ('declined', 'Declined'), ('converted', 'Converted'), ('archived', 'Archived')], default='draft', max_length=20)),
                ('trucking_description', models.CharField(blank=True, max_length=255)),
                ('trucking_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('tax_rate', models.DecimalField(decimal_places=3, default=Decimal('9.750'), max_digits=6, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('tax_exempt', apps.estimates.fields.FlagField(default=False)),
                ('tax_exempt_reason', models.CharField(blank=True, max_length=255)),
                ('tax_exempt_cert_number', models.CharField(blank=True, max_length=100)),
                ('discount_percent', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=6)),
                ('discount_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('discount_reason', models.CharField(blank=True, max_length=255)),
                ('minimum_override', apps.estimates.fields.FlagField(default=False)),
                ('minimum_override_reason', models.CharField(blank=True, max_length=255)),
                ('parts_subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('tax_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('grand_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('notes', models.TextField(blank=True)),
                ('internal_notes', models.TextField(blank=True)),
                ('valid_until', models.DateField(blank=True, null=True)),
                ('dr_number', models.PositiveIntegerField(blank=True, null=True)),
                ('sent_at', models.DateTimeField(blank=True, null=True)),
                ('accepted_at', models.DateTimeField(blank=True, null=True)),
                ('archived_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'estimates',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'created_at'], name='estimates_status_created_idx'),
                    models.Index(fields=['client_name'], name='estimates_client_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LaborMinimumRule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('part_type', models.CharField(choices=PART_TYPE_CHOICES, max_length=20)),
                ('label', models.CharField(max_length=100)),
                ('min_size', models.DecimalField(blank=True, decimal_places=4, max_digits=8, null=True)),
                ('max_size', models.DecimalField(blank=True, decimal_places=4, max_digits=8, null=True)),
                ('min_width', models.DecimalField(blank=True, decimal_places=4, max_digits=8, null=True)),
                ('max_width', models.DecimalField(blank=True, decimal_places=4, max_digits=8, null=True)),
                ('minimum', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'labor_minimum_rules',
                'ordering': ['part_type', 'minimum', 'id'],
            },
        ),
        migrations.CreateModel(
            name='EstimatePart',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                *part_fields(),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('estimate', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='parts', to='estimates.estimate')),
            ],
            options={
                'db_table': 'estimate_parts',
                'ordering': ['estimate', 'part_number'],
                'constraints': [
                    models.UniqueConstraint(fields=('estimate', 'part_number'), name='unique_estimate_part_number'),
                ],
            },
        ),
    ]

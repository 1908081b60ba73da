from decimal import Decimal
from django.db import migrations, models
import django.db.models.deletion
import apps.estimates.fields
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


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('estimates', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='WorkOrder',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('order_number', models.CharField(max_length=50, unique=True)),
                ('dr_number', models.PositiveIntegerField(blank=True, db_index=True, null=True)),
                ('client_name', models.CharField(max_length=200)),
                ('contact_name', models.CharField(blank=True, max_length=200)),
                ('contact_email', models.EmailField(blank=True, max_length=254)),
                ('contact_phone', models.CharField(blank=True, max_length=50)),
                ('client_purchase_order_number', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('waiting_for_materials', 'Waiting for Materials'), ('received', 'Received'), ('processing', 'Processing'), ('stored', 'Stored'), ('shipped', 'Shipped'), ('archived', 'Archived')], default='received', max_length=30)),
                ('promised_date', models.DateField(blank=True, null=True)),
                ('storage_location', models.CharField(blank=True, max_length=200)),
                ('notes', models.TextField(blank=True)),
                ('received_at', models.DateTimeField(blank=True, null=True)),
                ('all_material_received', models.BooleanField(default=False)),
                ('estimate_number', models.CharField(blank=True, max_length=50)),
                ('estimate_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('trucking_description', models.CharField(blank=True, max_length=255)),
                ('trucking_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('tax_rate', models.DecimalField(decimal_places=3, default=Decimal('0.000'), max_digits=6)),
                ('parts_subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('tax_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('grand_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('minimum_override', apps.estimates.fields.FlagField(default=False)),
                ('minimum_override_reason', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('estimate', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='work_order', to='estimates.estimate')),
            ],
            options={
                'db_table': 'work_orders',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'created_at'], name='work_orders_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='InboundOrder',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('po_number', models.PositiveIntegerField(blank=True, db_index=True, null=True)),
                ('supplier_name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('client_name', models.CharField(blank=True, max_length=200)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('received', 'Received')], default='pending', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('work_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inbound_orders', to='workorders.workorder')),
            ],
            options={
                'db_table': 'inbound_orders',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='WorkOrderPart',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
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
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In Progress'), ('completed', 'Completed')], default='pending', max_length=20)),
                ('material_received', models.BooleanField(default=False)),
                ('material_ordered', models.BooleanField(default=False)),
                ('material_ordered_at', models.DateTimeField(blank=True, null=True)),
                ('material_po_number', models.PositiveIntegerField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('inbound_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='parts', to='workorders.inboundorder')),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='parts', to='workorders.workorder')),
            ],
            options={
                'db_table': 'work_order_parts',
                'ordering': ['work_order', 'part_number'],
            },
        ),
    ]

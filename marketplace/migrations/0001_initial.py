from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Listing',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('condition', models.CharField(blank=True, choices=[('mint', 'Mint'), ('near_mint', 'Near Mint'), ('lightly_played', 'Lightly Played'), ('moderately_played', 'Moderately Played'), ('heavily_played', 'Heavily Played'), ('damaged', 'Damaged')], max_length=20)),
                ('grading_company', models.CharField(blank=True, choices=[('', 'Ungraded'), ('psa', 'PSA'), ('beckett', 'Beckett'), ('cgc', 'CGC'), ('sgc', 'SGC'), ('tag', 'TAG'), ('other', 'Other')], max_length=10)),
                ('grade', models.DecimalField(blank=True, decimal_places=1, max_digits=3, null=True)),
                ('listing_type', models.CharField(choices=[('auction', 'Auction'), ('buy_now', 'Buy Now'), ('auction_with_buy_now', 'Auction with Buy Now')], default='auction', max_length=20)),
                ('starting_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('reserve_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('buy_now_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('current_bid', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('bid_count', models.PositiveIntegerField(default=0)),
                ('final_sale_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('auction_start', models.DateTimeField(blank=True, null=True)),
                ('auction_end', models.DateTimeField(blank=True, null=True)),
                ('auto_extend', models.BooleanField(default=True)),
                ('auto_extend_minutes', models.PositiveIntegerField(default=2)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('active', 'Active'), ('ended', 'Ended'), ('sold', 'Sold'), ('unsold', 'Unsold'), ('cancelled', 'Cancelled')], default='draft', max_length=20)),
                ('view_count', models.PositiveIntegerField(default=0)),
                ('created', models.DateTimeField(auto_now_add=True)),
                ('updated', models.DateTimeField(auto_now=True)),
                ('seller', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='listings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created'],
                'indexes': [
                    models.Index(fields=['status', '-created'], name='listing_status_created_idx'),
                    models.Index(fields=['status', 'auction_end'], name='listing_status_end_idx'),
                    models.Index(fields=['seller', 'status'], name='listing_seller_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Bid',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('max_bid', models.DecimalField(decimal_places=2, max_digits=10)),
                ('is_winning', models.BooleanField(default=False)),
                ('is_auto_bid', models.BooleanField(default=False)),
                ('created', models.DateTimeField(auto_now_add=True)),
                ('bidder', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bids', to=settings.AUTH_USER_MODEL)),
                ('listing', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bids', to='marketplace.listing')),
            ],
            options={
                'ordering': ['-created', '-pk'],
                'indexes': [
                    models.Index(fields=['listing', 'is_winning'], name='bid_listing_winning_idx'),
                    models.Index(fields=['bidder', '-created'], name='bid_bidder_created_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_winning', True)), fields=('listing',), name='one_winning_bid_per_listing'),
                ],
            },
        ),
    ]

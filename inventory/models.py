import uuid
from decimal import Decimal

from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models

# Pseudo-category meaning "no filter"; seeded by migration and never deletable
RESERVED_CATEGORY = 'all'


class TimeStampedModel(models.Model):
    """Base model with created_at and updated_at fields"""
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Category(TimeStampedModel):
    """Menu categories; ``name`` is a lower-case slug, unique regardless of case"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=50, unique=True)
    display_name = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True, default='')

    class Meta:
        db_table = 'categories'
        ordering = ['name']
        verbose_name_plural = "Categories"

    @property
    def is_reserved(self):
        return self.name == RESERVED_CATEGORY

    def save(self, *args, **kwargs):
        self.name = self.name.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.display_name or self.name


class MenuItem(TimeStampedModel):
    """Sellable catalog entry. Its current price is the only price orders are checked against."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='items')
    name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    image_url = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'menu_items'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['category'], name='idx_menu_items_category'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(price__gt=0), name='menu_item_price_positive'),
        ]

    def __str__(self):
        return f"{self.name} ({self.price})"

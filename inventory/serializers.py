import re
from decimal import Decimal

from rest_framework import serializers

from nokopos.exceptions import DuplicateCategory, DuplicateName, ReservedCategory
from .catalog import normalize_item_id
from .models import RESERVED_CATEGORY, Category, MenuItem

IMAGE_URL_PATTERN = re.compile(r'^(https?://.+|data:image/.+)', re.IGNORECASE | re.DOTALL)


class CategorySerializer(serializers.ModelSerializer):
    name = serializers.CharField(min_length=1, max_length=50)
    displayName = serializers.CharField(source='display_name', min_length=1, max_length=100)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    itemsCount = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Category
        fields = ['id', 'name', 'displayName', 'description', 'itemsCount', 'createdAt', 'updatedAt']
        read_only_fields = ['id']

    def get_itemsCount(self, obj):
        items_count = getattr(obj, 'items_count', None)
        if items_count is None:
            items_count = obj.items.count()
        return items_count

    def validate_name(self, value):
        """Validate unique category name, ignoring case"""
        value = value.strip().lower()
        queryset = Category.objects.filter(name=value)
        if self.instance:
            queryset = queryset.exclude(id=self.instance.id)
        if queryset.exists():
            raise DuplicateCategory()
        return value

    def validate_description(self, value):
        return value or ''

    def validate(self, attrs):
        if self.instance and self.instance.is_reserved:
            new_name = attrs.get('name', self.instance.name)
            if new_name != RESERVED_CATEGORY:
                raise ReservedCategory()
        return attrs


class CategoryField(serializers.RelatedField):
    """Accepts a category by id or by name; always renders the id"""
    default_error_messages = {
        'does_not_exist': 'Category does not exist',
        'reserved': 'Menu items cannot be assigned to the "all" category',
        'invalid': 'Category must be a category id or name',
    }

    def to_internal_value(self, data):
        if not isinstance(data, str) or not data.strip():
            self.fail('invalid')

        category_id = normalize_item_id(data)
        if category_id:
            category = self.get_queryset().filter(id=category_id).first()
        else:
            category = self.get_queryset().filter(name=data.strip().lower()).first()

        if category is None:
            self.fail('does_not_exist')
        if category.is_reserved:
            self.fail('reserved')
        return category

    def to_representation(self, value):
        return str(value.pk)


class MenuItemSerializer(serializers.ModelSerializer):
    name = serializers.CharField(min_length=2, max_length=100)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    category = CategoryField(queryset=Category.objects.all())
    categoryName = serializers.CharField(source='category.name', read_only=True)
    imageUrl = serializers.CharField(source='image_url', required=False, allow_blank=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            'id', 'name', 'price', 'category', 'categoryName', 'imageUrl',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = ['id']

    def validate_name(self, value):
        """Validate unique menu item name, ignoring case"""
        queryset = MenuItem.objects.filter(name__iexact=value)
        if self.instance:
            queryset = queryset.exclude(id=self.instance.id)
        if queryset.exists():
            raise DuplicateName()
        return value

    def validate_imageUrl(self, value):
        if not value or not value.strip():
            return ''
        if not IMAGE_URL_PATTERN.match(value.strip()):
            raise serializers.ValidationError("Image must be a valid HTTP URL or data URL")
        return value.strip()


class MenuItemSummarySerializer(serializers.ModelSerializer):
    """Catalog details attached to order lines for display"""
    category = serializers.CharField(source='category.name', read_only=True)

    class Meta:
        model = MenuItem
        fields = ['id', 'name', 'price', 'category']

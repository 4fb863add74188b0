import django_filters
from django.db.models import F

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    category = django_filters.CharFilter(field_name="category", lookup_expr="iexact")
    type = django_filters.CharFilter(field_name="type", lookup_expr="iexact")
    available = django_filters.BooleanFilter(field_name="is_available")
    low_stock = django_filters.BooleanFilter(method="filter_low_stock")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Product
        fields = [
            "name",
            "category",
            "type",
            "available",
            "low_stock",
            "min_price",
            "max_price",
        ]

    def filter_low_stock(self, queryset, name, value):
        if value:
            return queryset.filter(stock__lte=F("need_to_order"))
        return queryset

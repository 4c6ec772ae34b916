import django_filters
from .models import Product, Category


class ProductFilter(django_filters.FilterSet):
    category = django_filters.NumberFilter(method='filter_by_category')
    brand = django_filters.NumberFilter(field_name='brand_id')
    search = django_filters.CharFilter(field_name='name', lookup_expr='icontains')

    class Meta:
        model = Product
        fields = ['category', 'brand', 'search']

    def filter_by_category(self, queryset, name, value):
        """
        Filter products based on the provided category id.
          - If the category is a parent (has no parent), include products filed
            directly under it and under any of its subcategories.
          - If the category is a subcategory, filter products strictly by it.
          - If the category does not exist, return an empty queryset.
        """
        selected_category = Category.objects.filter(pk=value).first()
        if selected_category is None:
            return queryset.none()

        if selected_category.parent_id is None:
            return queryset.filter(category__in=selected_category.get_descendants(include_self=True))
        return queryset.filter(category=selected_category)
